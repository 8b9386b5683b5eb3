"""
Historial de analisis en un archivo JSON.

    history = AnalysisHistory("historial.json", max_entries=10)
    history.save(result)       # queda primero; si hay mas de 10, se borra el mas viejo
    history.entries()          # [mas nuevo, ..., mas viejo]
    history.get(0)             # el ultimo analisis, o None

Cada escritura va a un archivo temporal que luego reemplaza al real,
asi un corte a mitad de escritura no deja el historial corrupto.
"""

from __future__ import annotations

import json
from pathlib import Path

from proplogic.analysis.models import AnalysisResult

DEFAULT_MAX_ENTRIES = 10


class AnalysisHistory:
    """Cola acotada de AnalysisResult, mas nuevo primero."""

    def __init__(self, path: str | Path, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries debe ser positivo, recibí {max_entries}")
        self.path = Path(path)
        self.max_entries = max_entries

    def _load(self) -> list[dict]:
        """Entradas crudas del archivo.

        Acepta {"history": [...]} o directamente una lista. Un archivo
        ilegible o con otra forma cuenta como historial vacio.
        """
        if not self.path.exists():
            return []
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return []

        if isinstance(data, dict):
            data = data.get("history", [])
        if not isinstance(data, list):
            return []
        return [entry for entry in data if isinstance(entry, dict)]

    @staticmethod
    def _parse(entry: dict) -> AnalysisResult | None:
        try:
            return AnalysisResult.from_dict(entry)
        except (KeyError, TypeError, ValueError, AttributeError):
            return None

    def _write(self, entries: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump({"history": entries}, f, ensure_ascii=False, indent=2)
        tmp_path.replace(self.path)

    def save(self, result: AnalysisResult) -> None:
        """Agrega un analisis al principio y descarta los que sobran.

        Las entradas que no se pueden leer se pierden en la reescritura.
        """
        entries = [e for e in self._load() if self._parse(e) is not None]
        entries.insert(0, result.to_dict())
        self._write(entries[: self.max_entries])

    def entries(self) -> list[AnalysisResult]:
        """Todos los analisis guardados, del mas nuevo al mas viejo."""
        parsed = (self._parse(e) for e in self._load())
        return [result for result in parsed if result is not None]

    def get(self, index: int) -> AnalysisResult | None:
        """El analisis en la posicion index (0 = mas nuevo), o None."""
        entries = self.entries()
        if 0 <= index < len(entries):
            return entries[index]
        return None

    def clear(self) -> None:
        """Borra el historial."""
        self.path.unlink(missing_ok=True)

    def __len__(self) -> int:
        return len(self.entries())
