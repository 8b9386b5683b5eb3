"""
AnalyzerConfig — Todos los limites del analizador en un solo lugar.

¿Cómo se usa?
    config = AnalyzerConfig()                          # usar defaults
    config = AnalyzerConfig(max_propositions=10)       # override un valor
    config = AnalyzerConfig.from_json("cfg.json")      # cargar de archivo
    config = AnalyzerConfig.from_env()                 # .env / variables de entorno

    result = analyze(text, variables, config=config)

Variables de entorno reconocidas por from_env():
    PROPLOGIC_MAX_PROPOSITIONS   (default 20)
    PROPLOGIC_MAX_TEXT_LENGTH    (default 5000)
    PROPLOGIC_HISTORY_SIZE       (default 10)
    PROPLOGIC_STRICT_VARIABLES   (default false)
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path

from dotenv import load_dotenv

# Los simbolos son letras a-z: nunca puede haber mas de 26.
ALPHABET_SIZE = 26

ENV_PREFIX = "PROPLOGIC_"


@dataclass(frozen=True)
class AnalyzerConfig:
    """Configuración del analizador. Inmutable."""

    # =================================================================
    # PROPOSICIONES
    # =================================================================
    # La tabla de verdad tiene 2^n filas: este limite acota el peor caso.
    # Con 20 proposiciones ya son ~1M de filas.
    max_propositions: int = 20
    min_propositions: int = 2

    # =================================================================
    # TEXTO
    # =================================================================
    min_text_length: int = 10
    max_text_length: int = 5000

    # =================================================================
    # HISTORIAL
    # =================================================================
    # Cantidad de analisis que guarda el historial (se descarta el mas viejo).
    history_max_entries: int = 10

    # =================================================================
    # MODO ESTRICTO
    # =================================================================
    # False: una variable del AST que no esta declarada vale False.
    # True:  analyze() rechaza la expresion con ValidationError.
    strict_variables: bool = False

    def __post_init__(self) -> None:
        """Validaciones inmediatas con mensajes claros."""
        if self.min_propositions < 1:
            raise ValueError(f"min_propositions debe ser positivo, recibí {self.min_propositions}")

        if not self.min_propositions <= self.max_propositions <= ALPHABET_SIZE:
            raise ValueError(
                f"max_propositions ({self.max_propositions}) debe estar entre "
                f"min_propositions ({self.min_propositions}) y {ALPHABET_SIZE}"
            )

        if self.min_text_length < 1:
            raise ValueError(f"min_text_length debe ser positivo, recibí {self.min_text_length}")

        if self.max_text_length < self.min_text_length:
            raise ValueError(
                f"max_text_length ({self.max_text_length}) no puede ser menor que "
                f"min_text_length ({self.min_text_length})"
            )

        if self.history_max_entries < 1:
            raise ValueError(
                f"history_max_entries debe ser positivo, recibí {self.history_max_entries}"
            )

    # =================================================================
    # GUARDAR Y CARGAR
    # =================================================================

    def to_json(self, path: str | Path) -> None:
        """Guarda el config como JSON."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, path: str | Path) -> AnalyzerConfig:
        """Carga un config desde un archivo JSON.

        Claves ausentes toman su valor default.
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return cls(**data)

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> AnalyzerConfig:
        """Construye el config desde variables de entorno (y un .env si existe)."""
        load_dotenv(dotenv_path)

        overrides: dict[str, object] = {}
        for name, env in (
            ("max_propositions", "MAX_PROPOSITIONS"),
            ("max_text_length", "MAX_TEXT_LENGTH"),
            ("history_max_entries", "HISTORY_SIZE"),
        ):
            value = os.getenv(ENV_PREFIX + env)
            if value is not None:
                try:
                    overrides[name] = int(value)
                except ValueError:
                    raise ValueError(f"{ENV_PREFIX + env} debe ser un entero, recibí {value!r}") from None

        strict = os.getenv(ENV_PREFIX + "STRICT_VARIABLES")
        if strict is not None:
            overrides["strict_variables"] = strict.strip().lower() in ("1", "true", "yes", "si", "sí")

        return cls(**overrides)
