"""
models.py — Tipos de datos de un analisis.

    PropositionVariable  → simbolo + significado ('p': "llueve")
    AnalysisResult       → todo lo que produce analyze(), inmutable

Formato JSON de AnalysisResult (lo consume el historial):
    {
        "originalText": "Si llueve entonces el suelo se moja.",
        "variables": [{"symbol": "p", "meaning": "llueve"}, ...],
        "expression": "(p) → (q)",
        "expressionType": "Contingencia",
        "truthTable": [{"assignment": {"p": false, "q": false}, "result": true}, ...],
        "ast": {"type": "binary", "operator": "IMPLIES", ...},
        "timestamp": "2026-01-01T12:00:00+00:00"
    }
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from proplogic.analysis.render import expression_to_natural_language
from proplogic.logic.errors import ValidationError
from proplogic.logic.formula import ASTNode, ast_from_dict, ast_to_dict
from proplogic.logic.truth_table import ExpressionType, TruthTableRow


@dataclass(frozen=True)
class PropositionVariable:
    """Una proposicion declarada por el usuario.

    La validacion (letra minuscula, significado no vacio, sin duplicados)
    la hace validate_variables(), no el constructor.
    """

    symbol: str
    meaning: str

    def to_dict(self) -> dict[str, str]:
        return {"symbol": self.symbol, "meaning": self.meaning}

    @classmethod
    def from_dict(cls, data: Mapping[str, str]) -> PropositionVariable:
        return cls(symbol=data["symbol"], meaning=data["meaning"])


def coerce_variables(variables) -> tuple[PropositionVariable, ...]:
    """Normaliza las formas aceptadas de declarar variables.

    Acepta:
        {"p": "llueve", "q": "me mojo"}                   (dict simbolo → significado)
        [PropositionVariable("p", "llueve"), ...]
        [{"symbol": "p", "meaning": "llueve"}, ...]
        [("p", "llueve"), ...]
    """
    if isinstance(variables, Mapping):
        return tuple(PropositionVariable(s, m) for s, m in variables.items())

    coerced: list[PropositionVariable] = []
    for item in variables:
        if isinstance(item, PropositionVariable):
            coerced.append(item)
            continue
        try:
            if isinstance(item, Mapping):
                coerced.append(PropositionVariable.from_dict(item))
            else:
                symbol, meaning = item
                coerced.append(PropositionVariable(symbol, meaning))
        except (KeyError, TypeError, ValueError):
            raise ValidationError(
                f"Proposición mal formada: {item!r}. Se espera símbolo y significado."
            ) from None
    return tuple(coerced)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class AnalysisResult:
    """Resultado completo de un analisis. Se crea solo desde analyze()."""

    original_text: str
    variables: tuple[PropositionVariable, ...]
    expression: str
    expression_type: ExpressionType
    truth_table: tuple[TruthTableRow, ...]
    ast: ASTNode
    timestamp: str = field(default_factory=_now)

    @property
    def symbols(self) -> list[str]:
        return [v.symbol for v in self.variables]

    @property
    def meanings(self) -> dict[str, str]:
        """Tabla simbolo → significado, propia de este analisis."""
        return {v.symbol: v.meaning for v in self.variables}

    def to_natural_language(self) -> str:
        """La expresion leida en español con los significados de este analisis."""
        return expression_to_natural_language(self.expression, self.meanings)

    # --- Serializacion ---

    def to_dict(self) -> dict:
        """Serializa a un dict compatible con JSON (claves camelCase)."""
        return {
            "originalText": self.original_text,
            "variables": [v.to_dict() for v in self.variables],
            "expression": self.expression,
            "expressionType": self.expression_type.value,
            "truthTable": [row.to_dict() for row in self.truth_table],
            "ast": ast_to_dict(self.ast),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> AnalysisResult:
        """Deserializa desde un dict (como lo produce ``to_dict``)."""
        return cls(
            original_text=data["originalText"],
            variables=tuple(PropositionVariable.from_dict(v) for v in data["variables"]),
            expression=data["expression"],
            expression_type=ExpressionType(data["expressionType"]),
            truth_table=tuple(TruthTableRow.from_dict(r) for r in data["truthTable"]),
            ast=ast_from_dict(data["ast"]),
            timestamp=data["timestamp"],
        )

    def to_json(self, path: str | Path | None = None) -> str:
        """Exporta a JSON. Si se da un path, tambien lo escribe a disco."""
        text = json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
        if path is not None:
            p = Path(path)
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(text, encoding="utf-8")
        return text
