"""
errors.py — Jerarquia de errores del motor logico.

Cada etapa del pipeline lanza su propio tipo de error:

    ValidationError  → texto o proposiciones invalidas (corregible por el usuario)
    ParseError       → expresion simbolica mal formada
    ExtractionError  → el texto no se pudo traducir a una expresion
    EvaluationError  → variable sin valor en modo estricto
    InternalError    → nodo u operador desconocido en el AST (bug)

Todos heredan de LogicError, asi quien llama puede capturar cualquier
falla del pipeline con un solo `except LogicError`.
"""

from __future__ import annotations


class LogicError(Exception):
    """Base de todos los errores del motor."""


class ValidationError(LogicError, ValueError):
    """El texto o las proposiciones no cumplen las restricciones."""


class ParseError(LogicError, ValueError):
    """La expresion simbolica no se pudo parsear.

    Attributes:
        token: El token problematico, si se conoce.
    """

    def __init__(self, message: str, token: str | None = None) -> None:
        super().__init__(message)
        self.token = token


class ExtractionError(LogicError, ValueError):
    """No se pudo extraer una expresion logica del texto.

    Attributes:
        clause: La clausula que fallo, si se conoce.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class EvaluationError(LogicError, KeyError):
    """Variable sin valor asignado (solo en modo estricto)."""

    def __str__(self) -> str:
        # KeyError envuelve el mensaje en comillas; lo evitamos
        return str(self.args[0]) if self.args else ""


class InternalError(LogicError, RuntimeError):
    """Nodo u operador desconocido. Nunca deberia ocurrir con un AST del parser."""
