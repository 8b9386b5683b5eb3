"""
truth_table.py — Evaluador de AST + generador de tablas de verdad.

Flujo:
    1. Evaluar: AST + asignacion de valores → True/False
    2. Generar tabla: las 2^n combinaciones de valores → columna de resultados
    3. Clasificar: todo True → Tautologia, todo False → Contradiccion,
       mezcla → Contingencia

Orden de las filas (canonico, reproducible):
    La fila i corresponde a la expansion binaria de i con n bits,
    el bit MAS significativo es la PRIMERA variable declarada.

    p q | fila
    F F |  0
    F T |  1
    T F |  2
    T T |  3

Costo: O(2^n · |AST|). El limite de proposiciones acota el peor caso.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from itertools import product
from types import MappingProxyType

from proplogic.logic.errors import EvaluationError, InternalError
from proplogic.logic.formula import (
    ASTNode,
    BinaryNode,
    ConstantNode,
    Operator,
    UnaryNode,
    VariableNode,
)


# =====================================================================
# EVALUADOR: AST + asignacion → True/False
# =====================================================================


def evaluate(node: ASTNode, assignment: dict[str, bool], *, strict: bool = False) -> bool:
    """Evalua un AST con una asignacion de valores.

    Una variable sin valor en la asignacion vale False. Con strict=True
    se lanza EvaluationError en su lugar.

    Ejemplo:
        ast = parse_expression("p ∧ q")
        evaluate(ast, {'p': True, 'q': True})   → True
        evaluate(ast, {'p': True, 'q': False})  → False
        evaluate(ast, {'p': True})              → False  (q ausente)
    """
    if isinstance(node, VariableNode):
        if node.name not in assignment:
            if strict:
                raise EvaluationError(f"La proposición '{node.name}' no tiene valor asignado")
            return False
        return assignment[node.name]

    if isinstance(node, ConstantNode):
        return node.value

    if isinstance(node, UnaryNode):
        if node.operator is Operator.NOT:
            return not evaluate(node.operand, assignment, strict=strict)
        raise InternalError(f"Operador unario desconocido: {node.operator}")

    if isinstance(node, BinaryNode):
        left = evaluate(node.left, assignment, strict=strict)
        right = evaluate(node.right, assignment, strict=strict)

        if node.operator is Operator.AND:
            return left and right
        if node.operator is Operator.OR:
            return left or right
        if node.operator is Operator.IMPLIES:
            # p → q  ≡  ¬p ∨ q
            return (not left) or right
        if node.operator is Operator.IFF:
            return left == right
        raise InternalError(f"Operador binario desconocido: {node.operator}")

    raise InternalError(f"Nodo desconocido: {type(node).__name__}")


# =====================================================================
# TABLA DE VERDAD
# =====================================================================


@dataclass(frozen=True)
class TruthTableRow:
    """Una fila: asignacion completa + resultado de la expresion.

    La asignacion se guarda como MappingProxyType: de solo lectura, asi la
    fila (y el AnalysisResult que la contiene) no cambia despues de creada.
    """

    assignment: Mapping[str, bool]
    result: bool

    def __post_init__(self) -> None:
        object.__setattr__(self, "assignment", MappingProxyType(dict(self.assignment)))

    def __hash__(self) -> int:
        return hash((tuple(self.assignment.items()), self.result))

    def to_dict(self) -> dict:
        return {"assignment": dict(self.assignment), "result": self.result}

    @classmethod
    def from_dict(cls, data: dict) -> TruthTableRow:
        return cls(
            assignment={k: bool(v) for k, v in data["assignment"].items()},
            result=bool(data["result"]),
        )


def _symbols(variables: Iterable) -> list[str]:
    """Acepta PropositionVariable o simbolos sueltos ('p')."""
    return [getattr(v, "symbol", v) for v in variables]


def generate_assignments(symbols: Sequence[str]) -> list[dict[str, bool]]:
    """Todas las asignaciones en orden binario canonico.

    product([False, True], repeat=n) recorre exactamente 0..2^n-1 en
    binario con el primer simbolo como bit mas significativo.
    """
    return [dict(zip(symbols, values)) for values in product([False, True], repeat=len(symbols))]


def generate_truth_table(
    ast: ASTNode,
    variables: Iterable,
    *,
    strict: bool = False,
) -> list[TruthTableRow]:
    """Genera la tabla de verdad completa de un AST.

    Args:
        ast: Raiz del AST.
        variables: Variables declaradas, en orden (PropositionVariable o str).
        strict: Propagado al evaluador.

    Returns:
        2^n filas en orden binario canonico.

    Ejemplo:
        rows = generate_truth_table(parse_expression("p → q"), ["p", "q"])
        # [F F → T, F T → T, T F → F, T T → T]
    """
    symbols = _symbols(variables)
    return [
        TruthTableRow(assignment, evaluate(ast, assignment, strict=strict))
        for assignment in generate_assignments(symbols)
    ]


# =====================================================================
# CLASIFICACION
# =====================================================================


class ExpressionType(Enum):
    """Clasificacion semantica de una expresion."""

    TAUTOLOGY = "Tautología"
    CONTRADICTION = "Contradicción"
    CONTINGENCY = "Contingencia"


def classify(rows: Iterable[TruthTableRow]) -> ExpressionType:
    """Clasifica una tabla de verdad segun su columna de resultados.

    Solo mira los resultados, asi que el orden de las filas no importa.

    Raises:
        ValueError: Si la tabla esta vacia.
    """
    results = [row.result for row in rows]
    if not results:
        raise ValueError("No se puede clasificar una tabla de verdad vacía")

    if all(results):
        return ExpressionType.TAUTOLOGY
    if not any(results):
        return ExpressionType.CONTRADICTION
    return ExpressionType.CONTINGENCY


# =====================================================================
# PRETTY PRINT DE TABLA DE VERDAD
# =====================================================================


def format_truth_table(rows: Sequence[TruthTableRow], symbols: Sequence[str], header: str) -> str:
    """Genera una tabla de verdad en texto plano (V/F).

    Ejemplo:
        print(format_truth_table(rows, ["p", "q"], "p → q"))

        p | q | p → q
        --|---|------
        F | F |   V
        F | V |   V
        V | F |   F
        V | V |   V
    """
    head = " | ".join(symbols) + " | " + header
    separator = "-|-".join("-" * len(s) for s in symbols) + "-|-" + "-" * len(header)

    lines = [head, separator]
    padding = " " * (len(header) // 2)
    for row in rows:
        values = " | ".join("V" if row.assignment[s] else "F" for s in symbols)
        lines.append(f"{values} | {padding}{'V' if row.result else 'F'}")

    return "\n".join(lines)
