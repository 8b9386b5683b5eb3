"""
formula.py — Tokenizer y parser de expresiones logicas simbolicas.

Convierte un string como "(p ∧ q) → ¬r" en un arbol de sintaxis
abstracta (AST) listo para evaluar.

Flujo:
    1. Tokenizar: "p ∧ ¬q"  →  [IDENT(p), AND, NOT, IDENT(q), EOF]
    2. Verificar parentesis balanceados (pre-pasada con una pila)
    3. Parsear: tokens → AST

Gramatica soportada (BNF):
    expr          ::= biconditional
    biconditional ::= implication ('↔' implication)*
    implication   ::= disjunction ('→' disjunction)*
    disjunction   ::= conjunction ('∨' conjunction)*
    conjunction   ::= negation ('∧' negation)*
    negation      ::= '¬' negation | primary
    primary       ::= '(' expr ')' | '⊤' | '⊥' | variable
    variable      ::= [a-z]

Precedencia de operadores (de menor a mayor):
    1. ↔  (bicondicional)
    2. →  (implicacion)
    3. ∨  (disyuncion)
    4. ∧  (conjuncion)
    5. ¬  (negacion)

Todos los operadores binarios asocian a la IZQUIERDA:
    p → q → r  se parsea como  (p → q) → r

Limites: a lo sumo MAX_NESTING parentesis/negaciones anidados y un AST
de profundidad MAX_DEPTH. Pasarse es un ParseError, nunca RecursionError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

from proplogic.logic.errors import ParseError


# =====================================================================
# TOKENIZER
# =====================================================================
# Siete glifos reservados + parentesis. Todo lo demas que no sea espacio
# se agrupa en identificadores; el parser decide si son validos.


class TokenType(Enum):
    """Tipos de token en una expresion logica."""

    IDENT = auto()      # Identificador (se valida en el parser): p, q, ...
    TRUE = auto()       # Constante verdadera: ⊤
    FALSE = auto()      # Constante falsa: ⊥
    NOT = auto()        # Negacion: ¬
    AND = auto()        # Conjuncion: ∧
    OR = auto()         # Disyuncion: ∨
    IMPLIES = auto()    # Implicacion: →
    IFF = auto()        # Bicondicional: ↔
    LPAREN = auto()     # (
    RPAREN = auto()     # )
    EOF = auto()        # Fin de la expresion


@dataclass(frozen=True)
class Token:
    """Un token individual, con su posicion (caracter) en la expresion."""

    type: TokenType
    value: str
    position: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r})"


RESERVED: dict[str, TokenType] = {
    "∧": TokenType.AND,
    "∨": TokenType.OR,
    "¬": TokenType.NOT,
    "→": TokenType.IMPLIES,
    "↔": TokenType.IFF,
    "⊤": TokenType.TRUE,
    "⊥": TokenType.FALSE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


def tokenize(expression: str) -> list[Token]:
    """Convierte una expresion en una lista de tokens.

    Nunca lanza errores: un identificador mal formado ("pq", "P", "x1")
    se emite tal cual como IDENT y lo rechaza el parser.

    Ejemplo:
        tokenize("¬(p∧q)")
        → [Token(NOT, '¬'), Token(LPAREN, '('), Token(IDENT, 'p'),
           Token(AND, '∧'), Token(IDENT, 'q'), Token(RPAREN, ')'), Token(EOF, '')]
    """
    tokens: list[Token] = []
    start = -1  # inicio del identificador en curso, -1 si no hay

    for i, char in enumerate(expression):
        if char.isspace() or char in RESERVED:
            if start >= 0:
                tokens.append(Token(TokenType.IDENT, expression[start:i], start))
                start = -1
            if char in RESERVED:
                tokens.append(Token(RESERVED[char], char, i))
        elif start < 0:
            start = i

    if start >= 0:
        tokens.append(Token(TokenType.IDENT, expression[start:], start))

    tokens.append(Token(TokenType.EOF, "", len(expression)))
    return tokens


# =====================================================================
# AST (Abstract Syntax Tree)
# =====================================================================
# Variante cerrada de cuatro tipos de nodo. Todos son inmutables.


class Operator(Enum):
    """Operadores logicos, con su glifo como valor."""

    NOT = "¬"
    AND = "∧"
    OR = "∨"
    IMPLIES = "→"
    IFF = "↔"


BINARY_OPERATORS: dict[TokenType, Operator] = {
    TokenType.AND: Operator.AND,
    TokenType.OR: Operator.OR,
    TokenType.IMPLIES: Operator.IMPLIES,
    TokenType.IFF: Operator.IFF,
}


class ASTNode:
    """Nodo base del arbol de sintaxis abstracta."""

    __slots__ = ()

    def __str__(self) -> str:
        return ast_to_string(self)


@dataclass(frozen=True)
class VariableNode(ASTNode):
    """Proposicion (hoja del arbol). Ejemplo: 'p'."""

    name: str


@dataclass(frozen=True)
class ConstantNode(ASTNode):
    """Constante ⊤ (True) o ⊥ (False)."""

    value: bool


@dataclass(frozen=True)
class UnaryNode(ASTNode):
    """Negacion: ¬φ."""

    operator: Operator
    operand: ASTNode


@dataclass(frozen=True)
class BinaryNode(ASTNode):
    """Operacion binaria: φ ○ ψ.

    Ejemplo: p ∧ q → BinaryNode(AND, VariableNode('p'), VariableNode('q'))
    """

    operator: Operator
    left: ASTNode
    right: ASTNode


# =====================================================================
# PARSER: tokens → AST
# =====================================================================

_VARIABLE_RE = re.compile(r"[a-z]")

# Parentesis + negaciones anidadas. Cada nivel de parentesis cuesta unos
# diez frames del parser recursivo.
MAX_NESTING = 50
# Profundidad del AST (cadenas largas de operadores se pliegan en profundidad).
MAX_DEPTH = 256


def check_balanced_parens(expression: str) -> bool:
    """Verifica con una pila que cada '(' tenga su ')' posterior y viceversa."""
    stack: list[int] = []
    for i, char in enumerate(expression):
        if char == "(":
            stack.append(i)
        elif char == ")":
            if not stack:
                return False
            stack.pop()
    return not stack


class ExpressionParser:
    """Parser de recursive descent para expresiones logicas.

    Ejemplo:
        parser = ExpressionParser("p ∧ q → r")
        ast = parser.parse()
        # ast = BinaryNode(IMPLIES, BinaryNode(AND, p, q), r)
    """

    def __init__(self, expression: str) -> None:
        self.expression = expression
        self.tokens = tokenize(expression)
        self.pos = 0
        self.nesting = 0

    def parse(self) -> ASTNode:
        """Parsea la expresion completa y retorna el AST.

        Raises:
            ParseError: Si la expresion tiene errores de sintaxis.
        """
        if not self.expression.strip():
            raise ParseError("La expresión lógica no puede estar vacía.")

        if not check_balanced_parens(self.expression):
            raise ParseError("Paréntesis no balanceados en la expresión.")

        ast = self._biconditional()

        if self._current().type != TokenType.EOF:
            token = self._current()
            raise ParseError(
                f"Tokens inesperados después de la expresión: "
                f"'{token.value}' en posición {token.position}",
                token=token.value,
            )

        if ast_depth(ast) > MAX_DEPTH:
            raise ParseError(
                f"Expresión demasiado profunda: más de {MAX_DEPTH} operadores encadenados."
            )

        return ast

    def _enter(self, token: Token) -> None:
        """Entra a un nivel de anidamiento ('(' o '¬')."""
        self.nesting += 1
        if self.nesting > MAX_NESTING:
            raise ParseError(
                f"Expresión demasiado anidada: más de {MAX_NESTING} niveles de "
                f"paréntesis o negaciones (posición {token.position}).",
                token=token.value,
            )

    def _current(self) -> Token:
        """Token actual sin avanzar."""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return Token(TokenType.EOF, "", len(self.expression))

    def _advance(self) -> Token:
        """Consume y retorna el token actual."""
        token = self._current()
        self.pos += 1
        return token

    def _expect(self, token_type: TokenType, symbol: str) -> Token:
        """Consume un token del tipo esperado o lanza error."""
        token = self._current()
        if token.type != token_type:
            found = token.value or "fin de la expresión"
            raise ParseError(
                f"Se esperaba '{symbol}' pero se encontró '{found}' "
                f"en posición {token.position}",
                token=token.value or None,
            )
        return self._advance()

    def _binary_tier(self, token_type: TokenType, operand) -> ASTNode:
        """Un nivel de precedencia: operand (op operand)*, plegado a la izquierda."""
        left = operand()
        while self._current().type == token_type:
            self._advance()
            right = operand()
            left = BinaryNode(BINARY_OPERATORS[token_type], left, right)
        return left

    # --- Niveles de precedencia (de menor a mayor) ---

    def _biconditional(self) -> ASTNode:
        """biconditional ::= implication ('↔' implication)*"""
        return self._binary_tier(TokenType.IFF, self._implication)

    def _implication(self) -> ASTNode:
        """implication ::= disjunction ('→' disjunction)*"""
        return self._binary_tier(TokenType.IMPLIES, self._disjunction)

    def _disjunction(self) -> ASTNode:
        """disjunction ::= conjunction ('∨' conjunction)*"""
        return self._binary_tier(TokenType.OR, self._conjunction)

    def _conjunction(self) -> ASTNode:
        """conjunction ::= negation ('∧' negation)*"""
        return self._binary_tier(TokenType.AND, self._negation)

    def _negation(self) -> ASTNode:
        """negation ::= '¬' negation | primary"""
        if self._current().type == TokenType.NOT:
            self._enter(self._advance())
            node = UnaryNode(Operator.NOT, self._negation())
            self.nesting -= 1
            return node
        return self._primary()

    def _primary(self) -> ASTNode:
        """primary ::= '(' expr ')' | '⊤' | '⊥' | variable"""
        token = self._current()

        if token.type == TokenType.LPAREN:
            self._enter(self._advance())
            node = self._biconditional()
            self._expect(TokenType.RPAREN, ")")
            self.nesting -= 1
            return node

        if token.type == TokenType.TRUE:
            self._advance()
            return ConstantNode(True)

        if token.type == TokenType.FALSE:
            self._advance()
            return ConstantNode(False)

        if token.type == TokenType.IDENT:
            if not _VARIABLE_RE.fullmatch(token.value):
                raise ParseError(
                    f"Identificador inválido '{token.value}' en posición {token.position}: "
                    f"las proposiciones deben ser una sola letra minúscula.",
                    token=token.value,
                )
            self._advance()
            return VariableNode(token.value)

        if token.type == TokenType.EOF:
            raise ParseError(
                "Fin inesperado de la expresión: se esperaba una proposición, '¬' o '('."
            )

        raise ParseError(
            f"Se esperaba una proposición, '¬' o '(' pero se encontró "
            f"'{token.value}' en posición {token.position}",
            token=token.value,
        )


def parse_expression(expression: str) -> ASTNode:
    """Parsea una expresion simbolica. Atajo de ExpressionParser(...).parse()."""
    try:
        return ExpressionParser(expression).parse()
    except RecursionError:
        raise ParseError("Expresión demasiado anidada para analizarla.") from None


def is_valid_expression(expression: str) -> tuple[bool, str]:
    """Verifica si una expresion es sintacticamente valida.

    Pensado para vista previa en vivo: nunca lanza.

    Ejemplo:
        is_valid_expression("p → q")      → (True, "OK")
        is_valid_expression("(p ∧ q")     → (False, "Paréntesis no balanceados ...")
    """
    try:
        parse_expression(expression)
        return True, "OK"
    except ParseError as e:
        return False, str(e)


# =====================================================================
# RECORRIDOS DEL AST
# =====================================================================


def extract_variables(node: ASTNode) -> set[str]:
    """Extrae todas las variables de un AST. Ej: {'p', 'q'}"""
    if isinstance(node, VariableNode):
        return {node.name}
    if isinstance(node, UnaryNode):
        return extract_variables(node.operand)
    if isinstance(node, BinaryNode):
        return extract_variables(node.left) | extract_variables(node.right)
    return set()


def ast_depth(node: ASTNode) -> int:
    """Profundidad del AST (una hoja = 1). Iterativo, sin limite de recursion."""
    depth = 0
    stack = [(node, 1)]
    while stack:
        current, level = stack.pop()
        depth = max(depth, level)
        if isinstance(current, UnaryNode):
            stack.append((current.operand, level + 1))
        elif isinstance(current, BinaryNode):
            stack.append((current.left, level + 1))
            stack.append((current.right, level + 1))
    return depth


_PRECEDENCE: dict[Operator, int] = {
    Operator.IFF: 1,
    Operator.IMPLIES: 2,
    Operator.OR: 3,
    Operator.AND: 4,
}


def ast_to_string(node: ASTNode) -> str:
    """Convierte un AST a string con la minima cantidad de parentesis.

    Como los operadores asocian a la izquierda, el hijo derecho lleva
    parentesis tambien cuando tiene la MISMA precedencia:
        (p → q) → r  →  "p → q → r"
        p → (q → r)  →  "p → (q → r)"
    """
    if isinstance(node, VariableNode):
        return node.name

    if isinstance(node, ConstantNode):
        return "⊤" if node.value else "⊥"

    if isinstance(node, UnaryNode):
        inner = ast_to_string(node.operand)
        if isinstance(node.operand, BinaryNode):
            return f"¬({inner})"
        return f"¬{inner}"

    if isinstance(node, BinaryNode):
        prec = _PRECEDENCE[node.operator]
        left = ast_to_string(node.left)
        right = ast_to_string(node.right)

        if isinstance(node.left, BinaryNode) and _PRECEDENCE[node.left.operator] < prec:
            left = f"({left})"
        if isinstance(node.right, BinaryNode) and _PRECEDENCE[node.right.operator] <= prec:
            right = f"({right})"

        return f"{left} {node.operator.value} {right}"

    return repr(node)


# =====================================================================
# SERIALIZACION
# =====================================================================


def ast_to_dict(node: ASTNode) -> dict:
    """Serializa un AST a un dict compatible con JSON."""
    if isinstance(node, VariableNode):
        return {"type": "variable", "name": node.name}
    if isinstance(node, ConstantNode):
        return {"type": "constant", "value": node.value}
    if isinstance(node, UnaryNode):
        return {
            "type": "unary",
            "operator": node.operator.name,
            "operand": ast_to_dict(node.operand),
        }
    if isinstance(node, BinaryNode):
        return {
            "type": "binary",
            "operator": node.operator.name,
            "left": ast_to_dict(node.left),
            "right": ast_to_dict(node.right),
        }
    raise TypeError(f"Nodo desconocido: {type(node).__name__}")


def ast_from_dict(data: dict) -> ASTNode:
    """Reconstruye un AST desde un dict (como lo produce ``ast_to_dict``)."""
    kind = data.get("type")
    if kind == "variable":
        return VariableNode(data["name"])
    if kind == "constant":
        return ConstantNode(bool(data["value"]))
    if kind == "unary":
        return UnaryNode(Operator[data["operator"]], ast_from_dict(data["operand"]))
    if kind == "binary":
        return BinaryNode(
            Operator[data["operator"]],
            ast_from_dict(data["left"]),
            ast_from_dict(data["right"]),
        )
    raise ValueError(f"Tipo de nodo desconocido: {kind!r}")
