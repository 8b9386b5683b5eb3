"""
analyzer.py — Pipeline completo de analisis.

    texto + proposiciones
        │
        ├─ validar texto y proposiciones        (ValidationError)
        ├─ extraer expresion del texto          (ExtractionError)
        │    └─ o usar la expresion dada        (camino simbolico)
        ├─ parsear                              (ParseError)
        ├─ generar tabla de verdad
        └─ clasificar
        │
    AnalysisResult

Fail-fast: la primera etapa que falla lanza y corta el pipeline.

Uso:
    result = analyze(
        "Si llueve entonces el suelo se moja.",
        {"p": "llueve", "q": "el suelo se moja"},
    )
    result.expression        → "(p) → (q)"
    result.expression_type   → ExpressionType.CONTINGENCY
"""

from __future__ import annotations

import re
from collections import Counter

from rich.console import Console

from proplogic.analysis.config import AnalyzerConfig
from proplogic.analysis.models import AnalysisResult, PropositionVariable, coerce_variables
from proplogic.extraction.extractor import extract_logical_expression
from proplogic.logic.errors import ValidationError
from proplogic.logic.formula import extract_variables, parse_expression
from proplogic.logic.truth_table import classify, format_truth_table, generate_truth_table

console = Console()

_SYMBOL_RE = re.compile(r"[a-z]")

# En modo verbose la tabla se imprime completa solo hasta 2^5 filas.
VERBOSE_TABLE_MAX_PROPOSITIONS = 5


# =====================================================================
# VALIDACION
# =====================================================================


def validate_text(text: str, config: AnalyzerConfig | None = None) -> None:
    """Valida largo del texto.

    Raises:
        ValidationError: Texto vacio, muy corto o muy largo.
    """
    config = config or AnalyzerConfig()

    if not text or not text.strip():
        raise ValidationError("El texto no puede estar vacío.")

    if len(text) < config.min_text_length:
        raise ValidationError(
            f"El texto debe tener al menos {config.min_text_length} caracteres."
        )

    if len(text) > config.max_text_length:
        raise ValidationError(
            f"El texto no debe exceder los {config.max_text_length} caracteres."
        )


def validate_variables(
    variables: tuple[PropositionVariable, ...], config: AnalyzerConfig | None = None
) -> None:
    """Valida cantidad, simbolos y significados de las proposiciones.

    Raises:
        ValidationError: Con el primer problema encontrado.
    """
    config = config or AnalyzerConfig()

    if len(variables) < config.min_propositions:
        raise ValidationError(
            f"Debe proporcionar al menos {config.min_propositions} proposiciones."
        )

    if len(variables) > config.max_propositions:
        raise ValidationError(
            f"No puede exceder el máximo de {config.max_propositions} proposiciones."
        )

    invalid = [v.symbol for v in variables if not _SYMBOL_RE.fullmatch(str(v.symbol))]
    if invalid:
        raise ValidationError(
            "Los símbolos de proposición deben ser letras minúsculas individuales "
            f"(inválidos: {', '.join(repr(s) for s in invalid)})."
        )

    duplicates = [s for s, n in Counter(v.symbol for v in variables).items() if n > 1]
    if duplicates:
        raise ValidationError(
            f"No puede haber símbolos de proposición duplicados ({', '.join(map(str, duplicates))})."
        )

    for v in variables:
        if not isinstance(v.meaning, str):
            raise ValidationError(
                f"El significado de la proposición '{v.symbol}' debe ser texto, "
                f"recibí {type(v.meaning).__name__}."
            )
        if not v.meaning.strip():
            raise ValidationError(f"La proposición '{v.symbol}' debe tener un significado.")


def check_text(text: str, config: AnalyzerConfig | None = None) -> tuple[bool, str]:
    """Como validate_text, pero retorna (es_valido, mensaje). Para vista previa."""
    try:
        validate_text(text, config)
        return True, "OK"
    except ValidationError as e:
        return False, str(e)


def check_variables(variables, config: AnalyzerConfig | None = None) -> tuple[bool, str]:
    """Como validate_variables, pero retorna (es_valido, mensaje). Para vista previa."""
    try:
        validate_variables(coerce_variables(variables), config)
        return True, "OK"
    except ValidationError as e:
        return False, str(e)


# =====================================================================
# PIPELINE
# =====================================================================


def analyze(
    text: str,
    variables,
    expression: str | None = None,
    *,
    config: AnalyzerConfig | None = None,
    verbose: bool = False,
) -> AnalysisResult:
    """Analiza un texto y sus proposiciones.

    Args:
        text: Texto original en español.
        variables: Proposiciones declaradas (ver coerce_variables).
        expression: Expresion simbolica. Si es None, se extrae del texto.
        config: Limites del analizador (default: AnalyzerConfig()).
        verbose: Imprimir cada etapa en consola.

    Returns:
        AnalysisResult inmutable.

    Raises:
        ValidationError, ExtractionError, ParseError: Segun la etapa que falle.
    """
    config = config or AnalyzerConfig()
    declared = coerce_variables(variables)

    validate_text(text, config)
    validate_variables(declared, config)
    if verbose:
        console.print(f"[bold cyan]🔎 Analizando[/] {len(text)} caracteres, {len(declared)} proposiciones")

    if expression is None:
        expression = extract_logical_expression(text, declared)
        if verbose:
            console.print(f"   📐 Expresión extraída: {expression}")
    elif verbose:
        console.print(f"   📐 Expresión dada: {expression}")

    ast = parse_expression(expression)

    if config.strict_variables:
        declared_symbols = {v.symbol for v in declared}
        undeclared = sorted(extract_variables(ast) - declared_symbols)
        if undeclared:
            raise ValidationError(
                f"La expresión usa proposiciones no declaradas: {', '.join(undeclared)}."
            )

    rows = generate_truth_table(ast, declared)
    expression_type = classify(rows)

    if verbose:
        n_true = sum(1 for row in rows if row.result)
        console.print(f"   📊 Tabla de verdad: {len(rows)} filas, {n_true} verdaderas")
        if len(declared) <= VERBOSE_TABLE_MAX_PROPOSITIONS:
            table = format_truth_table(rows, [v.symbol for v in declared], expression)
            console.print(table, markup=False, highlight=False)
        console.print(f"   [bold green]✅ {expression_type.value}[/]")

    return AnalysisResult(
        original_text=text,
        variables=declared,
        expression=expression,
        expression_type=expression_type,
        truth_table=tuple(rows),
        ast=ast,
    )
