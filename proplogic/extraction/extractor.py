"""
extractor.py — Texto en español → expresion logica simbolica.

Heuristica de "mejor esfuerzo", NO un sistema de NLP general.

Flujo:
    1. Normalizar: minusculas + espacios colapsados
    2. Dividir en oraciones por '.'
    3. Por cada oracion:
         "si A, entonces C"              →  (A) → (C)
         "si A1 entonces C1. pero si A2 entonces C2"
                                         →  ((A1) → (C1)) ∧ ((A2) → (C2))
         cualquier otra cosa             →  clausula directa (o se ignora)
    4. Cada clausula se descompone (primero "y", despues "o"):
         "no X"      → ¬X
         "X y Y y Z" → (X ∧ Y ∧ Z)
         "X o Y"     → (X ∨ Y)
         "X"         → la proposicion cuyo significado mas se parece
    5. Las relaciones se unen con ∧

Ejemplo:
    extract_logical_expression(
        "Si llueve entonces el suelo se moja.",
        {"p": "llueve", "q": "el suelo se moja"},
    )
    → "(p) → (q)"

Puntaje de una proposicion para una clausula:
    base  = palabras del significado presentes en la clausula / palabras del significado
    final = base + base * palabras_de_la_clausula / LENGTH_BOOST_DIVISOR   (si base > 0)
Gana el puntaje mas alto (empate → la primera declarada), y solo si
llega a MATCH_THRESHOLD.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from proplogic.analysis.models import PropositionVariable, coerce_variables
from proplogic.extraction.normalize import (
    normalize_for_matching,
    normalize_text,
    split_sentences,
    words,
)
from proplogic.logic.errors import ExtractionError

MATCH_THRESHOLD = 0.3
LENGTH_BOOST_DIVISOR = 10

# Antecedente hasta la primera coma / "entonces"; consecuente hasta coma o punto.
IMPLICATION_RE = re.compile(r"\bsi\s+([^,]+?)\s*,?\s*\bentonces\b\s*,?\s*([^,.]+)")
CONTINUATION_RE = re.compile(r"^pero\b")
NEGATION_PREFIX = "no "
CONJUNCTION_SPLIT_RE = re.compile(r"\s+y\s+")
DISJUNCTION_SPLIT_RE = re.compile(r"\s+o\s+")


# =====================================================================
# TIPOS DE DATOS
# =====================================================================


@dataclass(frozen=True)
class Relationship:
    """Una relacion logica extraida de una (o dos) oraciones.

    Attributes:
        kind: "implication", "chained" (con "pero si...") o "clause".
        raw: Forma simbolica, ej: "(p) → (q)".
        source: Oracion(es) normalizadas de las que salio.
    """

    kind: str
    raw: str
    source: str


# =====================================================================
# PUNTAJE Y ASOCIACION DE VARIABLES
# =====================================================================


def score_variable(clause_words: Sequence[str], meaning: str) -> float:
    """Puntaje de similitud entre una clausula (ya en palabras) y un significado."""
    meaning_words = words(normalize_for_matching(meaning))
    if not meaning_words:
        return 0.0

    clause_set = set(clause_words)
    matches = sum(1 for w in meaning_words if w in clause_set)
    score = matches / len(meaning_words)

    if score > 0:
        # Premia clausulas largas que igual coinciden bien
        score += score * len(clause_words) / LENGTH_BOOST_DIVISOR
    return score


def find_best_variable(
    clause: str, variables: Sequence[PropositionVariable]
) -> PropositionVariable | None:
    """La proposicion que mejor coincide con la clausula, o None.

    Ejemplo:
        find_best_variable("el suelo se mojará", [p: "llueve", q: "el suelo se moja"])
        → q   (base 4/4 = 1.0, +40% por 4 palabras → 1.4)
    """
    clause_words = words(normalize_for_matching(clause))
    best: PropositionVariable | None = None
    best_score = 0.0

    for variable in variables:
        score = score_variable(clause_words, variable.meaning)
        if score > best_score:
            best, best_score = variable, score

    return best if best_score >= MATCH_THRESHOLD else None


# =====================================================================
# CLAUSULAS
# =====================================================================


def _strip_negation(text: str) -> tuple[bool, str]:
    text = text.strip()
    if text.startswith(NEGATION_PREFIX):
        return True, text[len(NEGATION_PREFIX):].strip()
    return False, text


def _match_term(term: str, variables: Sequence[PropositionVariable]) -> str:
    """Un termino suelto ("llueve", "no llueve") → "p" / "¬p"."""
    negated, text = _strip_negation(term)
    variable = find_best_variable(text, variables)
    if variable is None:
        raise ExtractionError(
            f'No se pudo asociar la cláusula "{text}" con ninguna proposición.',
            clause=text,
        )
    return f"¬{variable.symbol}" if negated else variable.symbol


def _join(parts: list[str], glyph: str) -> str:
    if len(parts) == 1:
        return parts[0]
    return "(" + f" {glyph} ".join(parts) + ")"


def parse_clause(clause: str, variables: Sequence[PropositionVariable]) -> str:
    """Convierte una clausula en una sub-expresion simbolica.

    "y" liga menos que "o": la clausula se corta primero en conjunciones
    y cada una en disyunciones. Un "no " inicial niega la clausula entera;
    dentro de la cadena niega solo su termino. Las cadenas quedan planas
    ("(p ∧ q ∧ r)"), sin importar cuantos "y" tenga el texto.

    Ejemplo:
        parse_clause("no llueve y hace frio", vars)  → "¬(p ∧ q)"
        parse_clause("llueve o nieva", vars)         → "(p ∨ r)"
        parse_clause("llueve y hace frio o nieva")   → "(p ∧ (q ∨ r))"

    Raises:
        ExtractionError: Si alguna parte no se asocia a ninguna proposicion.
    """
    negated, text = _strip_negation(clause)

    conjuncts = [
        _join([_match_term(term, variables) for term in DISJUNCTION_SPLIT_RE.split(part)], "∨")
        for part in CONJUNCTION_SPLIT_RE.split(text)
    ]
    expression = _join(conjuncts, "∧")

    return f"¬{expression}" if negated else expression


def match_implication(sentence: str) -> tuple[str, str] | None:
    """Busca "si A [,] entonces C". Retorna (A, C) o None."""
    match = IMPLICATION_RE.search(sentence)
    if match is None:
        return None
    return match.group(1).strip(), match.group(2).strip()


# =====================================================================
# EXTRACCION
# =====================================================================


def _implication(
    parts: tuple[str, str], variables: Sequence[PropositionVariable]
) -> str:
    antecedent = parse_clause(parts[0], variables)
    consequent = parse_clause(parts[1], variables)
    return f"({antecedent}) → ({consequent})"


def extract_relationships(text: str, variables) -> list[Relationship]:
    """Extrae las relaciones logicas del texto, en orden de aparicion.

    Una oracion sin implicacion que tampoco se asocia a ninguna
    proposicion se ignora; un error dentro de una implicacion aborta.

    Raises:
        ExtractionError: Clausula sin proposicion o "pero" mal formado.
    """
    declared = coerce_variables(variables)
    sentences = split_sentences(normalize_text(text))
    relationships: list[Relationship] = []

    i = 0
    while i < len(sentences):
        sentence = sentences[i]
        parts = match_implication(sentence)

        if parts is None:
            try:
                raw = parse_clause(sentence, declared)
            except ExtractionError:
                i += 1
                continue
            relationships.append(Relationship("clause", raw, sentence))
            i += 1
            continue

        first = _implication(parts, declared)
        following = sentences[i + 1] if i + 1 < len(sentences) else None

        if following is not None and CONTINUATION_RE.match(following):
            second_parts = match_implication(following)
            if second_parts is None:
                raise ExtractionError(
                    f'La oración "{following}" comienza con "pero" pero no tiene '
                    f'la forma "si ... entonces ...".',
                    clause=following,
                )
            second = _implication(second_parts, declared)
            relationships.append(
                Relationship("chained", f"({first}) ∧ ({second})", f"{sentence}. {following}")
            )
            i += 2
        else:
            relationships.append(Relationship("implication", first, sentence))
            i += 1

    return relationships


def extract_logical_expression(text: str, variables) -> str:
    """Deriva una expresion simbolica del texto y las proposiciones declaradas.

    Args:
        text: Texto libre en español.
        variables: Proposiciones (dict simbolo → significado o PropositionVariable).

    Returns:
        Expresion lista para parse_expression().

    Raises:
        ExtractionError: Si no se puede extraer ninguna estructura logica.
    """
    relationships = extract_relationships(text, variables)
    if not relationships:
        raise ExtractionError("No se encontró ninguna estructura lógica en el texto.")

    if len(relationships) == 1:
        return relationships[0].raw
    # Con varias relaciones, cada una va entre parentesis para que
    # la ∧ no se mezcle con la precedencia de →.
    return " ∧ ".join(f"({r.raw})" for r in relationships)
