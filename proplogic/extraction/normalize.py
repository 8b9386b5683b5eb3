"""
normalize.py — Normalizacion de texto en español para la extraccion.

Dos normalizaciones distintas:

    normalize_text()          → para buscar patrones ("si ... entonces ...")
                                minusculas + espacios colapsados
    normalize_for_matching()  → para comparar palabras con los significados
                                ademas quita tildes y colapsa dos
                                terminaciones de futuro

La normalizacion de futuro es deliberadamente estrecha:
    "mojará"  → "moja"    (ará → a)
    "vivirá"  → "vive"    (irá → e)
No es un stemmer: solo cubre el caso tipico "si X, entonces Y ocurrirá".
"""

from __future__ import annotations

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")
_WORD_RE = re.compile(r"\w+")

# Un punto NO separa oraciones si lo precede la palabra suelta "no".
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<!\bno)\.")

# Se aplican ANTES de quitar tildes: sin la tilde, "ara" tambien
# aparece al final de palabras como "para".
FUTURE_ENDINGS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"irá\b"), "e"),
    (re.compile(r"ará\b"), "a"),
)


def normalize_text(text: str) -> str:
    """Minusculas y espacios colapsados a uno solo."""
    return _WHITESPACE_RE.sub(" ", text.lower()).strip()


def split_sentences(text: str) -> list[str]:
    """Divide en oraciones por '.', descartando las vacias.

    Ejemplo:
        split_sentences("si llueve entonces me mojo. pero no.")
        → ["si llueve entonces me mojo", "pero no."]
    """
    sentences = (s.strip() for s in _SENTENCE_BOUNDARY_RE.split(text))
    return [s for s in sentences if s]


def strip_diacritics(text: str) -> str:
    """Quita tildes y diacriticos: "acción" → "accion", "ñandú" → "nandu"."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def collapse_future_endings(text: str) -> str:
    """Colapsa "irá"→"e" y "ará"→"a" al final de palabra."""
    for pattern, replacement in FUTURE_ENDINGS:
        text = pattern.sub(replacement, text)
    return text


def normalize_for_matching(text: str) -> str:
    """Normalizacion completa para comparar clausulas con significados."""
    return strip_diacritics(collapse_future_endings(text.lower()))


def words(text: str) -> list[str]:
    """Palabras de un texto ya normalizado (se descarta la puntuacion)."""
    return _WORD_RE.findall(text)
