"""
render.py — Expresion simbolica → lenguaje natural.

    expression_to_natural_language("p → ¬q", {"p": "llueve", "q": "salgo"})
    → '"llueve" implica no "salgo"'

Los significados se pasan en cada llamada: no hay tabla global, asi que
dos analisis concurrentes no se pisan.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

CONNECTOR_WORDS: dict[str, str] = {
    "∧": " y ",
    "∨": " o ",
    "¬": "no ",
    "→": " implica ",
    "↔": " si y solo si ",
    "⊤": " verdadero ",
    "⊥": " falso ",
}

_SYMBOL_RE = re.compile(r"\b[a-z]\b")
_SPACES_RE = re.compile(r" {2,}")


def expression_to_natural_language(expression: str, meanings: Mapping[str, str]) -> str:
    """Reemplaza simbolos por sus significados y conectores por palabras.

    Los simbolos se reemplazan en UNA sola pasada, antes que los
    conectores: asi una variable llamada "y" u "o" no choca con las
    palabras " y " / " o ", y un significado que contiene una letra
    suelta no se vuelve a sustituir.

    Simbolos sin significado quedan tal cual.
    """
    natural = _SYMBOL_RE.sub(
        lambda m: f'"{meanings[m.group(0)]}"' if m.group(0) in meanings else m.group(0),
        expression,
    )
    for glyph, word in CONNECTOR_WORDS.items():
        natural = natural.replace(glyph, word)
    return _SPACES_RE.sub(" ", natural).strip()
