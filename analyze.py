"""
🎯 CLI — Analiza proposiciones logicas en español.

Usage:
    python analyze.py "Si llueve entonces el suelo se moja." \\
        --var p=llueve --var q="el suelo se moja"
    python analyze.py "Llueve o no llueve siempre." --var p=llueve --var q=nieva \\
        --expression "p ∨ ¬p"
    python analyze.py "Si llueve entonces el suelo se moja." --var p=llueve \\
        --var q="el suelo se moja" --preview
    python analyze.py --history historial.json --show-history

Examples:
    $ python analyze.py "Si llueve entonces el suelo se moja." --var p=llueve --var q="el suelo se moja"
    📐 Expresión: (p) → (q)
    🗣️  Lectura:   ("llueve") implica ("el suelo se moja")
    ...
    🏷️  Contingencia
"""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from proplogic.analysis.analyzer import analyze
from proplogic.analysis.config import AnalyzerConfig
from proplogic.analysis.history import AnalysisHistory
from proplogic.analysis.models import AnalysisResult, PropositionVariable
from proplogic.extraction.extractor import extract_logical_expression
from proplogic.logic.errors import LogicError
from proplogic.logic.truth_table import ExpressionType

console = Console()

TYPE_STYLES = {
    ExpressionType.TAUTOLOGY: "bold green",
    ExpressionType.CONTRADICTION: "bold red",
    ExpressionType.CONTINGENCY: "bold yellow",
}


def parse_variable(value: str) -> PropositionVariable:
    """'p=llueve' → PropositionVariable('p', 'llueve')."""
    symbol, sep, meaning = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(
            f"Formato inválido {value!r}: se espera SIMBOLO=SIGNIFICADO (ej: p=llueve)"
        )
    return PropositionVariable(symbol.strip(), meaning.strip())


def print_result(result: AnalysisResult) -> None:
    """Imprime un analisis: variables, expresion, lectura y tabla de verdad."""
    variables = Table(title="Proposiciones")
    variables.add_column("Símbolo", style="cyan", justify="center")
    variables.add_column("Significado")
    for v in result.variables:
        variables.add_row(escape(v.symbol), escape(v.meaning))
    console.print(variables)

    console.print(f"\n📐 Expresión: [bold]{escape(result.expression)}[/]")
    console.print(f"🗣️  Lectura:   {escape(result.to_natural_language())}\n")

    table = Table(title="Tabla de verdad")
    for symbol in result.symbols:
        table.add_column(symbol, justify="center")
    table.add_column(escape(result.expression), justify="center", style="bold")
    for row in result.truth_table:
        cells = ["V" if row.assignment[s] else "F" for s in result.symbols]
        cells.append("[green]V[/]" if row.result else "[red]F[/]")
        table.add_row(*cells)
    console.print(table)

    style = TYPE_STYLES[result.expression_type]
    console.print(f"\n🏷️  [{style}]{result.expression_type.value}[/]")


def print_history(history: AnalysisHistory) -> None:
    entries = history.entries()
    if not entries:
        console.print("[yellow]No hay análisis guardados.[/]")
        return

    table = Table(title=f"Historial ({history.path})")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Fecha")
    table.add_column("Expresión")
    table.add_column("Tipo")
    for i, entry in enumerate(entries):
        table.add_row(str(i), entry.timestamp, escape(entry.expression), entry.expression_type.value)
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Analiza proposiciones lógicas: texto → expresión → tabla de verdad",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("text", type=str, nargs="?", help="Texto a analizar")
    parser.add_argument(
        "-p",
        "--var",
        dest="variables",
        type=parse_variable,
        action="append",
        default=[],
        metavar="SIMBOLO=SIGNIFICADO",
        help="Proposición declarada (repetible)",
    )
    parser.add_argument(
        "-e",
        "--expression",
        type=str,
        default=None,
        help="Expresión simbólica (omite la extracción del texto)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Solo mostrar la expresión extraída del texto",
    )
    parser.add_argument("--json", type=str, default=None, help="Exportar el resultado a JSON")
    parser.add_argument(
        "--history",
        type=str,
        default=None,
        help="Archivo de historial (se guarda cada análisis)",
    )
    parser.add_argument(
        "--show-history",
        action="store_true",
        help="Mostrar el historial guardado",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Config JSON (default: variables de entorno / .env)",
    )
    parser.add_argument("-V", "--verbose", action="store_true", help="Mostrar cada etapa")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = AnalyzerConfig.from_json(args.config) if args.config else AnalyzerConfig.from_env()
    except (OSError, ValueError, TypeError) as e:
        console.print(f"[bold red]❌ Config inválido: {escape(str(e))}[/]")
        return 1

    history = (
        AnalysisHistory(args.history, max_entries=config.history_max_entries)
        if args.history
        else None
    )

    if args.show_history:
        if history is None:
            console.print("[bold red]❌ --show-history requiere --history ARCHIVO[/]")
            return 1
        print_history(history)
        return 0

    if not args.text:
        parser.print_help()
        return 1

    try:
        if args.preview:
            expression = extract_logical_expression(args.text, args.variables)
            console.print(f"📐 {escape(expression)}")
            return 0

        result = analyze(
            args.text,
            args.variables,
            args.expression,
            config=config,
            verbose=args.verbose,
        )
    except LogicError as e:
        console.print(f"[bold red]❌ {escape(str(e))}[/]")
        return 1

    print_result(result)

    if args.json:
        result.to_json(args.json)
        console.print(f"\n💾 Exportado a {Path(args.json)}")

    if history is not None:
        history.save(result)
        console.print(f"🗂️  Guardado en historial ({len(history)}/{history.max_entries})")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
