"""Tests del pipeline analyze() y de los modelos de resultado."""

import json
import string

import pytest

from proplogic.analysis.analyzer import (
    analyze,
    check_text,
    check_variables,
    validate_text,
    validate_variables,
)
from proplogic.analysis.config import AnalyzerConfig
from proplogic.analysis.models import AnalysisResult, PropositionVariable, coerce_variables
from proplogic.analysis.render import expression_to_natural_language
from proplogic.logic.errors import ExtractionError, LogicError, ParseError, ValidationError
from proplogic.logic.formula import parse_expression
from proplogic.logic.truth_table import ExpressionType

SYMBOLIC_TEXT = "Texto para el camino simbólico."


def variables_for(symbols):
    return [PropositionVariable(s, f"proposición {s}") for s in symbols]


# =====================================================================
# VALIDACION
# =====================================================================


class TestValidateText:
    def test_empty(self):
        with pytest.raises(ValidationError, match="vacío"):
            validate_text("   \n ")

    def test_minimum_length(self):
        validate_text("a" * 10)
        with pytest.raises(ValidationError, match="al menos 10"):
            validate_text("a" * 9)

    def test_maximum_length(self):
        validate_text("a" * 5000)
        with pytest.raises(ValidationError, match="exceder los 5000"):
            validate_text("a" * 5001)

    def test_custom_limits(self):
        config = AnalyzerConfig(min_text_length=3, max_text_length=20)
        validate_text("abc", config)
        with pytest.raises(ValidationError, match="20"):
            validate_text("a" * 21, config)

    def test_check_text(self):
        assert check_text("Si llueve entonces me mojo.") == (True, "OK")
        valid, message = check_text("corto")
        assert not valid
        assert "al menos" in message


class TestValidateVariables:
    def test_minimum_count(self):
        validate_variables(tuple(variables_for("pq")))
        with pytest.raises(ValidationError, match="al menos 2"):
            validate_variables(tuple(variables_for("p")))

    def test_maximum_count(self):
        validate_variables(tuple(variables_for(string.ascii_lowercase[:20])))
        with pytest.raises(ValidationError, match="máximo de 20"):
            validate_variables(tuple(variables_for(string.ascii_lowercase[:21])))

    @pytest.mark.parametrize("symbol", ["P", "pq", "1", "", "ñ"])
    def test_invalid_symbol(self, symbol):
        variables = (PropositionVariable(symbol, "algo"), PropositionVariable("q", "otra cosa"))
        with pytest.raises(ValidationError, match="letras minúsculas"):
            validate_variables(variables)

    def test_duplicate_symbols(self):
        variables = (PropositionVariable("p", "llueve"), PropositionVariable("p", "nieva"))
        with pytest.raises(ValidationError, match="duplicados"):
            validate_variables(variables)

    def test_empty_meaning(self):
        variables = (PropositionVariable("p", "llueve"), PropositionVariable("q", "  "))
        with pytest.raises(ValidationError, match="'q' debe tener un significado"):
            validate_variables(variables)

    def test_meaning_must_be_text(self):
        with pytest.raises(ValidationError, match="'p' debe ser texto, recibí int"):
            validate_variables(coerce_variables({"p": 5, "q": "nieva"}))

    def test_check_variables_with_non_text_meaning(self):
        valid, message = check_variables({"p": None, "q": "nieva"})
        assert not valid
        assert "debe ser texto" in message

    def test_check_variables(self):
        assert check_variables({"p": "llueve", "q": "nieva"}) == (True, "OK")
        valid, message = check_variables({"p": "llueve"})
        assert not valid
        assert "al menos" in message


class TestCoerceVariables:
    def test_mapping(self):
        assert coerce_variables({"p": "llueve"}) == (PropositionVariable("p", "llueve"),)

    def test_mixed_sequence(self):
        coerced = coerce_variables(
            [
                PropositionVariable("p", "llueve"),
                {"symbol": "q", "meaning": "nieva"},
                ("r", "hace sol"),
            ]
        )
        assert [v.symbol for v in coerced] == ["p", "q", "r"]

    @pytest.mark.parametrize("item", [{"symbol": "p"}, ("p",), 42])
    def test_malformed(self, item):
        with pytest.raises(ValidationError, match="mal formada"):
            coerce_variables([item])


# =====================================================================
# PIPELINE
# =====================================================================


class TestAnalyze:
    def test_text_to_contingency(self, rain_text, rain_variables):
        result = analyze(rain_text, rain_variables)
        assert result.expression == "(p) → (q)"
        assert result.expression_type is ExpressionType.CONTINGENCY
        assert [row.result for row in result.truth_table] == [True, True, False, True]
        assert result.truth_table[2].assignment == {"p": True, "q": False}

    def test_result_keeps_inputs(self, rain_text, rain_variables):
        result = analyze(rain_text, rain_variables)
        assert result.original_text == rain_text
        assert result.variables == rain_variables
        assert result.symbols == ["p", "q"]
        assert result.ast == parse_expression("p → q")

    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("p ∧ q", ExpressionType.CONTINGENCY),
            ("p ∨ ¬p", ExpressionType.TAUTOLOGY),
            ("p ∧ ¬p", ExpressionType.CONTRADICTION),
            ("(p → q) ↔ (¬q → ¬p)", ExpressionType.TAUTOLOGY),
        ],
    )
    def test_symbolic_path(self, rain_variables, expression, expected):
        result = analyze(SYMBOLIC_TEXT, rain_variables, expression)
        assert result.expression == expression
        assert result.expression_type is expected

    def test_row_count_follows_declared_variables(self):
        result = analyze(SYMBOLIC_TEXT, variables_for("pqrs"), "p ∨ q")
        assert len(result.truth_table) == 16

    def test_parse_error(self, rain_variables):
        with pytest.raises(ParseError, match="Paréntesis no balanceados"):
            analyze(SYMBOLIC_TEXT, rain_variables, "(p ∧ q")

    def test_extraction_error(self, rain_variables):
        with pytest.raises(ExtractionError) as exc:
            analyze("Si llueve entonces vuelan los cerdos.", rain_variables)
        assert exc.value.clause == "vuelan los cerdos"

    def test_validation_runs_first(self):
        with pytest.raises(ValidationError):
            analyze("corto", {"p": "llueve", "q": "nieva"}, "(p")

    def test_all_failures_are_logic_errors(self, rain_variables):
        with pytest.raises(LogicError):
            analyze(SYMBOLIC_TEXT, rain_variables, "p ∧ ∧ q")

    def test_undeclared_variable_is_false_by_default(self, rain_variables):
        result = analyze(SYMBOLIC_TEXT, rain_variables, "p ∧ r")
        assert result.expression_type is ExpressionType.CONTRADICTION

    def test_undeclared_variable_strict(self, rain_variables):
        config = AnalyzerConfig(strict_variables=True)
        with pytest.raises(ValidationError, match="no declaradas: r"):
            analyze(SYMBOLIC_TEXT, rain_variables, "p ∧ r", config=config)

    def test_custom_proposition_limit(self):
        config = AnalyzerConfig(max_propositions=3)
        with pytest.raises(ValidationError, match="máximo de 3"):
            analyze(SYMBOLIC_TEXT, variables_for("pqrs"), "p", config=config)

    def test_verbose_prints_stages(self, capsys, rain_text, rain_variables):
        analyze(rain_text, rain_variables, verbose=True)
        out = capsys.readouterr().out
        assert "(p) → (q)" in out
        assert "Contingencia" in out

    def test_quiet_by_default(self, capsys, rain_text, rain_variables):
        analyze(rain_text, rain_variables)
        assert capsys.readouterr().out == ""

    def test_verbose_prints_small_table(self, capsys, rain_text, rain_variables):
        analyze(rain_text, rain_variables, verbose=True)
        out = capsys.readouterr().out
        assert "p | q | (p) → (q)" in out
        assert "V | F |" in out

    def test_verbose_skips_large_table(self, capsys):
        analyze(SYMBOLIC_TEXT, variables_for("pqrstu"), "p ∨ q", verbose=True)
        out = capsys.readouterr().out
        assert "64 filas" in out
        assert "p | q | r" not in out

    def test_long_conjunction_in_text(self, rain_variables):
        text = "Si " + " y ".join(["llueve"] * 120) + " entonces el suelo se moja."
        result = analyze(text, rain_variables)
        assert result.expression.startswith("((p ∧ p ∧ p")
        assert result.expression.endswith(" → (q)")
        assert result.expression_type is ExpressionType.CONTINGENCY

    def test_deeply_nested_expression(self, rain_variables):
        expression = "(" * 200 + "p" + ")" * 200
        with pytest.raises(ParseError, match="demasiado anidada"):
            analyze(SYMBOLIC_TEXT, rain_variables, expression)

    def test_deep_negation_is_logic_error(self, rain_variables):
        with pytest.raises(LogicError):
            analyze(SYMBOLIC_TEXT, rain_variables, "¬" * 500 + "q")


# =====================================================================
# LENGUAJE NATURAL
# =====================================================================


class TestNaturalLanguage:
    def test_result_reading(self, rain_text, rain_variables):
        result = analyze(rain_text, rain_variables)
        assert result.to_natural_language() == '("llueve") implica ("el suelo se moja")'

    def test_connectors(self):
        meanings = {"p": "llueve", "q": "el suelo se moja"}
        assert (
            expression_to_natural_language("¬p ∧ q", meanings)
            == 'no "llueve" y "el suelo se moja"'
        )
        assert (
            expression_to_natural_language("p ↔ q", meanings)
            == '"llueve" si y solo si "el suelo se moja"'
        )

    def test_symbols_named_like_connectors(self):
        meanings = {"y": "ayer llovió", "o": "hoy"}
        assert expression_to_natural_language("y ∨ o", meanings) == '"ayer llovió" o "hoy"'

    def test_unknown_symbol_is_kept(self):
        assert expression_to_natural_language("p ∨ z", {"p": "llueve"}) == '"llueve" o z'

    def test_meanings_are_per_result(self):
        first = analyze(SYMBOLIC_TEXT, {"p": "llueve", "q": "nieva"}, "p ∧ q")
        second = analyze(SYMBOLIC_TEXT, {"p": "hace sol", "q": "hace calor"}, "p ∧ q")
        assert first.to_natural_language() == '"llueve" y "nieva"'
        assert second.to_natural_language() == '"hace sol" y "hace calor"'


# =====================================================================
# SERIALIZACION
# =====================================================================


class TestAnalysisResultSerialization:
    def test_dict_keys(self, rain_text, rain_variables):
        data = analyze(rain_text, rain_variables).to_dict()
        assert set(data) == {
            "originalText",
            "variables",
            "expression",
            "expressionType",
            "truthTable",
            "ast",
            "timestamp",
        }
        assert data["expressionType"] == "Contingencia"
        assert data["variables"][0] == {"symbol": "p", "meaning": "llueve"}
        assert data["truthTable"][0] == {"assignment": {"p": False, "q": False}, "result": True}

    def test_round_trip(self, rain_text, rain_variables):
        result = analyze(rain_text, rain_variables)
        assert AnalysisResult.from_dict(result.to_dict()) == result

    def test_to_json_file(self, tmp_path, rain_text, rain_variables):
        result = analyze(rain_text, rain_variables)
        path = tmp_path / "out" / "resultado.json"
        text = result.to_json(path)

        assert path.read_text(encoding="utf-8") == text
        assert "Contingencia" in text  # ensure_ascii=False
        assert AnalysisResult.from_dict(json.loads(text)) == result

    def test_result_is_immutable(self, rain_text, rain_variables):
        result = analyze(rain_text, rain_variables)
        with pytest.raises(AttributeError):
            result.expression = "p"

    def test_table_rows_are_read_only(self, rain_text, rain_variables):
        result = analyze(rain_text, rain_variables)
        with pytest.raises(TypeError):
            result.truth_table[0].assignment["p"] = True
        assert result.truth_table[0].assignment == {"p": False, "q": False}

    def test_result_is_hashable(self, rain_text, rain_variables):
        result = analyze(rain_text, rain_variables)
        assert hash(result) == hash(AnalysisResult.from_dict(result.to_dict()))
        assert len({result, result}) == 1

    def test_serialized_assignment_is_plain_dict(self, rain_text, rain_variables):
        data = analyze(rain_text, rain_variables).to_dict()
        assert type(data["truthTable"][0]["assignment"]) is dict
        json.dumps(data)
