"""Fixtures compartidos por la suite de proplogic."""

import pytest

from proplogic.analysis.models import PropositionVariable


@pytest.fixture
def rain_text():
    return "Si llueve entonces el suelo se moja."


@pytest.fixture
def rain_variables():
    """p: llueve, q: el suelo se moja."""
    return (
        PropositionVariable("p", "llueve"),
        PropositionVariable("q", "el suelo se moja"),
    )


@pytest.fixture
def weather_variables():
    """Cuatro proposiciones para oraciones encadenadas con "pero"."""
    return (
        PropositionVariable("p", "llueve"),
        PropositionVariable("q", "el suelo se moja"),
        PropositionVariable("r", "hace sol"),
        PropositionVariable("s", "el suelo se seca"),
    )


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Cada test corre sin variables PROPLOGIC_* ni .env heredados."""
    for name in (
        "PROPLOGIC_MAX_PROPOSITIONS",
        "PROPLOGIC_MAX_TEXT_LENGTH",
        "PROPLOGIC_HISTORY_SIZE",
        "PROPLOGIC_STRICT_VARIABLES",
    ):
        # setenv + delenv: al terminar, monkeypatch restaura el estado
        # original aunque load_dotenv() haya escrito la variable.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
