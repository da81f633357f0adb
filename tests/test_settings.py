import pytest
from pydantic import ValidationError

from config.settings import Settings
from expenses import ResiduePolicy


def test_defaults():
    settings = Settings.from_env({})

    assert settings.currency_symbol == "$"
    assert settings.residue_policy is ResiduePolicy.PAYER
    assert settings.log_level == "INFO"
    assert settings.port == 8000


def test_values_come_from_prefixed_variables():
    settings = Settings.from_env({
        "SPLITTER_CURRENCY_SYMBOL": "€",
        "SPLITTER_RESIDUE_POLICY": "Distribute",
        "SPLITTER_LOG_LEVEL": "debug",
        "SPLITTER_PORT": "9000",
        "CURRENCY_SYMBOL": "ignored",
    })

    assert settings.currency_symbol == "€"
    assert settings.residue_policy is ResiduePolicy.DISTRIBUTE
    assert settings.log_level == "DEBUG"
    assert settings.port == 9000


@pytest.mark.parametrize("key, value", [
    ("SPLITTER_RESIDUE_POLICY", "evenly"),
    ("SPLITTER_LOG_LEVEL", "loud"),
    ("SPLITTER_PORT", "0"),
])
def test_invalid_values_are_rejected(key, value):
    with pytest.raises(ValidationError):
        Settings.from_env({key: value})
