from decimal import Decimal

import pytest

from receiptdraft.receipt.ocr_parser.common import (
    DEFAULT_PARSER_RULES,
    ParserRulesError,
    build_parser_rules,
)
from receiptdraft.runtime import load_parser_rules, reset_paths


def test_empty_config_gives_defaults() -> None:
    assert build_parser_rules(None) is DEFAULT_PARSER_RULES
    assert build_parser_rules({}) is DEFAULT_PARSER_RULES


def test_lists_extend_defaults_and_scalars_replace() -> None:
    rules = build_parser_rules(
        {
            "item_filter": {
                "extra_exclusion_keywords": ["Bag Fee"],
                "extra_modifier_words": ["Oatmilk"],
            },
            "matching": {
                "extra_card_brands": ["Interac"],
                "sequential_price_ceiling": 80,
                "max_proximity_distance": 30,
            },
        }
    )

    assert "visa" in rules.exclusion_keywords
    assert rules.exclusion_keywords[-1] == "bag fee"
    assert "oatmilk" in rules.modifier_words
    assert "interac" in rules.card_brands
    assert rules.sequential_price_ceiling == Decimal("80")
    assert rules.proximity_price_ceiling == DEFAULT_PARSER_RULES.proximity_price_ceiling
    assert rules.max_proximity_distance == 30.0


@pytest.mark.parametrize(
    "config",
    [
        {"item_filter": ["not", "a", "table"]},
        {"item_filter": {"extra_exclusion_keywords": "bag fee"}},
        {"item_filter": {"extra_modifier_words": [1, 2]}},
        {"matching": {"sequential_price_ceiling": "lots"}},
        {"matching": {"proximity_price_ceiling": 0}},
    ],
)
def test_invalid_config_raises(config) -> None:
    with pytest.raises(ParserRulesError):
        build_parser_rules(config)


def test_load_parser_rules_from_toml(tmp_path) -> None:
    rules_path = tmp_path / "parser_rules.toml"
    rules_path.write_text(
        """
[item_filter]
extra_exclusion_keywords = ["bottle deposit"]

[matching]
proximity_price_ceiling = 250
""".strip()
    )

    rules = load_parser_rules(str(rules_path))

    assert "bottle deposit" in rules.exclusion_keywords
    assert rules.proximity_price_ceiling == Decimal("250")


def test_missing_rules_file_gives_defaults(tmp_path) -> None:
    assert load_parser_rules(str(tmp_path / "does_not_exist.toml")) is DEFAULT_PARSER_RULES


def test_default_location_comes_from_config_dir(tmp_path, monkeypatch) -> None:
    config_dir = tmp_path / "custom_config"
    config_dir.mkdir()
    (config_dir / "parser_rules.toml").write_text('[matching]\nextra_card_brands = ["interac"]\n')
    monkeypatch.setenv("RECEIPTDRAFT_CONFIG_DIR", str(config_dir))
    reset_paths()
    load_parser_rules.cache_clear()

    assert "interac" in load_parser_rules().card_brands


def test_malformed_rules_file_raises(tmp_path) -> None:
    rules_path = tmp_path / "parser_rules.toml"
    rules_path.write_text('[matching]\nsequential_price_ceiling = -5\n')

    with pytest.raises(ParserRulesError):
        load_parser_rules(str(rules_path))
