"""Runtime loader for parser keyword and threshold overrides."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from receiptdraft.receipt.ocr_parser.common import DEFAULT_PARSER_RULES, ParserRules, build_parser_rules
from receiptdraft.runtime.logging import get_logger
from receiptdraft.runtime.paths import get_paths

logger = get_logger(__name__)


@lru_cache(maxsize=4)
def load_parser_rules(config_path: str | None = None) -> ParserRules:
    """
    Load parser rules from parser_rules.toml.

    Args:
        config_path: Optional TOML path override. If None, uses the config directory.

    Returns:
        ParserRules with the file's additions applied; defaults when the file is absent.

    Raises:
        ParserRulesError: If the file has an invalid shape.
    """
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    path = Path(config_path) if config_path is not None else get_paths().parser_rules
    if not path.exists():
        logger.debug("No parser rules at %s, using defaults", path)
        return DEFAULT_PARSER_RULES

    with open(path, "rb") as f:
        config = tomllib.load(f)

    logger.debug("Loaded parser rules from %s", path)
    return build_parser_rules(config)
