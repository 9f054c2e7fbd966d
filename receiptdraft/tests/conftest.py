"""Shared pytest fixtures for receiptdraft tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime

import pytest

from receiptdraft.runtime import load_parser_rules, reset_paths


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch) -> Iterator[None]:
    """Point config lookups at an empty per-test directory."""
    monkeypatch.setenv("RECEIPTDRAFT_CONFIG_DIR", str(tmp_path / "config"))
    reset_paths()
    load_parser_rules.cache_clear()
    yield
    reset_paths()
    load_parser_rules.cache_clear()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 14, 12, 30, 0)


@pytest.fixture
def scenario_one_blocks() -> list[str]:
    return [
        "WHOLE FOODS MARKET",
        "123 Main Street",
        "Bananas",
        "$1.99",
        "Milk",
        "$3.49",
        "Subtotal $5.48",
        "Tax $0.48",
        "Total $5.96",
    ]
