import json
from pathlib import Path

import pytest

from receiptdraft.cli.main import main


def _write(tmp_path: Path, payload: object, name: str = "ocr.json") -> str:
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "scan" in capsys.readouterr().out


def test_scan_prints_review_text(
    tmp_path: Path, scenario_one_blocks: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    assert main(["scan", _write(tmp_path, scenario_one_blocks)]) == 0

    out = capsys.readouterr().out
    assert "RECEIPT DRAFT" in out
    assert "Store:    WHOLE FOODS MARKET" in out
    assert "Items (2):" in out
    assert "Total     5.96" in out


def test_scan_accepts_blocks_object_and_json_output(
    tmp_path: Path, scenario_one_blocks: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write(tmp_path, {"blocks": scenario_one_blocks})

    assert main(["scan", path, "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert [item["name"] for item in payload["receipt"]["items"]] == ["Bananas", "Milk"]
    assert payload["warnings"] == []


def test_scan_without_items_asks_for_manual_entry(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["scan", _write(tmp_path, ["SHOP NAME", "Thank you"])]) == 0

    assert "No items found. Add items manually before saving." in capsys.readouterr().out


def test_scan_with_rules_override(
    tmp_path: Path, scenario_one_blocks: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    rules = tmp_path / "rules.toml"
    rules.write_text('[item_filter]\nextra_exclusion_keywords = ["banana"]\n', encoding="utf-8")

    assert main(["scan", _write(tmp_path, scenario_one_blocks), "--json", "--rules", str(rules)]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert "Bananas" not in [item["name"] for item in payload["receipt"]["items"]]


def test_scan_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["scan", str(tmp_path / "missing.json")]) == 1
    assert "not found" in capsys.readouterr().out


@pytest.mark.parametrize("content", ["not json", '{"text": "SHOP"}', "42"])
def test_scan_invalid_file(tmp_path: Path, content: str, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "ocr.json"
    path.write_text(content, encoding="utf-8")

    assert main(["scan", str(path)]) == 1
    assert "invalid OCR result" in capsys.readouterr().out


def test_scan_empty_blocks(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["scan", _write(tmp_path, [])]) == 1
    assert "Enter the receipt manually" in capsys.readouterr().out
