from pathlib import Path
from unittest.mock import patch

import pytest

import main
from models import ProposalLookupEntry


def test_parse_args_requires_command() -> None:
    with pytest.raises(SystemExit):
        main.parse_args([])


def test_parse_args_serve_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PORT", raising=False)
    args = main.parse_args(["serve"])
    assert args.command == "serve"
    assert args.port == 8000
    assert args.reload is False


def test_render_writes_html_file(tmp_path: Path) -> None:
    output = tmp_path / "pages" / "eip-1.html"
    with patch("main.render_proposal", return_value="<html>EIP-1</html>") as mock_render:
        main.render("eip-1", output)

    mock_render.assert_called_once_with("eip-1")
    assert output.read_text(encoding="utf-8") == "<html>EIP-1</html>"


def test_build_lookup_writes_table(tmp_path: Path) -> None:
    entries = {1: ProposalLookupEntry(number=1, is_erc=False, markdown_path="https://example.com/eip-1.md")}
    with patch("main.build_lookup_table", return_value=entries):
        path = main.build_lookup(tmp_path / "table.json")

    assert path.exists()
    assert '"markdownPath": "https://example.com/eip-1.md"' in path.read_text(encoding="utf-8")
