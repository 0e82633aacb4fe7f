import json
from pathlib import Path
from unittest.mock import patch

import click
import httpx
import pytest
from click.testing import CliRunner

from swagger2blocks.cli import _parse_sources, main

FIXTURES = Path(__file__).parent / "fixtures"
WIDGETS = str(FIXTURES / "widgets.yaml")
PETS = str(FIXTURES / "petstore_v2.json")


class TestParseSources:
    def test_keeps_order(self):
        assert list(_parse_sources(("b=./b.yaml", "a=http://x/swagger.json"))) == ["b", "a"]

    def test_rejects_missing_separator(self):
        with pytest.raises(click.BadParameter):
            _parse_sources(("widgets.yaml",))


class TestCliBuild:
    def test_build_to_file(self, tmp_path):
        output_file = tmp_path / "out" / "model.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "build",
            "-s", f"widgets={WIDGETS}",
            "-s", f"pets={PETS}",
            "-o", str(output_file),
        ])

        assert result.exit_code == 0
        assert output_file.exists()
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert data["keys"] == ["widgets", "pets"]
        assert len(data["actions"]) == 7

    def test_build_single_key(self, tmp_path):
        output_file = tmp_path / "model.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "build", "-s", f"widgets={WIDGETS}", "-s", f"pets={PETS}",
            "--key", "pets", "-o", str(output_file),
        ])

        assert result.exit_code == 0
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert {a["source"] for a in data["actions"]} == {"pets"}

    def test_build_from_config(self, tmp_path):
        config = tmp_path / "sources.yaml"
        config.write_text(f"sources:\n  widgets: {WIDGETS}\n")
        output_file = tmp_path / "model.json"

        runner = CliRunner()
        result = runner.invoke(main, ["build", "-c", str(config), "-o", str(output_file)])

        assert result.exit_code == 0
        assert json.loads(output_file.read_text(encoding="utf-8"))["keys"] == ["widgets"]

    @patch("swagger2blocks.fetch.httpx.get")
    def test_unreachable_source_is_reported(self, mock_get, tmp_path):
        mock_get.side_effect = httpx.ConnectError("Connection refused")
        output_file = tmp_path / "model.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "build",
            "-s", "remote=http://localhost:1/swagger.json",
            "-s", f"widgets={WIDGETS}",
            "-o", str(output_file),
        ])

        assert result.exit_code == 0
        assert "Source remote unavailable" in result.output
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert data["keys"] == ["widgets"]
        assert data["failed_keys"] == ["remote"]

    def test_no_sources_fails(self):
        runner = CliRunner()
        result = runner.invoke(main, ["build"])
        assert result.exit_code != 0
        assert "No sources" in result.output

    def test_invalid_config_fails(self, tmp_path):
        config = tmp_path / "sources.yaml"
        config.write_text("max_workers: 0\n")
        runner = CliRunner()
        result = runner.invoke(main, ["build", "-c", str(config)])
        assert result.exit_code != 0


class TestCliKeys:
    def test_lists_keys_and_sites(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "keys", "-s", f"widgets={WIDGETS}", "-s", f"gone={tmp_path / 'nope.yaml'}",
        ])

        assert result.exit_code == 0
        assert "widgets\thttp://localhost:5000/api" in result.output
        assert "Source gone unavailable" in result.output
