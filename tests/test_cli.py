"""Tests for the command line interface."""
from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from pretty_sequence.cli import cli


SOURCE = "title: CLI\nparticipant A as Alice\nA->>B: Hello\nB-->>A: 2. Bye\n"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "diagram.txt"
    path.write_text(SOURCE, encoding="utf-8")
    return path


class TestRender:
    def test_renders_svg_to_stdout(self, runner, source_file):
        result = runner.invoke(cli, ["render", str(source_file)])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("<svg")
        assert "Alice" in result.output

    def test_reads_stdin(self, runner):
        result = runner.invoke(cli, ["render", "-"], input="A->>B: piped\n")
        assert result.exit_code == 0
        assert "piped" in result.output

    def test_writes_output_file(self, runner, source_file, tmp_path):
        out = tmp_path / "out.svg"
        result = runner.invoke(cli, ["render", str(source_file), "-o", str(out)])
        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8").startswith("<svg")

    def test_style_flags(self, runner, source_file):
        result = runner.invoke(
            cli,
            ["render", str(source_file), "--plain-numbers", "--plain-text", "--lifeline-dash", "long"],
        )
        assert result.exit_code == 0
        assert "<circle" not in result.output
        assert 'stroke-dasharray="14 6"' in result.output

    def test_metric_options(self, runner, source_file):
        result = runner.invoke(cli, ["render", str(source_file), "--margin", "100"])
        assert result.exit_code == 0
        # 2 * 100 + 250 + 141
        assert 'width="591"' in result.output

    def test_metric_out_of_range(self, runner, source_file):
        result = runner.invoke(cli, ["render", str(source_file), "--margin", "500"])
        assert result.exit_code == 2

    def test_export_preset(self, runner, source_file):
        result = runner.invoke(cli, ["render", str(source_file), "--export"])
        assert result.exit_code == 0
        # 2 * 60 + 210 + 160
        assert 'width="490"' in result.output

    def test_config_file(self, runner, source_file, tmp_path):
        config = tmp_path / "settings.json"
        config.write_text(
            json.dumps({"style": {"colored_lines": False}, "layout": {"spacing": 300}}),
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["render", str(source_file), "--config", str(config)])
        assert result.exit_code == 0
        assert 'stroke="#d1d5db"' in result.output
        # 2 * 50 + 300 + 141
        assert 'width="541"' in result.output

    def test_flags_override_config_file(self, runner, source_file, tmp_path):
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({"style": {"colored_lines": False}}), encoding="utf-8")
        result = runner.invoke(
            cli, ["render", str(source_file), "--config", str(config), "--colored-lines"]
        )
        assert result.exit_code == 0
        assert 'stroke="#d1d5db"' not in result.output

    def test_broken_config_file(self, runner, source_file, tmp_path):
        config = tmp_path / "settings.json"
        config.write_text("{not json", encoding="utf-8")
        result = runner.invoke(cli, ["render", str(source_file), "--config", str(config)])
        assert result.exit_code == 1
        assert "Invalid config file" in result.output

    @pytest.mark.parametrize(
        "layout",
        [
            {"box_width": "wide"},
            {"box_width": 120.5},
            {"step_height": True},
            {"step_height": -500, "box_width": 5},
            {"margin": 121},
        ],
    )
    def test_config_layout_values_are_checked(self, runner, source_file, tmp_path, layout):
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({"layout": layout}), encoding="utf-8")
        result = runner.invoke(cli, ["render", str(source_file), "--config", str(config)])
        assert result.exit_code == 1
        assert "Invalid config file" in result.output
        assert "<svg" not in result.output

    def test_config_layout_must_be_an_object(self, runner, source_file, tmp_path):
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({"layout": [1, 2]}), encoding="utf-8")
        result = runner.invoke(cli, ["render", str(source_file), "--config", str(config)])
        assert result.exit_code == 1
        assert "layout must be a JSON object" in result.output

    def test_config_range_edges_are_accepted(self, runner, source_file, tmp_path):
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({"layout": {"margin": 120, "spacing": 120}}), encoding="utf-8")
        result = runner.invoke(cli, ["render", str(source_file), "--config", str(config)])
        assert result.exit_code == 0
        # 2 * 120 + 120 + 141
        assert 'width="501"' in result.output

    def test_config_file_not_utf8(self, runner, source_file, tmp_path):
        config = tmp_path / "settings.json"
        config.write_bytes(b'{"style": {"font": "\xff\xfe"}}')
        result = runner.invoke(cli, ["render", str(source_file), "--config", str(config)])
        assert result.exit_code == 1
        assert "Invalid config file" in result.output

    def test_empty_diagram_writes_nothing(self, runner):
        result = runner.invoke(cli, ["render", "-"], input="%% nothing\n")
        assert result.exit_code == 0
        assert "<svg" not in result.output


class TestJson:
    def test_exports_model(self, runner, source_file):
        result = runner.invoke(cli, ["json", str(source_file)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["title"] == "CLI"
        assert [p["id"] for p in data["participants"]] == ["A", "B"]
        assert data["messages"][1]["displayStep"] == 2


class TestFmt:
    def test_normalizes_source(self, runner, source_file):
        result = runner.invoke(cli, ["fmt", str(source_file)])
        assert result.exit_code == 0
        assert "    participant A as Alice\n" in result.output
        assert "    participant B\n" in result.output
        assert "    B-->>A: 2. Bye\n" in result.output
