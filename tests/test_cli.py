"""Tests for CLI interface."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from conftest import StubAdapter, weather_handler
from typer.testing import CliRunner

from dxbench.cli import app, load_tool_catalog

runner = CliRunner()

SCENARIOS_YAML = """\
scenarios:
  - id: weather-tokyo
    task: What's the weather in Tokyo right now?
    expect: {tool: get_weather, params: {city: Tokyo}}
  - id: book-flight
    task: Book me a flight to Berlin
    expect: {tool: none}
  - id: compare-cities
    task: Compare the weather in Tokyo and Osaka
    expect: {tool: get_weather}
    tags: [multi-tool]
"""


@pytest.fixture
def tools_file(tmp_path: Path, weather_tools) -> Path:
    path = tmp_path / "tools.json"
    path.write_text(
        json.dumps({"tools": [t.model_dump(mode="json", by_alias=True) for t in weather_tools]})
    )
    return path


@pytest.fixture
def scenarios_file(tmp_path: Path) -> Path:
    path = tmp_path / "scenarios.yaml"
    path.write_text(SCENARIOS_YAML)
    return path


@pytest.fixture
def stub_adapter():
    adapter = StubAdapter(weather_handler)
    with patch("dxbench.cli.create_adapter", return_value=adapter):
        yield adapter


def bench_args(tools_file: Path, scenarios_file: Path, *extra: str) -> list[str]:
    return [
        "bench",
        str(tools_file),
        "--scenarios",
        str(scenarios_file),
        "--runs",
        "1",
        "--config",
        str(tools_file.parent),
        *extra,
    ]


class TestLoadToolCatalog:
    """Tests for load_tool_catalog."""

    def test_list_form(self, tmp_path):
        path = tmp_path / "tools.json"
        path.write_text('[{"name": "a"}, {"name": "b", "inputSchema": {"properties": {"x": {}}}}]')

        tools = load_tool_catalog(path)

        assert [t.name for t in tools] == ["a", "b"]
        assert "x" in tools[1].input_schema.properties

    def test_tools_object_form(self, tools_file):
        assert [t.name for t in load_tool_catalog(tools_file)] == ["get_weather", "get_forecast"]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "tools.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_tool_catalog(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "tools.json"
        path.write_text('{"name": "a"}')
        with pytest.raises(ValueError, match="list of tools"):
            load_tool_catalog(path)


class TestBenchCommand:
    """Tests for the bench command."""

    def test_json_report(self, tools_file, scenarios_file, stub_adapter):
        result = runner.invoke(app, bench_args(tools_file, scenarios_file, "--format", "json"))

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["score"] == 100
        assert data["rating"] == "Excellent"
        assert [s["id"] for s in data["scenarios"]] == ["weather-tokyo", "book-flight", "compare-cities"]
        assert stub_adapter.closed

    def test_text_report(self, tools_file, scenarios_file, stub_adapter):
        result = runner.invoke(app, bench_args(tools_file, scenarios_file))

        assert result.exit_code == 0, result.output
        assert "Agent DX Score:  100 / 100" in result.stdout
        assert "Tool Selection" in result.stdout

    def test_output_file(self, tools_file, scenarios_file, stub_adapter, tmp_path):
        out = tmp_path / "report.json"

        result = runner.invoke(
            app, bench_args(tools_file, scenarios_file, "--format", "json", "--output", str(out))
        )

        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text())["score"] == 100

    def test_skip_error_recovery(self, tools_file, scenarios_file, stub_adapter):
        result = runner.invoke(
            app, bench_args(tools_file, scenarios_file, "--format", "json", "--skip-error-recovery")
        )

        assert result.exit_code == 0, result.output
        dimensions = [d["dimension"] for d in json.loads(result.stdout)["dimensions"]]
        assert "Error Recovery" not in dimensions
        assert len(stub_adapter.calls) == 3

    def test_dry_run(self, tools_file, scenarios_file, stub_adapter):
        result = runner.invoke(app, bench_args(tools_file, scenarios_file, "--dry-run"))

        assert result.exit_code == 0, result.output
        assert "Bench Estimate" in result.stdout
        assert stub_adapter.calls == []

    def test_abort_at_cost_prompt(self, tools_file, scenarios_file):
        adapter = StubAdapter(weather_handler, pricing=(3.0, 15.0))
        with patch("dxbench.cli.create_adapter", return_value=adapter):
            result = runner.invoke(app, bench_args(tools_file, scenarios_file), input="n\n")

        assert result.exit_code == 0, result.output
        assert "Estimated cost" in result.stdout
        assert "Aborted." in result.stdout
        assert adapter.calls == []

    def test_yes_skips_prompt(self, tools_file, scenarios_file):
        adapter = StubAdapter(weather_handler, pricing=(3.0, 15.0))
        with patch("dxbench.cli.create_adapter", return_value=adapter):
            result = runner.invoke(app, bench_args(tools_file, scenarios_file, "--yes", "-f", "json"))

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["cost"]["estimatedCost"] > 0

    def test_empty_catalog(self, tmp_path, scenarios_file, stub_adapter):
        path = tmp_path / "tools.json"
        path.write_text("[]")

        result = runner.invoke(app, bench_args(path, scenarios_file))

        assert result.exit_code == 2
        assert "empty" in result.stdout

    def test_bad_tools_json(self, tmp_path, scenarios_file, stub_adapter):
        path = tmp_path / "tools.json"
        path.write_text("{oops")

        result = runner.invoke(app, bench_args(path, scenarios_file))

        assert result.exit_code == 2
        assert "Could not load tools" in result.stdout

    def test_missing_tools_file(self, tmp_path, scenarios_file, stub_adapter):
        result = runner.invoke(app, bench_args(tmp_path / "absent.json", scenarios_file))
        assert result.exit_code == 2

    def test_bad_format(self, tools_file, scenarios_file, stub_adapter):
        result = runner.invoke(app, bench_args(tools_file, scenarios_file, "--format", "xml"))
        assert result.exit_code == 2

    def test_invalid_option_value(self, tools_file, scenarios_file, stub_adapter):
        result = runner.invoke(app, bench_args(tools_file, scenarios_file, "--temperature", "5"))

        assert result.exit_code == 2
        assert "Config error" in result.stdout

    def test_config_file_supplies_server_name(self, tools_file, scenarios_file, stub_adapter):
        (tools_file.parent / "dxbench.config.yaml").write_text("server:\n  name: weather-server\n")

        result = runner.invoke(app, bench_args(tools_file, scenarios_file))

        assert result.exit_code == 0, result.output
        assert "DX Bench - weather-server" in result.stdout

    def test_invalid_scenario_file(self, tools_file, tmp_path, stub_adapter):
        bad = tmp_path / "bad.yaml"
        bad.write_text("scenarios:\n  - expect: {tool: x}\n")

        result = runner.invoke(app, bench_args(tools_file, bad))

        assert result.exit_code == 2
        assert stub_adapter.closed
