"""Tests for the command line interface."""
import json
import logging

import pytest
import yaml

from patternkit.cli.main import build_parser, main


@pytest.fixture(autouse=True)
def restore_root_logging(tmp_path, monkeypatch):
    """main() reconfigures the root logger; put it back afterwards."""
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def run(capsys, *argv):
    exit_code = main(list(argv))
    captured = capsys.readouterr()
    return exit_code, captured.out, captured.err


class TestPatternsCommands:
    """Test the patterns resource."""

    def test_list_json(self, capsys):
        exit_code, out, _ = run(capsys, "patterns", "list")

        assert exit_code == 0
        data = json.loads(out)
        assert [item["name"] for item in data["patterns"]][:2] == ["Template Method", "Strategy"]
        assert len(data["patterns"]) == 9

    def test_list_yaml(self, capsys):
        exit_code, out, _ = run(capsys, "--format", "yaml", "patterns", "list")
        assert exit_code == 0
        assert yaml.safe_load(out)["patterns"][-1]["key"] == "mediator"

    def test_list_table(self, capsys):
        exit_code, out, _ = run(capsys, "--format", "table", "patterns", "list")
        assert exit_code == 0
        assert "Template Method" in out
        assert "Category" in out

    def test_show(self, capsys):
        exit_code, out, _ = run(capsys, "patterns", "show", "Proxy")
        assert exit_code == 0
        assert json.loads(out)["variants"] == ["protection", "remote", "virtual"]

    def test_show_unknown(self, capsys):
        exit_code, out, err = run(capsys, "patterns", "show", "singleton")
        assert exit_code == 1
        assert out == ""
        assert "Error: Pattern 'singleton' not found" in err

    def test_toc(self, capsys):
        exit_code, out, _ = run(capsys, "patterns", "toc")
        assert exit_code == 0
        assert out.splitlines()[0] == "1. [Template Method](#template-method)"

    def test_markdown(self, capsys):
        exit_code, out, _ = run(capsys, "patterns", "markdown")
        assert exit_code == 0
        assert out.startswith("# Design Patterns")

    def test_verify(self, capsys):
        exit_code, out, _ = run(capsys, "patterns", "verify")
        assert exit_code == 0
        assert json.loads(out) == {"status": "ok", "patterns": 9}


class TestOtherCommands:
    def test_glossary(self, capsys):
        exit_code, out, _ = run(capsys, "glossary")
        terms = [item["term"] for item in json.loads(out)["glossary"]]
        assert exit_code == 0
        assert terms[-1] == "Mediator"

    def test_demo_by_name(self, capsys):
        exit_code, out, _ = run(capsys, "demo", "Composite")
        assert exit_code == 0
        assert json.loads(out)["total_minutes"] == 41

    def test_demo_all(self, capsys):
        exit_code, out, _ = run(capsys, "demo", "all")
        assert exit_code == 0
        assert len(json.loads(out)) == 9

    def test_config_show(self, capsys):
        exit_code, out, _ = run(capsys, "config", "show")
        assert exit_code == 0
        assert json.loads(out)["command"]["history_length"] == 100

    def test_config_file_used(self, capsys, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("output:\n  format: yaml\n", encoding="utf-8")

        exit_code, out, _ = run(capsys, "--config", str(path), "config", "show")

        assert exit_code == 0
        assert yaml.safe_load(out)["output"]["format"] == "yaml"

    def test_missing_config_file(self, capsys, tmp_path):
        exit_code, _, err = run(capsys, "--config", str(tmp_path / "nope.yaml"), "patterns", "list")
        assert exit_code == 1
        assert "Configuration file not found" in err

    def test_output_file(self, capsys, tmp_path):
        target = tmp_path / "out" / "toc.md"

        exit_code, out, _ = run(capsys, "--output", str(target), "patterns", "toc")

        assert exit_code == 0
        assert out == ""
        assert target.read_text(encoding="utf-8").startswith("1. [Template Method]")

    def test_no_command_prints_help(self, capsys):
        exit_code, out, _ = run(capsys)
        assert exit_code == 1
        assert "usage:" in out

    def test_missing_action(self, capsys):
        exit_code, _, err = run(capsys, "patterns")
        assert exit_code == 1
        assert "Unknown command: patterns" in err


class TestParser:
    def test_global_options(self):
        args = build_parser().parse_args(["--log-level", "DEBUG", "--format", "list", "glossary"])
        assert args.log_level == "DEBUG"
        assert args.format == "list"
        assert args.resource == "glossary"

    def test_invalid_format(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--format", "xml", "glossary"])
