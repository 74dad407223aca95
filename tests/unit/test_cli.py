"""Tests for the command line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from docslice import __version__
from docslice.cli.main import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def quiet(monkeypatch):
    """Ignore user config files and keep INFO logs off the captured output."""
    monkeypatch.setattr("docslice.config.loader.CONFIG_SEARCH_PATHS", [])
    monkeypatch.setenv("DOCSLICE_VERBOSITY", "0")
    monkeypatch.delenv("DOCSLICE_TERMINATOR", raising=False)


class TestCli:
    """Tests for the docslice commands."""

    def test_version(self, runner: CliRunner):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_index(self, runner: CliRunner, greeter_dir: Path):
        result = runner.invoke(app, ["index", str(greeter_dir)])

        assert result.exit_code == 0
        assert "Greeter.greet" in result.output
        assert "example_hello" in result.output

    def test_doc(self, runner: CliRunner, greeter_dir: Path):
        result = runner.invoke(app, ["doc", str(greeter_dir), "hello[0:2]"])

        assert result.exit_code == 0
        assert result.stdout == "Hello returns a greeting. It never fails.\n"

    def test_doc_slice_option(self, runner: CliRunner, greeter_dir: Path):
        result = runner.invoke(app, ["doc", str(greeter_dir), "hello", "--slice", "1"])

        assert result.exit_code == 0
        assert result.stdout == "It never fails.\n"

    def test_doc_terminator_from_environment(self, runner: CliRunner, monkeypatch, greeter_dir: Path):
        monkeypatch.setenv("DOCSLICE_TERMINATOR", "!")

        result = runner.invoke(app, ["doc", str(greeter_dir), "hello[0]"])

        assert result.exit_code == 0
        assert "exclamation mark.!" in result.stdout

    def test_unknown_doc(self, runner: CliRunner, greeter_dir: Path):
        result = runner.invoke(app, ["doc", str(greeter_dir), "missing"])

        assert result.exit_code == 1
        assert "Doc missing not found." in result.output

    def test_invalid_slice(self, runner: CliRunner, greeter_dir: Path):
        result = runner.invoke(app, ["doc", str(greeter_dir), "hello", "-s", "9"])

        assert result.exit_code == 1
        assert "out of range" in result.output

    def test_example_annotated(self, runner: CliRunner, greeter_dir: Path):
        result = runner.invoke(app, ["example", str(greeter_dir), "example_oneline"])

        assert result.exit_code == 0
        assert result.stdout == '```python\nprint(hello("there"))\n```\n'

    def test_example_plain(self, runner: CliRunner, greeter_dir: Path):
        result = runner.invoke(app, ["example", str(greeter_dir), "example_only_output", "--plain"])

        assert result.exit_code == 0
        assert result.stdout == "def example_only_output():\n    pass\n"

    def test_output(self, runner: CliRunner, greeter_dir: Path):
        result = runner.invoke(app, ["output", str(greeter_dir), "example_hello"])

        assert result.exit_code == 0
        assert result.stdout == "Hello, world!\n"

    def test_play(self, runner: CliRunner, greeter_dir: Path):
        result = runner.invoke(app, ["play", str(greeter_dir), "example_hello"])

        assert result.exit_code == 0
        assert result.stdout.startswith("from greeter import hello\n")
        assert result.stdout.endswith("    main()\n")

    def test_play_without_playground(self, runner: CliRunner, write_sources):
        directory = write_sources({
            "test_rel.py": "from .client import send\n\n\ndef example_send():\n    send()\n",
        })

        result = runner.invoke(app, ["play", str(directory), "example_send"])

        assert result.exit_code == 1
        assert "Failed to format code" in result.output

    def test_parse_error(self, runner: CliRunner, write_sources):
        directory = write_sources({"bad.py": "def broken(:\n"})

        result = runner.invoke(app, ["index", str(directory)])

        assert result.exit_code == 1
        assert "Failed to parse" in result.output

    def test_missing_directory(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(app, ["index", str(tmp_path / "missing")])

        assert result.exit_code != 0

    def test_malformed_config(self, runner: CliRunner, greeter_dir: Path, tmp_path: Path):
        config = tmp_path / "docslice.config.json"
        config.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["doc", str(greeter_dir), "hello", "--config", str(config)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_invalid_verbosity_environment(self, runner: CliRunner, monkeypatch, greeter_dir: Path):
        monkeypatch.setenv("DOCSLICE_VERBOSITY", "loud")

        result = runner.invoke(app, ["index", str(greeter_dir)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
