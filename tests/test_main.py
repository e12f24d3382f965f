"""CLI-level tests for the ccreg command (end-to-end via CliRunner)."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ccreg.flags import ENV_OPTIONS_NAME
from ccreg.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command from an empty directory with no CCREG_FLAGS."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(ENV_OPTIONS_NAME, raising=False)
    return tmp_path


class TestShow:
    def test_json_snapshot(self) -> None:
        result = runner.invoke(app, ["show", "--json", "-O3", "--mcpu=z16"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["options"]["OptLevel"] == "O3"
        assert data["options"]["TargetCPU"] == "z16"
        assert data["config"] == {}

    def test_table(self) -> None:
        result = runner.invoke(app, ["show", "--maccel=NNPA"])
        assert result.exit_code == 0, result.output
        assert "TargetAccel" in result.output
        assert "NNPA" in result.output

    def test_env_flags(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_OPTIONS_NAME, "--march=z")
        result = runner.invoke(app, ["show", "--json"])
        assert json.loads(result.output)["options"]["TargetArch"] == "z"

    def test_no_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_OPTIONS_NAME, "--march=z")
        result = runner.invoke(app, ["show", "--json", "--no-env"])
        assert json.loads(result.output)["options"]["TargetArch"] == ""

    def test_discovers_options_file(self, _isolated: Path) -> None:
        (_isolated / "ccreg.toml").write_text(
            '[options]\nmcpu = "z16"\n[config]\nsharedLibDeps = ["libzdnn.so"]\n',
            encoding="utf-8",
        )
        result = runner.invoke(app, ["show", "--json"])
        data = json.loads(result.output)
        assert data["options"]["TargetCPU"] == "z16"
        assert data["config"] == {"sharedLibDeps": ["libzdnn.so"]}

    def test_toml_output(self) -> None:
        result = runner.invoke(app, ["show", "--toml", "--mcpu=z16"])
        assert result.exit_code == 0, result.output
        assert 'mcpu = "z16"' in result.output

    def test_bad_flag(self) -> None:
        result = runner.invoke(app, ["show", "--bogus"])
        assert result.exit_code == 1

    def test_bad_value_exit_code(self) -> None:
        result = runner.invoke(app, ["show", "--maccel=TPU"])
        assert result.exit_code == 3


class TestGet:
    def test_lowercase_opt_flag_rejected(self) -> None:
        result = runner.invoke(app, ["get", "OptLevel", "-o2"])
        assert result.exit_code == 1

    def test_opt_level(self) -> None:
        result = runner.invoke(app, ["get", "OptLevel", "-O2"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "O2"

    def test_flag_name(self) -> None:
        result = runner.invoke(app, ["get", "mcpu", "--mcpu=z16"])
        assert result.output.strip() == "z16"

    def test_json(self) -> None:
        result = runner.invoke(app, ["get", "Verbose", "--json", "--verbose"])
        assert json.loads(result.output) == {"option": "Verbose", "value": "true"}

    def test_unknown_option(self) -> None:
        result = runner.invoke(app, ["get", "Nope"])
        assert result.exit_code == 1


class TestConfig:
    def test_prints_values(self, _isolated: Path) -> None:
        (_isolated / "ccreg.toml").write_text(
            '[config]\nsharedLibDeps = ["a.so", "b.so"]\n', encoding="utf-8"
        )
        result = runner.invoke(app, ["config", "sharedLibDeps"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["a.so", "b.so"]

    def test_missing_key(self) -> None:
        result = runner.invoke(app, ["config", "nothing", "--json"])
        assert json.loads(result.output) == {"key": "nothing", "values": []}


class TestOptions:
    def test_json_catalog(self) -> None:
        result = runner.invoke(app, ["options", "--json"])
        assert result.exit_code == 0, result.output
        rows = {row["option"]: row for row in json.loads(result.output)}
        assert rows["OptLevel"]["default"] == "O0"
        assert rows["TargetCPU"]["flag"] == "mcpu"

    def test_category_filter(self) -> None:
        result = runner.invoke(app, ["options", "--json", "--category", "compiler"])
        categories = {row["category"] for row in json.loads(result.output)}
        assert categories == {"compiler"}
