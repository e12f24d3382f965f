"""Tests for the shared CLI helpers in ccreg.cli."""

import json
from pathlib import Path

import pytest
import typer

from ccreg.cli import check_status, error_exit, json_print, resolve_registry
from ccreg.flags import ENV_OPTIONS_NAME
from ccreg.registry import Status

# ---------------------------------------------------------------------------
# error_exit()
# ---------------------------------------------------------------------------


class TestErrorExit:
    def test_plain_stderr_and_exit(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            error_exit("something broke")
        assert exc_info.value.exit_code == 1
        captured = capsys.readouterr()
        assert "something broke" in captured.err
        assert captured.out == ""

    def test_json_mode_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit):
            error_exit("bad input", json_mode=True)
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"error": "bad input"}
        assert captured.err == ""

    def test_custom_exit_code(self) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            error_exit("fatal", code=2)
        assert exc_info.value.exit_code == 2


class TestJsonPrint:
    def test_dict_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        json_print({"OptLevel": "O2"})
        assert json.loads(capsys.readouterr().out) == {"OptLevel": "O2"}


class TestCheckStatus:
    def test_ok_passes(self) -> None:
        check_status(Status.OK, "anything")

    def test_failure_uses_status_as_exit_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(typer.Exit) as exc_info:
            check_status(Status.UNKNOWN_ACCELERATOR, "flags")
        assert exc_info.value.exit_code == 3
        assert "unknown accelerator" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# resolve_registry()
# ---------------------------------------------------------------------------


class TestResolveRegistry:
    def test_file_then_env_then_argv(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "opts.toml"
        path.write_text('[options]\nmcpu = "z14"\nmarch = "z"\nO = "O1"\n', encoding="utf-8")
        monkeypatch.setenv(ENV_OPTIONS_NAME, "--mcpu=z15 -O2")
        reg = resolve_registry(["-O3"], file=path)
        assert reg.get_target_arch() == "z"
        assert reg.get_target_cpu() == "z15"
        assert reg.get_optimization_level_option() == "-O3"

    def test_no_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv(ENV_OPTIONS_NAME, "--mcpu=z15")
        reg = resolve_registry([], use_env=False)
        assert reg.get_target_cpu() == ""

    def test_flag_error_exits(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv(ENV_OPTIONS_NAME, raising=False)
        with pytest.raises(typer.Exit) as exc_info:
            resolve_registry(["--bogus"])
        assert exc_info.value.exit_code == 1

    def test_bad_value_exits_with_status(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv(ENV_OPTIONS_NAME, raising=False)
        with pytest.raises(typer.Exit) as exc_info:
            resolve_registry(["-O2", "--repeat-transform=x"])
        assert exc_info.value.exit_code == int(Status.MALFORMED_VALUE)

    def test_broken_file_exits(self, tmp_path: Path) -> None:
        path = tmp_path / "opts.toml"
        path.write_text("[options]\nunknown = 1\n", encoding="utf-8")
        with pytest.raises(typer.Exit):
            resolve_registry([], file=path, use_env=False)
