"""
Tests for argument parsing in args.py
"""
from pathlib import Path

import pytest

from photosort.args import build_parser, get_config, get_version_string
from photosort.models import AppConfig


def test_get_config_required_dirs(tmp_path):
    """Both directories are parsed and resolved to absolute paths."""
    cfg = get_config(["-s", str(tmp_path / "in"), "-t", str(tmp_path / "out")])

    assert isinstance(cfg, AppConfig)
    assert cfg.source_dir == (tmp_path / "in").resolve()
    assert cfg.target_dir == (tmp_path / "out").resolve()


def test_get_config_long_options(tmp_path):
    cfg = get_config(["--source-dir", str(tmp_path), "--target-dir", str(tmp_path / "sorted")])

    assert cfg.source_dir == tmp_path.resolve()
    assert cfg.target_dir == (tmp_path / "sorted").resolve()


def test_get_config_relative_paths_become_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = get_config(["-s", "photos", "-t", "sorted"])

    assert cfg.source_dir.is_absolute()
    assert cfg.source_dir == tmp_path.resolve() / "photos"
    assert cfg.target_dir == tmp_path.resolve() / "sorted"


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["-s", "photos"],
        ["-t", "sorted"],
        ["-s", "photos", "-t", "sorted", "--overwrite"],
        ["--sou", "photos", "--tar", "sorted"],
        ["--source", "photos", "--target-dir", "sorted"],
    ],
)
def test_get_config_argument_errors_exit_non_zero(argv):
    with pytest.raises(SystemExit) as exc_info:
        get_config(argv)
    assert exc_info.value.code == 2


@pytest.mark.parametrize("flag", ["-V", "--version"])
def test_version_flag_prints_and_exits(flag, capsys):
    with pytest.raises(SystemExit) as exc_info:
        get_config([flag])

    assert exc_info.value.code == 0
    cfg = AppConfig()
    assert cfg.script_version in capsys.readouterr().out


@pytest.mark.parametrize("flag", ["-h", "--help"])
def test_help_flag_lists_options(flag, capsys):
    with pytest.raises(SystemExit) as exc_info:
        get_config([flag])

    assert exc_info.value.code == 0
    out = capsys.readouterr().out
    assert "--source-dir" in out
    assert "--target-dir" in out


def test_get_version_string():
    cfg = AppConfig(script_name="PhotoSort", script_version="1.2.3", script_date="2026-01-01")
    version = get_version_string(cfg)

    assert version.startswith("PhotoSort 1.2.3")
    assert "(2026-01-01)" in version


def test_parser_has_no_extra_options():
    parser = build_parser(AppConfig())
    options = {opt for action in parser._actions for opt in action.option_strings}

    assert options == {"-h", "--help", "-s", "--source-dir", "-t", "--target-dir", "-V", "--version"}


def test_get_config_keeps_source_path_type(tmp_path):
    cfg = get_config(["-s", str(tmp_path), "-t", str(tmp_path)])
    assert isinstance(cfg.source_dir, Path)
