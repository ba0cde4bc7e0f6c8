"""Tests for configuration path resolution helpers."""

import sys
from pathlib import Path

import pytest

from mbclient.config.paths import default_config_path, default_log_file, user_config_dir


def test_config_path_honours_environment_override(tmp_path: Path) -> None:
    target = tmp_path / "custom.toml"

    assert default_config_path({"MBCLIENT_CONFIG": str(target)}) == target.resolve()


@pytest.mark.skipif(sys.platform.startswith("win"), reason="XDG layout is POSIX only")
def test_config_path_uses_xdg_config_home(tmp_path: Path) -> None:
    env = {"XDG_CONFIG_HOME": str(tmp_path)}

    assert user_config_dir(env) == tmp_path / "mbclient"
    assert default_config_path(env) == (tmp_path / "mbclient" / "config.toml").resolve()


@pytest.mark.skipif(sys.platform.startswith("win"), reason="XDG layout is POSIX only")
def test_config_path_falls_back_to_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(Path, "home", classmethod(lambda _cls: tmp_path))

    assert user_config_dir({}) == tmp_path / ".config" / "mbclient"


def test_log_file_only_when_requested(tmp_path: Path) -> None:
    assert default_log_file({}) is None
    assert default_log_file({"MBCLIENT_LOG_FILE": "  "}) is None
    assert default_log_file({"MBCLIENT_LOG_FILE": str(tmp_path / "client.log")}) == (
        tmp_path / "client.log"
    ).resolve()
