import os
import subprocess
import sys

import pytest
from pydantic import ValidationError

from pairflow.core.config import Settings


def test_defaults(monkeypatch):
    for var in ("PAIRFLOW_LOG_LEVEL", "LOG_LEVEL", "PAIRFLOW_TRACE"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings.load()
    assert settings.LOG_LEVEL == "WARNING"
    assert settings.TRACE is False


def test_load_reads_environment(monkeypatch):
    monkeypatch.setenv("PAIRFLOW_LOG_LEVEL", "debug")
    monkeypatch.setenv("PAIRFLOW_TRACE", "true")
    settings = Settings.load()
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.TRACE is True


def test_generic_log_level_is_fallback(monkeypatch):
    monkeypatch.delenv("PAIRFLOW_LOG_LEVEL", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    assert Settings.load().LOG_LEVEL == "ERROR"


def test_invalid_log_level():
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="LOUD")


@pytest.mark.parametrize("name", ["warn", "Fatal", "NOTSET"])
def test_any_stdlib_level_name_is_accepted(monkeypatch, name):
    monkeypatch.delenv("PAIRFLOW_LOG_LEVEL", raising=False)
    monkeypatch.setenv("LOG_LEVEL", name)
    assert Settings.load().LOG_LEVEL == name.upper()


def test_empty_variables_count_as_unset(monkeypatch):
    monkeypatch.setenv("PAIRFLOW_LOG_LEVEL", "")
    monkeypatch.setenv("LOG_LEVEL", "")
    monkeypatch.setenv("PAIRFLOW_TRACE", "")
    settings = Settings.load()
    assert settings.LOG_LEVEL == "WARNING"
    assert settings.TRACE is False


def test_package_imports_under_host_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warn")
    monkeypatch.setenv("PAIRFLOW_TRACE", "")
    env = dict(os.environ, PYTHONPATH=os.pathsep.join(p for p in sys.path if p))
    result = subprocess.run(
        [sys.executable, "-c", "import pairflow"],
        env=env,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, result.stderr
