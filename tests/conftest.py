from __future__ import annotations

import pytest

from ionbench.config.runtime_defaults import (
    clear_runtime_defaults_cache,
    reset_runtime_defaults_load_telemetry,
)
from ionbench.tempfiles import TEMP_DIR_ENV_VAR, cleanup_temp_files


@pytest.fixture(autouse=True)
def isolated_runtime(tmp_path, monkeypatch):
    monkeypatch.delenv("IONBENCH_RUNTIME_DEFAULTS_PATH", raising=False)
    monkeypatch.setenv(TEMP_DIR_ENV_VAR, str(tmp_path / "scratch"))
    clear_runtime_defaults_cache()
    reset_runtime_defaults_load_telemetry()
    yield
    cleanup_temp_files()
    clear_runtime_defaults_cache()


@pytest.fixture
def ion_text_input(tmp_path):
    path = tmp_path / "input.ion"
    path.write_text('{name: "alpha", id: 1} {name: "beta", tags: [a, b]} 42 "tail"\n', encoding="utf-8")
    return path
