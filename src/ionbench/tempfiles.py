"""Scratch files for converted benchmark inputs and write-task outputs."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from ionbench.config.runtime_defaults import get_runtime_defaults
from ionbench.util.logging import log_structured_event

TEMP_DIR_ENV_VAR = "IONBENCH_TEMP_DIR"

_TEMP_LOG = logging.getLogger("ionbench.tempfiles")
_OWNED_TEMP_DIR: Path | None = None


def _normalize_temp_dir(value: str | Path | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return str(Path(text).expanduser())


def resolve_temp_dir(temp_dir: str | Path | None) -> Path | None:
    normalized = _normalize_temp_dir(temp_dir)
    if normalized is None:
        return None
    path = Path(normalized)
    path.mkdir(parents=True, exist_ok=True)
    if not path.is_dir():
        raise ValueError(f"temp_dir must be a directory: {path}")
    return path


def temp_directory() -> Path:
    """
    Return the directory that holds scratch files.

    An explicit ``IONBENCH_TEMP_DIR`` wins over the configured ``temp_dir``;
    when neither is set a private directory is created on first use and
    removed again by :func:`cleanup_temp_files`.
    """
    global _OWNED_TEMP_DIR
    defaults = get_runtime_defaults().temp_file_defaults
    configured = resolve_temp_dir(os.getenv(TEMP_DIR_ENV_VAR)) or resolve_temp_dir(defaults.temp_dir)
    if configured is not None:
        return configured
    if _OWNED_TEMP_DIR is None or not _OWNED_TEMP_DIR.is_dir():
        _OWNED_TEMP_DIR = Path(tempfile.mkdtemp(prefix=defaults.temp_dir_prefix))
    return _OWNED_TEMP_DIR


def new_temp_file(name: str, suffix: str) -> Path:
    """Create an empty, uniquely named file whose name starts with ``name``."""
    directory = temp_directory()
    fd, raw_path = tempfile.mkstemp(prefix=f"{name}-", suffix=suffix, dir=directory)
    os.close(fd)
    path = Path(raw_path)
    log_structured_event(_TEMP_LOG, logging.DEBUG, "temp_file_created", path=path)
    return path


def cleanup_temp_files() -> None:
    global _OWNED_TEMP_DIR
    owned = _OWNED_TEMP_DIR
    _OWNED_TEMP_DIR = None
    if owned is None:
        return
    shutil.rmtree(owned, ignore_errors=True)
    log_structured_event(_TEMP_LOG, logging.DEBUG, "temp_files_cleaned", path=owned)
