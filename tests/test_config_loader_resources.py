import os
from pathlib import Path

from ionbench.config.loader import (
    load_runtime_defaults,
    load_toml,
    load_toml_detailed,
    resolve_runtime_defaults_path,
)


def test_load_runtime_defaults_from_packaged_resources(monkeypatch):
    monkeypatch.delenv("IONBENCH_RUNTIME_DEFAULTS_PATH", raising=False)

    loaded = load_runtime_defaults()

    assert isinstance(loaded, dict)
    assert loaded["meta"]["schema_version"] == 1
    assert loaded["stream_defaults"]["input_buffer_size"] > 0


def test_load_runtime_defaults_honors_override_path(tmp_path, monkeypatch):
    override = tmp_path / "defaults.toml"
    override.write_text("[stream_defaults]\ninput_buffer_size = 123\n", encoding="utf-8")
    monkeypatch.setenv("IONBENCH_RUNTIME_DEFAULTS_PATH", str(override))

    loaded = load_runtime_defaults()

    assert loaded["stream_defaults"]["input_buffer_size"] == 123


def test_load_toml_reports_error_kinds(tmp_path):
    missing = load_toml_detailed(tmp_path / "missing.toml")
    assert missing["ok"] is False
    assert missing["error_kind"] == "missing"

    broken = tmp_path / "broken.toml"
    broken.write_text("[stream_defaults\n", encoding="utf-8")
    invalid = load_toml_detailed(broken)
    assert invalid["ok"] is False
    assert invalid["error_kind"] == "invalid_toml"
    assert load_toml(broken) == {}


def test_load_toml_rejects_oversized_files(tmp_path):
    large = tmp_path / "large.toml"
    large.write_text('comment = "' + ("x" * 300_000) + '"\n', encoding="utf-8")

    result = load_toml_detailed(large)

    assert result["error_kind"] == "oversized"
    assert result["payload"] == {}


def test_resolve_runtime_defaults_path_returns_existing_packaged_path(monkeypatch):
    monkeypatch.delenv("IONBENCH_RUNTIME_DEFAULTS_PATH", raising=False)

    path = resolve_runtime_defaults_path()

    assert isinstance(path, Path)
    assert path.name == "defaults.toml"
    assert path.exists()


def test_load_toml_cache_invalidates_when_file_changes(tmp_path):
    import ionbench.config.loader as loader_mod

    config_path = tmp_path / "defaults.toml"
    config_path.write_text("[stream_defaults]\ninput_buffer_size = 3\n", encoding="utf-8")

    loader_mod._load_toml_cached.cache_clear()
    first = load_toml(config_path)
    second = load_toml(config_path)
    assert first["stream_defaults"]["input_buffer_size"] == 3
    assert second["stream_defaults"]["input_buffer_size"] == 3
    assert loader_mod._load_toml_cached.cache_info().hits >= 1

    stat_before = config_path.stat()
    config_path.write_text("[stream_defaults]\ninput_buffer_size = 9\n", encoding="utf-8")
    bumped_seconds = max(stat_before.st_mtime + 5.0, config_path.stat().st_mtime + 5.0)
    os.utime(config_path, (bumped_seconds, bumped_seconds))

    third = load_toml(config_path)
    assert third["stream_defaults"]["input_buffer_size"] == 9
