from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
from typing import Any, Mapping

from ionbench.config.loader import (
    load_packaged_runtime_defaults_detailed,
    load_runtime_defaults_override_detailed,
)
from ionbench.util.logging import log_structured_event

_MAX_CONFIG_STRING_LENGTH = 256
_MAX_BUFFER_SIZE = 64 * 1024 * 1024
RUNTIME_DEFAULTS_SCHEMA_VERSION = 1
_RUNTIME_DEFAULTS_LOG = logging.getLogger("ionbench.config.runtime_defaults")
_RUNTIME_DEFAULTS_LOAD_TELEMETRY = {
    "source": "unknown",
    "fallback_activations": 0,
    "error_kind": None,
    "schema_status": "unknown",
}


@dataclass(frozen=True)
class StreamDefaults:
    input_buffer_size: int = 64 * 1024
    output_buffer_size: int = 64 * 1024


@dataclass(frozen=True)
class TempFileDefaults:
    temp_dir: str | None = None
    temp_dir_prefix: str = "ionbench-"


@dataclass(frozen=True)
class RuntimeDefaults:
    stream_defaults: StreamDefaults
    temp_file_defaults: TempFileDefaults


_BUILTIN_RUNTIME_DEFAULTS = RuntimeDefaults(
    stream_defaults=StreamDefaults(),
    temp_file_defaults=TempFileDefaults(),
)


def _set_runtime_defaults_telemetry(
    *,
    source: str,
    error_kind: str | None,
    schema_status: str,
    used_fallback: bool,
) -> None:
    if used_fallback:
        _RUNTIME_DEFAULTS_LOAD_TELEMETRY["fallback_activations"] = int(
            _RUNTIME_DEFAULTS_LOAD_TELEMETRY["fallback_activations"]
        ) + 1
    _RUNTIME_DEFAULTS_LOAD_TELEMETRY["source"] = source
    _RUNTIME_DEFAULTS_LOAD_TELEMETRY["error_kind"] = error_kind
    _RUNTIME_DEFAULTS_LOAD_TELEMETRY["schema_status"] = schema_status
    level = logging.WARNING if used_fallback else logging.DEBUG
    log_structured_event(
        _RUNTIME_DEFAULTS_LOG,
        level,
        "runtime_defaults_source",
        source=source,
        schema_status=schema_status,
        error_kind=error_kind,
        used_fallback=bool(used_fallback),
        fallback_activations=int(_RUNTIME_DEFAULTS_LOAD_TELEMETRY["fallback_activations"]),
    )


def runtime_defaults_load_telemetry() -> dict[str, object]:
    return dict(_RUNTIME_DEFAULTS_LOAD_TELEMETRY)


def reset_runtime_defaults_load_telemetry() -> None:
    _RUNTIME_DEFAULTS_LOAD_TELEMETRY["source"] = "unknown"
    _RUNTIME_DEFAULTS_LOAD_TELEMETRY["fallback_activations"] = 0
    _RUNTIME_DEFAULTS_LOAD_TELEMETRY["error_kind"] = None
    _RUNTIME_DEFAULTS_LOAD_TELEMETRY["schema_status"] = "unknown"


def _to_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    return {}


def _schema_status(payload: Mapping[str, Any], *, require_schema: bool) -> tuple[bool, str]:
    raw = _to_mapping(payload.get("meta")).get("schema_version")
    if raw is None:
        if require_schema:
            return False, "missing"
        return True, "absent"
    try:
        version = int(raw)
    except (TypeError, ValueError):
        return False, "mismatch"
    if version != RUNTIME_DEFAULTS_SCHEMA_VERSION:
        return False, "mismatch"
    return True, "ok"


def _parse_buffer_size(raw: Any, default: int) -> int:
    if isinstance(raw, bool):
        return int(default)
    try:
        parsed = int(raw)
    except (TypeError, ValueError):
        return int(default)
    if parsed <= 0:
        return int(default)
    return min(parsed, _MAX_BUFFER_SIZE)


def _parse_optional_dir(raw: Any, default: str | None) -> str | None:
    if raw is None:
        return default
    value = str(raw).strip()
    if len(value) > _MAX_CONFIG_STRING_LENGTH:
        return default
    if value.lower() in {"", "auto", "none"}:
        return None
    return value


def _parse_small_string(raw: Any, default: str) -> str:
    if raw is None:
        return str(default)
    value = str(raw).strip()
    if not value or len(value) > _MAX_CONFIG_STRING_LENGTH:
        return str(default)
    return value


def parse_runtime_defaults(payload: Mapping[str, Any] | None, *, base: RuntimeDefaults | None = None) -> RuntimeDefaults:
    root = _to_mapping(payload)
    runtime_base = _BUILTIN_RUNTIME_DEFAULTS if base is None else base

    stream_raw = _to_mapping(root.get("stream_defaults"))
    stream_base = runtime_base.stream_defaults
    stream_defaults = StreamDefaults(
        input_buffer_size=_parse_buffer_size(
            stream_raw.get("input_buffer_size"),
            stream_base.input_buffer_size,
        ),
        output_buffer_size=_parse_buffer_size(
            stream_raw.get("output_buffer_size"),
            stream_base.output_buffer_size,
        ),
    )

    temp_raw = _to_mapping(root.get("temp_file_defaults"))
    temp_base = runtime_base.temp_file_defaults
    temp_file_defaults = TempFileDefaults(
        temp_dir=_parse_optional_dir(temp_raw.get("temp_dir"), temp_base.temp_dir),
        temp_dir_prefix=_parse_small_string(temp_raw.get("temp_dir_prefix"), temp_base.temp_dir_prefix),
    )
    return RuntimeDefaults(stream_defaults=stream_defaults, temp_file_defaults=temp_file_defaults)


def _fallback(error_kind: str, schema_status: str) -> RuntimeDefaults:
    _set_runtime_defaults_telemetry(
        source="builtin_fallback",
        error_kind=error_kind,
        schema_status=schema_status,
        used_fallback=True,
    )
    return _BUILTIN_RUNTIME_DEFAULTS


@lru_cache(maxsize=1)
def get_runtime_defaults() -> RuntimeDefaults:
    packaged = load_packaged_runtime_defaults_detailed()
    if not packaged.get("ok"):
        return _fallback(f"packaged_{packaged.get('error_kind')}", "missing")
    packaged_payload = packaged["payload"]
    schema_ok, schema_state = _schema_status(packaged_payload, require_schema=True)
    if not schema_ok:
        return _fallback(f"packaged_schema_{schema_state}", schema_state)

    parsed = parse_runtime_defaults(packaged_payload)
    source = "packaged_toml"
    error_kind = None

    override = load_runtime_defaults_override_detailed()
    if override is not None:
        if not override.get("ok"):
            error_kind = f"override_{override.get('error_kind')}"
        else:
            override_ok, override_state = _schema_status(override["payload"], require_schema=False)
            if override_ok:
                parsed = parse_runtime_defaults(override["payload"], base=parsed)
                source = "override_toml"
                schema_state = override_state
            else:
                error_kind = f"override_schema_{override_state}"

    _set_runtime_defaults_telemetry(
        source=source,
        error_kind=error_kind,
        schema_status=schema_state,
        used_fallback=False,
    )
    return parsed


def clear_runtime_defaults_cache() -> None:
    get_runtime_defaults.cache_clear()
