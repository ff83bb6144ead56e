from ionbench.config.loader import (
    RUNTIME_DEFAULTS_ENV_VAR,
    load_runtime_defaults,
    resolve_runtime_defaults_path,
)
from ionbench.config.runtime_defaults import (
    RUNTIME_DEFAULTS_SCHEMA_VERSION,
    RuntimeDefaults,
    StreamDefaults,
    TempFileDefaults,
    clear_runtime_defaults_cache,
    get_runtime_defaults,
    parse_runtime_defaults,
    reset_runtime_defaults_load_telemetry,
    runtime_defaults_load_telemetry,
)

__all__ = [
    "RUNTIME_DEFAULTS_ENV_VAR",
    "resolve_runtime_defaults_path",
    "load_runtime_defaults",
    "RUNTIME_DEFAULTS_SCHEMA_VERSION",
    "RuntimeDefaults",
    "StreamDefaults",
    "TempFileDefaults",
    "parse_runtime_defaults",
    "get_runtime_defaults",
    "clear_runtime_defaults_cache",
    "runtime_defaults_load_telemetry",
    "reset_runtime_defaults_load_telemetry",
]
