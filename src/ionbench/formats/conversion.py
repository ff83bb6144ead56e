from __future__ import annotations

import logging
import sys
from pathlib import Path

from amazon.ion import simpleion

from ionbench.util.logging import log_structured_event

ION_BINARY_VERSION_MARKER = b"\xe0\x01\x00\xea"
UNBOUNDED_LIMIT = sys.maxsize

_CONVERSION_LOG = logging.getLogger("ionbench.formats.conversion")


def has_binary_marker(data: bytes) -> bool:
    return data[: len(ION_BINARY_VERSION_MARKER)] == ION_BINARY_VERSION_MARKER


def is_ion_binary(path: Path, options) -> bool:
    with options.new_input_stream(path) as stream:
        return has_binary_marker(stream.read(len(ION_BINARY_VERSION_MARKER)))


def load_values(data: bytes, limit: int = UNBOUNDED_LIMIT) -> list:
    values = simpleion.loads(data, single_value=False)
    if limit < len(values):
        return values[:limit]
    return values


def encode_values(values, *, binary: bool) -> bytes:
    encoded = simpleion.dumps(values, binary=binary, sequence_as_stream=True)
    if isinstance(encoded, str):
        return encoded.encode("utf-8")
    return encoded


def _needs_rewrite(original: Path, options, *, binary: bool) -> bool:
    if options.limit != UNBOUNDED_LIMIT:
        return True
    if options.imports_file is not None:
        return True
    return is_ion_binary(original, options) != binary


def convert_file(original: Path, destination: Path, options, *, binary: bool) -> Path:
    """
    Re-encode ``original`` into ``destination`` so it matches ``options``.

    Returns ``original`` untouched (and removes ``destination``) when the input
    already has the requested encoding, nothing would be dropped and no
    imports file is set.
    """
    if not _needs_rewrite(original, options, binary=binary):
        destination.unlink(missing_ok=True)
        log_structured_event(
            _CONVERSION_LOG,
            logging.DEBUG,
            "input_conversion_skipped",
            input=original,
            format=options.format,
        )
        return original

    with options.new_input_stream(original) as source:
        values = load_values(source.read(), options.limit)
    payload = encode_values(values, binary=binary)
    with options.new_output_stream(destination) as sink:
        sink.write(payload)
    log_structured_event(
        _CONVERSION_LOG,
        logging.DEBUG,
        "input_converted",
        input=original,
        output=destination,
        format=options.format,
        value_count=len(values),
        size_bytes=len(payload),
    )
    return destination
