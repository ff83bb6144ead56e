"""
Options combinations: the resolved, typed configuration of one benchmark trial.

A trial is described by a single Ion struct annotated with the command it
belongs to, for example::

    read::{format: ion_text, ion_api: dom, limit: 100, paths: "paths.txt"}

:func:`options_combination_from` inspects the annotation and returns a
:class:`ReadOptionsCombination` or :class:`WriteOptionsCombination`.
:func:`create_measurable_task` then converts an input file to match the
options and builds the task for the combination's direction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, ClassVar

from amazon.ion import simpleion
from amazon.ion.core import IonType
from amazon.ion.exceptions import IonException

from ionbench.config.runtime_defaults import get_runtime_defaults
from ionbench.formats.conversion import UNBOUNDED_LIMIT
from ionbench.formats.format import Format
from ionbench.formats.tasks import MeasurableTask
from ionbench.formats.types import IonAPI, IonReaderType, IoType
from ionbench.options.errors import MalformedOptionsError, UnsupportedVariantError
from ionbench.options.schema import (
    COMMON_OPTION_FIELDS,
    READ_OPTION_FIELDS,
    WRITE_OPTION_FIELDS,
    resolve_fields,
)
from ionbench.tempfiles import new_temp_file
from ionbench.util.logging import log_structured_event, new_job_id

_OPTIONS_LOG = logging.getLogger("ionbench.options")


class Variant(Enum):
    READ = "read"
    WRITE = "write"


def parse_options_record(serialized: str):
    """Parse ``serialized`` into exactly one Ion struct."""
    try:
        values = simpleion.loads(serialized, single_value=False)
    except IonException as exc:
        raise MalformedOptionsError("Malformed options: not valid Ion text.", exc) from exc
    if len(values) != 1:
        raise MalformedOptionsError(f"Malformed options: expected a single value, found {len(values)}.")
    record = values[0]
    if getattr(record, "ion_type", None) is not IonType.STRUCT:
        raise MalformedOptionsError("Malformed options: expected a struct.")
    return record


def first_annotation(record) -> str | None:
    annotations = getattr(record, "ion_annotations", None) or ()
    if not annotations:
        return None
    token = annotations[0]
    # Annotations arrive as SymbolTokens from the pure-Python reader.
    return getattr(token, "text", token)


def read_paths_file(paths_file: str | Path) -> tuple[str, ...]:
    """Read input paths, one per line, up to the first empty line or end of file."""
    paths: list[str] = []
    with open(paths_file, encoding="utf-8") as handle:
        for line in handle:
            line = line.rstrip("\r\n")
            if not line:
                break
            paths.append(line)
    return tuple(paths)


@dataclass(frozen=True)
class OptionsCombination:
    """Options shared by every trial, whatever its direction."""

    variant: ClassVar[Variant | None] = None
    option_fields: ClassVar[tuple] = ()

    preallocation: int | None = None
    flush_period: int | None = None
    format: Format = Format.ION_BINARY
    api: IonAPI = IonAPI.STREAMING
    io_type: IoType = IoType.FILE
    imports_file: str | None = None
    limit: int = UNBOUNDED_LIMIT

    @classmethod
    def _variant_fields(cls, record) -> dict[str, Any]:
        return resolve_fields(record, cls.option_fields)

    @classmethod
    def from_ion(cls, serialized: str) -> "OptionsCombination":
        record = parse_options_record(serialized)
        fields = resolve_fields(record, COMMON_OPTION_FIELDS)
        fields.update(cls._variant_fields(record))
        options = cls(**fields)
        log_structured_event(
            _OPTIONS_LOG,
            logging.DEBUG,
            "options_combination_resolved",
            variant=options.variant,
            format=options.format,
            api=options.api,
            io_type=options.io_type,
            limit=options.limit,
        )
        return options

    def new_input_stream(self, path: str | Path) -> BinaryIO:
        buffer_size = get_runtime_defaults().stream_defaults.input_buffer_size
        return open(path, "rb", buffering=buffer_size)

    def new_output_stream(self, path: str | Path) -> BinaryIO:
        """Open ``path`` for writing, replacing any existing content."""
        buffer_size = get_runtime_defaults().stream_defaults.output_buffer_size
        return open(path, "wb", buffering=buffer_size)


@dataclass(frozen=True)
class ReadOptionsCombination(OptionsCombination):
    variant: ClassVar[Variant] = Variant.READ
    option_fields: ClassVar[tuple] = READ_OPTION_FIELDS

    paths_file: str | None = None
    paths: tuple[str, ...] | None = None
    reader_type: IonReaderType = IonReaderType.NON_BLOCKING
    use_lob_chunks: bool = False
    use_big_decimals: bool = False

    @classmethod
    def _variant_fields(cls, record) -> dict[str, Any]:
        fields = super()._variant_fields(record)
        if fields["paths_file"] is not None:
            fields["paths"] = read_paths_file(fields["paths_file"])
        return fields


@dataclass(frozen=True)
class WriteOptionsCombination(OptionsCombination):
    variant: ClassVar[Variant] = Variant.WRITE
    option_fields: ClassVar[tuple] = WRITE_OPTION_FIELDS

    float_width: int | None = None
    writer_block_size: int | None = None
    use_symbol_tables: bool = True


_COMBINATION_TYPES: dict[str, type[OptionsCombination]] = {
    Variant.READ.value: ReadOptionsCombination,
    Variant.WRITE.value: WriteOptionsCombination,
}


def options_combination_from(serialized: str) -> OptionsCombination:
    """Build the read or write combination named by the record's first annotation."""
    tag = first_annotation(parse_options_record(serialized))
    combination_type = _COMBINATION_TYPES.get(tag)
    if combination_type is None:
        raise UnsupportedVariantError(tag)
    return combination_type.from_ion(serialized)


def convert_input(options: OptionsCombination, input_file: str | Path) -> Path:
    original = Path(input_file).resolve()
    destination = new_temp_file(original.name, options.format.suffix)
    try:
        return options.format.convert(original, destination, options)
    except Exception:
        destination.unlink(missing_ok=True)
        raise


def build_task(options: OptionsCombination, converted_input: Path) -> MeasurableTask:
    if options.variant is Variant.READ:
        return options.format.create_read_task(converted_input, options)
    if options.variant is Variant.WRITE:
        return options.format.create_write_task(converted_input, options)
    raise UnsupportedVariantError(options.variant)


def create_measurable_task(options: OptionsCombination, input_file: str | Path) -> MeasurableTask:
    """Convert ``input_file`` to match ``options`` and build the trial's task over it."""
    converted = convert_input(options, input_file)
    task = build_task(options, converted)
    log_structured_event(
        _OPTIONS_LOG,
        logging.INFO,
        "measurable_task_created",
        trial_id=new_job_id("trial"),
        variant=options.variant,
        format=options.format,
        input=input_file,
        converted_input=converted,
        task=type(task).__name__,
    )
    return task
