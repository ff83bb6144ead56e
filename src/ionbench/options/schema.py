"""
Option fields, their translators and defaults.

Every field of a configuration record is described by one :class:`OptionField`
row. :func:`get_or_default` is the single place where the ``auto`` sentinel and
absent fields are mapped to defaults; translators only ever see present,
non-``auto`` values and raise :class:`OptionTypeError` on the wrong shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, TypeVar

from amazon.ion.core import IonType
from amazon.ion.symbols import SymbolToken

from ionbench.formats.conversion import UNBOUNDED_LIMIT
from ionbench.formats.format import Format
from ionbench.formats.types import IonAPI, IonReaderType, IoType
from ionbench.options.errors import OptionTypeError

T = TypeVar("T")

AUTO_VALUE = "auto"
VALID_FLOAT_WIDTHS = frozenset({32, 64})

# Record field names.
PREALLOCATION_NAME = "preallocation"
FLUSH_PERIOD_NAME = "flush_period"
FORMAT_NAME = "format"
ION_API_NAME = "ion_api"
IO_TYPE_NAME = "io_type"
ION_IMPORTS_NAME = "ion_imports"
LIMIT_NAME = "limit"
PATHS_NAME = "paths"
ION_READER_NAME = "ion_reader"
ION_USE_LOB_CHUNKS_NAME = "ion_use_lob_chunks"
ION_USE_BIG_DECIMALS_NAME = "ion_use_big_decimals"
ION_FLOAT_WIDTH_NAME = "ion_float_width"
ION_WRITER_BLOCK_SIZE_NAME = "ion_writer_block_size"
ION_USE_SYMBOL_TABLES_NAME = "ion_use_symbol_tables"


def _ion_type(value):
    return getattr(value, "ion_type", None)


def text_of(value) -> str | None:
    """Return the text of a string or symbol value, or ``None`` for anything else."""
    if isinstance(value, SymbolToken):
        return value.text
    if isinstance(value, str) and _ion_type(value) in (None, IonType.STRING, IonType.SYMBOL):
        return str(value)
    return None


def is_auto(value) -> bool:
    return text_of(value) == AUTO_VALUE


def get_or_default(record: Mapping[str, Any], field_name: str, translate: Callable[[Any], T], default: T) -> T:
    """
    Retrieve and translate ``field_name`` from ``record``.

    Returns ``default`` without calling ``translate`` when the field is absent
    or holds the ``auto`` sentinel. Translation errors propagate.
    """
    if field_name not in record:
        return default
    value = record[field_name]
    if is_auto(value):
        return default
    return translate(value)


def ion_int(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or _ion_type(value) not in (None, IonType.INT):
        raise OptionTypeError(f"Expected an integer option value, got {value!r}")
    return int(value)


def ion_non_negative_int(value) -> int:
    parsed = ion_int(value)
    if parsed < 0:
        raise OptionTypeError(f"Expected a non-negative integer option value, got {parsed}")
    return parsed


def ion_positive_int(value) -> int:
    parsed = ion_int(value)
    if parsed <= 0:
        raise OptionTypeError(f"Expected a positive integer option value, got {parsed}")
    return parsed


def ion_text(value) -> str:
    text = text_of(value)
    if text is None:
        raise OptionTypeError(f"Expected a string or symbol option value, got {value!r}")
    return text


def ion_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if _ion_type(value) is IonType.BOOL and isinstance(value, int):
        return bool(value)
    raise OptionTypeError(f"Expected a boolean option value, got {value!r}")


def ion_float_width(value) -> int:
    width = ion_int(value)
    if width not in VALID_FLOAT_WIDTHS:
        raise OptionTypeError(f"Expected a float width of 32 or 64, got {width}")
    return width


def ion_enum(enum_cls: type[Enum]) -> Callable[[Any], Enum]:
    def translate(value):
        name = ion_text(value).strip().upper()
        try:
            return enum_cls[name]
        except KeyError:
            choices = ", ".join(member.name.lower() for member in enum_cls)
            raise OptionTypeError(
                f"Unknown {enum_cls.__name__} value {value!r}. Expected one of: {choices}"
            ) from None

    translate.__name__ = f"ion_{enum_cls.__name__.lower()}"
    return translate


@dataclass(frozen=True)
class OptionField:
    name: str
    attribute: str
    translate: Callable[[Any], Any]
    default: Any = None


COMMON_OPTION_FIELDS = (
    OptionField(PREALLOCATION_NAME, "preallocation", ion_int),
    OptionField(FLUSH_PERIOD_NAME, "flush_period", ion_int),
    OptionField(FORMAT_NAME, "format", ion_enum(Format), Format.ION_BINARY),
    OptionField(ION_API_NAME, "api", ion_enum(IonAPI), IonAPI.STREAMING),
    OptionField(IO_TYPE_NAME, "io_type", ion_enum(IoType), IoType.FILE),
    OptionField(ION_IMPORTS_NAME, "imports_file", ion_text),
    OptionField(LIMIT_NAME, "limit", ion_non_negative_int, UNBOUNDED_LIMIT),
)

# ``paths`` names an auxiliary file; its lines are read by the read variant.
READ_OPTION_FIELDS = (
    OptionField(PATHS_NAME, "paths_file", ion_text),
    OptionField(ION_READER_NAME, "reader_type", ion_enum(IonReaderType), IonReaderType.NON_BLOCKING),
    OptionField(ION_USE_LOB_CHUNKS_NAME, "use_lob_chunks", ion_bool, False),
    OptionField(ION_USE_BIG_DECIMALS_NAME, "use_big_decimals", ion_bool, False),
)

WRITE_OPTION_FIELDS = (
    OptionField(ION_FLOAT_WIDTH_NAME, "float_width", ion_float_width),
    OptionField(ION_WRITER_BLOCK_SIZE_NAME, "writer_block_size", ion_positive_int),
    OptionField(ION_USE_SYMBOL_TABLES_NAME, "use_symbol_tables", ion_bool, True),
)


def resolve_fields(record: Mapping[str, Any], fields) -> dict[str, Any]:
    return {
        option.attribute: get_or_default(record, option.name, option.translate, option.default)
        for option in fields
    }
