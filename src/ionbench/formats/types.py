from __future__ import annotations

from enum import Enum


class IonAPI(Enum):
    """Whether values are consumed event by event or materialized whole."""

    STREAMING = "streaming"
    DOM = "dom"


class IoType(Enum):
    FILE = "file"
    BUFFER = "buffer"


class IonReaderType(Enum):
    BLOCKING = "blocking"
    NON_BLOCKING = "non_blocking"


__all__ = ["IonAPI", "IoType", "IonReaderType"]
