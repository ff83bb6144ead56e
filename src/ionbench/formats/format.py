from __future__ import annotations

from enum import Enum
from pathlib import Path

from ionbench.formats.conversion import convert_file
from ionbench.formats.tasks import MeasurableTask, ReadTask, WriteTask


class Format(Enum):
    """Encodings a benchmark trial can run against."""

    ION_BINARY = ("ion_binary", ".10n", True)
    ION_TEXT = ("ion_text", ".ion", False)

    def __init__(self, label: str, suffix: str, binary: bool):
        self.label = label
        self.suffix = suffix
        self.is_binary = binary

    def convert(self, original: Path, destination: Path, options) -> Path:
        return convert_file(Path(original), Path(destination), options, binary=self.is_binary)

    def create_read_task(self, path: Path, options) -> MeasurableTask:
        return ReadTask(Path(path), options)

    def create_write_task(self, path: Path, options) -> MeasurableTask:
        return WriteTask(Path(path), options, binary=self.is_binary, suffix=self.suffix)
