from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any, Protocol

from amazon.ion.core import IonEventType
from amazon.ion.exceptions import IonException
from amazon.ion.reader import NEXT_EVENT, blocking_reader, read_data_event
from amazon.ion.reader_binary import binary_reader
from amazon.ion.reader_managed import managed_reader
from amazon.ion.reader_text import text_reader

from ionbench.formats.conversion import encode_values, has_binary_marker, load_values
from ionbench.formats.types import IonAPI, IonReaderType, IoType
from ionbench.tempfiles import new_temp_file


class MeasurableTask(Protocol):
    """A unit of work the harness can time; ``run`` may be called repeatedly."""

    def run(self) -> int: ...


def _raw_reader(data: bytes):
    return binary_reader() if has_binary_marker(data) else text_reader()


def _blocking_events(data: bytes):
    reader = blocking_reader(managed_reader(_raw_reader(data), None), BytesIO(data))
    while True:
        event = reader.send(NEXT_EVENT)
        if event.event_type is IonEventType.STREAM_END:
            return
        yield event


def _non_blocking_events(data: bytes):
    # The whole buffer is handed over at once, so INCOMPLETE means end of data.
    reader = managed_reader(_raw_reader(data), None)
    event = reader.send(read_data_event(data))
    flushed = False
    while True:
        event_type = event.event_type
        if event_type is IonEventType.STREAM_END:
            return
        if event_type is IonEventType.INCOMPLETE:
            if flushed:
                raise IonException("Unexpected end of Ion data")
            flushed = True
        else:
            flushed = False
            yield event
        event = reader.send(NEXT_EVENT)


def count_top_level_values(
    data: bytes, limit: int, reader_type: IonReaderType = IonReaderType.NON_BLOCKING
) -> int:
    if reader_type is IonReaderType.BLOCKING:
        events = _blocking_events(data)
    else:
        events = _non_blocking_events(data)
    count = 0
    depth = 0
    for event in events:
        if count >= limit:
            break
        event_type = event.event_type
        if event_type is IonEventType.CONTAINER_START:
            if depth == 0:
                count += 1
            depth += 1
        elif event_type is IonEventType.CONTAINER_END:
            depth -= 1
        elif event_type is IonEventType.SCALAR and depth == 0:
            count += 1
    return count


@dataclass
class ReadTask:
    path: Path
    options: Any
    _buffers: dict[Path, bytes] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        if self.options.io_type is IoType.BUFFER:
            for path in self.input_paths():
                self._buffers[path] = self._read_bytes(path)

    def input_paths(self) -> tuple[Path, ...]:
        paths = getattr(self.options, "paths", None)
        if paths is not None:
            return tuple(Path(p) for p in paths)
        return (Path(self.path),)

    def _read_bytes(self, path: Path) -> bytes:
        with self.options.new_input_stream(path) as stream:
            return stream.read()

    def _data(self, path: Path) -> bytes:
        cached = self._buffers.get(path)
        if cached is not None:
            return cached
        return self._read_bytes(path)

    def run(self) -> int:
        """Read every input in order; ``limit`` caps the values read across all of them."""
        reader_type = getattr(self.options, "reader_type", IonReaderType.NON_BLOCKING)
        total = 0
        for path in self.input_paths():
            remaining = self.options.limit - total
            if remaining <= 0:
                break
            data = self._data(path)
            if self.options.api is IonAPI.DOM:
                total += len(load_values(data, remaining))
            else:
                total += count_top_level_values(data, remaining, reader_type)
        return total


@dataclass
class WriteTask:
    path: Path
    options: Any
    binary: bool = True
    suffix: str = ".10n"
    _values: list = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        with self.options.new_input_stream(self.path) as stream:
            self._values = load_values(stream.read(), self.options.limit)

    def run(self) -> int:
        payload = encode_values(self._values, binary=self.binary)
        if self.options.io_type is IoType.BUFFER:
            sink = BytesIO()
            sink.write(payload)
            return sink.tell()
        destination = new_temp_file(Path(self.path).stem, self.suffix)
        with self.options.new_output_stream(destination) as sink:
            sink.write(payload)
        return len(payload)
