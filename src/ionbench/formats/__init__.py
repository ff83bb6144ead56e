from ionbench.formats.format import Format
from ionbench.formats.tasks import MeasurableTask, ReadTask, WriteTask
from ionbench.formats.types import IonAPI, IonReaderType, IoType

__all__ = [
    "Format",
    "IonAPI",
    "IoType",
    "IonReaderType",
    "MeasurableTask",
    "ReadTask",
    "WriteTask",
]
