from pathlib import Path

import pytest

from ionbench.formats import Format, ReadTask, WriteTask
from ionbench.options import (
    UnsupportedVariantError,
    build_task,
    convert_input,
    create_measurable_task,
    options_combination_from,
)
from ionbench.options.combination import OptionsCombination


class _FormatSpy:
    def __init__(self, converted):
        self.converted = converted
        self.convert_calls = []
        self.read_calls = []
        self.write_calls = []

    def convert(self, fmt, original, destination, options):
        self.convert_calls.append((fmt, original, destination, options))
        return self.converted

    def create_read_task(self, fmt, path, options):
        self.read_calls.append((path, options))
        return "read-task"

    def create_write_task(self, fmt, path, options):
        self.write_calls.append((path, options))
        return "write-task"


@pytest.fixture
def format_spy(tmp_path, monkeypatch):
    spy = _FormatSpy(tmp_path / "converted.10n")
    monkeypatch.setattr(Format, "convert", lambda self, o, d, opts: spy.convert(self, o, d, opts))
    monkeypatch.setattr(Format, "create_read_task", lambda self, p, opts: spy.create_read_task(self, p, opts))
    monkeypatch.setattr(Format, "create_write_task", lambda self, p, opts: spy.create_write_task(self, p, opts))
    return spy


def test_read_task_is_built_from_converted_path(format_spy, ion_text_input):
    options = options_combination_from("read::{}")

    task = create_measurable_task(options, str(ion_text_input))

    assert task == "read-task"
    assert format_spy.read_calls == [(format_spy.converted, options)]
    assert format_spy.write_calls == []


def test_write_task_is_built_from_converted_path(format_spy, ion_text_input):
    options = options_combination_from("write::{format: ion_text}")

    task = create_measurable_task(options, ion_text_input)

    assert task == "write-task"
    assert format_spy.write_calls == [(format_spy.converted, options)]
    assert format_spy.read_calls == []


def test_conversion_targets_temp_file_with_format_suffix(format_spy, ion_text_input, tmp_path):
    options = options_combination_from("read::{format: ion_text}")

    convert_input(options, ion_text_input)

    fmt, original, destination, passed = format_spy.convert_calls[0]
    assert fmt is Format.ION_TEXT
    assert original == ion_text_input.resolve()
    assert passed is options
    assert destination.name.startswith("input.ion-")
    assert destination.suffix == ".ion"
    assert destination.parent == tmp_path / "scratch"


def test_conversion_failure_propagates(monkeypatch, ion_text_input):
    def fail(self, original, destination, options):
        raise OSError("disk full")

    monkeypatch.setattr(Format, "convert", fail)
    options = options_combination_from("read::{}")

    with pytest.raises(OSError, match="disk full"):
        create_measurable_task(options, ion_text_input)


def test_build_task_rejects_untagged_base_combination(tmp_path):
    with pytest.raises(UnsupportedVariantError):
        build_task(OptionsCombination(), tmp_path / "input.10n")


def test_real_pipeline_builds_read_task_over_converted_binary(ion_text_input):
    options = options_combination_from("read::{format: ion_binary, ion_api: dom}")

    task = create_measurable_task(options, ion_text_input)

    assert isinstance(task, ReadTask)
    assert task.path != ion_text_input.resolve()
    assert task.path.suffix == ".10n"
    assert task.run() == 4


def test_real_pipeline_reuses_input_when_conversion_is_a_noop(ion_text_input):
    options = options_combination_from("write::{format: ion_text, io_type: buffer}")

    task = create_measurable_task(options, ion_text_input)

    assert isinstance(task, WriteTask)
    assert Path(task.path) == ion_text_input.resolve()
    assert task.run() > 0


def test_missing_input_leaves_no_scratch_file(tmp_path):
    options = options_combination_from("read::{format: ion_binary}")

    with pytest.raises(FileNotFoundError):
        create_measurable_task(options, tmp_path / "missing.ion")

    assert list((tmp_path / "scratch").iterdir()) == []


def test_failed_conversion_removes_its_destination(monkeypatch, ion_text_input):
    seen = []

    def fail(self, original, destination, options):
        seen.append(destination)
        raise OSError("disk full")

    monkeypatch.setattr(Format, "convert", fail)

    with pytest.raises(OSError, match="disk full"):
        convert_input(options_combination_from("write::{}"), ion_text_input)

    assert len(seen) == 1
    assert not seen[0].exists()
