import unittest

from amazon.ion import simpleion

from ionbench.formats import Format, IonAPI
from ionbench.options.errors import OptionTypeError
from ionbench.options.schema import (
    AUTO_VALUE,
    get_or_default,
    ion_bool,
    ion_enum,
    ion_float_width,
    ion_int,
    ion_non_negative_int,
    ion_text,
    resolve_fields,
    COMMON_OPTION_FIELDS,
)


def _struct(text):
    return simpleion.loads(text)


class _RecordingTranslator:
    def __init__(self, result="translated"):
        self.calls = []
        self.result = result

    def __call__(self, value):
        self.calls.append(value)
        return self.result


class TestGetOrDefault(unittest.TestCase):
    def test_absent_field_returns_default_without_translating(self):
        translate = _RecordingTranslator()
        self.assertEqual(get_or_default({}, "limit", translate, 7), 7)
        self.assertEqual(translate.calls, [])

    def test_auto_symbol_returns_default_without_translating(self):
        translate = _RecordingTranslator()
        record = _struct("{limit: auto}")
        self.assertIsNone(get_or_default(record, "limit", translate, None))
        self.assertEqual(translate.calls, [])

    def test_auto_string_returns_default(self):
        record = _struct('{format: "auto"}')
        self.assertIs(get_or_default(record, "format", ion_enum(Format), Format.ION_BINARY), Format.ION_BINARY)

    def test_plain_auto_string_is_sentinel(self):
        self.assertEqual(get_or_default({"limit": AUTO_VALUE}, "limit", ion_int, 3), 3)

    def test_present_value_is_translated(self):
        record = _struct("{limit: 100}")
        self.assertEqual(get_or_default(record, "limit", ion_int, 5), 100)

    def test_present_value_equals_direct_translation(self):
        record = _struct("{ion_api: dom, preallocation: 2, ion_imports: \"imports.ion\"}")
        self.assertIs(get_or_default(record, "ion_api", ion_enum(IonAPI), IonAPI.STREAMING), ion_enum(IonAPI)(record["ion_api"]))
        self.assertEqual(get_or_default(record, "preallocation", ion_int, None), ion_int(record["preallocation"]))
        self.assertEqual(get_or_default(record, "ion_imports", ion_text, None), "imports.ion")

    def test_translator_failure_propagates(self):
        record = _struct('{limit: "many"}')
        with self.assertRaises(OptionTypeError):
            get_or_default(record, "limit", ion_int, 5)

    def test_translator_errors_are_not_wrapped(self):
        class Boom(Exception):
            pass

        def explode(value):
            raise Boom(value)

        with self.assertRaises(Boom):
            get_or_default({"limit": 1}, "limit", explode, 0)

    def test_auto_equals_omission_for_every_common_field(self):
        auto_record = _struct("{" + ", ".join(f"{field.name}: auto" for field in COMMON_OPTION_FIELDS) + "}")
        self.assertEqual(resolve_fields(auto_record, COMMON_OPTION_FIELDS), resolve_fields(_struct("{}"), COMMON_OPTION_FIELDS))


class TestTranslators(unittest.TestCase):
    def test_ion_int_rejects_bool_and_null(self):
        record = _struct("{flag: true, empty: null.int, text: abc}")
        for name in ("flag", "empty", "text"):
            with self.assertRaises(OptionTypeError):
                ion_int(record[name])

    def test_non_negative_int_rejects_negative(self):
        with self.assertRaises(OptionTypeError):
            ion_non_negative_int(-1)
        self.assertEqual(ion_non_negative_int(0), 0)

    def test_ion_bool(self):
        record = _struct("{yes: true, no: false, other: 1}")
        self.assertIs(ion_bool(record["yes"]), True)
        self.assertIs(ion_bool(record["no"]), False)
        with self.assertRaises(OptionTypeError):
            ion_bool(record["other"])

    def test_ion_enum_is_case_insensitive(self):
        record = _struct("{a: ion_text, b: ION_TEXT, c: \"Ion_Text\"}")
        translate = ion_enum(Format)
        for name in ("a", "b", "c"):
            self.assertIs(translate(record[name]), Format.ION_TEXT)

    def test_ion_enum_unknown_value_names_choices(self):
        with self.assertRaises(OptionTypeError) as ctx:
            ion_enum(Format)("cbor")
        self.assertIn("ion_binary", str(ctx.exception))

    def test_float_width(self):
        self.assertEqual(ion_float_width(32), 32)
        with self.assertRaises(OptionTypeError):
            ion_float_width(16)


if __name__ == "__main__":
    unittest.main()
