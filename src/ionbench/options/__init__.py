from ionbench.options.combination import (
    OptionsCombination,
    ReadOptionsCombination,
    Variant,
    WriteOptionsCombination,
    build_task,
    convert_input,
    create_measurable_task,
    options_combination_from,
    parse_options_record,
    read_paths_file,
)
from ionbench.options.errors import (
    MalformedOptionsError,
    OptionsError,
    OptionTypeError,
    UnsupportedVariantError,
)
from ionbench.options.schema import AUTO_VALUE, OptionField, get_or_default

__all__ = [
    "AUTO_VALUE",
    "OptionField",
    "get_or_default",
    "OptionsCombination",
    "ReadOptionsCombination",
    "WriteOptionsCombination",
    "Variant",
    "options_combination_from",
    "parse_options_record",
    "read_paths_file",
    "convert_input",
    "build_task",
    "create_measurable_task",
    "OptionsError",
    "MalformedOptionsError",
    "OptionTypeError",
    "UnsupportedVariantError",
]
