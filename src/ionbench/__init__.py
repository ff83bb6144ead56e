from ionbench._version import VERSION, __version__


def options_combination_from(serialized):
    from ionbench.options.combination import options_combination_from as _options_combination_from

    return _options_combination_from(serialized)


def create_measurable_task(options, input_file):
    from ionbench.options.combination import create_measurable_task as _create_measurable_task

    return _create_measurable_task(options, input_file)


__all__ = ["VERSION", "__version__", "options_combination_from", "create_measurable_task"]
