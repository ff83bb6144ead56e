from ionbench.util.core import ReadableException


class OptionsError(ReadableException):
    pass


class MalformedOptionsError(OptionsError):
    pass


class OptionTypeError(OptionsError):
    pass


class UnsupportedVariantError(OptionsError):
    def __init__(self, tag, cause=None):
        self.tag = tag
        super().__init__(
            f"Unsupported options combination {tag!r}: must be annotated with 'read' or 'write'.",
            cause,
        )
