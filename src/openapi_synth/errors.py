"""Exceptions raised by openapi-synth.

Most defects in a document under construction are not raised; they are
recorded in the model and reported together by compile. These exceptions
cover the cases where an operation cannot proceed at all.
"""


class OpenAPISynthError(Exception):
    """Base class for all openapi-synth errors."""


class DocumentLoadError(OpenAPISynthError):
    """An existing OpenAPI document could not be read or has the wrong shape."""


class RouteError(OpenAPISynthError):
    """A route key is missing its path or method."""


class CompileError(OpenAPISynthError):
    """All defects found while compiling a document.

    Compile returns this instead of raising it: a document with defects can
    still be serialized.
    """

    def __init__(self, defects: list):
        self.defects = list(defects)
        super().__init__("\n".join(str(d) for d in self.defects))
