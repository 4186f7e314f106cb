"""Error types shared by the compscripts tools."""


class CompscriptsError(RuntimeError):
    """An error that should be displayed to the user as ``Error: <message>``."""


class SilentError(CompscriptsError):
    """An error that was already reported (or a user cancel): exit 1, print nothing."""

    def __init__(self, message: str = ""):
        super().__init__(message)


class RangeParseError(ValueError):
    """A selection range string could not be parsed."""


class RepeatedIdError(ValueError):
    """Two records in a data file share the same id."""

    def __init__(self, record_id: int, kind: str = "ID"):
        self.record_id = record_id
        self.kind = kind
        super().__init__(f"repeated {kind}: {record_id}; it'll have to be removed manually.")
