"""Errors raised while reading a taxdump."""


class DumpFormatError(ValueError):
    """A row that cannot be merged; aborts the run.

    Attributes:
        member: Dump file the row came from
        line_number: 1-based line number within that file
    """

    def __init__(self, member: str, line_number: int, message: str) -> None:
        self.member = member
        self.line_number = line_number
        super().__init__(f"{member}:{line_number}: {message}")
