"""Domain Errors - Raised by core functions, handled by the shell."""


class JournalError(Exception):
    """Base class for food journal failures shown to the user."""


class MissingFoodNameError(JournalError):
    """An entry was added without a food name."""

    def __init__(self) -> None:
        super().__init__("Please enter a food name")


class NothingToExportError(JournalError):
    """The store holds no entries for any day."""

    def __init__(self) -> None:
        super().__init__("No entries to export")
