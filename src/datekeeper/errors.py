"""Error taxonomy surfaced to users as ``"<operation>: <message>"``."""


class DatekeeperError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidFormat(DatekeeperError):
    """Text that could not be parsed: bad date, missing index, blank subject."""


class NotFound(DatekeeperError):
    """User not started, or no task at the requested date/index."""


class StoreFailure(DatekeeperError):
    """The document store could not be read or written."""
