"""Error types raised by the naming engine."""


class RngRenameError(Exception):
    """Base class for all errors raised by rngrename."""


class ConfigError(RngRenameError):
    """Invalid naming configuration, or a forced strategy that cannot run."""


class ExhaustedNameSpaceError(RngRenameError):
    """The naming space cannot provide a unique name for every file."""

    def __init__(self, message: str, needed: int | None = None, available: int | None = None) -> None:
        super().__init__(message)
        self.needed = needed
        self.available = available

    @classmethod
    def insufficient(cls, needed: int, available: int) -> "ExhaustedNameSpaceError":
        return cls(
            "This combination of character set and length cannot uniquely cover every file. "
            f"There are {needed} files but only {available} unique names available.",
            needed=needed,
            available=available,
        )
