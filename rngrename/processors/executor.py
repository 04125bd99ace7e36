"""Execution of planned renames."""

import logging
from collections.abc import Callable, Iterable
from enum import Enum

from rngrename.models.rename import RenamePair


logger = logging.getLogger(__name__)


class ConfirmMode(str, Enum):
    """When to ask the user before renaming."""

    NONE = "none"
    BATCH = "batch"
    EACH = "each"


class ErrorHandlingMode(str, Enum):
    """What to do when renaming a single file fails."""

    IGNORE = "ignore"
    WARN = "warn"
    HALT = "halt"


class BatchResponse(str, Enum):
    PROCEED = "proceed"
    SKIP = "skip"
    HALT = "halt"


class ErrorResponse(str, Enum):
    SKIP = "skip"
    RETRY = "retry"
    HALT = "halt"


class UserHalt(Exception):
    """The user asked to stop."""


class RenameExecutor:
    """Applies rename pairs to the filesystem."""

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the executor.

        ``renamed_count`` totals the successful renames across every call,
        including calls interrupted by an error or a halt.

        Args:
            dry_run: Validate every rename but leave files untouched.
        """
        self.dry_run = dry_run
        self.renamed_count = 0

    def validate(self, pair: RenamePair) -> None:
        """Check that a rename can be performed.

        Raises:
            FileNotFoundError: If the source file doesn't exist.
            FileExistsError: If the destination already exists.
        """
        if not pair.source_path.exists():
            raise FileNotFoundError(f"Source file not found: {pair.source_path}")
        if pair.destination_path.exists():
            raise FileExistsError(f"Target file already exists: {pair.destination_path}")

    def apply(self, pair: RenamePair) -> None:
        """Rename a single file, or only validate it in dry run mode."""
        self.validate(pair)
        if self.dry_run:
            logger.debug("Dry run: would rename %s to %s.", pair.source_path, pair.destination_path)
            return
        pair.source_path.rename(pair.destination_path)
        logger.debug("Renamed %s to %s.", pair.source_path, pair.destination_path)

    def apply_all(
        self,
        pairs: Iterable[RenamePair],
        err_mode: ErrorHandlingMode = ErrorHandlingMode.HALT,
        on_error: Callable[[RenamePair, OSError], ErrorResponse] | None = None,
    ) -> int:
        """Apply renames one by one.

        Args:
            pairs: Renames to apply.
            err_mode: How to react to a failed rename.
            on_error: Asked what to do with a failed rename in ``WARN`` mode.
                      Without it, ``WARN`` behaves like ``IGNORE`` after logging.

        Returns:
            The number of files renamed.

        Raises:
            OSError: The first failure, in ``HALT`` mode.
            UserHalt: If ``on_error`` answered ``HALT``.
        """
        success_count = 0
        for pair in pairs:
            while True:
                try:
                    self.apply(pair)
                except OSError as e:
                    if err_mode is ErrorHandlingMode.HALT:
                        raise
                    if err_mode is ErrorHandlingMode.IGNORE or on_error is None:
                        logger.warning("Failed to rename %s: %s. Ignoring.", pair.source_path, e)
                        break
                    response = on_error(pair, e)
                    if response is ErrorResponse.RETRY:
                        continue
                    if response is ErrorResponse.HALT:
                        raise UserHalt() from e
                    break
                else:
                    success_count += 1
                    self.renamed_count += 1
                    break

        logger.info("Successfully renamed %d files.", success_count)
        return success_count
