"""Registry of names already taken in each target directory."""

import logging
from collections import defaultdict
from pathlib import Path


logger = logging.getLogger(__name__)


def list_existing_names(directory: Path) -> set[str]:
    """List every entry name in a directory (files, directories and links).

    A directory that does not exist has no names.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return set()
    return {item.name for item in directory.iterdir()}


class CollisionRegistry:
    """Tracks which destination names are taken, grouped by directory.

    Names are seeded from disk once per directory and then grow as names are
    reserved for the current batch. A reservation is never released.
    """

    def __init__(self, case_insensitive: bool = False) -> None:
        """Initialize the registry.

        Args:
            case_insensitive: Compare names case-folded, for filesystems such as
                              the Windows and macOS defaults.
        """
        self.case_insensitive = case_insensitive
        self._occupied: dict[Path, set[str]] = defaultdict(set)
        self._seeded: set[Path] = set()

    def _normalize(self, name: str) -> str:
        return name.casefold() if self.case_insensitive else name

    def seed(self, directory: Path) -> int:
        """Mark every existing entry of a directory as taken.

        Seeding the same directory twice is a no-op.

        Returns:
            The number of names added.
        """
        if directory in self._seeded:
            return 0
        self._seeded.add(directory)

        names = {self._normalize(n) for n in list_existing_names(directory)}
        before = len(self._occupied[directory])
        self._occupied[directory].update(names)
        added = len(self._occupied[directory]) - before
        logger.debug("Seeded %d existing names from %s.", added, directory)
        return added

    def add_existing(self, directory: Path, names: set[str]) -> None:
        """Mark names as taken without touching the disk."""
        self._occupied[directory].update(self._normalize(n) for n in names)

    def contains(self, path: Path) -> bool:
        return self._normalize(path.name) in self._occupied[path.parent]

    def reserve(self, path: Path) -> bool:
        """Claim a destination path for the current batch.

        Returns:
            True if the name was free and is now reserved, False if it was already taken.
        """
        key = self._normalize(path.name)
        occupied = self._occupied[path.parent]
        if key in occupied:
            return False
        occupied.add(key)
        return True

    def occupied_count(self, directory: Path) -> int:
        return len(self._occupied[directory])
