"""Naming space data model: alphabet, case mode and name length."""

import functools
import itertools
import math
import random
import string
from collections import Counter
from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from rngrename.errors import ConfigError


# Sizes above this are treated as effectively infinite when computing ratios
SPACE_SIZE_LIMIT = 2**64

# Characters that are never allowed in a filename component
UNSAFE_FILENAME_CHARS = '<>:"/\\|?*'


class CaseMode(str, Enum):
    """Letter casing applied to the alphabet."""

    LOWER = "lower"
    UPPER = "upper"
    MIXED = "mixed"


class CharSetSelection(str, Enum):
    """Preset character sets selectable from the command line."""

    LETTERS = "letters"
    NUMBERS = "numbers"
    ALPHA_NUMERIC = "alpha_numeric"
    BASE16 = "base16"
    BASE64 = "base64"
    CUSTOM = "custom"


PRESET_ALPHABETS: dict[CharSetSelection, str] = {
    CharSetSelection.LETTERS: string.ascii_lowercase,
    CharSetSelection.NUMBERS: string.digits,
    CharSetSelection.ALPHA_NUMERIC: string.ascii_lowercase + string.digits,
    CharSetSelection.BASE16: string.digits + "abcdef",
    # url-safe variant so every symbol is filename-safe
    CharSetSelection.BASE64: string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_",
}

# Case modes each preset accepts; an empty tuple means the preset is used verbatim
SUPPORTED_CASES: dict[CharSetSelection, tuple[CaseMode, ...]] = {
    CharSetSelection.LETTERS: (CaseMode.LOWER, CaseMode.UPPER, CaseMode.MIXED),
    CharSetSelection.NUMBERS: (),
    CharSetSelection.ALPHA_NUMERIC: (CaseMode.LOWER, CaseMode.UPPER, CaseMode.MIXED),
    CharSetSelection.BASE16: (CaseMode.LOWER, CaseMode.UPPER),
    CharSetSelection.BASE64: (),
    CharSetSelection.CUSTOM: (),
}


def is_unsafe_char(char: str) -> bool:
    """Whether a single character may not appear in a filename."""
    return char in UNSAFE_FILENAME_CHARS or not char.isprintable()


def validate_custom_chars(chars: str) -> str:
    """Check a user-supplied character set.

    Raises:
        ConfigError: If the set is empty, or has unsafe or duplicate characters.
    """
    if not chars:
        raise ConfigError("The custom character set is empty.")

    illegal = [c for c in dict.fromkeys(chars) if is_unsafe_char(c)]
    if illegal:
        listed = ", ".join(repr(c) for c in illegal)
        raise ConfigError(f"The custom character set contains illegal characters: {listed}")

    duplicates = [c for c, count in Counter(chars).items() if count > 1]
    if duplicates:
        listed = ", ".join(repr(c) for c in duplicates)
        raise ConfigError(f"The custom character set contains duplicate characters: {listed}")

    return chars


def resolve_alphabet(
    selection: CharSetSelection,
    custom_chars: str | None = None,
    case_mode: CaseMode | None = None,
) -> tuple[str, CaseMode | None]:
    """Resolve a preset (or custom set) and optional casing into an alphabet.

    Returns:
        The base alphabet and the case mode to apply to it.

    Raises:
        ConfigError: For invalid preset/case/custom combinations.
    """
    if selection is CharSetSelection.CUSTOM:
        if custom_chars is None:
            raise ConfigError("A custom character set requires custom characters.")
    elif custom_chars is not None:
        raise ConfigError("Custom characters cannot be used unless the character set is 'custom'.")

    supported = SUPPORTED_CASES[selection]
    if case_mode is not None and case_mode not in supported:
        raise ConfigError(f"The character set '{selection.value}' is incompatible with the case '{case_mode.value}'.")
    if case_mode is None and supported:
        case_mode = CaseMode.LOWER

    if selection is CharSetSelection.CUSTOM:
        return validate_custom_chars(custom_chars), case_mode
    return PRESET_ALPHABETS[selection], case_mode


class NameSpace(BaseModel):
    """The set of all names of a fixed length over an alphabet.

    The effective alphabet accounts for the case mode: ``LOWER`` and ``UPPER``
    fix the case of letters, ``MIXED`` contributes both cases of every letter.
    Non-letter symbols are unaffected. ``None`` uses the symbols verbatim.
    """

    model_config = ConfigDict(frozen=True)

    alphabet: str
    length: int
    case_mode: CaseMode | None = None

    @model_validator(mode="after")
    def _check_parameters(self) -> "NameSpace":
        if not self.alphabet:
            raise ConfigError("The alphabet of a naming space cannot be empty.")
        if self.length < 1:
            raise ConfigError(f"The name length must be at least 1, got {self.length}.")
        return self

    @functools.cached_property
    def symbols(self) -> tuple[str, ...]:
        """The effective alphabet, in a stable order and without duplicates."""
        if self.case_mode is CaseMode.LOWER:
            expanded = (c.lower() for c in self.alphabet)
        elif self.case_mode is CaseMode.UPPER:
            expanded = (c.upper() for c in self.alphabet)
        elif self.case_mode is CaseMode.MIXED:
            expanded = (v for c in self.alphabet for v in ((c.lower(), c.upper()) if c.isalpha() else (c,)))
        else:
            expanded = iter(self.alphabet)
        return tuple(dict.fromkeys(expanded))

    def symbol_count(self) -> int:
        return len(self.symbols)

    def size(self) -> int:
        """Total number of distinct names (q)."""
        return self.symbol_count() ** self.length

    def effective_size(self) -> int | float:
        """Size used for ratio decisions; ``math.inf`` when too large to matter."""
        size = self.size()
        if size > SPACE_SIZE_LIMIT:
            return math.inf
        return size

    def random_name(self, rng: random.Random) -> str:
        """Draw a uniformly random name."""
        return "".join(rng.choices(self.symbols, k=self.length))

    def enumerate_names(self) -> Iterator[str]:
        """Yield every name of the space in lexicographic symbol order."""
        for combo in itertools.product(self.symbols, repeat=self.length):
            yield "".join(combo)

    def __str__(self) -> str:
        case = self.case_mode.value if self.case_mode else "verbatim"
        return f"NameSpace('{self.alphabet}', length={self.length}, case={case})"
