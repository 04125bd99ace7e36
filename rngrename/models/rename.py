"""Rename operation data models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from rngrename.errors import ConfigError
from rngrename.models.namespace import CaseMode, CharSetSelection, NameSpace, is_unsafe_char, resolve_alphabet


# The ratio of files to naming space at which generation switches from
# drawing names on demand to enumerating and shuffling the whole space.
STRATEGY_RATIO_THRESHOLD = 0.1


class ExtensionMode(str, Enum):
    """How the original file extension carries over to the new name.

    E.g. for ``tarball.tar.xz``: ``keep`` = ``.xz``; ``keep_all`` = ``.tar.xz``;
    ``force`` = the configured extension; ``strip`` = none.
    """

    KEEP = "keep"
    KEEP_ALL = "keep_all"
    STRIP = "strip"
    FORCE = "force"


class StrategyKind(str, Enum):
    """Name generation strategies."""

    ON_DEMAND = "on_demand"
    EXHAUSTIVE_MATCH = "match"


class TargetFile(BaseModel):
    """A file waiting for a new name."""

    model_config = ConfigDict(frozen=True)

    original_path: Path = Field(description="Absolute path of the file to rename")

    @property
    def directory(self) -> Path:
        return self.original_path.parent

    @property
    def name(self) -> str:
        return self.original_path.name


class RenamePair(BaseModel):
    """A single planned rename from an original path to a new path."""

    model_config = ConfigDict(frozen=True)

    source_path: Path = Field(description="Original absolute path")
    destination_path: Path = Field(description="New absolute path")

    def __str__(self) -> str:
        return f"RenamePair('{self.source_path}' -> '{self.destination_path}')"


class StrategyDecision(BaseModel):
    """The outcome of choosing a generation strategy for one group of files."""

    model_config = ConfigDict(frozen=True)

    p: int = Field(description="Number of files needing a name")
    q: int | float = Field(description="Size of the naming space, infinite when too large to matter")
    ratio: float = Field(description="Saturation ratio p / q")
    chosen: StrategyKind
    forced: bool = False


def _strip_unsafe(value: str) -> str:
    return "".join(c for c in value if not is_unsafe_char(c))


class RenameConfig(BaseModel):
    """Resolved configuration for one rename run."""

    char_set: CharSetSelection = CharSetSelection.BASE16
    custom_chars: str | None = None
    case_mode: CaseMode | None = None
    length: int = Field(default=8, description="Number of random characters in each name")
    prefix: str = ""
    suffix: str = Field(default="", description="Static text placed before the extension")
    ext_mode: ExtensionMode = ExtensionMode.KEEP
    forced_extension: str | None = None
    forced_strategy: StrategyKind | None = None
    strategy_threshold: float = STRATEGY_RATIO_THRESHOLD
    case_insensitive: bool = Field(default=False, description="Compare names case-insensitively")

    @field_validator("prefix", "suffix")
    @classmethod
    def _sanitize_static_text(cls, value: str) -> str:
        return _strip_unsafe(value)

    @field_validator("forced_extension")
    @classmethod
    def _sanitize_extension(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _strip_unsafe(value)

    @model_validator(mode="after")
    def _check_combination(self) -> "RenameConfig":
        if self.length < 1:
            raise ConfigError(f"The name length must be at least 1, got {self.length}.")
        if not 0 < self.strategy_threshold <= 1:
            raise ConfigError(f"The strategy threshold must be in (0, 1], got {self.strategy_threshold}.")
        if self.ext_mode is ExtensionMode.FORCE and self.forced_extension is None:
            raise ConfigError("Extension mode 'force' requires an extension to force.")
        # fails early on incompatible character set options
        resolve_alphabet(self.char_set, self.custom_chars, self.case_mode)
        return self

    def to_namespace(self) -> NameSpace:
        alphabet, case_mode = resolve_alphabet(self.char_set, self.custom_chars, self.case_mode)
        return NameSpace(alphabet=alphabet, length=self.length, case_mode=case_mode)
