"""Batch assembly: turns a list of files into planned renames."""

import logging
import random
from collections import defaultdict
from collections.abc import Iterable
from pathlib import Path

from rngrename.errors import ConfigError, ExhaustedNameSpaceError
from rngrename.models.rename import RenameConfig, RenamePair, StrategyDecision, TargetFile
from rngrename.processors.composer import NameComposer
from rngrename.processors.registry import CollisionRegistry
from rngrename.processors.strategies import NameGenerationStrategy, get_strategy, select_strategy


logger = logging.getLogger(__name__)

# Hard limit on the number of files processed in one batch
FILE_COUNT_MAX = 2**24


def dedup_paths(paths: Iterable[Path | str]) -> list[Path]:
    """Make paths absolute and drop duplicates, keeping the first occurrence."""
    return list(dict.fromkeys(Path(p).resolve() for p in paths))


def chunk_pairs(pairs: list[RenamePair], size: int) -> list[list[RenamePair]]:
    """Split pairs into display batches of ``size``; 0 means a single batch."""
    if size <= 0 or size >= len(pairs):
        return [pairs] if pairs else []
    return [pairs[i : i + size] for i in range(0, len(pairs), size)]


class BatchAssembler:
    """Plans random renames for a batch of files.

    Files are grouped by directory, since names only collide within a
    directory. Each group gets its own strategy decision; the whole batch is
    planned before anything is renamed.
    """

    def __init__(
        self,
        config: RenameConfig,
        rng: random.Random | None = None,
        registry: CollisionRegistry | None = None,
    ) -> None:
        """Initialize the assembler.

        Args:
            config: Resolved rename configuration.
            rng: Randomness source shared by every group. Pass a seeded
                 ``random.Random`` for reproducible plans.
            registry: Collision registry to use; a fresh one by default.
        """
        self.config = config
        self.namespace = config.to_namespace()
        self.composer = NameComposer(
            prefix=config.prefix,
            suffix=config.suffix,
            ext_mode=config.ext_mode,
            forced_extension=config.forced_extension,
        )
        self.rng = rng if rng is not None else random.Random()
        self.registry = registry if registry is not None else CollisionRegistry(config.case_insensitive)
        self.last_decisions: dict[Path, StrategyDecision] = {}

    def _group_by_directory(self, targets: list[TargetFile]) -> dict[Path, list[int]]:
        groups: dict[Path, list[int]] = defaultdict(list)
        for index, target in enumerate(targets):
            groups[target.directory].append(index)
        return groups

    def _decide(self, p: int) -> StrategyDecision:
        return select_strategy(
            p,
            self.namespace.effective_size(),
            threshold=self.config.strategy_threshold,
            forced=self.config.forced_strategy,
        )

    def _strategy_for(self, decision: StrategyDecision) -> NameGenerationStrategy:
        return get_strategy(decision.chosen)

    def assemble(self, paths: Iterable[Path | str]) -> list[RenamePair]:
        """Plan new names for every file.

        Args:
            paths: Files to rename. Relative paths are resolved and duplicates dropped.

        Returns:
            Rename pairs in the same order as the input files.

        Raises:
            ConfigError: If there are too many files, or a forced strategy cannot run.
            ExhaustedNameSpaceError: If a directory cannot get a unique name for every file.
        """
        targets = [TargetFile(original_path=p) for p in dedup_paths(paths)]
        if len(targets) > FILE_COUNT_MAX:
            raise ConfigError(f"Cannot process {len(targets)} files at once. The limit is {FILE_COUNT_MAX}.")

        logger.debug("Naming space is %s with %d names.", self.namespace, self.namespace.size())

        new_names: list[str | None] = [None] * len(targets)
        self.last_decisions = {}
        for directory, indices in self._group_by_directory(targets).items():
            self.registry.seed(directory)

            decision = self._decide(len(indices))
            self.last_decisions[directory] = decision
            strategy = self._strategy_for(decision)

            group = [targets[i] for i in indices]
            names = strategy.assign(group, self.namespace, self.composer, self.registry, self.rng)
            if len(names) != len(group):
                raise ExhaustedNameSpaceError(
                    f"Only {len(names)} of {len(group)} files in {directory} were given a name.",
                    needed=len(group),
                    available=len(names),
                )
            for i, name in zip(indices, names):
                new_names[i] = name

        pairs = [
            RenamePair(source_path=target.original_path, destination_path=target.directory / name)
            for target, name in zip(targets, new_names)
        ]
        logger.info("Planned names for %d files.", len(pairs))
        return pairs
