"""Name generation strategies and the policy choosing between them."""

import logging
import math
import random
from abc import ABC, abstractmethod
from collections import defaultdict, deque
from collections.abc import Callable

from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt

from rngrename.errors import ConfigError, ExhaustedNameSpaceError
from rngrename.models.namespace import NameSpace
from rngrename.models.rename import STRATEGY_RATIO_THRESHOLD, StrategyDecision, StrategyKind, TargetFile
from rngrename.processors.composer import NameComposer
from rngrename.processors.registry import CollisionRegistry


logger = logging.getLogger(__name__)

# Hard limit on the number of names the exhaustive strategy will materialise
PERMUTATION_COUNT_MAX = 2**24

# Random draws allowed per file, as a multiple of the naming space size
DRAWS_PER_NAME_FACTOR = 32

# Upper bound on random draws for a single file before giving up
MAX_DRAWS_PER_NAME = 2**20


def select_strategy(
    p: int,
    q: int | float,
    threshold: float = STRATEGY_RATIO_THRESHOLD,
    forced: StrategyKind | None = None,
) -> StrategyDecision:
    """Choose a generation strategy from the saturation ratio p / q.

    Independent sampling needs about ``sum(q / (q - f) for f in range(p))``
    draws, close to ``p`` while ``p << q`` but growing hyperbolically as
    ``p`` approaches ``q``. Past ``threshold`` it is cheaper to enumerate the
    whole space once and shuffle it.

    Args:
        p: Number of files needing names.
        q: Size of the naming space, ``math.inf`` when too large to matter.
        threshold: Ratio at or above which the exhaustive strategy is chosen.
        forced: Strategy to use regardless of the ratio.
    """
    ratio = 0.0 if math.isinf(q) else p / q
    logger.debug("Ratio of files to naming space is %.2e.", ratio)

    if forced is not None:
        logger.debug("Forcing the '%s' strategy.", forced.value)
        return StrategyDecision(p=p, q=q, ratio=ratio, chosen=forced, forced=True)

    chosen = StrategyKind.EXHAUSTIVE_MATCH if ratio >= threshold else StrategyKind.ON_DEMAND
    return StrategyDecision(p=p, q=q, ratio=ratio, chosen=chosen)


class _NameCollision(Exception):
    """A drawn name is already taken."""


class NameGenerationStrategy(ABC):
    """Base class for name generation strategies.

    A strategy assigns a unique composed filename to every target file of a
    single directory, reserving each one in the registry.
    """

    kind: StrategyKind

    @abstractmethod
    def assign(
        self,
        targets: list[TargetFile],
        namespace: NameSpace,
        composer: NameComposer,
        registry: CollisionRegistry,
        rng: random.Random,
    ) -> list[str]:
        """Assign new filenames to the targets.

        Args:
            targets: Files of one directory, in input order.
            namespace: Naming space to draw generated names from.
            composer: Turns a generated name into the final filename.
            registry: Registry the final filenames are reserved in.
            rng: Randomness source for the whole batch.

        Returns:
            The new filenames, in the same order as ``targets``.

        Raises:
            ExhaustedNameSpaceError: If some target cannot get a unique name.
        """
        pass


class OnDemandStrategy(NameGenerationStrategy):
    """Draws each name independently and redraws on collision.

    Use when the naming space is large and the files are few.
    """

    kind = StrategyKind.ON_DEMAND

    def __init__(self, max_draws: int = MAX_DRAWS_PER_NAME) -> None:
        self.max_draws = max_draws

    def _draw_and_reserve(
        self,
        target: TargetFile,
        namespace: NameSpace,
        composer: NameComposer,
        registry: CollisionRegistry,
        rng: random.Random,
    ) -> str:
        name = composer.compose(namespace.random_name(rng), target.name)
        if not registry.reserve(target.directory / name):
            logger.debug("Random name conflict: '%s'. Retrying.", name)
            raise _NameCollision(name)
        return name

    def assign(
        self,
        targets: list[TargetFile],
        namespace: NameSpace,
        composer: NameComposer,
        registry: CollisionRegistry,
        rng: random.Random,
    ) -> list[str]:
        logger.info("Using the 'generate on demand' strategy.")

        q = namespace.size()
        if len(targets) > q:
            raise ExhaustedNameSpaceError.insufficient(len(targets), q)

        bound = max(1, min(q * DRAWS_PER_NAME_FACTOR, self.max_draws))
        names = []
        for target in targets:
            retrying = Retrying(
                stop=stop_after_attempt(bound),
                retry=retry_if_exception_type(_NameCollision),
            )
            try:
                name = retrying(self._draw_and_reserve, target, namespace, composer, registry, rng)
            except RetryError as e:
                raise ExhaustedNameSpaceError(
                    f"Could not find a free name for {target.original_path} after {bound} attempts.",
                    needed=len(targets),
                    available=q,
                ) from e
            names.append(name)

        logger.debug("Generated %d random names.", len(names))
        return names


class ExhaustiveMatchStrategy(NameGenerationStrategy):
    """Enumerates the whole naming space, shuffles it, then matches it to files.

    Use when the naming space is on the same order of magnitude as the
    number of files.

    Files of one directory may turn the same generated name into different
    filenames (``KEEP`` mode with mixed extensions), so a name skipped for one
    file stays available to the others. When a file finds no free name, names
    already handed out are moved between files along an augmenting path.
    """

    kind = StrategyKind.EXHAUSTIVE_MATCH

    def __init__(self, max_permutations: int = PERMUTATION_COUNT_MAX) -> None:
        self.max_permutations = max_permutations

    def assign(
        self,
        targets: list[TargetFile],
        namespace: NameSpace,
        composer: NameComposer,
        registry: CollisionRegistry,
        rng: random.Random,
    ) -> list[str]:
        logger.info("Using the 'generate then match' strategy.")

        q = namespace.size()
        if q > self.max_permutations:
            raise ConfigError(
                f"Cannot enumerate all {q} names of {namespace}. The limit is {self.max_permutations}."
            )
        if len(targets) > q:
            raise ExhaustedNameSpaceError.insufficient(len(targets), q)

        candidates = list(namespace.enumerate_names())
        rng.shuffle(candidates)
        if registry.case_insensitive:
            # Names differing only in case would land on the same file
            unique: dict[str, str] = {}
            for candidate in candidates:
                unique.setdefault(candidate.casefold(), candidate)
            candidates = list(unique.values())

        # Within one directory a composed name depends only on the extension
        extensions = [composer.extension_for(target.name) for target in targets]

        def fits(target_idx: int, candidate_idx: int) -> bool:
            target = targets[target_idx]
            return not registry.contains(target.directory / composer.compose(candidates[candidate_idx], target.name))

        owner: dict[int, int] = {}
        assigned: dict[int, int] = {}
        deferred: list[int] = []
        scanned: dict[str, int] = defaultdict(int)
        position = 0

        for target_idx, target in enumerate(targets):
            extension = extensions[target_idx]
            choice = None
            while choice is None and scanned[extension] < len(deferred):
                candidate_idx = deferred[scanned[extension]]
                if candidate_idx not in owner and fits(target_idx, candidate_idx):
                    choice = candidate_idx
                scanned[extension] += 1
            while choice is None and position < len(candidates):
                if fits(target_idx, position):
                    choice = position
                else:
                    logger.debug("Name '%s' is taken for %s. Deferring.", candidates[position], target.name)
                    deferred.append(position)
                position += 1

            if choice is not None:
                owner[choice] = target_idx
                assigned[target_idx] = choice
            elif not self._augment(target_idx, len(candidates), extensions, fits, owner, assigned):
                raise ExhaustedNameSpaceError(
                    f"Ran out of free names in {target.directory}: "
                    f"{len(assigned)} of {len(targets)} files were assigned.",
                    needed=len(targets),
                    available=len(assigned),
                )

        names = []
        for target_idx, target in enumerate(targets):
            name = composer.compose(candidates[assigned[target_idx]], target.name)
            if not registry.reserve(target.directory / name):
                raise ExhaustedNameSpaceError(
                    f"Generated name {name} collides with another new name in {target.directory}.",
                    needed=len(targets),
                    available=target_idx,
                )
            names.append(name)

        logger.debug("Matched %d names out of %d candidates.", len(names), len(candidates))
        return names

    @staticmethod
    def _augment(
        start: int,
        candidate_count: int,
        extensions: list[str],
        fits: Callable[[int, int], bool],
        owner: dict[int, int],
        assigned: dict[int, int],
    ) -> bool:
        """Free up a name for ``start`` by moving names between assigned files.

        Breadth-first search for an augmenting path ending on an unowned name.
        Files sharing an extension accept the same names, so each extension is
        expanded once. Updates ``owner`` and ``assigned`` in place.

        Returns:
            True if ``start`` now has a name.
        """
        reached_from: dict[int, int] = {}
        expanded: set[str] = set()
        queue = deque([start])
        while queue:
            target_idx = queue.popleft()
            if extensions[target_idx] in expanded:
                continue
            expanded.add(extensions[target_idx])

            for candidate_idx in range(candidate_count):
                if candidate_idx in reached_from or not fits(target_idx, candidate_idx):
                    continue
                reached_from[candidate_idx] = target_idx
                holder = owner.get(candidate_idx)
                if holder is not None:
                    queue.append(holder)
                    continue

                # Walk the path back, shifting each file onto the name it reached
                while True:
                    previous = reached_from[candidate_idx]
                    released = assigned.get(previous)
                    owner[candidate_idx] = previous
                    assigned[previous] = candidate_idx
                    if previous == start:
                        return True
                    candidate_idx = released
        return False


STRATEGIES: dict[StrategyKind, type[NameGenerationStrategy]] = {
    StrategyKind.ON_DEMAND: OnDemandStrategy,
    StrategyKind.EXHAUSTIVE_MATCH: ExhaustiveMatchStrategy,
}


def get_strategy(kind: StrategyKind) -> NameGenerationStrategy:
    return STRATEGIES[kind]()
