"""Next-question selection strategies and their registry."""

from collections.abc import Iterable
from functools import partial

from loguru import logger

from config import StrategyConfig
from strategies.base import LearningStrategy, StrategyState
from strategies.random_order import RandomStrategy
from strategies.registry import StrategyConstructor, StrategyMetadata, StrategyRegistry
from strategies.repeat_incorrect import RepeatIncorrectStrategy
from strategies.sequential import SequentialStrategy
from strategies.spaced_repetition import DEFAULT_STRIDE, SpacedRepetitionStrategy

SEQUENTIAL_METADATA = StrategyMetadata(
    name=SequentialStrategy.name,
    display_name="Sequential",
    description="Presents the questions in their original order.",
    version="1.0.0",
    icon="➡️",
    color="#3498db",
    usage="Best for a first pass through new material.",
)

RANDOM_METADATA = StrategyMetadata(
    name=RandomStrategy.name,
    display_name="Random",
    description="Questions in random order.",
    version="2.0.0",
    icon="🎲",
    color="#e74c3c",
    usage="Ideal for general review and avoiding memorising the order.",
)

SPACED_REPETITION_METADATA = StrategyMetadata(
    name=SpacedRepetitionStrategy.name,
    display_name="Spaced repetition",
    description="Revisits questions at spaced intervals to improve retention.",
    version="1.0.0",
    icon="🔁",
    color="#27ae60",
    usage="Questions come back a fixed number of positions apart.",
)

REPEAT_INCORRECT_METADATA = StrategyMetadata(
    name=RepeatIncorrectStrategy.name,
    display_name="Repeat incorrect",
    description="Focuses on questions answered incorrectly.",
    version="2.0.0",
    icon="🎯",
    color="#f39c12",
    usage="Ideal for working on weak areas and correcting mistakes.",
)


def default_strategies(
    config: StrategyConfig | None = None,
) -> list[tuple[StrategyMetadata, StrategyConstructor]]:
    """The built-in strategies, in registration order, configured from ``config``."""
    config = config or StrategyConfig()
    return [
        (SEQUENTIAL_METADATA, SequentialStrategy),
        (RANDOM_METADATA, partial(RandomStrategy, seed=config.random_seed)),
        (
            SPACED_REPETITION_METADATA,
            partial(SpacedRepetitionStrategy, stride=config.spaced_repetition_stride),
        ),
        (REPEAT_INCORRECT_METADATA, RepeatIncorrectStrategy),
    ]


def build_strategy_registry(
    config: StrategyConfig | None = None,
    enabled: Iterable[str] | None = None,
) -> StrategyRegistry:
    """Create the strategy registry from the built-ins.

    Args:
        config: Strategy tunables. Defaults to StrategyConfig().
        enabled: Optional subset of strategy names to keep. Empty or None keeps all.
    """
    wanted = {name.strip() for name in enabled} if enabled else None
    registry = StrategyRegistry()
    for metadata, constructor in default_strategies(config):
        if wanted is not None and metadata.name not in wanted:
            logger.debug(f"Strategy '{metadata.name}' disabled by configuration")
            continue
        registry.register(metadata.name, metadata, constructor)
    return registry


__all__ = [
    "LearningStrategy",
    "StrategyState",
    "SequentialStrategy",
    "RandomStrategy",
    "SpacedRepetitionStrategy",
    "RepeatIncorrectStrategy",
    "DEFAULT_STRIDE",
    "StrategyMetadata",
    "StrategyRegistry",
    "default_strategies",
    "build_strategy_registry",
]
