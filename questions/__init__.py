"""Question kinds and the factory that builds them from raw records."""

from collections.abc import Iterable

from loguru import logger

from questions.base import QuestionProvider, parse_bool_answer, parse_letter_input
from questions.factory import QuestionFactory
from questions.fill_blank import FillBlankProvider, FillBlankQuestion
from questions.flashcard import Flashcard, FlashcardProvider
from questions.multiple_choice import MultipleChoiceProvider, MultipleChoiceQuestion
from questions.true_false import TrueFalseProvider, TrueFalseQuestion
from registry import Registry

# Providers available at build time, in registration order.
DEFAULT_PROVIDERS: tuple[type[QuestionProvider], ...] = (
    MultipleChoiceProvider,
    TrueFalseProvider,
    FillBlankProvider,
    FlashcardProvider,
)


def build_question_registry(
    providers: Iterable[QuestionProvider] | None = None,
    enabled: Iterable[str] | None = None,
) -> Registry[QuestionProvider]:
    """Create the question-type registry.

    Args:
        providers: Provider instances to register. Defaults to one instance
            of each class in DEFAULT_PROVIDERS.
        enabled: Optional subset of type tags to keep. Empty or None keeps all.
    """
    if providers is None:
        providers = [provider_class() for provider_class in DEFAULT_PROVIDERS]
    wanted = {tag.strip() for tag in enabled} if enabled else None

    registry: Registry[QuestionProvider] = Registry(kind="question provider")
    for provider in providers:
        if wanted is not None and provider.type_tag not in wanted:
            logger.debug(f"Question type '{provider.type_tag}' disabled by configuration")
            continue
        registry.register(provider.type_tag, provider)
    return registry


__all__ = [
    "QuestionProvider",
    "QuestionFactory",
    "MultipleChoiceQuestion",
    "MultipleChoiceProvider",
    "TrueFalseQuestion",
    "TrueFalseProvider",
    "FillBlankQuestion",
    "FillBlankProvider",
    "Flashcard",
    "FlashcardProvider",
    "DEFAULT_PROVIDERS",
    "build_question_registry",
    "parse_bool_answer",
    "parse_letter_input",
]
