"""Shared pytest fixtures for the course engine test suite."""

import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import Block, Course
from questions import (
    FillBlankQuestion,
    Flashcard,
    MultipleChoiceQuestion,
    QuestionFactory,
    TrueFalseQuestion,
    build_question_registry,
)
from simulator_models import SimulatedLearnerConfig
from storage import init_schema
from strategies import build_strategy_registry


@pytest.fixture
def multiple_choice_question() -> MultipleChoiceQuestion:
    """A multiple choice question whose correct answer is the second option."""
    return MultipleChoiceQuestion(
        id="A",
        prompt="What is the capital of France?",
        options=["London", "Paris", "Madrid"],
        correct_answer="Paris",
    )


@pytest.fixture
def true_false_question() -> TrueFalseQuestion:
    return TrueFalseQuestion(id="B", prompt="Water boils at 100°C at sea level.", answer=True)


@pytest.fixture
def fill_blank_question() -> FillBlankQuestion:
    return FillBlankQuestion(id="C", prompt="The sky is ___.", answer="blue")


@pytest.fixture
def flashcard_question() -> Flashcard:
    return Flashcard(id="D", front="Hola", back="Hello")


@pytest.fixture
def sample_questions(
    multiple_choice_question, true_false_question, fill_blank_question, flashcard_question
) -> list:
    """Four questions A, B, C, D of different types."""
    return [
        multiple_choice_question,
        true_false_question,
        fill_blank_question,
        flashcard_question,
    ]


@pytest.fixture
def sample_course(sample_questions) -> Course:
    """A course with a single block holding A, B, C, D."""
    return Course(
        id="c001",
        title="General knowledge",
        description="A small course for tests",
        blocks=[
            Block(id="b001", title="Basics", type="teoria", questions=sample_questions),
        ],
    )


@pytest.fixture
def numbered_questions() -> list[FillBlankQuestion]:
    """Six fill-blank questions q0..q5 whose answers are their index."""
    return [
        FillBlankQuestion(id=f"q{i}", prompt=f"Question {i}: ___", answer=str(i))
        for i in range(6)
    ]


@pytest.fixture
def question_registry():
    return build_question_registry()


@pytest.fixture
def question_factory(question_registry) -> QuestionFactory:
    return QuestionFactory(question_registry)


@pytest.fixture
def strategy_registry():
    return build_strategy_registry()


@pytest.fixture
def learner_config() -> SimulatedLearnerConfig:
    """A learner with fixed, fast answering."""
    return SimulatedLearnerConfig(
        accuracy=0.7,
        repetition_bonus=0.1,
        hint_rate=0.0,
        min_seconds=1,
        max_seconds=1,
    )


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_sessions.db"
    init_schema(db_path)
    return db_path
