"""Core simulation logic for the learner simulator."""

import json
import random
from datetime import datetime
from pathlib import Path
from typing import Any

from loguru import logger
from rich.console import Console
from rich.table import Table

from activity import LearningActivity
from models import Block, Course, Question
from questions import (
    Flashcard,
    FillBlankQuestion,
    MultipleChoiceQuestion,
    QuestionFactory,
    TrueFalseQuestion,
)
from session_stats import Scorer
from simulator_models import SimulatedLearnerConfig, SimulationResults, StepResult
from storage.base import SessionRepository
from strategies.registry import StrategyRegistry

QUESTIONS_PER_BLOCK = 5


def _raw_question(type_tag: str, number: int) -> dict[str, Any]:
    """Raw record for a generated question of the given type."""
    qid = f"q{number:03d}"
    if type_tag == "test":
        options = [f"option {number}-{i}" for i in range(4)]
        return {
            "type": "test",
            "id": qid,
            "enunciado": f"Which option belongs to question {number}?",
            "opciones": options,
            "respuestaCorrecta": options[number % 4],
        }
    if type_tag == "truefalse":
        return {
            "type": "truefalse",
            "id": qid,
            "enunciado": f"{number} is an even number.",
            "respuesta": "true" if number % 2 == 0 else "false",
        }
    if type_tag == "completar_huecos":
        return {
            "type": "completar_huecos",
            "id": qid,
            "enunciado": f"The word for item {number} is ___.",
            "respuesta": f"word{number}",
        }
    return {
        "type": type_tag,
        "id": qid,
        "pregunta": f"Front of card {number}",
        "respuesta": f"Back of card {number}",
    }


def generate_course(
    factory: QuestionFactory,
    question_count: int,
    course_id: str = "simulated",
) -> Course:
    """Build a course whose questions cycle through every supported type."""
    types = factory.list_supported_types()
    if not types:
        raise ValueError("No question types are registered")

    questions = factory.build_many(
        _raw_question(types[i % len(types)], i + 1) for i in range(question_count)
    )
    blocks = [
        Block(
            id=f"b{start // QUESTIONS_PER_BLOCK + 1}",
            title=f"Block {start // QUESTIONS_PER_BLOCK + 1}",
            questions=questions[start : start + QUESTIONS_PER_BLOCK],
        )
        for start in range(0, len(questions), QUESTIONS_PER_BLOCK)
    ]
    return Course(id=course_id, title="Simulated course", blocks=blocks)


def correct_response(question: Question) -> str | None:
    if isinstance(question, MultipleChoiceQuestion):
        return question.correct_answer
    if isinstance(question, TrueFalseQuestion):
        return "true" if question.answer else "false"
    if isinstance(question, FillBlankQuestion):
        return question.answer
    if isinstance(question, Flashcard):
        return question.back
    return None


def wrong_response(question: Question, rng: random.Random) -> str | None:
    if isinstance(question, MultipleChoiceQuestion):
        wrong = [o for o in question.options if o != question.correct_answer]
        return rng.choice(wrong) if wrong else None
    if isinstance(question, TrueFalseQuestion):
        return "false" if question.answer else "true"
    if isinstance(question, FillBlankQuestion):
        return question.answer[::-1] + "?"
    return None


class ResponseGenerator:
    """Generates simulated learner responses."""

    def __init__(self, config: SimulatedLearnerConfig, rng: random.Random):
        self.config = config
        self.rng = rng

    def generate_response(self, question: Question, times_seen: int) -> tuple[str | None, int]:
        """Return (response, hints_used) for a question seen ``times_seen`` times before."""
        p_correct = min(1.0, self.config.accuracy + self.config.repetition_bonus * times_seen)
        hints = 1 if self.rng.random() < self.config.hint_rate else 0
        if self.rng.random() < p_correct:
            return correct_response(question), hints
        return wrong_response(question, self.rng), hints


class Simulator:
    """Runs a simulated learner through a learning activity."""

    def __init__(
        self,
        course: Course,
        strategies: StrategyRegistry,
        config: SimulatedLearnerConfig,
        repository: SessionRepository | None = None,
        seed: int | None = None,
        scorer: Scorer | None = None,
    ):
        self.course = course
        self.strategies = strategies
        self.config = config
        self.repository = repository
        self.scorer = scorer
        self.rng = random.Random(seed)
        self.seed = seed
        self.response_generator = ResponseGenerator(config, self.rng)

    def run(self, strategy_name: str, steps: int, verbose: bool = False) -> SimulationResults:
        """Answer up to ``steps`` questions, then finish the session."""
        options: dict[str, Any] = {}
        if strategy_name == "random" and self.seed is not None:
            options["seed"] = self.seed

        activity = LearningActivity.start(
            self.course,
            strategy_name,
            self.strategies,
            repository=self.repository,
            scorer=self.scorer,
            **options,
        )
        started_at = activity.session.start_time
        seen: dict[str, int] = {}
        results: list[StepResult] = []
        exhausted = False

        for step in range(1, steps + 1):
            question = activity.next_question()
            if question is None:
                exhausted = True
                break

            response, hints = self.response_generator.generate_response(
                question, seen.get(question.id, 0)
            )
            seconds = self.rng.randint(
                self.config.min_seconds, max(self.config.min_seconds, self.config.max_seconds)
            )
            recorded = activity.answer(
                response, question, time_spent_seconds=seconds, hints_used=hints
            )
            seen[question.id] = seen.get(question.id, 0) + 1

            results.append(
                StepResult(
                    step=step,
                    question_id=question.id,
                    question_type=question.type,
                    response=response,
                    is_correct=recorded.correct,
                    hints_used=hints,
                    time_spent_seconds=seconds,
                    strategy_progress=activity.session.strategy.progress(),
                )
            )
            if verbose:
                mark = "✓" if recorded.correct else "✗"
                print(f"  {step:3d}. {mark} {question.id} ({question.type})")

        stats = activity.finish()
        logger.info(
            f"Simulation of '{strategy_name}' finished: {len(results)} steps, "
            f"accuracy {stats.accuracy_pct:.1f}%"
        )
        return SimulationResults(
            session_id=activity.session.id,
            strategy=strategy_name,
            question_count=self.course.question_count(),
            config=self.config,
            started_at=started_at,
            finished_at=activity.session.end_time or datetime.now(),
            steps=results,
            statistics=stats,
            exhausted=exhausted,
        )


def print_results(results: SimulationResults, console: Console | None = None) -> None:
    """Print a summary table of a simulation run."""
    console = console or Console()
    stats = results.statistics

    table = Table(title=f"Simulation: {results.strategy}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Questions in course", str(results.question_count))
    table.add_row("Questions asked", str(len(results.steps)))
    table.add_row("Distinct questions", str(len(results.times_asked())))
    table.add_row("Completion", f"{stats.completion_pct:.1f}%")
    table.add_row("Accuracy", f"{stats.accuracy_pct:.1f}%")
    table.add_row("Best streak", str(stats.best_streak))
    table.add_row("Score", str(stats.total_score))
    table.add_row("Strategy exhausted", "yes" if results.exhausted else "no")
    console.print(table)


def save_results(results: SimulationResults, output_path: Path) -> None:
    with open(output_path, "w") as f:
        json.dump(results.model_dump(mode="json"), f, indent=2, ensure_ascii=False)


def run_simulation_and_report(
    course: Course,
    strategies: StrategyRegistry,
    config: SimulatedLearnerConfig,
    strategy_name: str,
    steps: int,
    output_path: Path | None = None,
    repository: SessionRepository | None = None,
    verbose: bool = False,
    seed: int | None = None,
    scorer: Scorer | None = None,
) -> SimulationResults:
    """Run a simulation, print the summary and optionally write JSON results."""
    simulator = Simulator(
        course, strategies, config, repository=repository, seed=seed, scorer=scorer
    )
    results = simulator.run(strategy_name, steps, verbose=verbose)

    print_results(results)
    if output_path is not None:
        save_results(results, output_path)
        print(f"\nResults saved to: {output_path}")
    return results
