"""Integration tests using the learner simulator and the CLI."""

import json
import random

import pytest

import main
from config import ScoringConfig, get_settings
from questions import QuestionFactory, build_question_registry
from session_stats import make_scorer
from simulate import (
    ResponseGenerator,
    Simulator,
    correct_response,
    generate_course,
    wrong_response,
)
from simulator_models import SimulatedLearnerConfig
from storage import SQLiteSessionRepository


@pytest.fixture
def generated_course(question_factory):
    return generate_course(question_factory, 12)


class TestGenerateCourse:
    def test_cycles_through_types(self, generated_course):
        types = [q.type for q in generated_course.questions()]
        assert types[:4] == ["test", "truefalse", "completar_huecos", "flashcard"]
        assert generated_course.question_count() == 12
        assert len(generated_course.blocks) == 3

    def test_respects_enabled_types(self):
        factory = QuestionFactory(build_question_registry(enabled=["truefalse"]))
        course = generate_course(factory, 3)
        assert {q.type for q in course.questions()} == {"truefalse"}

    def test_no_types_registered(self):
        factory = QuestionFactory(build_question_registry(enabled=["nothing"]))
        with pytest.raises(ValueError):
            generate_course(factory, 3)


class TestResponses:
    def test_correct_responses_are_correct(self, generated_course):
        for question in generated_course.questions():
            assert question.is_correct(correct_response(question))

    def test_wrong_responses_are_wrong(self, generated_course):
        rng = random.Random(0)
        for question in generated_course.questions():
            if question.type == "flashcard":
                continue
            assert not question.is_correct(wrong_response(question, rng))

    def test_perfect_learner(self, generated_course):
        generator = ResponseGenerator(SimulatedLearnerConfig(accuracy=1.0), random.Random(1))
        for question in generated_course.questions():
            response, _ = generator.generate_response(question, 0)
            assert question.is_correct(response)


class TestSimulator:
    def test_sequential_run_exhausts(self, generated_course, strategy_registry, learner_config):
        simulator = Simulator(generated_course, strategy_registry, learner_config, seed=3)
        results = simulator.run("sequential", steps=50)
        assert results.exhausted
        assert len(results.steps) == 12
        assert results.statistics.completion_pct == 100.0
        assert 0.0 <= results.statistics.accuracy_pct <= 100.0

    def test_spaced_repetition_runs_all_steps(
        self, generated_course, strategy_registry, learner_config
    ):
        simulator = Simulator(generated_course, strategy_registry, learner_config, seed=3)
        results = simulator.run("spaced_repetition", steps=30)
        assert not results.exhausted
        assert len(results.steps) == 30
        assert len(results.times_asked()) == 12

    def test_same_seed_same_results(self, generated_course, strategy_registry, learner_config):
        first = Simulator(generated_course, strategy_registry, learner_config, seed=8)
        second = Simulator(generated_course, strategy_registry, learner_config, seed=8)
        a = first.run("random", steps=20)
        b = second.run("random", steps=20)
        assert [s.question_id for s in a.steps] == [s.question_id for s in b.steps]
        assert [s.is_correct for s in a.steps] == [s.is_correct for s in b.steps]

    def test_repeat_incorrect_asks_misses_again(
        self, generated_course, strategy_registry, learner_config
    ):
        config = learner_config.model_copy(update={"accuracy": 0.0, "repetition_bonus": 0.0})
        simulator = Simulator(generated_course, strategy_registry, config, seed=1)
        results = simulator.run("repeat_incorrect", steps=100)
        # Every non-flashcard question is missed once and asked again.
        assert len(results.steps) == 12 + 9
        assert results.exhausted

    def test_scorer_applied(self, generated_course, strategy_registry, learner_config):
        config = learner_config.model_copy(update={"accuracy": 1.0})
        scorer = make_scorer(ScoringConfig(points_per_correct=1, hint_penalty=0))
        simulator = Simulator(
            generated_course, strategy_registry, config, seed=4, scorer=scorer
        )
        results = simulator.run("sequential", steps=12)
        assert results.statistics.total_score == 12

    def test_session_saved(self, test_db_path, generated_course, strategy_registry, learner_config):
        repo = SQLiteSessionRepository(
            test_db_path, courses=[generated_course], strategies=strategy_registry
        )
        simulator = Simulator(
            generated_course, strategy_registry, learner_config, repository=repo, seed=2
        )
        results = simulator.run("sequential", steps=5)
        loaded = repo.get_by_id(results.session_id)
        assert loaded is not None
        assert not loaded.is_active()
        assert len(loaded.records) == 5


class TestCli:
    @pytest.fixture(autouse=True)
    def cli_env(self, monkeypatch):
        monkeypatch.setenv("COLUMNS", "200")
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_types(self, capsys):
        assert main.main(["types"]) == 0
        output = capsys.readouterr().out
        assert "completar_huecos" in output
        assert "flashcard" in output

    def test_strategies(self, capsys):
        assert main.main(["strategies"]) == 0
        assert "spaced_repetition" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main.main([]) == 1

    def test_simulate_and_list_sessions(self, tmp_path, capsys):
        db = tmp_path / "cli.db"
        output_file = tmp_path / "results.json"
        code = main.main(
            [
                "simulate",
                "--strategy",
                "sequential",
                "--questions",
                "4",
                "--steps",
                "10",
                "--seed",
                "1",
                "--db",
                str(db),
                "--output",
                str(output_file),
            ]
        )
        assert code == 0
        data = json.loads(output_file.read_text())
        assert data["strategy"] == "sequential"
        assert len(data["steps"]) == 4

        capsys.readouterr()
        assert main.main(["sessions", "--db", str(db)]) == 0
        assert "simulated" in capsys.readouterr().out

    def test_unknown_strategy_reports_error(self, tmp_path, capsys):
        assert main.main(["simulate", "--strategy", "alphabetical"]) == 2
        assert "alphabetical" in capsys.readouterr().out

    def test_simulate_uses_configured_scoring(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COURSE_ENGINE_ENGINE__SCORING__POINTS_PER_CORRECT", "3")
        monkeypatch.setenv("COURSE_ENGINE_ENGINE__SCORING__HINT_PENALTY", "0")
        output_file = tmp_path / "results.json"
        code = main.main(
            [
                "simulate",
                "-q",
                "4",
                "-n",
                "4",
                "-a",
                "1.0",
                "--hint-rate",
                "0",
                "-o",
                str(output_file),
            ]
        )
        assert code == 0
        data = json.loads(output_file.read_text())
        assert data["statistics"]["correct_count"] == 4
        assert data["statistics"]["total_score"] == 12

    def test_out_of_range_option_reports_error(self, capsys):
        assert main.main(["simulate", "--accuracy", "2"]) == 2
        output = capsys.readouterr().out
        assert "Invalid value" in output
        assert "accuracy" in output

    def test_describe_one_strategy(self, capsys):
        assert main.main(["strategies", "spaced_repetition"]) == 0
        assert "Revisits questions at spaced intervals" in capsys.readouterr().out

    def test_describe_unknown_strategy(self, capsys):
        assert main.main(["strategies", "alphabetical"]) == 2
        assert "alphabetical" in capsys.readouterr().out
