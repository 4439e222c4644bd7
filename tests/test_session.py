"""Tests for the Session aggregate."""

from datetime import datetime, timedelta

import pytest

from errors import EngineError, ValidationError
from models import Answer, Block, Course, QuestionResult
from session import Session
from strategies import RepeatIncorrectStrategy, SequentialStrategy


@pytest.fixture
def session(sample_course) -> Session:
    return Session.create("s001", sample_course, SequentialStrategy(sample_course.questions()))


class TestCreate:
    """Tests for Session.create."""

    def test_new_session_is_active(self, session, sample_course):
        assert session.id == "s001"
        assert session.course is sample_course
        assert session.is_active()
        assert session.end_time is None
        assert session.records == ()
        assert session.start_time <= datetime.now()

    @pytest.mark.parametrize("session_id", ["", "   ", None])
    def test_blank_id_rejected(self, sample_course, session_id):
        with pytest.raises(ValidationError):
            Session.create(session_id, sample_course, SequentialStrategy([]))

    def test_missing_course_rejected(self):
        with pytest.raises(ValidationError):
            Session.create("s", None, SequentialStrategy([]))

    def test_missing_strategy_rejected(self, sample_course):
        with pytest.raises(ValidationError):
            Session.create("s", sample_course, None)


class TestNextQuestion:
    """Tests for Session.next_question."""

    def test_opens_record_and_sets_position(self, session, sample_course):
        question = session.next_question()
        assert question.id == "A"
        assert session.current_question is question
        assert session.current_block is sample_course.blocks[0]
        assert len(session.records) == 1
        assert session.records[0].result == QuestionResult.UNANSWERED

    def test_returns_none_when_strategy_is_done(self, session):
        for _ in range(4):
            session.next_question()
        assert session.next_question() is None
        assert session.current_question is None
        assert len(session.records) == 4

    def test_current_block_follows_question(self, multiple_choice_question, flashcard_question):
        course = Course(
            id="c",
            title="Two blocks",
            blocks=[
                Block(id="b1", title="One", questions=[multiple_choice_question]),
                Block(id="b2", title="Two", questions=[flashcard_question]),
            ],
        )
        session = Session.create("s", course, SequentialStrategy(course.questions()))
        session.next_question()
        assert session.current_block.id == "b1"
        session.next_question()
        assert session.current_block.id == "b2"


class TestRecordAnswer:
    """Tests for Session.record_answer."""

    def test_updates_in_flight_record(self, session):
        question = session.next_question()
        answer = session.record_answer(question, "Paris", time_spent_seconds=5)
        assert answer.correct
        assert answer.content == "Paris"
        assert len(session.records) == 1
        record = session.records[0]
        assert record.result == QuestionResult.CORRECT
        assert record.attempts == 1
        assert record.time_spent_seconds == 5
        assert record.response == "Paris"
        assert record.answered_at == answer.timestamp

    def test_retry_increments_attempts(self, session):
        question = session.next_question()
        session.record_answer(question, "London", time_spent_seconds=3)
        session.record_answer(question, "Paris", time_spent_seconds=4, hints_used=1)
        record = session.records[0]
        assert record.attempts == 2
        assert record.time_spent_seconds == 7
        assert record.hints_used == 1
        assert record.result == QuestionResult.CORRECT

    def test_correctness_comes_from_question(self, session):
        """A supplied Answer's own flag is ignored."""
        question = session.next_question()
        answer = session.record_answer(question, Answer(content="London", correct=True))
        assert not answer.correct
        assert session.records[0].result == QuestionResult.INCORRECT

    def test_other_question_appends_record(self, session, fill_blank_question):
        session.next_question()
        session.record_answer(fill_blank_question, "blue")
        assert len(session.records) == 2
        assert session.records[0].result == QuestionResult.UNANSWERED
        assert session.records[1].question is fill_blank_question

    def test_earlier_records_not_changed(self, session):
        first = session.next_question()
        session.record_answer(first, "London")
        second = session.next_question()
        session.record_answer(second, "true")
        session.record_answer(first, "Paris")
        assert session.records[0].result == QuestionResult.INCORRECT
        assert session.records[0].attempts == 1
        assert len(session.records) == 3

    def test_does_not_refresh_statistics(self, session):
        question = session.next_question()
        session.record_answer(question, "Paris")
        assert session.accuracy_pct == 0.0
        assert session.completion_pct == 0.0

    def test_informs_strategy(self, sample_course):
        strategy = RepeatIncorrectStrategy(sample_course.questions())
        session = Session.create("s", sample_course, strategy)
        question = session.next_question()
        session.record_answer(question, "London")
        assert strategy.pending_repeats == 1

    def test_none_question_rejected(self, session):
        with pytest.raises(ValidationError):
            session.record_answer(None, "x")

    def test_negative_time_rejected(self, session):
        question = session.next_question()
        with pytest.raises(ValidationError):
            session.record_answer(question, "Paris", time_spent_seconds=-10)
        record = session.current_record()
        assert record.result == QuestionResult.UNANSWERED
        assert record.attempts == 0

    def test_negative_hints_rejected(self, session):
        question = session.next_question()
        with pytest.raises(ValidationError):
            session.record_answer(question, "Paris", hints_used=-1)
        assert len(session.records) == 1


class TestStatistics:
    """Tests for Session.refresh_statistics."""

    def test_refresh_is_idempotent(self, session):
        for response in ["Paris", "false", "blue"]:
            session.record_answer(session.next_question(), response)
        first = session.refresh_statistics()
        second = session.refresh_statistics()
        assert first == second
        assert session.statistics() == first

    def test_empty_course(self):
        course = Course(id="c", title="Empty")
        session = Session.create("s", course, SequentialStrategy(course.questions()))
        stats = session.refresh_statistics()
        assert stats.completion_pct == 0.0
        assert stats.accuracy_pct == 0.0

    def test_custom_scorer(self, session):
        session.record_answer(session.next_question(), "Paris")
        session.refresh_statistics(scorer=lambda record: 3)
        assert session.total_score == 3


class TestBoundedFields:
    """Range checks on assignment."""

    @pytest.mark.parametrize(
        "field, value",
        [
            ("completion_pct", 100.5),
            ("completion_pct", -1),
            ("accuracy_pct", 101),
            ("best_streak", -1),
            ("total_score", -5),
            ("time_spent_seconds", -1),
        ],
    )
    def test_out_of_range_rejected(self, session, field, value):
        before = getattr(session, field)
        with pytest.raises(ValidationError):
            setattr(session, field, value)
        assert getattr(session, field) == before

    def test_range_error_is_an_engine_error(self, session):
        with pytest.raises(EngineError) as excinfo:
            session.completion_pct = 101
        assert "completion_pct" in str(excinfo.value)
        assert isinstance(excinfo.value, ValueError)

    def test_in_range_accepted(self, session):
        session.completion_pct = 100
        session.accuracy_pct = 0
        assert session.completion_pct == 100.0

    def test_records_view_is_read_only(self, session):
        session.next_question()
        assert isinstance(session.records, tuple)


class TestFinish:
    """Tests for finishing a session."""

    def test_finish_sets_end_time(self, session):
        session.start_time = datetime.now() - timedelta(seconds=90)
        session.finish()
        assert not session.is_active()
        assert session.end_time is not None
        assert session.time_spent_seconds >= 90
        assert session.duration_seconds() == session.time_spent_seconds

    def test_finish_is_idempotent(self, session):
        session.finish()
        end_time = session.end_time
        spent = session.time_spent_seconds
        session.finish()
        assert session.end_time == end_time
        assert session.time_spent_seconds == spent

    def test_end_time_cannot_be_cleared(self, session):
        session.finish()
        with pytest.raises(ValidationError):
            session.end_time = None
        with pytest.raises(ValidationError):
            session.end_time = datetime.now() + timedelta(days=1)

    def test_finished_session_rejects_activity(self, session):
        question = session.next_question()
        session.finish()
        with pytest.raises(ValidationError):
            session.next_question()
        with pytest.raises(ValidationError):
            session.record_answer(question, "Paris")

    def test_refresh_allowed_after_finish(self, session):
        session.record_answer(session.next_question(), "Paris")
        session.finish()
        assert session.refresh_statistics().accuracy_pct == 100.0
