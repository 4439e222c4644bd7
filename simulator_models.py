"""Data models for the learner simulator."""

from datetime import datetime

from pydantic import BaseModel, Field

from session_stats import SessionStatistics


class SimulatedLearnerConfig(BaseModel):
    """Configuration for a simulated learner's answering behaviour."""

    # Probability of answering any question correctly (0.5 = coin flip)
    accuracy: float = Field(default=0.7, ge=0.0, le=1.0)

    # Extra chance of getting a question right each time it comes back
    # (models learning from repetition)
    repetition_bonus: float = Field(default=0.1, ge=0.0, le=1.0)

    # Probability of asking for a hint before answering
    hint_rate: float = Field(default=0.1, ge=0.0, le=1.0)

    # Seconds spent per question, drawn uniformly from this range
    min_seconds: int = Field(default=2, ge=0)
    max_seconds: int = Field(default=20, ge=0)


class StepResult(BaseModel):
    """Result of a single simulated question."""

    step: int  # 1-indexed
    question_id: str
    question_type: str
    response: str | None
    is_correct: bool
    hints_used: int = 0
    time_spent_seconds: int = 0
    strategy_progress: float = 0.0


class SimulationResults(BaseModel):
    """Complete output of a simulation run."""

    session_id: str
    strategy: str
    question_count: int
    config: SimulatedLearnerConfig
    started_at: datetime
    finished_at: datetime
    steps: list[StepResult] = Field(default_factory=list)
    statistics: SessionStatistics
    exhausted: bool = False

    def times_asked(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for step in self.steps:
            counts[step.question_id] = counts.get(step.question_id, 0) + 1
        return counts
