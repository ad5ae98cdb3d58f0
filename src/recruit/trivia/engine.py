"""Trivia round state machine.

State progression: loading -> in_question -> answer_submitted -> (in_question | game_over)
with a one-time share_prompt side branch after the answer at SHARE_PROMPT_INDEX.

The engine is pure: it holds no database handles and reads no clock. Time
advances only through `tick()`, so a finished round can be replayed on the
server from the per-answer timings a client reports.
"""

from __future__ import annotations

import enum
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

SHARE_PROMPT_INDEX = 2
FAST_ANSWER_SECONDS = 5.0


class RoundState(str, enum.Enum):
    LOADING = "loading"
    IN_QUESTION = "in_question"
    ANSWER_SUBMITTED = "answer_submitted"
    SHARE_PROMPT = "share_prompt"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Question:
    id: str
    question: str
    options: list[str]
    correct_answer: int
    explanation: str = ""
    difficulty: str = "medium"
    category: str = "general"
    image_url: str | None = None
    image_alt: str | None = None

    @classmethod
    def from_row(cls, row: Any) -> Question:
        """Build from a TriviaQuestion ORM row."""
        return cls(
            id=row.id,
            question=row.question,
            options=list(row.options),
            correct_answer=row.correct_answer,
            explanation=row.explanation,
            difficulty=row.difficulty,
            category=row.category,
            image_url=row.image_url,
            image_alt=row.image_alt,
        )


@dataclass(frozen=True)
class AnswerResult:
    question_id: str
    selected_answer: int | None
    is_correct: bool
    time_spent: float
    streak: int
    points: int
    auto_submitted: bool = False


def streak_bonus(streak: int) -> int:
    """Bonus multiplier for a run of consecutive correct answers.

    5+ -> 3
    3+ -> 2
    2+ -> 1
    """
    if streak >= 5:
        return 3
    if streak >= 3:
        return 2
    if streak >= 2:
        return 1
    return 0


def time_bonus(remaining: float, duration: float) -> float:
    """Fraction of the question timer left, in [0, 1]."""
    if duration <= 0:
        return 0.0
    return max(0.0, min(remaining, duration)) / duration


def question_score(base: int, streak: int, remaining: float, duration: float) -> int:
    """Points for a correct answer: base x (1 + streak_bonus + time_bonus), rounded half up."""
    return int(base * (1 + streak_bonus(streak) + time_bonus(remaining, duration)) + 0.5)


@dataclass
class TriviaRound:
    """One trivia round.

    Raises ValueError on any call that is not valid in the current state.
    """

    points_per_question: int = 10
    points_per_game: int = 50
    question_seconds: float = 30.0
    game_mode: str = "normal"

    state: RoundState = RoundState.LOADING
    questions: list[Question] = field(default_factory=list)
    index: int = 0
    remaining: float = 0.0
    selected: int | None = None
    streak: int = 0
    max_streak: int = 0
    score: int = 0
    results: list[AnswerResult] = field(default_factory=list)
    share_prompt_shown: bool = False

    def _require(self, *states: RoundState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise ValueError(f"Invalid action in state {self.state.value}; expected {allowed}")

    @property
    def current_question(self) -> Question | None:
        if self.state in (RoundState.LOADING, RoundState.GAME_OVER):
            return None
        return self.questions[self.index]

    @property
    def timer_running(self) -> bool:
        return self.state == RoundState.IN_QUESTION

    def load(self, questions: list[Question]) -> None:
        self._require(RoundState.LOADING)
        if not questions:
            raise ValueError("A round needs at least one question")
        self.questions = list(questions)
        self.index = 0
        self._start_question()

    def _start_question(self) -> None:
        self.state = RoundState.IN_QUESTION
        self.remaining = float(self.question_seconds)
        self.selected = None

    def select(self, answer: int | None) -> None:
        """Highlight an option without submitting it."""
        self._require(RoundState.IN_QUESTION)
        question = self.questions[self.index]
        if answer is not None and not 0 <= answer < len(question.options):
            raise ValueError(f"Answer {answer} out of range for question {question.id}")
        self.selected = answer

    def tick(self, seconds: float) -> AnswerResult | None:
        """Advance the question timer; auto-submits when it reaches zero.

        Ticks outside in_question are ignored, so the timer stays paused
        while an answer or the share prompt is showing.
        """
        if self.state != RoundState.IN_QUESTION:
            return None
        self.remaining = max(0.0, self.remaining - seconds)
        if self.remaining == 0:
            return self._submit(self.selected, auto=True)
        return None

    def submit(self, answer: int | None = None) -> AnswerResult:
        """Submit `answer`, or the current selection when omitted."""
        self._require(RoundState.IN_QUESTION)
        if answer is not None:
            self.select(answer)
        return self._submit(self.selected, auto=False)

    def _submit(self, answer: int | None, *, auto: bool) -> AnswerResult:
        question = self.questions[self.index]
        is_correct = answer is not None and answer == question.correct_answer

        if is_correct:
            self.streak += 1
            self.max_streak = max(self.max_streak, self.streak)
            points = question_score(
                self.points_per_question, self.streak, self.remaining, self.question_seconds,
            )
        else:
            self.streak = 0
            points = 0
        self.score += points

        result = AnswerResult(
            question_id=question.id,
            selected_answer=answer,
            is_correct=is_correct,
            time_spent=self.question_seconds - self.remaining,
            streak=self.streak,
            points=points,
            auto_submitted=auto,
        )
        self.results.append(result)

        has_more = self.index < len(self.questions) - 1
        if self.index == SHARE_PROMPT_INDEX and has_more and not self.share_prompt_shown:
            self.share_prompt_shown = True
            self.state = RoundState.SHARE_PROMPT
        else:
            self.state = RoundState.ANSWER_SUBMITTED
        return result

    def dismiss_share_prompt(self) -> None:
        self._require(RoundState.SHARE_PROMPT)
        self.state = RoundState.ANSWER_SUBMITTED

    def next_question(self) -> RoundState:
        self._require(RoundState.ANSWER_SUBMITTED)
        if self.index < len(self.questions) - 1:
            self.index += 1
            self._start_question()
        else:
            self.state = RoundState.GAME_OVER
        return self.state

    # -- Round summary --

    @property
    def correct_answers(self) -> int:
        return sum(1 for r in self.results if r.is_correct)

    @property
    def fast_correct(self) -> int:
        return sum(1 for r in self.results if r.is_correct and r.time_spent < FAST_ANSWER_SECONDS)

    @property
    def is_perfect(self) -> bool:
        return self.state == RoundState.GAME_OVER and self.correct_answers == len(self.questions)

    @property
    def completion_points(self) -> int:
        """Ledger award for a finished round: correct x points_per_question + points_per_game."""
        self._require(RoundState.GAME_OVER)
        return self.correct_answers * self.points_per_question + self.points_per_game

    def category_results(self) -> dict[str, dict[str, int]]:
        by_id = {q.id: q for q in self.questions}
        totals: dict[str, dict[str, int]] = defaultdict(lambda: {"correct": 0, "total": 0})
        for r in self.results:
            bucket = totals[by_id[r.question_id].category]
            bucket["total"] += 1
            if r.is_correct:
                bucket["correct"] += 1
        return dict(totals)
