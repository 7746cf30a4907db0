import random
from functools import partial

import pytest

from mcq_exam.models.question_model import Question
from mcq_exam.services.timer import CountdownTimer
from mcq_exam.views.presenter import ExamPresenter

# 백그라운드 스레드 없이 advance()로만 움직이는 타이머
manual_timer = partial(CountdownTimer, interval=None)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingPresenter(ExamPresenter):
    def __init__(self):
        self.question_lists = []
        self.timer_values = []
        self.results = []

    def render_question_list(self, questions):
        self.question_lists.append(list(questions))

    def render_timer(self, remaining_seconds):
        self.timer_values.append(remaining_seconds)

    def render_result(self, result, mode):
        self.results.append((result, mode))


@pytest.fixture
def bank():
    return [
        Question(
            id=f"b{i}",
            text=f"Question {i}",
            options=[f"{i}-A", f"{i}-B", f"{i}-C", f"{i}-D"],
            correct_index=i % 4,
        )
        for i in range(8)
    ]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def timer_factory():
    return manual_timer
