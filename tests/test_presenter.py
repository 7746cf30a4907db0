"""
화면 표시 헬퍼 + SnapshotPresenter 테스트
"""
import pytest

from mcq_exam.models.question_model import ExamConfig
from mcq_exam.models.session_state import SubmissionMode
from mcq_exam.services.exam_session import ExamSession
from mcq_exam.views.presenter import format_time, is_warning, result_note
from mcq_exam.views.snapshot_presenter import SnapshotPresenter


@pytest.mark.parametrize("seconds,expected", [
    (0, "00:00"),
    (9, "00:09"),
    (65, "01:05"),
    (1800, "30:00"),
    (3600, "60:00"),
    (-3, "00:00"),
])
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected


def test_warning_threshold():
    assert is_warning(60)
    assert is_warning(0)
    assert not is_warning(61)


def test_result_note():
    assert result_note(SubmissionMode.AUTO) == "Auto-submitted because timer reached zero."
    assert result_note(SubmissionMode.MANUAL) == "Submitted manually."


@pytest.fixture
def snapshot_exam(bank, clock, timer_factory):
    presenter = SnapshotPresenter()
    exam = ExamSession(bank, presenter=presenter, timer_factory=timer_factory, clock=clock)
    return exam, presenter


def test_snapshot_follows_session_screens(snapshot_exam):
    exam, presenter = snapshot_exam
    assert presenter.snapshot()["screen"] == "setup"

    exam.begin(ExamConfig(requested_count=3, time_limit_minutes=1))
    snap = presenter.snapshot()
    assert snap["screen"] == "exam"
    assert [card["number"] for card in snap["questions"]] == [1, 2, 3]
    assert all("correct_index" not in card for card in snap["questions"])
    assert snap["timer"] == {"remaining_seconds": 60, "display": "01:00", "warning": True}

    exam.timer.advance(60)
    snap = presenter.snapshot()
    assert snap["screen"] == "result"
    assert snap["timer"]["display"] == "00:00"
    assert snap["result"]["submission_mode"] == "auto"
    assert snap["result"]["note"] == "Auto-submitted because timer reached zero."


def test_review_cards_mark_correct_and_wrong_choice(snapshot_exam, clock):
    exam, presenter = snapshot_exam
    exam.begin(ExamConfig(requested_count=2, time_limit_minutes=5))
    # b0: 정답 0, b1: 정답 1
    exam.record_answer(0, 2)
    clock.advance(75)
    exam.submit()

    result = presenter.result
    assert result["score_display"] == "0/2"
    assert result["percent_display"] == "0.0%"
    assert result["elapsed_display"] == "01:15"
    assert result["unanswered_count"] == 1

    wrong, unanswered = result["review"]
    assert wrong["status"] == "Incorrect"
    assert [o["correct"] for o in wrong["options"]] == [True, False, False, False]
    assert [o["incorrect"] for o in wrong["options"]] == [False, False, True, False]
    assert unanswered["status"] == "Not answered"
    assert not any(o["incorrect"] for o in unanswered["options"])
