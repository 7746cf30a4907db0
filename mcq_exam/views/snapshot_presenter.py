"""
views/snapshot_presenter.py

웹 화면이 폴링하는 JSON 스냅샷을 유지하는 ExamPresenter 구현.

스냅샷 구성:
  - screen   : "setup" / "exam" / "result" (화면 전환용)
  - timer    : {"remaining_seconds", "display", "warning"}
  - questions: 출제 문제 카드 (정답 정보 없음)
  - result   : 점수 요약 + 리뷰 카드 (제출 후)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from mcq_exam.models.question_model import AttemptQuestion
from mcq_exam.models.session_state import ExamResult, ReviewRecord, SubmissionMode
from mcq_exam.views.presenter import ExamPresenter, format_time, is_warning, result_note


def question_card(question: AttemptQuestion, position: int) -> dict:
    """시험 화면용 문제 카드. 정답 인덱스는 넣지 않는다."""
    return {
        "position": position,
        "number": position + 1,
        "id": question.id,
        "question": question.text,
        "options": list(question.options),
    }


def review_card(record: ReviewRecord, position: int) -> dict:
    """
    정답 보기 화면용 카드.
    보기마다 correct(정답) / incorrect(오답으로 고른 보기) 표시를 붙인다.
    """
    options = [
        {
            "text": text,
            "correct": index == record.correct_index,
            "incorrect": record.answer == index and index != record.correct_index,
        }
        for index, text in enumerate(record.options)
    ]
    return {
        "number": position + 1,
        "question": record.question,
        "status": record.status,
        "is_correct": record.is_correct,
        "answer": record.answer,
        "correct_index": record.correct_index,
        "options": options,
    }


def timer_view(remaining_seconds: int) -> dict:
    return {
        "remaining_seconds": remaining_seconds,
        "display": format_time(remaining_seconds),
        "warning": is_warning(remaining_seconds),
    }


class SnapshotPresenter(ExamPresenter):
    def __init__(self) -> None:
        self.screen = "setup"
        self.timer: Optional[Dict[str, Any]] = None
        self.questions: List[dict] = []
        self.result: Optional[Dict[str, Any]] = None

    def render_question_list(self, questions: List[AttemptQuestion]) -> None:
        self.questions = [question_card(q, i) for i, q in enumerate(questions)]
        self.result = None
        self.screen = "exam"

    def render_timer(self, remaining_seconds: int) -> None:
        self.timer = timer_view(remaining_seconds)

    def render_result(self, result: ExamResult, mode: SubmissionMode) -> None:
        self.result = {
            "correct_count": result.correct_count,
            "total": result.total,
            "unanswered_count": result.unanswered_count,
            "percent": result.percent,
            "score_display": f"{result.correct_count}/{result.total}",
            "percent_display": f"{result.percent:.1f}%",
            "elapsed_seconds": result.elapsed_seconds,
            "elapsed_display": format_time(result.elapsed_seconds),
            "submission_mode": mode.value,
            "note": result_note(mode),
            "review": [review_card(r, i) for i, r in enumerate(result.records)],
        }
        self.screen = "result"

    def snapshot(self) -> dict:
        return {
            "screen": self.screen,
            "timer": self.timer,
            "questions": self.questions,
            "result": self.result,
        }
