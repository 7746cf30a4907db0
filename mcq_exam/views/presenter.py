"""
views/presenter.py

시험 엔진이 화면에 알리는 세 가지 렌더링 지점.
엔진은 화면 구조를 모르고, 이 인터페이스만 호출한다.
기본 구현은 아무것도 하지 않는다 (헤드리스 실행, 테스트).
"""

from __future__ import annotations

from typing import List

from config import TIMER_WARN_SECONDS
from mcq_exam.models.question_model import AttemptQuestion
from mcq_exam.models.session_state import ExamResult, SubmissionMode


class ExamPresenter:
    def render_question_list(self, questions: List[AttemptQuestion]) -> None:
        """시험 시작 시 출제 문제 목록 표시."""

    def render_timer(self, remaining_seconds: int) -> None:
        """시작 시 한 번, 이후 매 틱마다 남은 시간 표시."""

    def render_result(self, result: ExamResult, mode: SubmissionMode) -> None:
        """제출 직후 결과 표시."""


def format_time(seconds: int) -> str:
    """초 → "MM:SS". 60분 이상이면 분 자리가 늘어난다."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def is_warning(remaining_seconds: int) -> bool:
    return remaining_seconds <= TIMER_WARN_SECONDS


def result_note(mode: SubmissionMode) -> str:
    if mode == SubmissionMode.AUTO:
        return "Auto-submitted because timer reached zero."
    return "Submitted manually."
