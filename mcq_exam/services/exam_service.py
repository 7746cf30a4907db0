"""
services/exam_service.py

제출된 응시의 채점 및 문항별 리뷰 기록 생성.
순수 Python 함수로 구성. UI 코드, 상태 변경 없음.
"""

import math
from typing import List

from mcq_exam.errors import InvalidTransition
from mcq_exam.models.session_state import ExamResult, Phase, ReviewRecord, SessionState


def calculate_percent(correct_count: int, total: int) -> float:
    """
    정답률(%)을 반환한다. 반올림은 화면에서 한다.
    total이 0이면 0.0.
    """
    if total == 0:
        return 0.0
    return correct_count / total * 100


def calculate_elapsed_seconds(state: SessionState) -> int:
    """
    소요 시간(초). 시계 오차나 스케줄러 지연이 있어도 0 ~ total_seconds 범위로 자른다.
    반올림은 .5 올림.
    """
    if state.started_at is None or state.ended_at is None:
        return 0
    elapsed = math.floor(state.ended_at - state.started_at + 0.5)
    return min(state.total_seconds, max(0, elapsed))


def build_review_records(state: SessionState) -> List[ReviewRecord]:
    """
    출제 순서대로 문항별 채점 기록을 만든다.

    정답 판정 기준: state.answers.get(위치) == question.correct_index
    응답하지 않은 문제(키 없음)는 오답으로 처리.
    """
    records: List[ReviewRecord] = []
    for position, question in enumerate(state.questions):
        answer = state.answers.get(position)
        records.append(
            ReviewRecord(
                question=question.text,
                options=list(question.options),
                correct_index=question.correct_index,
                answer=answer,
                is_correct=answer is not None and answer == question.correct_index,
            )
        )
    return records


def evaluate(state: SessionState) -> ExamResult:
    """
    제출된 세션을 채점한다.

    Args:
        state: submitted 단계의 SessionState.

    Returns:
        ExamResult(correct_count, total, percent, elapsed_seconds, records).

    Raises:
        InvalidTransition: 아직 제출되지 않은 세션.
    """
    if state.phase != Phase.SUBMITTED:
        raise InvalidTransition(f"제출된 세션만 채점할 수 있습니다. (현재: {state.phase.value})")

    records = build_review_records(state)
    correct_count = sum(1 for r in records if r.is_correct)
    total = len(records)

    return ExamResult(
        correct_count=correct_count,
        total=total,
        percent=calculate_percent(correct_count, total),
        elapsed_seconds=calculate_elapsed_seconds(state),
        records=records,
        submission_mode=state.submission_mode,
    )
