"""
services/selector.py

문제 은행 + 시험 설정 → 이번 응시에 출제할 문제 목록.
I/O 없음, 은행은 변경하지 않는다. 설정 값은 호출 전에 검증되었다고 가정한다.
"""

import random
from typing import List, Optional, Sequence

from mcq_exam.models.question_model import AttemptQuestion, ExamConfig, Question
from mcq_exam.services.permutation import shuffle, shuffle_options


def fallback_id(ordinal: int) -> str:
    """id가 없는 문제에 붙이는 대체 식별자. ordinal은 1-based."""
    return f"q_{ordinal}"


def to_attempt_question(question: Question, ordinal: int) -> AttemptQuestion:
    return AttemptQuestion(
        id=question.id or fallback_id(ordinal),
        text=question.text,
        options=list(question.options),
        correct_index=question.correct_index,
    )


def select_questions(
    bank: Sequence[Question],
    config: ExamConfig,
    rng: Optional[random.Random] = None,
) -> List[AttemptQuestion]:
    """
    출제 문제 목록을 만든다.

    1. 은행 전체를 AttemptQuestion 후보로 복사 (id 없으면 q_<순번>)
    2. shuffle_questions이면 후보 순서를 섞고, 아니면 은행 순서 유지
    3. 앞에서부터 requested_count개를 자름 (섞은 뒤에 자르므로 모든 문제가 같은 확률로 뽑힌다)
    4. shuffle_options이면 뽑힌 문제마다 독립적으로 보기 순서를 섞음

    Returns:
        새 세션이 단독 소유하는 AttemptQuestion 리스트.
    """
    candidates = [to_attempt_question(q, i + 1) for i, q in enumerate(bank)]
    ordered = shuffle(candidates, rng) if config.shuffle_questions else candidates
    picked = ordered[:config.requested_count]

    if config.shuffle_options:
        return [shuffle_options(q, rng) for q in picked]
    return picked
