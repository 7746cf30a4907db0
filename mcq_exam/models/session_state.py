"""
models/session_state.py

응시 세션의 상태(OMR 카드)와 채점 결과 모델.
Pydantic BaseModel 기반. 직렬화/역직렬화 및 타입 안전성 확보.
UI 코드 없음. 상태 전이 규칙은 services/exam_session.py가 담당한다.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from mcq_exam.models.question_model import AttemptQuestion


class Phase(str, Enum):
    SETUP = "setup"
    ACTIVE = "active"
    SUBMITTED = "submitted"


class SubmissionMode(str, Enum):
    MANUAL = "manual"
    AUTO = "auto"


class SessionState(BaseModel):
    """
    한 번의 응시 전체 상태를 표현하는 모델.

    Attributes:
        phase:             setup → active → submitted (역행 없음).
        questions:         출제된 문제 목록. active 진입 시 확정된다.
        answers:           사용자 답안지. {문제 위치(0-based): 선택한 보기 인덱스}
                           키가 없으면 미응답.
        total_seconds:     제한 시간 (초).
        remaining_seconds: 남은 시간 (초). 0 <= remaining <= total.
        started_at:        시험 시작 시각 (time.time() 기준 Unix timestamp).
        ended_at:          제출 시각. 제출 전에는 None.
        submission_mode:   manual / auto. 제출 시 한 번만 기록된다.
    """

    phase: Phase = Field(default=Phase.SETUP)
    questions: List[AttemptQuestion] = Field(default_factory=list)
    answers: Dict[int, int] = Field(
        default_factory=dict,
        description="사용자 답안지. key: 문제 위치, value: 선택한 보기 인덱스"
    )
    total_seconds: int = Field(default=0, ge=0)
    remaining_seconds: int = Field(default=0, ge=0)
    started_at: Optional[float] = None
    ended_at: Optional[float] = None
    submission_mode: Optional[SubmissionMode] = None

    @property
    def answered_count(self) -> int:
        return len(self.answers)


class ReviewRecord(BaseModel):
    """문항별 채점 기록. 정답 보기 화면을 세션 없이 그릴 수 있을 만큼의 정보를 담는다."""

    model_config = {"frozen": True}

    question: str
    options: List[str]
    correct_index: int
    answer: Optional[int] = None
    is_correct: bool

    @property
    def status(self) -> str:
        if self.answer is None:
            return "Not answered"
        return "Correct" if self.is_correct else "Incorrect"


class ExamResult(BaseModel):
    """evaluate()의 결과 묶음."""

    model_config = {"frozen": True}

    correct_count: int
    total: int
    percent: float = Field(description="0.0 ~ 100.0, 반올림하지 않음")
    elapsed_seconds: int
    records: List[ReviewRecord]
    submission_mode: Optional[SubmissionMode] = None

    @property
    def unanswered_count(self) -> int:
        return sum(1 for r in self.records if r.answer is None)
