from typing import Optional, List
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from config import MIN_OPTIONS, MAX_OPTIONS, DEFAULT_TIME_LIMIT_MINUTES
from mcq_exam.errors import InvalidConfig


class Question(BaseModel):
    """
    객관식 문제 모델 (문제 은행의 한 항목)
    Pydantic v2 적용, 생성 후 변경 불가
    """
    model_config = {"frozen": True}

    id: Optional[str] = Field(
        None,
        description="문제 식별자 (은행 내 고유). 없으면 출제 시 q_<순번>으로 대체"
    )
    text: str = Field(
        ...,
        min_length=1,
        description="발문/문제 내용"
    )
    options: List[str] = Field(
        ...,
        description="보기 리스트 (2 ~ 6개)"
    )
    correct_index: int = Field(
        ...,
        ge=0,
        description="정답 보기의 인덱스 (0-based)"
    )

    @field_validator('text')
    @classmethod
    def validate_text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("문제 내용(text)이 비어 있습니다.")
        return v

    @field_validator('options')
    @classmethod
    def validate_options(cls, v: List[str]) -> List[str]:
        """
        검증 로직 1: 보기는 MIN_OPTIONS ~ MAX_OPTIONS개, 공백을 제거해도 비어 있지 않아야 한다.
        보기 내용의 중복은 허용한다.
        """
        if not MIN_OPTIONS <= len(v) <= MAX_OPTIONS:
            raise ValueError(f"보기(options)는 {MIN_OPTIONS}~{MAX_OPTIONS}개여야 합니다. (현재 {len(v)}개)")
        if any(not option.strip() for option in v):
            raise ValueError("빈 보기가 있습니다.")
        return v

    @model_validator(mode='after')
    def validate_correct_index(self) -> 'Question':
        """
        검증 로직 2: 정답 인덱스는 반드시 보기 리스트 안을 가리켜야 한다.
        """
        if self.correct_index >= len(self.options):
            raise ValueError(
                f"정답 인덱스({self.correct_index})가 보기 개수({len(self.options)})를 벗어났습니다."
            )
        return self

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_index]


class AttemptQuestion(Question):
    """
    한 번의 응시(attempt)에 출제된 문제 사본.
    보기 섞기가 적용되면 options / correct_index가 원본과 다를 수 있다.
    """
    id: str = Field(
        ...,
        min_length=1,
        description="출제 시 확정된 식별자 (원본 id 또는 q_<순번>)"
    )


class ExamConfig(BaseModel):
    """시험 설정 화면에서 만들어져 begin()에서 한 번 소비되는 설정 값."""

    requested_count: int = Field(
        ...,
        ge=1,
        description="출제 문항 수 (1 ~ 은행 크기)"
    )
    shuffle_questions: bool = Field(
        default=False,
        description="문항 순서 섞기"
    )
    shuffle_options: bool = Field(
        default=False,
        description="보기 순서 섞기"
    )
    time_limit_minutes: int = Field(
        default=DEFAULT_TIME_LIMIT_MINUTES,
        ge=1,
        description="제한 시간 (분)"
    )

    @classmethod
    def from_setup(cls, **values) -> 'ExamConfig':
        """설정 입력값으로 ExamConfig를 만든다. 검증 실패는 InvalidConfig로 바꿔 올린다."""
        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            raise InvalidConfig(f"시험 설정이 올바르지 않습니다: {field} ({first.get('msg')})") from e

    def validate_for(self, bank_size: int) -> None:
        """은행 크기에 대한 범위 검사. 모델 생성 시점에는 은행 크기를 알 수 없어 따로 둔다."""
        if not 1 <= self.requested_count <= bank_size:
            raise InvalidConfig(f"문항 수는 1 ~ {bank_size} 사이여야 합니다. (요청: {self.requested_count})")
        if self.time_limit_minutes < 1:
            raise InvalidConfig("제한 시간은 최소 1분이어야 합니다.")
