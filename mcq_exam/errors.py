"""
errors.py

시험 엔진이 거부한 작업을 호출자에게 알리는 예외 계층.
모든 예외는 복구 가능하며, 발생 시점의 세션 상태는 변경되지 않는다.
호출자(API 라우터 등)는 code 값으로 오류 종류를 구분한다.
"""


class ExamError(Exception):
    """시험 엔진 예외의 기본 클래스."""

    code = "EXAM_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": type(self).__name__, "code": self.code, "message": self.message}


class InvalidConfig(ExamError):
    """시험 설정 값이 허용 범위를 벗어남. 세션은 Setup 단계에 머무른다."""

    code = "INVALID_CONFIG"


class InvalidTransition(ExamError):
    """현재 단계(phase)에서 허용되지 않는 작업."""

    code = "STATE_TRANSITION_INVALID"


class OutOfRangeAnswer(ExamError):
    """문제 위치 또는 보기 인덱스가 범위를 벗어남."""

    code = "ANSWER_OUT_OF_RANGE"
