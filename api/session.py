"""
api/session.py — 로컬 단일 사용자 인메모리 작업 공간

앱 하나에 사용자 한 명. 문제 은행, 현재 응시 세션, 마지막 시험 설정을 보관한다.
프로세스가 끝나면 모두 사라진다 (디스크 저장 없음).
"""

import threading
from typing import Any

from mcq_exam.services.exam_session import ExamSession

_lock = threading.RLock()
_state: dict[str, Any] = {}


def _new_state() -> dict[str, Any]:
    return {
        "bank": [],           # list[Question]
        "exam": None,         # ExamSession | None
        "presenter": None,    # SnapshotPresenter | None
        "last_config": None,  # ExamConfig | None (다시 풀기용)
        "exam_title": "",
    }


def get(key: str, default=None):
    """작업 공간에서 값 읽기."""
    with _lock:
        return _state.get(key, default)


def put(key: str, value) -> None:
    """작업 공간에 값 쓰기."""
    with _lock:
        _state[key] = value


def replace_exam(exam: ExamSession | None, presenter=None) -> None:
    """현재 응시 세션을 교체. 이전 세션의 타이머는 반드시 정지한다."""
    with _lock:
        previous: ExamSession | None = _state.get("exam")
        if previous is not None:
            previous.close()
        _state["exam"] = exam
        _state["presenter"] = presenter


def reset(keep_bank: bool = False) -> None:
    """작업 공간 초기화. keep_bank이면 문제 은행은 유지."""
    with _lock:
        bank = _state.get("bank", []) if keep_bank else []
        replace_exam(None)
        _state.clear()
        _state.update(_new_state())
        _state["bank"] = bank


reset()
