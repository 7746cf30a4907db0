"""
services/bank_io.py

문제 은행 JSON 가져오기/내보내기.
Public API:
  - parse_bank_json(raw) -> List[Question]     : JSON 텍스트/바이트 → 문제 리스트
  - normalize_payload(payload) -> List[Question] : 디코딩된 JSON → 문제 리스트
  - export_bank(questions) -> List[dict]         : 내보내기 형식 {id, question, options, correctIndex}
  - load_bank_file(path) -> List[Question]

가져오기 규칙:
- 최상위는 배열, 또는 {"questions": [...]} 객체
- 발문은 question → text 순으로 찾는다
- 보기는 공백 제거 후 빈 항목을 버린다 (남은 개수가 2 ~ 6이어야 함)
- 정답은 correctIndex → answerIndex → correctAnswer(보기 텍스트) 순으로 찾는다
- 규칙에 맞지 않는 항목은 건너뛴다 (전체 중단 없음)
- 가져온 항목에는 새 id를 발급한다
"""

import json
import logging
import random
import string
import time
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import ValidationError

from config import MIN_OPTIONS, MAX_OPTIONS
from mcq_exam.models.question_model import Question

# ── 로거 설정 ────────────────────────────────────────────────────────────────
logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ID_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_question_id() -> str:
    """q_<밀리초 타임스탬프 base36>_<임의 6자>"""
    stamp = _to_base36(int(time.time() * 1000))
    suffix = "".join(random.choices(_ID_ALPHABET, k=6))
    return f"q_{stamp}_{suffix}"


def _as_index(value: Any) -> Optional[int]:
    """정수 또는 정수값 실수(1.0)를 인덱스로. bool은 제외."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def normalize_item(item: Any) -> Optional[Question]:
    """가져오기 항목 하나 → Question. 규칙에 맞지 않으면 None."""
    if not isinstance(item, dict):
        return None

    raw_text = item.get("question")
    if not isinstance(raw_text, str):
        raw_text = item.get("text") if isinstance(item.get("text"), str) else ""
    text = raw_text.strip()
    if not text or not isinstance(item.get("options"), list):
        return None

    options = [opt.strip() if isinstance(opt, str) else "" for opt in item["options"]]
    options = [opt for opt in options if opt]
    if not MIN_OPTIONS <= len(options) <= MAX_OPTIONS:
        return None

    correct_index = _as_index(item.get("correctIndex"))
    if correct_index is None:
        correct_index = _as_index(item.get("answerIndex"))
    if correct_index is None:
        correct_index = -1
    if correct_index < 0 and isinstance(item.get("correctAnswer"), str):
        answer = item["correctAnswer"].strip()
        correct_index = options.index(answer) if answer in options else -1
    if not 0 <= correct_index < len(options):
        return None

    return Question(
        id=generate_question_id(),
        text=text,
        options=options,
        correct_index=correct_index,
    )


def normalize_payload(payload: Any) -> List[Question]:
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict) and isinstance(payload.get("questions"), list):
        items = payload["questions"]
    else:
        items = []

    questions: List[Question] = []
    for idx, item in enumerate(items):
        try:
            q = normalize_item(item)
        except ValidationError as e:
            logger.warning(f"item[{idx}]: Question 생성 실패 ({e.error_count()}개 오류)")
            continue
        if q is None:
            logger.warning(f"item[{idx}]: 형식이 맞지 않아 건너뜀")
            continue
        questions.append(q)

    logger.info(f"문제 은행 가져오기: {len(questions)}/{len(items)}개 항목 사용")
    return questions


def parse_bank_json(raw: Union[str, bytes]) -> List[Question]:
    """
    JSON 텍스트 → Question 리스트.

    Raises:
        ValueError: JSON 디코딩 실패.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ValueError("UTF-8 JSON 파일이 아닙니다.") from e
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON 형식이 올바르지 않습니다: {e.msg} (line {e.lineno})") from e
    return normalize_payload(payload)


def load_bank_file(path: Union[str, Path]) -> List[Question]:
    return parse_bank_json(Path(path).read_bytes())


def export_bank(questions: List[Question]) -> List[dict]:
    return [
        {
            "id": q.id,
            "question": q.text,
            "options": list(q.options),
            "correctIndex": q.correct_index,
        }
        for q in questions
    ]
