"""
api/routes.py — FastAPI 엔드포인트
"""

from typing import NoReturn

from fastapi import APIRouter, UploadFile, File, HTTPException
from pydantic import BaseModel

import config
from api.sample_questions import SAMPLE_QUESTIONS
import api.session as session

from mcq_exam.errors import ExamError, InvalidTransition
from mcq_exam.models.question_model import ExamConfig, Question
from mcq_exam.models.session_state import Phase, SubmissionMode
from mcq_exam.services.bank_io import export_bank, parse_bank_json
from mcq_exam.services.exam_service import evaluate
from mcq_exam.services.exam_session import ExamSession
from mcq_exam.views.snapshot_presenter import SnapshotPresenter, question_card, timer_view

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class StartExamBody(BaseModel):
    question_count: int | None = None
    time_limit_minutes: int = config.DEFAULT_TIME_LIMIT_MINUTES
    shuffle_questions: bool = False
    shuffle_options: bool = False
    title: str = ""

class SaveAnswerBody(BaseModel):
    position: int
    option_index: int


# ── 헬퍼 ─────────────────────────────────────────────────────────────────────

def _raise_http(e: ExamError) -> NoReturn:
    status_code = 409 if isinstance(e, InvalidTransition) else 400
    raise HTTPException(status_code=status_code, detail=e.to_dict())


def _current_exam() -> ExamSession:
    exam: ExamSession | None = session.get("exam")
    if exam is None:
        raise HTTPException(status_code=404, detail="시험 세션이 없습니다.")
    return exam


def _default_question_count(bank_size: int) -> int:
    return min(config.DEFAULT_QUESTION_COUNT, bank_size)


def _begin_exam(exam_config: ExamConfig) -> dict:
    current: ExamSession | None = session.get("exam")
    if current is not None and current.phase == Phase.ACTIVE:
        raise HTTPException(status_code=409, detail="진행 중인 시험이 있습니다. 먼저 제출하세요.")

    bank: list[Question] = session.get("bank", [])
    if not bank:
        raise HTTPException(status_code=400, detail="문제 은행이 비어 있습니다.")

    presenter = SnapshotPresenter()
    exam = ExamSession(bank, presenter=presenter)
    try:
        exam.begin(exam_config)
    except ExamError as e:
        _raise_http(e)

    session.replace_exam(exam, presenter)
    session.put("last_config", exam_config)
    return {
        "total": len(exam.state.questions),
        "total_seconds": exam.state.total_seconds,
        "ok": True,
    }


# ── 문제 은행 ────────────────────────────────────────────────────────────────

@router.post("/api/import-bank")
async def import_bank(file: UploadFile = File(...)):
    file_bytes = await file.read()
    if len(file_bytes) > config.MAX_BANK_FILE_SIZE:
        raise HTTPException(status_code=413, detail="JSON 파일이 너무 큽니다 (최대 5MB).")
    try:
        imported = parse_bank_json(file_bytes)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if not imported:
        raise HTTPException(status_code=422, detail="JSON에서 유효한 문제를 찾지 못했습니다.")

    bank: list[Question] = session.get("bank", [])
    session.put("bank", bank + imported)
    return {"imported": len(imported), "count": len(bank) + len(imported), "ok": True}


@router.post("/api/load-sample-bank")
async def load_sample_bank():
    session.put("bank", list(SAMPLE_QUESTIONS))
    return {"count": len(SAMPLE_QUESTIONS), "ok": True}


@router.get("/api/bank")
async def get_bank():
    bank: list[Question] = session.get("bank", [])
    return {"count": len(bank), "questions": export_bank(bank)}


@router.delete("/api/bank")
async def clear_bank():
    session.reset(keep_bank=False)
    return {"ok": True}


@router.get("/api/session-status")
async def session_status():
    bank: list[Question] = session.get("bank", [])
    exam: ExamSession | None = session.get("exam")
    return {
        "bank_size": len(bank),
        "default_question_count": _default_question_count(len(bank)),
        "default_time_limit_minutes": config.DEFAULT_TIME_LIMIT_MINUTES,
        "exam_title": session.get("exam_title") or config.DEFAULT_EXAM_TITLE,
        "phase": exam.phase.value if exam else Phase.SETUP.value,
    }


# ── 시험 진행 ────────────────────────────────────────────────────────────────

@router.post("/api/start-exam")
async def start_exam(body: StartExamBody):
    bank: list[Question] = session.get("bank", [])
    count = body.question_count
    if count is None:
        count = _default_question_count(len(bank))
    try:
        exam_config = ExamConfig.from_setup(
            requested_count=count,
            time_limit_minutes=body.time_limit_minutes,
            shuffle_questions=body.shuffle_questions,
            shuffle_options=body.shuffle_options,
        )
    except ExamError as e:
        _raise_http(e)

    result = _begin_exam(exam_config)
    session.put("exam_title", body.title.strip() or config.DEFAULT_EXAM_TITLE)
    return result


@router.post("/api/retry-exam")
async def retry_exam():
    last_config: ExamConfig | None = session.get("last_config")
    if last_config is None:
        raise HTTPException(status_code=400, detail="이전 시험 설정이 없습니다.")
    return _begin_exam(last_config)


@router.get("/api/question/{position}")
async def get_question(position: int):
    exam = _current_exam()
    questions = exam.state.questions
    if not (0 <= position < len(questions)):
        raise HTTPException(status_code=404, detail="문제를 찾을 수 없습니다.")

    d = question_card(questions[position], position)
    d.update({"saved_answer": exam.state.answers.get(position), "total": len(questions)})
    return d


@router.get("/api/exam-state")
async def get_exam_state():
    exam = _current_exam()
    presenter: SnapshotPresenter = session.get("presenter")
    state = exam.state
    return {
        "phase": state.phase.value,
        "screen": presenter.screen if presenter else None,
        "timer": timer_view(state.remaining_seconds),
        "total_seconds": state.total_seconds,
        "answers": {str(k): v for k, v in state.answers.items()},
        "answered_count": state.answered_count,
        "total": len(state.questions),
        "started_at": state.started_at,
        "submission_mode": state.submission_mode.value if state.submission_mode else None,
    }


@router.post("/api/save-answer")
async def save_answer(body: SaveAnswerBody):
    exam = _current_exam()
    try:
        exam.record_answer(body.position, body.option_index)
    except ExamError as e:
        _raise_http(e)
    return {"ok": True, "answered_count": exam.state.answered_count}


@router.post("/api/submit-exam")
async def submit_exam():
    exam = _current_exam()
    try:
        submitted = exam.submit(SubmissionMode.MANUAL)
    except ExamError as e:
        _raise_http(e)

    return {
        "submitted": submitted,
        "submission_mode": exam.state.submission_mode.value,
        "correct_count": exam.result.correct_count,
        "total": exam.result.total,
        "ok": True,
    }


@router.get("/api/results")
async def get_results():
    exam = _current_exam()
    presenter: SnapshotPresenter = session.get("presenter")
    try:
        result = evaluate(exam.state)
    except ExamError as e:
        _raise_http(e)

    data = dict(presenter.result) if presenter and presenter.result else {}
    data.update({
        "correct_count": result.correct_count,
        "total": result.total,
        "percent": result.percent,
        "elapsed_seconds": result.elapsed_seconds,
        "records": [r.model_dump() for r in result.records],
        "exam_title": session.get("exam_title") or config.DEFAULT_EXAM_TITLE,
    })
    return data


@router.post("/api/reset")
async def reset_session():
    session.reset(keep_bank=True)
    return {"ok": True}
