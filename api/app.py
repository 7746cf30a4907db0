"""
api/app.py — FastAPI 앱 인스턴스 + 수명 주기 + static 파일 서빙
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse

from config import BANK_FILE, STATIC_DIR
from api.routes import router
import api.session as session
from mcq_exam.services.bank_io import load_bank_file

logger = logging.getLogger(__name__)


def _preload_bank(path: str) -> None:
    """MCQ_BANK_FILE이 지정되어 있으면 시작 시 문제 은행을 불러온다."""
    if not path:
        return
    try:
        bank = load_bank_file(path)
    except (OSError, ValueError) as e:
        logger.error(f"문제 은행 파일 로드 실패 ({path}): {e}")
        return
    session.put("bank", bank)
    logger.info(f"문제 은행 {len(bank)}문항 로드: {path}")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    _preload_bank(BANK_FILE)
    yield
    # 종료 시 살아 있는 타이머 정리
    session.replace_exam(None)


def create_app() -> FastAPI:
    app = FastAPI(title="MCQ Exam", docs_url=None, redoc_url=None, lifespan=_lifespan)

    # CORS (로컬 브라우저 창에서만 접근)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    # static 파일 마운트
    if os.path.isdir(STATIC_DIR):
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    # 루트 → index.html
    @app.get("/")
    async def serve_index():
        index_path = os.path.join(STATIC_DIR, "index.html")
        if os.path.exists(index_path):
            return FileResponse(index_path)
        return {"error": "index.html not found"}

    return app
