"""
main.py — MCQ 시험 앱 진입점

로컬 서버를 띄우고 브라우저 창을 연다. 사용자는 한 명, 상태는 메모리에만 있다.
"""

import os
import shutil
import socket
import subprocess
import sys
import time
import threading
import logging
import webbrowser

_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

from config import BASE_DIR, LOG_FILE, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

_BROWSERS = ("google-chrome", "chromium", "chromium-browser", "msedge", "chrome")


def _configure_logging() -> None:
    fmt = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    try:
        handlers = [logging.FileHandler(LOG_FILE, encoding='utf-8'), logging.StreamHandler(sys.stdout)]
    except PermissionError:
        # 로그 파일을 열 수 없으면 콘솔만
        handlers = [logging.StreamHandler(sys.stdout)]
    logging.basicConfig(level=logging.INFO, format=fmt, handlers=handlers)


def _pick_port() -> int:
    """DEFAULT_PORT가 비어 있으면 그대로, 아니면 OS가 주는 빈 포트."""
    for port in (DEFAULT_PORT, 0):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind((DEFAULT_HOST, port))
            except OSError:
                logger.info(f"포트 {port} 사용 중, 다른 포트를 찾습니다.")
                continue
            return s.getsockname()[1]
    raise OSError("사용할 수 있는 포트가 없습니다.")


def _server_is_up(port: int) -> bool:
    try:
        with socket.create_connection((DEFAULT_HOST, port), timeout=0.5):
            return True
    except OSError:
        return False


def _wait_until_ready(port: int, server_thread: threading.Thread) -> bool:
    deadline = time.monotonic() + DEFAULT_TIMEOUT
    while time.monotonic() < deadline and server_thread.is_alive():
        if _server_is_up(port):
            return True
        time.sleep(0.1)
    return False


def _open_browser(url: str) -> None:
    # 크로미움 계열이 있으면 주소창 없는 앱 창으로 연다
    for name in _BROWSERS:
        path = shutil.which(name)
        if path:
            logger.info(f"앱 창 열기: {path}")
            subprocess.Popen([path, f"--app={url}", "--no-first-run", "--window-size=1280,800"])
            return
    logger.info("크로미움 계열 브라우저가 없어 기본 브라우저로 엽니다.")
    webbrowser.open(url)


def _serve(port: int) -> None:
    import uvicorn
    from api.app import create_app

    logger.info(f"시험 서버 시작: http://{DEFAULT_HOST}:{port}")
    try:
        uvicorn.run(create_app(), host=DEFAULT_HOST, port=port, log_level="warning")
    except Exception:
        logger.exception("시험 서버가 비정상 종료되었습니다.")


def main() -> int:
    _configure_logging()
    os.chdir(BASE_DIR)

    port = _pick_port()
    server_thread = threading.Thread(target=_serve, args=(port,), name="exam-server", daemon=True)
    server_thread.start()

    if not _wait_until_ready(port, server_thread):
        logger.error(f"{DEFAULT_TIMEOUT:.0f}초 안에 서버가 응답하지 않았습니다. 로그를 확인하세요: {LOG_FILE}")
        return 1

    _open_browser(f"http://{DEFAULT_HOST}:{port}")
    try:
        server_thread.join()
    except KeyboardInterrupt:
        logger.info("Ctrl+C, 종료합니다.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
