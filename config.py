import os

# 기본 디렉토리 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 경로 설정
STATIC_DIR = os.path.join(BASE_DIR, "static")
LOG_FILE = os.path.join(BASE_DIR, "launch.log")
BANK_FILE = os.getenv("MCQ_BANK_FILE", "")  # 시작 시 미리 불러올 문제 은행 JSON (선택)

# 서버 설정
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
DEFAULT_TIMEOUT = 15.0

# 문제 은행 설정
MIN_OPTIONS = 2
MAX_OPTIONS = 6
MAX_BANK_FILE_SIZE = 5 * 1024 * 1024  # 5 MB

# 시험 설정
DEFAULT_EXAM_TITLE = "MCQ Examination"
DEFAULT_QUESTION_COUNT = 10       # 은행 크기보다 크면 은행 크기로 줄임
DEFAULT_TIME_LIMIT_MINUTES = 30
TICK_SECONDS = 1.0                # 타이머 해상도
TIMER_WARN_SECONDS = 60           # 이하이면 경고 표시
