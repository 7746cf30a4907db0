"""
services/exam_session.py

한 번의 응시(attempt)를 관리하는 상태 머신.

상태 흐름: setup → active → submitted (종료 상태, 역행/건너뛰기 없음)

- begin()         : setup에서만. 설정 검증 → 출제 → 화면 출력 → 타이머 시작 → active
- record_answer() : active에서만. 같은 위치는 마지막 선택이 남는다
- submit()        : active에서만. 이미 submitted면 아무 일도 하지 않는다 (먼저 온 제출이 이긴다)
- 타이머 만료     : submit(AUTO)

타이머는 별도 스레드에서 틱을 보내므로 모든 이벤트는 RLock으로 직렬화한다.
거부된 작업은 ExamError를 올리고 상태를 바꾸지 않는다.
"""

import logging
import random
import threading
import time
from typing import Callable, Dict, Optional, Sequence

from mcq_exam.errors import InvalidTransition, OutOfRangeAnswer
from mcq_exam.models.question_model import ExamConfig, Question
from mcq_exam.models.session_state import ExamResult, Phase, SessionState, SubmissionMode
from mcq_exam.services.exam_service import evaluate
from mcq_exam.services.selector import select_questions
from mcq_exam.services.timer import CountdownTimer
from mcq_exam.views.presenter import ExamPresenter

logger = logging.getLogger(__name__)

TimerFactory = Callable[..., CountdownTimer]


class ExamSession:

    TRANSITIONS: Dict[Phase, Sequence[Phase]] = {
        Phase.SETUP: [Phase.ACTIVE],
        Phase.ACTIVE: [Phase.SUBMITTED],
        Phase.SUBMITTED: [],
    }

    def __init__(
        self,
        bank: Sequence[Question],
        presenter: Optional[ExamPresenter] = None,
        timer_factory: TimerFactory = CountdownTimer,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        self.bank = list(bank)
        self.presenter = presenter or ExamPresenter()
        self.state = SessionState()
        self.config: Optional[ExamConfig] = None
        self.result: Optional[ExamResult] = None

        self._timer_factory = timer_factory
        self._clock = clock
        self._rng = rng
        self._timer: Optional[CountdownTimer] = None
        self._lock = threading.RLock()

    # ── 조회 ────────────────────────────────────────────────────────────────

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def timer(self) -> Optional[CountdownTimer]:
        return self._timer

    # ── 전이 ────────────────────────────────────────────────────────────────

    def _require(self, phase: Phase, action: str) -> None:
        if self.state.phase != phase:
            raise InvalidTransition(
                f"{action}은(는) {phase.value} 단계에서만 가능합니다. (현재: {self.state.phase.value})"
            )

    def _transition(self, new_phase: Phase) -> None:
        if new_phase not in self.TRANSITIONS[self.state.phase]:
            raise InvalidTransition(f"{self.state.phase.value} → {new_phase.value} 전이는 허용되지 않습니다.")
        logger.info(f"세션 전이: {self.state.phase.value} → {new_phase.value}")
        self.state.phase = new_phase

    def begin(self, config: ExamConfig) -> None:
        """
        시험을 시작한다.

        Raises:
            InvalidTransition: setup 단계가 아님
            InvalidConfig:     문항 수가 1 ~ 은행 크기를 벗어나거나 제한 시간 < 1분
        """
        with self._lock:
            self._require(Phase.SETUP, "시험 시작")
            config.validate_for(len(self.bank))

            questions = select_questions(self.bank, config, self._rng)
            total_seconds = config.time_limit_minutes * 60
            started_at = self._clock()

            # 화면 출력과 타이머 시작이 모두 성공한 뒤에만 세션 상태를 바꾼다.
            # 틱 콜백은 이 락을 기다리므로 active 전환 전에 관찰되는 틱은 없다.
            self.presenter.render_question_list(questions)
            self.presenter.render_timer(total_seconds)
            timer = self._timer_factory(total_seconds, self._handle_tick, self._handle_expire)
            timer.start()

            self._timer = timer
            self.config = config
            self.state.questions = questions
            self.state.answers = {}
            self.state.total_seconds = total_seconds
            self.state.remaining_seconds = total_seconds
            self.state.started_at = started_at
            self._transition(Phase.ACTIVE)
            logger.info(
                f"시험 시작: {len(questions)}문항 / {config.time_limit_minutes}분 "
                f"(문항 섞기={config.shuffle_questions}, 보기 섞기={config.shuffle_options})"
            )

    def record_answer(self, position: int, option_index: int) -> None:
        """
        position번 문제의 답을 option_index로 기록한다 (덮어쓰기).

        Raises:
            InvalidTransition: active 단계가 아님
            OutOfRangeAnswer:  위치 또는 보기 인덱스가 범위 밖
        """
        with self._lock:
            self._require(Phase.ACTIVE, "답안 기록")
            questions = self.state.questions
            if not 0 <= position < len(questions):
                raise OutOfRangeAnswer(f"문제 위치 {position}이(가) 범위(0 ~ {len(questions) - 1})를 벗어났습니다.")
            option_count = len(questions[position].options)
            if not 0 <= option_index < option_count:
                raise OutOfRangeAnswer(
                    f"보기 인덱스 {option_index}이(가) 범위(0 ~ {option_count - 1})를 벗어났습니다."
                )
            self.state.answers[position] = option_index

    def submit(self, mode: SubmissionMode = SubmissionMode.MANUAL) -> bool:
        """
        시험을 제출한다.

        Returns:
            이번 호출로 제출되었으면 True, 이미 제출된 상태라 무시했으면 False.

        Raises:
            InvalidTransition: 아직 시작하지 않은 세션
        """
        with self._lock:
            if self.state.phase == Phase.SUBMITTED:
                logger.info(f"중복 제출 무시 ({mode.value}), 최초 제출: {self.state.submission_mode.value}")
                return False
            self._require(Phase.ACTIVE, "제출")

            # 타이머를 가장 먼저 멈춰 제출 이후의 틱/만료가 관찰되지 않게 한다
            if self._timer is not None:
                self._timer.stop()
            self.state.ended_at = self._clock()
            self.state.submission_mode = mode
            self._transition(Phase.SUBMITTED)

            self.result = evaluate(self.state)
            logger.info(
                f"제출 완료 ({mode.value}): {self.result.correct_count}/{self.result.total} "
                f"({self.result.percent:.1f}%)"
            )
            self.presenter.render_result(self.result, mode)
            return True

    def close(self) -> None:
        """세션을 버리기 전에 호출. 살아 있는 타이머를 정지한다."""
        with self._lock:
            if self._timer is not None:
                self._timer.stop()

    # ── 타이머 콜백 ─────────────────────────────────────────────────────────

    def _handle_tick(self, remaining_seconds: int) -> None:
        with self._lock:
            if self.state.phase != Phase.ACTIVE:
                return
            self.state.remaining_seconds = remaining_seconds
            self.presenter.render_timer(remaining_seconds)

    def _handle_expire(self) -> None:
        with self._lock:
            if self.state.phase != Phase.ACTIVE:
                return
            logger.info("제한 시간 종료, 자동 제출")
            self.submit(SubmissionMode.AUTO)
