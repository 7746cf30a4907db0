"""
services/timer.py

1초 해상도의 카운트다운 타이머. 일시정지 없음, 재시작 없음.

- 매 틱마다 remaining_seconds를 1 줄이고 on_tick(remaining)을 호출한다.
- 0에 도달하면 on_tick(0) 다음 on_expire()를 정확히 한 번 호출하고 멈춘다.
- stop()은 멱등이며, 시작 전에 불러도 안전하다.
- 스케줄러 지연으로 틱이 몰려도 하나씩 따라잡으므로 항상 정확히 0에서 만료된다.

interval=None으로 만들면 백그라운드 스레드 없이 advance()로만 진행된다 (테스트용).
"""

import logging
import threading
import time
from typing import Callable, Optional

from config import TICK_SECONDS

logger = logging.getLogger(__name__)


class CountdownTimer:
    def __init__(
        self,
        total_seconds: int,
        on_tick: Callable[[int], None],
        on_expire: Callable[[], None],
        interval: Optional[float] = TICK_SECONDS,
    ):
        if total_seconds < 0:
            raise ValueError(f"total_seconds는 0 이상이어야 합니다. (현재 {total_seconds})")
        self.total_seconds = total_seconds
        self.remaining_seconds = total_seconds
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._interval = interval

        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._started = False
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._started and not self._stop_event.is_set()

    @property
    def is_expired(self) -> bool:
        return self._started and self.remaining_seconds == 0

    def start(self) -> None:
        """타이머를 시작한다. 한 인스턴스는 한 번만 시작할 수 있다."""
        with self._lock:
            if self._started:
                raise RuntimeError("이미 시작된 타이머입니다. 새 세션에는 새 타이머를 만드세요.")
            self._started = True

        if self.total_seconds == 0:
            # 틱 없이 바로 만료
            self._stop_event.set()
            self._on_expire()
            return

        if self._interval is not None:
            self._thread = threading.Thread(target=self._run, name="exam-timer", daemon=True)
            self._thread.start()
        logger.debug(f"타이머 시작: {self.total_seconds}초")

    def stop(self) -> None:
        """
        틱을 멈춘다. 멱등.
        스레드를 join하지 않는다: 진행 중인 틱 콜백이 호출자가 쥔 락을 기다리고 있을 수 있다.
        """
        if not self._stop_event.is_set():
            self._stop_event.set()
            logger.debug(f"타이머 정지: 남은 시간 {self.remaining_seconds}초")

    def advance(self, steps: int = 1) -> bool:
        """
        틱 steps번을 순서대로 처리한다.

        Returns:
            처리 후에도 타이머가 돌고 있으면 True, 정지/만료되었으면 False.
        """
        for _ in range(steps):
            with self._lock:
                if not self.is_running:
                    return False
                self.remaining_seconds = max(0, self.remaining_seconds - 1)
                remaining = self.remaining_seconds
                if remaining == 0:
                    self._stop_event.set()

            self._on_tick(remaining)
            if remaining == 0:
                logger.info("타이머 만료")
                self._on_expire()
                return False
        return True

    def _run(self) -> None:
        next_deadline = time.monotonic() + self._interval
        while not self._stop_event.wait(max(0.0, next_deadline - time.monotonic())):
            # 지연된 만큼 밀린 틱 수를 계산
            overdue = time.monotonic() - next_deadline
            due = 1 + int(overdue // self._interval)
            next_deadline += due * self._interval
            if due > 1:
                logger.debug(f"타이머 틱 {due}개 몰림, 순차 처리")
            try:
                if not self.advance(due):
                    break
            except Exception:
                logger.exception("타이머 콜백 오류, 타이머를 정지합니다.")
                self._stop_event.set()
                break
