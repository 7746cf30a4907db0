"""
응시 세션 상태 머신 테스트
"""
import time
from functools import partial

import pytest

from mcq_exam.errors import InvalidConfig, InvalidTransition, OutOfRangeAnswer
from mcq_exam.models.question_model import ExamConfig
from mcq_exam.models.session_state import Phase, SubmissionMode
from mcq_exam.services.exam_session import ExamSession
from mcq_exam.services.timer import CountdownTimer
from mcq_exam.views.presenter import ExamPresenter


@pytest.fixture
def exam(bank, presenter, clock, rng, timer_factory):
    return ExamSession(bank, presenter=presenter, timer_factory=timer_factory, clock=clock, rng=rng)


def _begin(exam, count=4, minutes=1, **flags):
    exam.begin(ExamConfig(requested_count=count, time_limit_minutes=minutes, **flags))


# =============================================================================
# begin
# =============================================================================

def test_begin_moves_to_active(exam, presenter, clock):
    _begin(exam, count=4, minutes=2)
    state = exam.state
    assert exam.phase == Phase.ACTIVE
    assert len(state.questions) == 4
    assert state.answers == {}
    assert state.total_seconds == state.remaining_seconds == 120
    assert state.started_at == clock.now
    assert state.ended_at is None
    assert state.submission_mode is None
    assert exam.timer.is_running
    assert presenter.question_lists == [state.questions]
    assert presenter.timer_values == [120]


def test_begin_rejects_count_above_bank_size(exam, bank):
    with pytest.raises(InvalidConfig):
        _begin(exam, count=len(bank) + 1)
    assert exam.phase == Phase.SETUP
    assert exam.state.questions == []
    assert exam.timer is None


def test_begin_rejects_unvalidated_config(exam):
    config = ExamConfig.model_construct(
        requested_count=0, shuffle_questions=False, shuffle_options=False, time_limit_minutes=5
    )
    with pytest.raises(InvalidConfig):
        exam.begin(config)
    config = ExamConfig.model_construct(
        requested_count=1, shuffle_questions=False, shuffle_options=False, time_limit_minutes=0
    )
    with pytest.raises(InvalidConfig):
        exam.begin(config)
    assert exam.phase == Phase.SETUP


def test_from_setup_wraps_validation_errors():
    with pytest.raises(InvalidConfig):
        ExamConfig.from_setup(requested_count=0, time_limit_minutes=10)
    with pytest.raises(InvalidConfig):
        ExamConfig.from_setup(requested_count=3, time_limit_minutes=0)
    config = ExamConfig.from_setup(requested_count=3, time_limit_minutes=10, shuffle_options=True)
    assert config.shuffle_options is True


def test_begin_only_once(exam):
    _begin(exam)
    with pytest.raises(InvalidTransition):
        _begin(exam)


def test_empty_bank_cannot_begin(presenter, timer_factory):
    exam = ExamSession([], presenter=presenter, timer_factory=timer_factory)
    with pytest.raises(InvalidConfig):
        exam.begin(ExamConfig(requested_count=1))


# =============================================================================
# record_answer
# =============================================================================

def test_record_answer_requires_active(exam):
    with pytest.raises(InvalidTransition):
        exam.record_answer(0, 0)


def test_record_answer_last_write_wins(exam):
    _begin(exam)
    exam.record_answer(0, 1)
    exam.record_answer(0, 3)
    exam.record_answer(2, 0)
    assert exam.state.answers == {0: 3, 2: 0}


@pytest.mark.parametrize("position,option_index", [(-1, 0), (4, 0), (0, -1), (0, 4)])
def test_record_answer_out_of_range_has_no_effect(exam, position, option_index):
    _begin(exam, count=4)
    exam.record_answer(1, 2)
    with pytest.raises(OutOfRangeAnswer):
        exam.record_answer(position, option_index)
    assert exam.state.answers == {1: 2}


def test_record_answer_after_submit_rejected(exam):
    _begin(exam)
    exam.record_answer(0, 0)
    exam.submit()
    with pytest.raises(InvalidTransition):
        exam.record_answer(1, 1)
    assert exam.state.answers == {0: 0}


# =============================================================================
# submit / 타이머 연동
# =============================================================================

def test_submit_before_begin_rejected(exam):
    with pytest.raises(InvalidTransition):
        exam.submit()
    assert exam.phase == Phase.SETUP


def test_manual_then_auto_submit(exam, clock, presenter):
    _begin(exam)
    clock.advance(30)
    assert exam.submit(SubmissionMode.MANUAL) is True
    assert exam.submit(SubmissionMode.AUTO) is False
    assert exam.phase == Phase.SUBMITTED
    assert exam.state.submission_mode == SubmissionMode.MANUAL
    assert exam.state.ended_at == clock.now
    assert len(presenter.results) == 1
    assert presenter.results[0][1] == SubmissionMode.MANUAL


def test_auto_then_manual_submit(exam, presenter):
    _begin(exam, minutes=1)
    assert exam.timer.advance(60) is False
    assert exam.phase == Phase.SUBMITTED
    assert exam.state.submission_mode == SubmissionMode.AUTO
    assert exam.state.remaining_seconds == 0
    assert exam.submit(SubmissionMode.MANUAL) is False
    assert exam.state.submission_mode == SubmissionMode.AUTO
    assert len(presenter.results) == 1


def test_ticks_update_remaining_and_presenter(exam, presenter):
    _begin(exam, minutes=1)
    exam.timer.advance(3)
    assert exam.state.remaining_seconds == 57
    assert presenter.timer_values == [60, 59, 58, 57]


def test_manual_submit_stops_timer(exam, presenter):
    _begin(exam, minutes=1)
    exam.timer.advance(10)
    exam.submit()
    assert not exam.timer.is_running
    assert exam.timer.advance(100) is False
    assert exam.state.remaining_seconds == 50
    assert presenter.timer_values[-1] == 50
    assert exam.state.submission_mode == SubmissionMode.MANUAL


def test_late_tick_and_expiry_ignored_after_submit(exam, presenter):
    _begin(exam, minutes=1)
    exam.submit()
    exam._handle_tick(5)
    exam._handle_expire()
    assert exam.state.remaining_seconds == 60
    assert presenter.timer_values == [60]
    assert exam.state.submission_mode == SubmissionMode.MANUAL


def test_result_is_evaluated_on_submit(exam, clock):
    _begin(exam, count=2, minutes=10)
    first, second = exam.state.questions
    exam.record_answer(0, first.correct_index)
    exam.record_answer(1, (second.correct_index + 1) % len(second.options))
    clock.advance(42.4)
    exam.submit()
    assert exam.result.correct_count == 1
    assert exam.result.total == 2
    assert exam.result.percent == pytest.approx(50.0)
    assert exam.result.elapsed_seconds == 42


def test_close_stops_running_timer(exam):
    _begin(exam)
    exam.close()
    assert not exam.timer.is_running
    assert exam.phase == Phase.ACTIVE


# =============================================================================
# begin 실패 시 롤백
# =============================================================================

class _FailingPresenter(ExamPresenter):
    def render_question_list(self, questions):
        raise RuntimeError("화면 출력 실패")


def test_begin_leaves_setup_when_rendering_fails(bank, clock, timer_factory):
    exam = ExamSession(bank, presenter=_FailingPresenter(), timer_factory=timer_factory, clock=clock)
    with pytest.raises(RuntimeError):
        exam.begin(ExamConfig(requested_count=2))
    assert exam.phase == Phase.SETUP
    assert exam.timer is None
    assert exam.config is None
    assert exam.state.questions == []
    assert exam.state.started_at is None


def test_begin_leaves_setup_when_timer_fails(exam, timer_factory):
    def broken_timer(*args, **kwargs):
        raise RuntimeError("타이머 생성 실패")

    exam._timer_factory = broken_timer
    with pytest.raises(RuntimeError):
        _begin(exam)
    assert exam.phase == Phase.SETUP
    assert exam.timer is None

    # 실패 후에도 정상 타이머로 다시 시작할 수 있다
    exam._timer_factory = timer_factory
    _begin(exam)
    assert exam.phase == Phase.ACTIVE


# =============================================================================
# 스레드 타이머 연동
# =============================================================================

def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_threaded_timer_auto_submits(bank, presenter):
    exam = ExamSession(bank, presenter=presenter, timer_factory=partial(CountdownTimer, interval=0.005))
    _begin(exam, count=2, minutes=1)

    assert _wait_until(lambda: exam.phase == Phase.SUBMITTED)
    assert exam.state.submission_mode == SubmissionMode.AUTO
    assert exam.state.remaining_seconds == 0
    assert not exam.timer.is_running
    assert len(presenter.results) == 1
    assert presenter.timer_values == list(range(60, -1, -1))


def test_manual_submit_races_threaded_timer(bank, presenter):
    exam = ExamSession(bank, presenter=presenter, timer_factory=partial(CountdownTimer, interval=0.001))
    _begin(exam, count=2, minutes=1)
    _wait_until(lambda: exam.state.remaining_seconds <= 30)

    manual_won = exam.submit(SubmissionMode.MANUAL)
    assert exam.phase == Phase.SUBMITTED
    expected = SubmissionMode.MANUAL if manual_won else SubmissionMode.AUTO
    assert exam.state.submission_mode == expected

    # 제출 이후에는 틱도 두 번째 결과도 관찰되지 않는다
    remaining = exam.state.remaining_seconds
    ticks = len(presenter.timer_values)
    time.sleep(0.1)
    assert exam.state.remaining_seconds == remaining
    assert len(presenter.timer_values) == ticks
    assert len(presenter.results) == 1
