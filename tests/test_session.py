import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from ai_interpreter import ConfigurationError, RetriesExhausted
from bazi_utils import DEFAULT_CHART, DEFAULT_FORM
from logic import synthesize
from session import InvalidTransition, ReportSession

CONTENT = synthesize(DEFAULT_CHART, DEFAULT_FORM)


class FakeGenerator:
    """Returns or raises the queued outcomes and records the status it was called in."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.seen_status = []
        self.session = None

    def __call__(self, chart, form):
        self.seen_status.append(self.session.status)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_session(*outcomes, max_retries=3):
    generator = FakeGenerator(*outcomes)
    delays = []
    session = ReportSession(generator=generator, max_retries=max_retries, sleep=delays.append)
    generator.session = session
    return session, generator, delays


def test_new_session_is_idle():
    session, _, _ = make_session(CONTENT)
    assert session.status == "idle"
    assert session.content is None


def test_success_path():
    session, generator, delays = make_session(CONTENT)
    key = session.start(DEFAULT_CHART, DEFAULT_FORM)
    assert key == 1
    assert generator.seen_status == ["generating"]
    assert delays == [0.8]
    assert session.status == "success"
    assert session.content is CONTENT
    assert session.error is None


def test_failure_then_retry_succeeds():
    session, generator, _ = make_session(RetriesExhausted("boom", attempts=3), CONTENT)
    session.start(DEFAULT_CHART, DEFAULT_FORM)
    assert session.status == "error"
    assert session.error_kind == "exhausted"
    assert session.can_retry

    session.retry()
    assert session.status == "success"
    assert session.retry_count == 1
    assert session.content is CONTENT


def test_retries_are_bounded_then_default_content():
    session, generator, _ = make_session(RetriesExhausted("boom", attempts=3))
    session.start(DEFAULT_CHART, DEFAULT_FORM)
    for _ in range(3):
        session.retry()
    assert session.retry_count == 3
    assert session.status == "error"
    assert not session.can_retry
    with pytest.raises(InvalidTransition):
        session.retry()
    assert len(generator.seen_status) == 4

    content = session.use_default()
    assert session.status == "success"
    assert content.source == "default"
    assert content.element_balance == "木气充盈，火气待补"


def test_configuration_error_is_not_retryable():
    session, _, _ = make_session(ConfigurationError("no key"))
    session.start(DEFAULT_CHART, DEFAULT_FORM)
    assert session.status == "error"
    assert session.error_kind == "configuration"
    assert not session.can_retry
    assert session.use_default().source == "default"


def test_default_content_only_replaces_an_error():
    session, _, _ = make_session(CONTENT)
    with pytest.raises(InvalidTransition):
        session.use_default()
    session.start(DEFAULT_CHART, DEFAULT_FORM)
    with pytest.raises(InvalidTransition):
        session.use_default()


def test_new_request_resets_retry_count():
    session, _, _ = make_session(RetriesExhausted("boom", attempts=3))
    session.start(DEFAULT_CHART, DEFAULT_FORM)
    session.retry()
    assert session.start(DEFAULT_CHART, DEFAULT_FORM) == 2
    assert session.retry_count == 0


def test_superseded_result_is_dropped():
    newer = CONTENT.model_copy(update={"personality": "newer"})
    session, generator, _ = make_session(CONTENT)
    calls = []

    def generator_that_gets_superseded(chart, form):
        calls.append(session.request_key)
        if len(calls) == 1:
            # user submits again while the first request is still in flight
            generator.outcomes = [newer]
            session.start(chart, form)
            return CONTENT
        return generator(chart, form)

    session.generator = generator_that_gets_superseded
    session.start(DEFAULT_CHART, DEFAULT_FORM)
    assert calls == [1, 2]
    assert session.request_key == 2
    assert session.status == "success"
    assert session.content.personality == "newer"


def test_superseded_error_is_dropped():
    session, generator, _ = make_session(CONTENT)
    calls = []

    def failing_after_resubmit(chart, form):
        calls.append(session.request_key)
        if len(calls) == 1:
            session.start(chart, form)
            raise RetriesExhausted("late failure", attempts=3)
        return CONTENT

    session.generator = failing_after_resubmit
    session.start(DEFAULT_CHART, DEFAULT_FORM)
    assert session.status == "success"
    assert session.error is None
    assert session.content is CONTENT
