"""
Caller-side report flow: connecting -> generating -> success | error.

A session owns one "current" request. Starting a new request supersedes the
previous one; a result that arrives for a superseded request is dropped.
"""
import logging
import time

from ai_interpreter import InterpretationError, generate_interpretation
from config import CONNECTING_DELAY_SECONDS, LOGGER_NAME, SESSION_MAX_RETRIES
from models import BirthFormData, ChartInput, GeneratedContent
from templates import DEFAULT_CONTENT

logger = logging.getLogger(LOGGER_NAME)

IDLE = "idle"
CONNECTING = "connecting"
GENERATING = "generating"
SUCCESS = "success"
ERROR = "error"


class InvalidTransition(RuntimeError):
    pass


class ReportSession:
    """Drives one report card's AI content, with bounded retry and default fallback."""

    def __init__(
        self,
        generator=generate_interpretation,
        max_retries: int = SESSION_MAX_RETRIES,
        connecting_delay: float = CONNECTING_DELAY_SECONDS,
        sleep=time.sleep,
    ):
        self.generator = generator
        self.max_retries = max_retries
        self.connecting_delay = connecting_delay
        self.sleep = sleep

        self.status = IDLE
        self.request_key = 0
        self.retry_count = 0
        self.content = None
        self.error = None
        self.error_kind = None
        self._chart = None
        self._form = None

    @property
    def can_retry(self) -> bool:
        return (
            self.status == ERROR
            and self.error_kind != "configuration"
            and self.retry_count < self.max_retries
        )

    def start(self, chart: ChartInput, form: BirthFormData) -> int:
        """Begin a new request, superseding any in flight. Returns its key."""
        self.request_key += 1
        self.retry_count = 0
        self._chart = chart
        self._form = form
        self._run(self.request_key)
        return self.request_key

    def retry(self) -> None:
        if not self.can_retry:
            raise InvalidTransition(
                f"cannot retry from status={self.status} kind={self.error_kind} "
                f"retries={self.retry_count}/{self.max_retries}"
            )
        self.retry_count += 1
        self._run(self.request_key)

    def use_default(self) -> GeneratedContent:
        """Abandon the AI path and show the static default content."""
        if self.status != ERROR:
            raise InvalidTransition(f"default content only replaces an error, status={self.status}")
        self._set_success(DEFAULT_CONTENT.model_copy(deep=True))
        return self.content

    def _run(self, key: int) -> None:
        self.status = CONNECTING
        self.content = None
        self.error = None
        self.error_kind = None
        self.sleep(self.connecting_delay)
        if key != self.request_key:
            return
        self.status = GENERATING

        try:
            content = self.generator(self._chart, self._form)
        except InterpretationError as e:
            if key != self.request_key:
                logger.info("Dropping stale error for request_key=%s", key)
                return
            logger.warning("Report generation failed kind=%s error=%s", e.kind, e)
            self.status = ERROR
            self.error = e
            self.error_kind = e.kind
            return

        if key != self.request_key:
            logger.info("Dropping stale result for request_key=%s", key)
            return
        self._set_success(content)

    def _set_success(self, content: GeneratedContent) -> None:
        self.status = SUCCESS
        self.content = content
        self.error = None
        self.error_kind = None
