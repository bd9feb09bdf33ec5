import time
import logging
import requests
from plate_pipeline.domain.Interfaces.event_publisher import IEventPublisher
from plate_pipeline.domain.Models.detection_result import DetectionResult

logger = logging.getLogger(__name__)

class RetryPublisher(IEventPublisher):
    """
    Wrapper que reintenta publish hasta N veces con backoff exponencial.
    Solo reintenta si el error parece transitorio (red, timeout, broker unavailable).
    """
    TRANSIENT_KEYWORDS = (
        "timeout",
        "connection",
        "broker",
        "unreachable",
        "network",
        "transport",
        "503",
        "502",
    )

    def __init__(self, inner: IEventPublisher, attempts: int = 3, base_delay: float = 0.5, sleep=time.sleep):
        self.inner = inner
        self.attempts = max(1, attempts)
        self.base_delay = base_delay
        self._sleep = sleep

    def _is_transient_error(self, exc: Exception) -> bool:
        if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
            return True
        msg = str(exc).lower()
        return any(k in msg for k in self.TRANSIENT_KEYWORDS)

    def publish(self, result: DetectionResult) -> None:
        last_exc = None
        for i in range(1, self.attempts + 1):
            try:
                self.inner.publish(result)
                logger.debug("Publish OK (attempt %d/%d)", i, self.attempts)
                return
            except Exception as e:
                last_exc = e
                if not self._is_transient_error(e):
                    logger.error("Non-retryable publish error: %s", e)
                    raise
                if i == self.attempts:
                    break
                wait = self.base_delay * (2 ** (i - 1))
                logger.warning("Publish attempt %d failed (transient), retrying in %.2fs: %s", i, wait, e)
                self._sleep(wait)

        logger.error("❌ All publish attempts failed after %d tries: %s", self.attempts, last_exc)
        raise last_exc

    def close(self) -> None:
        self.inner.close()
