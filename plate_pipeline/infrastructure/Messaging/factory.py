from plate_pipeline.core.config import settings
from plate_pipeline.domain.Interfaces.event_publisher import IEventPublisher
from plate_pipeline.infrastructure.Messaging.retry_publisher import RetryPublisher


def create_publisher(kind: str | None = None) -> IEventPublisher:
    kind = (kind or settings.publisher).lower()

    if kind == "kafka":
        from plate_pipeline.infrastructure.Messaging.kafka_publisher import KafkaPublisher
        inner = KafkaPublisher()
    elif kind == "http":
        from plate_pipeline.infrastructure.Messaging.http_publisher import HttpPublisher
        inner = HttpPublisher()
    elif kind == "console":
        from plate_pipeline.infrastructure.Messaging.console_publisher import ConsolePublisher
        return ConsolePublisher()
    else:
        raise ValueError(f"publisher desconocido: {kind!r}")

    return RetryPublisher(
        inner,
        attempts=settings.publish_retry_attempts,
        base_delay=settings.publish_retry_base_delay,
    )
