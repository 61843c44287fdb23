"""
Taskiq Broker Configuration.

Message broker for deployments that run the trash purge in a taskiq
worker instead of inside the API process. Uses Redis as the backend.

Usage:
    taskiq worker xnote.backend.tasks.broker:broker

The scheduled tasks are registered on the broker when it is created.
"""

from typing import TYPE_CHECKING

from xnote.backend.core.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from taskiq_redis import ListQueueBroker


def create_broker() -> "ListQueueBroker":
    """
    Create and configure the Taskiq broker from database.yaml (redis section).

    Returns:
        Configured ListQueueBroker instance
    """
    from taskiq_redis import ListQueueBroker, RedisAsyncResultBackend

    from xnote.backend.core.config import get_app_config, get_redis_url

    redis_url = get_redis_url()
    broker_config = get_app_config().database.redis.broker

    result_backend = RedisAsyncResultBackend(
        redis_url=redis_url,
        result_ex_time=broker_config.result_expiry_seconds,
    )

    broker = ListQueueBroker(
        url=redis_url,
        queue_name=broker_config.queue_name,
    ).with_result_backend(result_backend)

    logger.debug(
        "Taskiq broker configured",
        extra={
            "queue_name": broker_config.queue_name,
            "result_expiry": broker_config.result_expiry_seconds,
        },
    )

    return broker


_broker: "ListQueueBroker | None" = None


def get_broker() -> "ListQueueBroker":
    """
    Get the broker instance, creating it if necessary.

    Returns:
        Configured broker instance
    """
    global _broker
    if _broker is None:
        _broker = create_broker()

        @_broker.on_event("startup")
        async def on_startup() -> None:
            logger.info("Taskiq worker starting up")

        @_broker.on_event("shutdown")
        async def on_shutdown() -> None:
            logger.info("Taskiq worker shutting down")

        from xnote.backend.tasks.scheduled import register_scheduled_tasks
        register_scheduled_tasks(_broker)

    return _broker


def __getattr__(name: str):
    """Lazy attribute access for broker (taskiq worker command)."""
    if name == "broker":
        return get_broker()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
