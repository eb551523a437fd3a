from .in_memory_notifier import InMemoryChangeNotifier, PublishedEvent
from .null_notifier import NullChangeNotifier
from .redis_notifier import RedisChangeNotifier, build_redis_client

__all__ = [
    "InMemoryChangeNotifier",
    "NullChangeNotifier",
    "PublishedEvent",
    "RedisChangeNotifier",
    "build_redis_client",
]
