from .base import InMemoryTokenStorage, TokenStorage
from .redis_adapter import RedisTokenStorage

__all__ = ["TokenStorage", "InMemoryTokenStorage", "RedisTokenStorage"]
