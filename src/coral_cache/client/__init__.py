from .base import CoralClient
from .proxy import ProxyCoralClient

__all__ = ["CoralClient", "ProxyCoralClient"]
