from .observers import CompositeObserver, LoggingObserver, MetricsObserver, fingerprint

__all__ = ["CompositeObserver", "LoggingObserver", "MetricsObserver", "fingerprint"]
