"""Record assembly from surviving candidates."""

from .enricher import RecordEnricher

__all__ = ["RecordEnricher"]
