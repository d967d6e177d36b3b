"""Error types and error reporting for the typeahead engine.

Every recoverable failure degrades to fewer or no results:
- FetchFailure: the remote candidate source rejected or timed out
- MalformedCandidate: a candidate without a usable id or label
- ConfigurationOutOfRange: an option clamped to its nearest valid bound
"""

from typing import Optional, Any, Dict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from collections import deque

from loguru import logger


class TypeaheadError(Exception):
    """Base class for engine errors."""


class FetchFailure(TypeaheadError):
    """The external candidate source failed for a query."""

    def __init__(self, query: str, cause: Optional[BaseException] = None):
        self.query = query
        self.cause = cause
        reason = f"{type(cause).__name__}: {cause}" if cause else "unknown error"
        super().__init__(f"Fetch failed for query {query!r} ({reason})")


class MalformedCandidate(TypeaheadError):
    """A candidate record is missing a required field."""

    def __init__(self, data: Any, reason: str):
        self.data = data
        self.reason = reason
        super().__init__(f"Malformed candidate ({reason}): {data!r}")


class ConfigurationOutOfRange(TypeaheadError):
    """An option was outside its valid range and has been clamped."""

    def __init__(self, field_name: str, value: Any, clamped: Any):
        self.field_name = field_name
        self.value = value
        self.clamped = clamped
        super().__init__(f"{field_name}={value!r} out of range, clamped to {clamped!r}")


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = 1
    MEDIUM = 2
    HIGH = 3


@dataclass
class ErrorEvent:
    """Represents a reported error."""
    timestamp: datetime
    error_type: str
    message: str
    severity: ErrorSeverity
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'timestamp': self.timestamp.isoformat(),
            'error_type': self.error_type,
            'message': self.message,
            'severity': self.severity.value,
            'context': self.context
        }


class ErrorAggregator:
    """Default error-reporting collaborator: logs and keeps a bounded history."""

    def __init__(self, window_size: int = 100):
        """
        Initialize error aggregator.

        Args:
            window_size: Number of errors to keep
        """
        self.window_size = window_size
        self.errors: deque = deque(maxlen=window_size)
        self.error_counts: Dict[str, int] = {}

    def report(self, error: TypeaheadError) -> ErrorEvent:
        """Record an engine error. Never raises."""
        context: Dict[str, Any] = {}
        if isinstance(error, FetchFailure):
            context['query'] = error.query
        elif isinstance(error, ConfigurationOutOfRange):
            context['field'] = error.field_name

        event = ErrorEvent(
            timestamp=datetime.now(),
            error_type=type(error).__name__,
            message=str(error),
            severity=self._classify_severity(error),
            context=context
        )
        self.record_error(event)
        return event

    def record_error(self, error_event: ErrorEvent) -> None:
        """Record an error event."""
        self.errors.append(error_event)
        key = error_event.error_type
        self.error_counts[key] = self.error_counts.get(key, 0) + 1

        if error_event.severity == ErrorSeverity.HIGH:
            logger.error(error_event.message)
        else:
            logger.warning(error_event.message)

    def _classify_severity(self, error: TypeaheadError) -> ErrorSeverity:
        if isinstance(error, FetchFailure):
            return ErrorSeverity.MEDIUM
        if isinstance(error, MalformedCandidate):
            return ErrorSeverity.LOW
        if isinstance(error, ConfigurationOutOfRange):
            return ErrorSeverity.LOW
        return ErrorSeverity.HIGH

    def get_error_summary(self) -> Dict[str, Any]:
        """Get error summary."""
        by_severity = {'low': 0, 'medium': 0, 'high': 0}
        for event in self.errors:
            by_severity[event.severity.name.lower()] += 1

        return {
            'total_errors': len(self.errors),
            'by_type': dict(self.error_counts),
            'by_severity': by_severity,
            'last_error': self.errors[-1].to_dict() if self.errors else None
        }

    def clear(self) -> None:
        self.errors.clear()
        self.error_counts.clear()
