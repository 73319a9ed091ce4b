"""Per-request context passed to every SessionService operation."""

from dataclasses import dataclass, field

from uuid_extensions import uuid7


@dataclass(frozen=True, kw_only=True)
class RequestContext:
    """Deadline and correlation for one session operation.

    Attributes:
        timeout_seconds: Deadline for the whole operation; None uses the
            service default.
        trace_id: Correlation id bound into every log line.
    """

    timeout_seconds: float | None = None
    trace_id: str = field(default_factory=lambda: str(uuid7()))
