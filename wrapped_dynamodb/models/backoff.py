from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BackoffPolicy(BaseModel):
    """Delay schedule for resubmitting unprocessed batch items.

    Attempt 1 goes out immediately; attempt n (n >= 2) waits
    ``initial_delay * multiplier ** (n - 2)`` seconds, capped at ``max_delay``.
    With ``max_attempts`` and ``max_delay`` left unset the schedule grows
    without bound and a chunk is retried until the store accepts it.
    """

    initial_delay: float = Field(0.1, gt=0, description="Delay before the first retry, in seconds")
    multiplier: float = Field(2.0, ge=1.0, description="Growth factor between consecutive retries")
    max_delay: Optional[float] = Field(None, gt=0, description="Ceiling for a single delay, in seconds")
    max_attempts: Optional[int] = Field(None, ge=1, description="Cap on store calls per chunk")

    model_config = ConfigDict(frozen=True)

    @property
    def bounded(self) -> bool:
        return self.max_attempts is not None

    def delay_before(self, attempt: int) -> float:
        """Seconds to wait before the given 1-based attempt."""
        if attempt <= 1:
            return 0.0
        delay = self.initial_delay * self.multiplier ** (attempt - 2)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay

    def allows(self, attempt: int) -> bool:
        """Whether the given 1-based attempt may be issued."""
        return self.max_attempts is None or attempt <= self.max_attempts
