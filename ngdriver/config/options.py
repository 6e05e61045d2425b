"""
Configuration options for ngdriver.

NgDriverOptions collects everything a NgDriver needs beyond the wrapped
driver itself: the root element selector, timeouts and the framework
detection retry budget.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .defaults import (
    DEFAULT_BLANK_URL,
    DEFAULT_DETECTION_ATTEMPTS,
    DEFAULT_DETECTION_INTERVAL,
    DEFAULT_IGNORE_SYNCHRONIZATION,
    DEFAULT_NG12_HYBRID,
    DEFAULT_ROOT_ELEMENT,
    DEFAULT_SCRIPT_TIMEOUT,
    DEFAULT_TRACK_OUTSTANDING_TIMEOUTS,
)


class NgDriverOptions(BaseModel):
    """Options controlling synchronization and bootstrap behavior."""

    root_element: str = Field(
        DEFAULT_ROOT_ELEMENT,
        description="CSS selector of the element hosting the Angular app",
    )
    ignore_synchronization: bool = Field(
        DEFAULT_IGNORE_SYNCHRONIZATION,
        description="Skip all waiting for Angular",
    )
    script_timeout: Optional[float] = Field(
        DEFAULT_SCRIPT_TIMEOUT,
        ge=0,
        description="Async script timeout in seconds applied to the wrapped driver",
    )
    detection_attempts: int = Field(
        DEFAULT_DETECTION_ATTEMPTS,
        ge=0,
        description="Retries when looking for Angular after navigation",
    )
    detection_interval: float = Field(
        DEFAULT_DETECTION_INTERVAL,
        gt=0,
        description="Seconds between detection retries",
    )
    ng12_hybrid: bool = Field(
        DEFAULT_NG12_HYBRID,
        description="Treat the app as an angular.js/Angular hybrid",
    )
    track_outstanding_timeouts: bool = Field(
        DEFAULT_TRACK_OUTSTANDING_TIMEOUTS,
        description="Record pending $timeout tasks in the default module",
    )
    blank_url: str = Field(
        DEFAULT_BLANK_URL,
        description="Neutral page loaded before each navigation",
    )

    @field_validator("root_element", "blank_url")
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Reject empty selectors and URLs."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @property
    def detection_interval_ms(self) -> int:
        """Detection interval in milliseconds, as the detection script expects."""
        return int(self.detection_interval * 1000)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NgDriverOptions":
        """Create options from a dictionary."""
        return cls(**data)

    def merge(self, other: "NgDriverOptions") -> "NgDriverOptions":
        """Merge with another NgDriverOptions, other takes precedence."""
        data = self.model_dump(exclude_none=True)
        data.update(other.model_dump(exclude_none=True, exclude_unset=True))
        return NgDriverOptions(**data)

    def to_dict(self) -> dict[str, Any]:
        """Convert options to a dictionary."""
        return self.model_dump(exclude_none=True)
