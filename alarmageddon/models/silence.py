"""Silence domain models."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, model_validator

MATCH_ALL_PATTERN = ".*"


class Silence(BaseModel):
    """Time-bounded suppression rule matched against alert text."""

    id: str = Field(..., description="Silence unique identifier")
    pattern: str = Field(default=MATCH_ALL_PATTERN, description="Case-insensitive regular expression")
    duration: str = Field(default="", description="Duration string the silence was created with")
    created_by: str = Field(default="Unknown", description="Creating actor")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime = Field(..., description="Expiration time")
    active: bool = Field(default=True, description="False once deleted or swept")

    @model_validator(mode="after")
    def validate_window(self) -> "Silence":
        """Ensure the silence expires after it was created."""
        if self.expires_at <= self.created_at:
            raise ValueError("expires_at must be after created_at")
        return self

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the silence has passed its expiration time."""
        return self.expires_at <= (now or datetime.now(timezone.utc))

    def is_effective(self, now: datetime | None = None) -> bool:
        """Check whether the silence currently suppresses alerts."""
        return self.active and not self.is_expired(now)

    def to_record(self) -> dict[str, str]:
        return {
            "id": self.id,
            "pattern": self.pattern,
            "duration": self.duration,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "active": "1" if self.active else "0",
        }

    @classmethod
    def from_record(cls, record: dict[str, str]) -> "Silence":
        data = dict(record)
        data["active"] = record.get("active") == "1"
        return cls.model_validate(data)
