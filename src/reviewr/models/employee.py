"""Employee records.

The core only needs a name and an email address for each subject; the rest
of the record is informational.
"""

from pydantic import BaseModel, Field


class Employee(BaseModel):
    """A person whose activity can be reviewed."""

    name: str = Field(..., description="Display name, also the record key")
    title: str = Field(default="", description="Job title")
    committer_email: str | None = Field(
        default=None,
        description="Address used to find the person on every platform",
    )

    @property
    def has_email(self) -> bool:
        return bool(self.committer_email and self.committer_email.strip())
