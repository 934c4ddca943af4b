"""Fine entity.

Fines are managed by their own record manager; the comment system only
reads them as thread parents and keeps ``comment_count`` in sync.
"""

from datetime import datetime

from pydantic import Field

from finetrack.domain.model.common import DomainModel, utcnow
from finetrack.domain.value import FineId


class Fine(DomainModel):
    """A fine, credit or warning recorded against a teammate."""

    id: FineId
    description: str
    subject_name: str
    proposer_name: str
    comment_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
