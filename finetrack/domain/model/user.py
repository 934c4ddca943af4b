"""User profile.

Authentication lives elsewhere; comments only need the profile fields they
snapshot as author information.
"""

from pydantic import Field

from finetrack.domain.model.common import DomainModel
from finetrack.domain.value import UserId


class User(DomainModel):
    """Signed-in user's profile."""

    id: UserId
    display_name: str = Field(min_length=1)
    username: str = Field(min_length=1)
