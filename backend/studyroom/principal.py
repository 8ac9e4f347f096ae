"""Actor making a request against the booking engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Actor:
    """
    Caller identity as supplied by the surrounding auth layer.

    ``user_id`` is None for anonymous callers; bookings they create have no owner.
    """

    user_id: Optional[str] = None
    is_admin: bool = False

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    def can_delete(self, created_by: Optional[str]) -> bool:
        """Creator-or-admin policy. Ownerless reservations are admin-only."""
        if self.is_admin:
            return True
        return created_by is not None and self.user_id == created_by


ANONYMOUS = Actor()
