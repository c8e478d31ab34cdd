"""Bookmark domain entity - pure business logic."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Bookmark:
    """A user's saved attraction, keyed by the upstream content id."""
    id: Optional[int]
    user_id: str
    content_id: str
    created_at: Optional[datetime] = None

    def is_valid(self) -> bool:
        """Validate bookmark business rules."""
        return bool(
            self.user_id and
            self.user_id.strip() and
            self.content_id and
            self.content_id.strip()
        )
