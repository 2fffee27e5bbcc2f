"""Identity data model - who is behind a live connection."""

from dataclasses import dataclass
from typing import Any, Dict

from aosha.auth.models import UserRole


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, bound to a connection until it disconnects."""
    id: int
    username: str
    role: UserRole

    @property
    def is_dm(self) -> bool:
        return self.role == UserRole.DM

    def to_roster_entry(self) -> Dict[str, Any]:
        return {"id": self.id, "username": self.username, "role": self.role.value}
