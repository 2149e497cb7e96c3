"""Resolve an athlete or coach role from an email address."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

ATHLETE = "athlete"
COACH = "coach"


class RoleDirectory:
    """Case-insensitive identity -> role lookup. Unlisted identities are athletes."""

    def __init__(self, roles: Optional[Mapping[str, str]] = None, default_role: str = ATHLETE) -> None:
        self._roles: Dict[str, str] = {
            _key(identity): role for identity, role in (roles or {}).items() if _key(identity)
        }
        self.default_role = default_role

    @classmethod
    def with_coaches(cls, emails: Iterable[str]) -> "RoleDirectory":
        return cls({email: COACH for email in emails})

    def role_for(self, identity: Optional[str]) -> str:
        return self._roles.get(_key(identity), self.default_role)

    def is_coach(self, identity: Optional[str]) -> bool:
        return self.role_for(identity) == COACH


def _key(identity: Optional[str]) -> str:
    return (identity or "").strip().lower()
