from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    LEARNER = "learner"
    INSTRUCTOR = "instructor"

    @classmethod
    def contains(cls, value: str) -> bool:
        return value in {role.value for role in cls}


def bearer_headers(token: str | None) -> dict[str, str]:
    """Build the Authorization header for a bearer token, if one is held."""
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}
