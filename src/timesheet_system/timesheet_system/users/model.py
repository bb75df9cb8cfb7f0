from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an employee account (roster data is owned elsewhere).

    Plain data object, no database access.
    """

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    is_active: bool = True


@dataclass(frozen=True)
class SessionUser:
    """The caller of a service operation, as stored in the Flask session."""

    user_id: int
    full_name: str
    role: Role

    @property
    def is_manager(self) -> bool:
        return self.role.is_manager
