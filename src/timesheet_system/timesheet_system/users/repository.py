from __future__ import annotations

from typing import Iterable, Optional, Protocol

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def get_names(self, user_ids: Iterable[int]) -> dict[int, str]:
        """Map user id -> full name for display (unknown ids are omitted)."""

        raise NotImplementedError
