"""User records and the user directory consulted by conversations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from pydantic import BaseModel, Field

from parrot.models.wire import ParticipantData, UserID

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Unknown"


class User(BaseModel):
    """A chat participant."""

    id: UserID
    full_name: str = Field(default=DEFAULT_NAME)
    first_name: str = Field(default=DEFAULT_NAME)
    photo_url: str | None = None
    is_self: bool = False

    @classmethod
    def from_participant(cls, participant: ParticipantData, self_user_id: UserID | None) -> User:
        full_name = participant.fallback_name or DEFAULT_NAME
        return cls(
            id=participant.id,
            full_name=full_name,
            first_name=full_name.split(" ")[0],
            is_self=participant.id == self_user_id,
        )


class UserList:
    """
    Directory of known users keyed by UserID.

    Lookups never fail: an unknown ID yields a placeholder user so that
    events from participants not yet loaded can still be displayed.
    """

    def __init__(self, self_user: User, users: Iterable[User] = ()) -> None:
        self._self_user = self_user.model_copy(update={"is_self": True})
        self._users: dict[UserID, User] = {self._self_user.id: self._self_user}
        for user in users:
            self.add_user(user)

    @property
    def self_user(self) -> User:
        return self._self_user

    def add_user(self, user: User) -> None:
        if user.id == self._self_user.id:
            return
        self._users[user.id] = user

    def get_user(self, user_id: UserID) -> User:
        user = self._users.get(user_id)
        if user is None:
            logger.debug("UserList returning placeholder for unknown user", extra={"user_id": user_id})
            return User(id=user_id)
        return user

    def __getitem__(self, user_id: UserID) -> User:
        return self.get_user(user_id)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._users

    def __iter__(self) -> Iterator[User]:
        return iter(self._users.values())

    def __len__(self) -> int:
        return len(self._users)
