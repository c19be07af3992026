"""Durable client storage for the session token and user identity."""

from __future__ import annotations

import structlog
from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from tasksubmit.api.schemas import User
from tasksubmit.infrastructure.db import create_session_factory, create_storage_engine
from tasksubmit.infrastructure.db.models import StoredValue

logger = structlog.get_logger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class CredentialStore:
    """Key/value storage holding ``token`` and ``user`` across restarts.

    Reads and writes are unguarded: two processes sharing one database can
    observe each other's stale values until they restore again.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    @classmethod
    def from_url(cls, url: str) -> CredentialStore:
        return cls(create_session_factory(create_storage_engine(url)))

    # --- Raw key/value access ---

    def get_item(self, key: str) -> str | None:
        with self.session_factory() as session:
            return session.scalar(select(StoredValue.value).where(StoredValue.key == key))

    def set_item(self, key: str, value: str) -> None:
        with self.session_factory() as session:
            session.merge(StoredValue(key=key, value=value))
            session.commit()

    def remove_items(self, *keys: str) -> None:
        with self.session_factory() as session:
            session.execute(delete(StoredValue).where(StoredValue.key.in_(keys)))
            session.commit()

    # --- Session credentials ---

    def get_token(self) -> str | None:
        return self.get_item(TOKEN_KEY) or None

    def get_user(self) -> User | None:
        """Return the persisted user, discarding it if it cannot be parsed."""
        raw = self.get_item(USER_KEY)
        if raw is None:
            return None
        try:
            return User.model_validate_json(raw)
        except ValueError:
            logger.warning("stored_user_discarded", reason="unparseable")
            self.remove_items(USER_KEY)
            return None

    def save_session(self, token: str, user: User) -> None:
        """Persist token and user together; neither is written if either fails."""
        with self.session_factory() as session:
            session.merge(StoredValue(key=TOKEN_KEY, value=token))
            session.merge(StoredValue(key=USER_KEY, value=user.model_dump_json()))
            session.commit()

    def clear(self) -> None:
        self.remove_items(TOKEN_KEY, USER_KEY)
