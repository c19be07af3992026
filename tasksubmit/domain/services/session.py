"""Session store: login, signup, restore and logout lifecycle."""

from __future__ import annotations

import structlog

from tasksubmit.api.client import ApiClientError, TaskSubmitClient, error_message
from tasksubmit.api.schemas import AuthResponse, User
from tasksubmit.core.auth import Role
from tasksubmit.core.logging import bind_session_context, clear_session_context
from tasksubmit.domain.models import SessionState
from tasksubmit.domain.services.base import ObservableStore
from tasksubmit.infrastructure.repositories.credential_store import CredentialStore

logger = structlog.get_logger(__name__)


class SessionStore(ObservableStore):
    """Holds who is signed in and keeps durable storage in step with it."""

    def __init__(self, client: TaskSubmitClient, storage: CredentialStore) -> None:
        super().__init__()
        self.client = client
        self.storage = storage
        self.state = SessionState()

    @property
    def user(self) -> User | None:
        return self.state.user

    async def login(self, email: str, password: str) -> bool:
        """Authenticate with email and password.

        Returns True on success. Failures are recorded in ``state.error``.
        """
        await logger.ainfo("login_attempt", email=email)
        self._begin()
        try:
            result = await self.client.login(email=email, password=password)
        except ApiClientError as exc:
            await logger.awarning("login_failed", email=email, error=exc.message)
            self._reject(error_message(exc))
            return False

        self._fulfil(result)
        await logger.ainfo("login_success", user_id=result.user.id, role=result.user.role.value)
        return True

    async def signup(self, email: str, password: str, name: str, role: Role | str) -> bool:
        """Register a new identity; same contract as :meth:`login`."""
        role_value = role.value if isinstance(role, Role) else role
        if not Role.contains(role_value):
            self.state.error = f"Invalid role: {role_value}"
            self._notify()
            return False

        await logger.ainfo("signup_attempt", email=email, role=role_value)
        self._begin()
        try:
            result = await self.client.signup(
                email=email, password=password, name=name, role=Role(role_value)
            )
        except ApiClientError as exc:
            await logger.awarning("signup_failed", email=email, error=exc.message)
            self._reject(error_message(exc))
            return False

        self._fulfil(result)
        await logger.ainfo("signup_success", user_id=result.user.id, role=role_value)
        return True

    def restore_session(self) -> SessionState:
        """Load persisted credentials once at start; always ends hydrated."""
        token = self.storage.get_token()
        if token:
            self.state.token = token
            self.state.is_authenticated = True
            user = self.storage.get_user()
            if user is not None:
                self.state.user = user
                bind_session_context(user_id=user.id, role=user.role.value)

        self.state.is_hydrated = True
        logger.info(
            "session_restored",
            authenticated=self.state.is_authenticated,
            has_user=self.state.user is not None,
        )
        self._notify()
        return self.state

    def logout(self) -> None:
        """Forget the local session. The backend is not contacted."""
        user_id = self.state.user.id if self.state.user else None
        self.state.user = None
        self.state.token = None
        self.state.is_authenticated = False
        self.state.error = None
        self.storage.clear()
        logger.info("logout", user_id=user_id)
        clear_session_context()
        self._notify()

    def clear_error(self) -> None:
        self.state.error = None
        self._notify()

    def reset(self) -> None:
        """Return to the process-start state, before hydration."""
        self.state = SessionState()
        clear_session_context()
        self._notify()

    def _begin(self) -> None:
        self.state.loading = True
        self.state.error = None
        self._notify()

    def _fulfil(self, result: AuthResponse) -> None:
        try:
            self.storage.save_session(result.token, result.user)
        finally:
            self.state.loading = False
        self.state.user = result.user
        self.state.token = result.token
        self.state.is_authenticated = True
        self.state.error = None
        bind_session_context(user_id=result.user.id, role=result.user.role.value)
        self._notify()

    def _reject(self, message: str) -> None:
        self.state.loading = False
        self.state.error = message
        self.state.is_authenticated = False
        self.state.user = None
        self.state.token = None
        self._notify()
