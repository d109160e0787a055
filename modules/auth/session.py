"""
Auth session holder.

Owns the single authoritative ``(principal, profile, state)`` tuple for a
client of the backend and publishes read-only snapshots to subscribers.
All mutations go through named operations: ``initialize``, ``sign_in``,
``sign_out``, ``refresh``, ``sign_up`` and ``handle_auth_event`` (backend
session-change notifications).

State machine:
    UNINITIALIZED -> RESOLVING -> AUTHENTICATED | UNAUTHENTICATED
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from supabase import AuthError, Client, PostgrestAPIError

from shared.config import Settings
from shared.models import AuthenticatedUser

from .exceptions import InvalidCredentialsError, SignUpError
from .interfaces import ISchemaProvisioner
from .models import SessionSnapshot, SessionState, SignUpResult
from .profiles import TRAINERS_TABLE, ProfileService

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionSnapshot], Any]


class SessionHolder:
    """
    Observable session store.

    Example:
        holder = SessionHolder(client, ProfileService(client, settings), settings)
        unsubscribe = holder.subscribe(lambda snap: print(snap.state))
        await holder.sign_in("trainer_pt@sportiko.eu", "...")
        holder.snapshot.profile.role  # "trainer"
    """

    def __init__(
        self,
        client: Client,
        profiles: ProfileService,
        settings: Settings,
        provisioner: Optional[ISchemaProvisioner] = None,
    ):
        self._client = client
        self._profiles = profiles
        self._settings = settings
        self._provisioner = provisioner
        self._snapshot = SessionSnapshot()
        self._listeners: list[SessionListener] = []
        self._backend_subscription: Any = None
        self._event_tasks: set[asyncio.Task] = set()

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def state(self) -> SessionState:
        return self._snapshot.state

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener for snapshot changes. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, snapshot: SessionSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)

    def _clear(self) -> None:
        self._publish(SessionSnapshot(state=SessionState.UNAUTHENTICATED))

    async def _establish(self, user: Any, access_token: Optional[str]) -> SessionSnapshot:
        principal = AuthenticatedUser.from_supabase_user(user)
        self._publish(SessionSnapshot(state=SessionState.RESOLVING, principal=principal))
        try:
            profile = await self._profiles.resolve(principal)
        except Exception:
            self._clear()
            raise
        self._publish(
            SessionSnapshot(
                state=SessionState.AUTHENTICATED,
                principal=principal,
                profile=profile,
                access_token=access_token,
            )
        )
        return self._snapshot

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def initialize(self) -> SessionSnapshot:
        """Load the current backend session and subscribe to session changes."""
        if self._backend_subscription is None:
            self._backend_subscription = self._client.auth.on_auth_state_change(
                self._on_backend_event
            )
        return await self.refresh()

    async def refresh(self) -> SessionSnapshot:
        """Re-read the backend session and re-resolve the profile."""
        self._publish(self._snapshot.model_copy(update={"state": SessionState.RESOLVING}))
        try:
            session = self._client.auth.get_session()
        except AuthError as e:
            logger.error("Error getting session: %s", e.message)
            session = None

        if session is None or session.user is None:
            self._clear()
            return self._snapshot
        return await self._establish(session.user, session.access_token)

    async def sign_in(self, email: str, password: str) -> SessionSnapshot:
        """
        Sign in with email and password.

        Raises:
            InvalidCredentialsError: If the backend rejects the credentials.
                The session state is left unchanged.
        """
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            logger.warning("Login error for %s: %s", email, e.message)
            raise InvalidCredentialsError(e.message or "Invalid login credentials") from e

        if response.user is None:
            raise InvalidCredentialsError()
        token = response.session.access_token if response.session else None
        return await self._establish(response.user, token)

    async def sign_out(self) -> bool:
        """
        Sign out.

        Local state is cleared even when the remote call fails.

        Returns:
            False if the backend rejected the sign-out, True otherwise
        """
        try:
            self._client.auth.sign_out()
        except AuthError as e:
            logger.warning("Remote sign-out failed, clearing local session anyway: %s", e.message)
            return False
        finally:
            self._clear()
        return True

    async def sign_up(self, email: str, password: str, full_name: str) -> SignUpResult:
        """
        Register a new trainer.

        Steps run in order: create the principal, insert the trainer row
        with a trial window, provision the tenant schema. A failing step
        stops the workflow; earlier steps are not rolled back and the
        failure is reported in ``SignUpResult.errors``.
        """
        try:
            response = self._client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"full_name": full_name}},
                }
            )
        except AuthError as e:
            logger.error("Sign up failed for %s: %s", email, e.message)
            raise SignUpError(e.message) from e

        if response.user is None:
            raise SignUpError("Sign up did not return a user")

        principal = AuthenticatedUser.from_supabase_user(response.user)
        result = SignUpResult(principal=principal)

        trial_end = datetime.now(timezone.utc) + timedelta(days=self._settings.trial_days)
        try:
            self._client.table(TRAINERS_TABLE).insert(
                {
                    "id": principal.id,
                    "email": principal.email,
                    "full_name": full_name,
                    "trial_end": trial_end.isoformat(),
                }
            ).execute()
        except PostgrestAPIError as e:
            logger.error("Trainer row creation failed for %s: %s", principal.id, e.message)
            result.errors.append(f"trainer profile: {e.message}")
            return result
        result.trainer_created = True

        if self._provisioner is not None:
            provisioning = await self._provisioner.provision(principal.id)
            result.provisioned = provisioning.success
            result.errors.extend(provisioning.errors)

        if response.session is not None:
            await self._establish(response.user, response.session.access_token)
        return result

    async def handle_auth_event(self, event: str, session: Any) -> SessionSnapshot:
        """
        Apply a backend session-change notification.

        Sign-out or a missing session clears the state. A notification for
        the principal already held (token refresh, user update) only swaps
        the token and principal details; anything else re-resolves.
        """
        if event == "SIGNED_OUT" or session is None or session.user is None:
            if self._snapshot.state != SessionState.UNAUTHENTICATED:
                self._clear()
            return self._snapshot

        current = self._snapshot
        if current.authenticated and current.principal and current.principal.id == str(session.user.id):
            self._publish(
                current.model_copy(
                    update={
                        "principal": AuthenticatedUser.from_supabase_user(session.user),
                        "access_token": session.access_token,
                    }
                )
            )
            return self._snapshot

        return await self._establish(session.user, session.access_token)

    def _on_backend_event(self, event: str, session: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Auth event %s outside an event loop; ignored", event)
            return
        task = loop.create_task(self.handle_auth_event(event, session))
        self._event_tasks.add(task)
        task.add_done_callback(self._event_task_done)

    def _event_task_done(self, task: asyncio.Task) -> None:
        self._event_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Handling auth event failed: %s", error, exc_info=error)

    async def close(self) -> None:
        """Unsubscribe from backend notifications and drop listeners."""
        if self._backend_subscription is not None:
            self._backend_subscription.unsubscribe()
            self._backend_subscription = None
        for task in list(self._event_tasks):
            task.cancel()
        self._event_tasks.clear()
        self._listeners.clear()
