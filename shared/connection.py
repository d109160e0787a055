"""
Backend connectivity probe and diagnostic connection-config cache.

Network failures are detected by a periodic probe rather than per call. The
monitor polls the backend on a fixed interval and exposes a status that the
readiness endpoint and the CLI report; ``check_now()`` is the manual retry.

The config cache remembers the last connection configuration that produced
a successful probe. It is for diagnostic display only and never takes part
in authorization decisions.
"""

import asyncio
import json
import logging
import time
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field
from supabase import Client

from .config import Settings

logger = logging.getLogger(__name__)

PROBE_TABLE = "trainers"
KEY_PREFIX_LENGTH = 20


class ConnectionStatus(str, Enum):
    """Connectivity indicator states."""

    CHECKING = "checking"
    CONNECTED = "connected"
    ERROR = "error"


class ConnectionCheck(BaseModel):
    """Outcome of a single connectivity probe."""

    connected: bool
    error: Optional[str] = None
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ConnectionConfig(BaseModel):
    """Connection configuration as cached for diagnostics."""

    url: str
    key_prefix: str = ""
    has_service_role: bool = False
    timestamp: float = Field(default_factory=time.time)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConnectionConfig":
        return cls(
            url=settings.supabase_url,
            key_prefix=settings.supabase_anon_key[:KEY_PREFIX_LENGTH],
            has_service_role=bool(settings.supabase_service_role_key),
        )


def check_connection(client: Client) -> ConnectionCheck:
    """
    Probe the backend with a minimal query.

    Never raises: any failure is reported as a disconnected result.
    """
    try:
        client.table(PROBE_TABLE).select("count").limit(1).execute()
    except Exception as e:  # probe reports every failure mode as "not connected"
        logger.error("Supabase connection check failed: %s", e)
        return ConnectionCheck(connected=False, error=getattr(e, "message", None) or str(e))
    return ConnectionCheck(connected=True)


class ConnectionConfigCache:
    """
    File-backed cache of the last known-good connection configuration.

    Entries older than the TTL are discarded on retrieval.
    """

    def __init__(self, path: str | Path, ttl_hours: int = 24):
        self._path = Path(path)
        self._ttl_seconds = ttl_hours * 60 * 60

    @property
    def path(self) -> Path:
        return self._path

    def store(self, config: ConnectionConfig) -> bool:
        """Persist a config snapshot. Returns False if it could not be written."""
        try:
            self._path.write_text(config.model_dump_json())
        except OSError as e:
            logger.error("Error storing DB config: %s", e)
            return False
        return True

    def retrieve(self) -> Optional[ConnectionConfig]:
        """Load the cached config, or None if absent, unreadable or expired."""
        if not self._path.exists():
            return None
        try:
            config = ConnectionConfig.model_validate(json.loads(self._path.read_text()))
        except (OSError, ValueError) as e:
            logger.error("Error retrieving DB config: %s", e)
            return None

        if time.time() - config.timestamp > self._ttl_seconds:
            self.clear()
            return None
        return config

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


class ConnectionMonitor:
    """
    Periodic connectivity probe.

    Runs ``check_connection`` every ``interval`` seconds on the event loop.
    A successful probe refreshes the config cache when one is attached.
    """

    def __init__(
        self,
        client: Client,
        interval: float = 30,
        cache: Optional[ConnectionConfigCache] = None,
        config: Optional[ConnectionConfig] = None,
    ):
        self._client = client
        self._interval = interval
        self._cache = cache
        self._config = config
        self._status = ConnectionStatus.CHECKING
        self._last_check: Optional[ConnectionCheck] = None
        self._listeners: list[Callable[[ConnectionCheck], Any]] = []
        self._task: Optional[asyncio.Task] = None

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def last_check(self) -> Optional[ConnectionCheck]:
        return self._last_check

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, listener: Callable[[ConnectionCheck], Any]) -> Callable[[], None]:
        """Register a listener for probe results. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def check_now(self) -> ConnectionCheck:
        """Run one probe immediately (manual retry)."""
        result = await asyncio.to_thread(check_connection, self._client)
        self._last_check = result
        self._status = ConnectionStatus.CONNECTED if result.connected else ConnectionStatus.ERROR

        if result.connected and self._cache is not None and self._config is not None:
            self._cache.store(self._config.model_copy(update={"timestamp": time.time()}))

        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception:  # listener errors never end the polling loop
                logger.exception("Connection listener %r failed", listener)
        return result

    async def _run(self) -> None:
        while True:
            await self.check_now()
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        """Start polling in the background on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Connection monitor started (interval=%ss)", self._interval)

    async def stop(self) -> None:
        """Stop polling and wait for the task to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
