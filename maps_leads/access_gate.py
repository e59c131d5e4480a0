"""
Shared-secret access gate.

The secret lives in the app's environment and is compared in plain text.
This is a convenience gate that keeps casual visitors out for a day at a
time; it is not a security boundary.

Each visitor's session record is kept in their own browser cookie, so one
visitor's login or logout never affects another.
"""
import json
import logging
import math
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Optional, Union

from .config import ACCESS_KEY, ACCESS_STORAGE_KEY, SESSION_DURATION_HOURS

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Persistence for the single ``{key, expiry}`` session record.

    Subclasses provide the raw storage through ``_read``, ``_write`` and
    ``clear``; this class handles encoding and discarding bad records.
    """

    def _read(self) -> Any:
        raise NotImplementedError

    def _write(self, record: dict) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def load(self) -> Optional[dict]:
        try:
            raw = self._read()
        except OSError as e:
            logger.warning(f"Could not read session record: {e}")
            return None

        if raw is None:
            return None

        record = raw
        if isinstance(raw, (str, bytes)):
            try:
                record = json.loads(raw)
            except json.JSONDecodeError as e:
                logger.warning(f"Unreadable session record: {e}")
                self.clear()
                return None

        if not isinstance(record, dict) or 'expiry' not in record:
            logger.warning("Malformed session record, discarding")
            self.clear()
            return None
        return record

    def save(self, record: dict) -> None:
        self._write(record)


class CookieSessionStore(SessionStore):
    """
    Keep the session record in a browser cookie.

    Args:
        cookie_manager: An ``extra_streamlit_components.CookieManager``
            rendered for the current visitor
        name: Cookie name
    """

    def __init__(self, cookie_manager, name: str = ACCESS_STORAGE_KEY):
        self.cookie_manager = cookie_manager
        self.name = name

    def _read(self) -> Any:
        return self.cookie_manager.get(cookie=self.name)

    def _write(self, record: dict) -> None:
        self.cookie_manager.set(
            self.name,
            json.dumps(record),
            expires_at=datetime.fromtimestamp(record['expiry']),
            key=f"set_{self.name}"
        )

    def clear(self) -> None:
        if self.cookie_manager.get(cookie=self.name) is not None:
            self.cookie_manager.delete(self.name, key=f"delete_{self.name}")


class FileSessionStore(SessionStore):
    """Keep the session record as a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding='utf-8')

    def _write(self, record: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(record), encoding='utf-8')

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


class AccessGate:
    """
    Compare an entered key to the configured secret and remember a
    successful login until it expires.

    Args:
        store: Where this visitor's session record is persisted
        secret: The shared key. When empty the gate is disabled.
        duration: How long a granted session stays valid
        clock: Returns the current time in epoch seconds
    """

    def __init__(
        self,
        store: SessionStore,
        secret: Optional[str] = ACCESS_KEY,
        duration: timedelta = timedelta(hours=SESSION_DURATION_HOURS),
        clock: Callable[[], float] = time.time
    ):
        self.store = store
        self.secret = secret
        self.duration = duration
        self.clock = clock

    @property
    def enabled(self) -> bool:
        return bool(self.secret)

    def check_access(self, entered: str) -> bool:
        """
        Grant access if the entered key matches the secret.

        On success a session record expiring after ``duration`` is persisted.
        A wrong key has no side effect.
        """
        if not self.enabled:
            return True
        if entered != self.secret:
            logger.info("Rejected access attempt")
            return False

        expiry = self.clock() + self.duration.total_seconds()
        self.store.save({'key': entered, 'expiry': expiry})
        logger.info("Access granted")
        return True

    def restore_session(self) -> bool:
        """
        Decide at startup whether a stored session still grants access.

        Expired records and records without a usable expiry are removed.
        """
        if not self.enabled:
            return True

        record = self.store.load()
        if record is None:
            return False

        try:
            expiry = float(record['expiry'])
        except (TypeError, ValueError):
            expiry = math.nan

        if not math.isfinite(expiry):
            logger.warning("Session record has an invalid expiry, discarding")
            self.store.clear()
            return False

        if self.clock() >= expiry:
            logger.info("Stored session expired")
            self.store.clear()
            return False
        return True

    def revoke(self) -> None:
        """Forget the stored session."""
        self.store.clear()
