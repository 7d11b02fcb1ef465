"""Session repository: bearer tokens mapped to a user id with an expiry (file persistence)."""
import json
import logging
import os
import secrets
import shutil
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from threading import Lock
from typing import Optional

from study.infra.paths import SESSIONS_FILE
from study.utilities.config import SESSION_TTL_HOURS

logger = logging.getLogger(__name__)

_lock = Lock()


class SessionRepository:
    def __init__(self, sessions_file: Optional[Path] = None):
        self.sessions_file = Path(sessions_file) if sessions_file else SESSIONS_FILE

    def _load(self) -> list:
        try:
            with open(self.sessions_file, "r", encoding="utf-8") as f:
                sessions = json.load(f) or []
        except FileNotFoundError:
            return []
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("Invalid JSON in sessions file: %s", e)
            return []
        if not isinstance(sessions, list):
            logger.error("Unexpected top-level %s in sessions file", type(sessions).__name__)
            return []
        return [s for s in sessions if isinstance(s, dict)]

    def _save(self, sessions: list) -> None:
        directory = self.sessions_file.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(directory), prefix=".sessions_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(sessions, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, str(self.sessions_file))
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def create_session(self, user_id: str, ttl_hours: int = SESSION_TTL_HOURS,
                       now: Optional[datetime] = None) -> str:
        """Mint a new token for ``user_id`` and return it."""
        now = now or datetime.now()
        token = secrets.token_urlsafe(32)
        with _lock:
            sessions = self._load()
            sessions.append({
                "token": token,
                "userId": user_id,
                "expiresAt": (now + timedelta(hours=ttl_hours)).isoformat(),
            })
            self._save(sessions)
        logger.info("Created session for user %s", user_id)
        return token

    def resolve(self, token: str, now: Optional[datetime] = None) -> Optional[str]:
        """User id behind a token, or None when the token is unknown or expired."""
        if not token:
            return None
        now = now or datetime.now()
        for entry in self._load():
            if entry.get("token") != token:
                continue
            try:
                expires_at = datetime.fromisoformat(entry.get("expiresAt", ""))
            except ValueError:
                logger.warning("Session with unreadable expiry for user %s", entry.get("userId"))
                return None
            if expires_at < now:
                logger.warning("Expired session for user %s", entry.get("userId"))
                return None
            return entry.get("userId")
        return None

    def revoke(self, token: str) -> bool:
        with _lock:
            sessions = self._load()
            remaining = [s for s in sessions if s.get("token") != token]
            if len(remaining) == len(sessions):
                return False
            self._save(remaining)
            return True


__all__ = ["SessionRepository"]
