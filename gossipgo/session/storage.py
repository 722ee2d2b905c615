"""Durable local storage for the session, as a JSON file."""

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from gossipgo.db.models import Session

logger = logging.getLogger(__name__)


class SessionStorage:
    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".session-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(session.model_dump_json())
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.debug("Session saved to %s", self.path)

    def load(self) -> Session | None:
        """Return the stored session, or None when absent or unreadable.

        Unreadable data is deleted so the next start begins unauthenticated.
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Could not read session file %s: %s", self.path, exc)
            return None

        try:
            return Session.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding corrupted session file %s: %s", self.path, exc.error_count())
            self.clear()
            return None

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not delete session file %s: %s", self.path, exc)
