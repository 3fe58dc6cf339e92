"""Session marker written by the login flow - token and demo flag"""
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SESSION_FILE = "shem-session.json"


@dataclass(frozen=True)
class Session:
    """
    Client-local session state.

    Attributes:
        token: Auth token to attach to API requests, if logged in.
        demo_user: Set by the login flow when the user picked demo mode.
    """
    token: str | None = None
    demo_user: str | None = None

    @property
    def is_demo(self) -> bool:
        return self.demo_user is not None


def load_session(path: str | os.PathLike | None = None) -> Session:
    """
    Read the session marker once.

    A missing file is an anonymous, non-demo session. SHEM_DEMO_MODE=1 forces
    demo mode regardless of the file. An unreadable file is logged and
    treated as missing.
    """
    path = Path(path or os.getenv("SHEM_SESSION_FILE", DEFAULT_SESSION_FILE))

    data = {}
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Session: Cannot read {path}: {e}")
            data = {}
        if not isinstance(data, dict):
            logger.warning(f"Session: Ignoring {path}, expected a JSON object")
            data = {}

    demo_user = data.get("demoUser")
    if os.getenv("SHEM_DEMO_MODE") == "1" and demo_user is None:
        demo_user = "demo"

    return Session(token=data.get("token"), demo_user=demo_user)
