"""
Identity Session - signed-in user state for the archive browser.

The identity provider owns the whole sign-in handshake; this client only
redirects to it, probes who the current user is, and keeps a local session
marker so a restarted browser knows it was signed in.
"""

import json
import webbrowser
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import requests

from .config import Settings, get_settings
from .utils.logger import get_logger

logger = get_logger(__name__)


class IdentitySession:
    """
    Process-scoped holder of the current user.

    Provides:
    - Session marker load / save / clear
    - Current-user probe
    - Sign-in and sign-out redirects

    The underlying ``requests.Session`` carries the session cookie and is
    shared with the archive client so every data request is authenticated.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http: Optional[requests.Session] = None,
        opener: Callable[[str], Any] = webbrowser.open,
    ):
        """
        Initialize the identity session.

        Args:
            settings: Settings instance (loaded from the environment if omitted)
            http: Shared HTTP session holding the session credential
            opener: Callable used to redirect the user to a URL
        """
        self.settings = settings or get_settings()
        self.http = http or requests.Session()
        self._opener = opener
        self._marker_file = Path(self.settings.session_file)
        self.current_user: Optional[Dict[str, Any]] = None
        self.init()

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def init(self) -> None:
        """Restore the current user from the local session marker."""
        self.current_user = self._load_stored_user()

    def clear(self) -> None:
        """Forget the current user and remove the local session marker."""
        self.current_user = None
        if self._marker_file.exists():
            try:
                self._marker_file.unlink()
            except OSError as exc:
                logger.warning("Could not delete session marker: %s", exc)

    def _load_stored_user(self) -> Optional[Dict[str, Any]]:
        if not self._marker_file.exists():
            return None
        try:
            with open(self._marker_file, "r") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not load session marker: %s", exc)
            return None

    def _save_user(self, user: Dict[str, Any]) -> None:
        with open(self._marker_file, "w") as f:
            json.dump(user, f, indent=2)
        self._marker_file.chmod(0o600)

    def load_user(self) -> Optional[Dict[str, Any]]:
        """
        Ask the identity provider who is signed in.

        Returns:
            The user profile, or None when no session is active
        """
        url = f"{self.settings.auth_base}/current-user"
        try:
            response = self.http.get(url, timeout=self.settings.request_timeout)
        except requests.RequestException as exc:
            logger.error("Error loading user: %s", exc)
            self.current_user = None
            return None

        if not response.ok:
            self.current_user = None
            return None

        try:
            user = response.json()
            self._save_user(user)
        except ValueError as exc:
            logger.error("Current-user response is not JSON: %s", exc)
            self.clear()
            return None
        except OSError as exc:
            logger.error("Could not save session marker: %s", exc)
            self.clear()
            return None
        self.current_user = user
        return self.current_user

    def sign_in(self) -> None:
        """Redirect to the identity provider's login page."""
        self._opener(f"{self.settings.auth_base}/login")

    def sign_out(self) -> None:
        """Redirect to the provider's logout endpoint and drop local state."""
        logger.info("Signing out")
        self._opener(f"{self.settings.auth_base}/logout")
        self.clear()
