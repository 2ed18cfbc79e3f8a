"""Browser application shell.

Wires the identity session, the archive client and the view controller
together; the rendering layer talks to ``controller`` only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from folklore.config import Settings, get_settings
from folklore.identity import IdentitySession

from browser.services.clients import get_archive_client, get_identity
from browser.services.view_controller import ViewController
from browser.state import ViewMode


@dataclass
class BrowserApp:
    settings: Settings = field(default_factory=get_settings)
    identity: Optional[IdentitySession] = None
    controller: Optional[ViewController] = None

    def __post_init__(self) -> None:
        if self.identity is None:
            self.identity = get_identity(self.settings)
        if self.controller is None:
            client = get_archive_client(self.identity, self.settings)
            self.controller = ViewController(client, self.settings)

    def ensure_signed_in(self) -> bool:
        """Probe the current user; start the sign-in redirect if there is none."""
        if self.identity.load_user() is None:
            self.identity.sign_in()
            return False
        return True

    def run(self, mode: ViewMode = ViewMode.TABLE) -> bool:
        """Load filter options and enter the first view."""
        self.controller.populate_unique_options()
        return self.controller.switch_to(mode)
