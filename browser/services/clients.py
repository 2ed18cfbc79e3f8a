"""Client factories for the browser layer."""

from __future__ import annotations

from typing import Optional

from folklore.archive_client import ArchiveClient
from folklore.config import Settings, get_settings
from folklore.identity import IdentitySession


def get_identity(settings: Optional[Settings] = None) -> IdentitySession:
    """Return the identity session, restored from the local marker."""

    return IdentitySession(settings or get_settings())


def get_archive_client(
    identity: Optional[IdentitySession] = None, settings: Optional[Settings] = None
) -> ArchiveClient:
    """Return an archive client sharing the identity's credential."""

    settings = settings or (identity.settings if identity is not None else get_settings())
    return ArchiveClient(settings=settings, identity=identity)
