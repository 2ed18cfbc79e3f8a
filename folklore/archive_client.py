"""
Archive API Client - Fetch folklore records from the archive data provider.

Every list or mapping parameter is sent as JSON inside the query string;
``requests`` takes care of the URL encoding. Record payloads are validated
into frozen ``FolkloreRecord`` models before they leave this module.
"""
import json
from typing import Any, Dict, List, Optional, Sequence

import requests
from pydantic import ValidationError

from .config import Settings, get_settings
from .identity import IdentitySession
from .models.fields import FilterCriteria
from .models.schemas import FolkloreRecord
from .utils.logger import get_logger

logger = get_logger(__name__)


class ArchiveError(Exception):
    """Base class for data provider failures."""


class NetworkFailure(ArchiveError):
    """Transport error, non-2xx response, or an unreadable payload."""


class AuthExpired(ArchiveError):
    """The provider answered 401; the sign-out flow has already been started."""


def _encode(value: Any) -> str:
    return json.dumps(value)


class ArchiveClient:
    """
    Client for the folklore archive endpoints.

    Provides methods to:
    - Count and page through records matching a filter set
    - Fetch the full filtered result set (map view)
    - Draw a random sample scoped to filters or to a folder
    - List filter options and folder contents
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        identity: Optional[IdentitySession] = None,
        http: Optional[requests.Session] = None,
    ):
        """
        Initialize the archive client.

        Args:
            settings: Settings instance (loaded from the environment if omitted)
            identity: Identity session; its HTTP session carries the credential
            http: Explicit HTTP session (defaults to the identity's)
        """
        self.settings = settings or get_settings()
        self.identity = identity
        if http is not None:
            self.http = http
        elif identity is not None:
            self.http = identity.http
        else:
            self.http = requests.Session()
        self.base_url = f"{self.settings.api_base.rstrip('/')}/folklore"

        if identity is not None and not identity.is_authenticated:
            logger.warning("Not signed in. Requests will fail until sign-in completes.")

    def _get_headers(self) -> dict:
        return {"Accept": "application/json"}

    def _request(self, endpoint: str, params: Optional[dict] = None) -> Any:
        """
        Make an authenticated GET request.

        Args:
            endpoint: Path below the ``/folklore`` root
            params: Query parameters (already JSON-encoded where needed)

        Returns:
            Decoded JSON body

        Raises:
            AuthExpired: on 401, after triggering sign-out
            NetworkFailure: on any other failure
        """
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.http.get(
                url,
                params=params,
                headers=self._get_headers(),
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as exc:
            raise NetworkFailure(f"GET {endpoint} failed: {exc}") from exc

        if response.status_code == 401:
            logger.warning("Session rejected by %s, signing out", endpoint)
            if self.identity is not None:
                self.identity.sign_out()
            raise AuthExpired(f"GET {endpoint} returned 401")

        try:
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as exc:
            raise NetworkFailure(f"GET {endpoint} failed: {exc}") from exc
        except ValueError as exc:
            raise NetworkFailure(f"GET {endpoint} returned invalid JSON") from exc

    @staticmethod
    def _records(payload: Any, endpoint: str) -> List[FolkloreRecord]:
        if not isinstance(payload, list):
            raise NetworkFailure(f"{endpoint} returned {type(payload).__name__}, expected a list")
        try:
            return [FolkloreRecord.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise NetworkFailure(f"{endpoint} returned malformed records: {exc}") from exc

    def count(self, filters: FilterCriteria) -> int:
        """Number of records matching ``filters``."""
        result = self._request("/count", {"filters": _encode(filters)})
        try:
            return int(result)
        except (TypeError, ValueError) as exc:
            raise NetworkFailure(f"/count returned {result!r}") from exc

    def paginated(
        self, page: int, page_size: int, filters: FilterCriteria
    ) -> List[FolkloreRecord]:
        """
        One page of records matching ``filters``.

        Args:
            page: 1-based page number
            page_size: Records per page
            filters: Filter criteria

        Returns:
            Up to ``page_size`` records (fewer on the last page)
        """
        params = {"page": page, "page_size": page_size, "filters": _encode(filters)}
        return self._records(self._request("/paginated", params), "/paginated")

    def all_records(self, filters: FilterCriteria) -> List[FolkloreRecord]:
        """Every record matching ``filters`` (used by the map view)."""
        return self._records(self._request("/", {"filters": _encode(filters)}), "/")

    def random(self, filters: FilterCriteria) -> List[FolkloreRecord]:
        """A server-chosen random subset of the records matching ``filters``."""
        payload = self._request("/random", {"filters": _encode(filters)})
        return self._records(payload, "/random")

    def random_in_folder(self, folder_path: Sequence[str]) -> List[FolkloreRecord]:
        """A server-chosen random subset of the records under ``folder_path``."""
        payload = self._request("/random", {"folder_path": _encode(list(folder_path))})
        return self._records(payload, "/random")

    def filter_options(self, field_to_path: Dict[str, str]) -> Dict[str, List[str]]:
        """
        Distinct values per filterable field.

        Returns:
            Mapping of field key to its sorted unique values
        """
        result = self._request("/filters", {"field_to_path": _encode(field_to_path)})
        if not isinstance(result, dict):
            raise NetworkFailure(f"/filters returned {type(result).__name__}, expected an object")
        return {
            key: sorted({v for v in (values or []) if v is not None}, key=str)
            for key, values in result.items()
        }

    def folder_contents(self, folder_path: Sequence[str], return_records: bool = False):
        """
        List a folder of the hierarchical index.

        Args:
            folder_path: Resolved path segments (no blanks)
            return_records: Return the records in the folder instead of sub-folder names

        Returns:
            Sub-folder names, or records when ``return_records`` is set
        """
        params = {
            "path": _encode(list(folder_path)),
            "return_records": "true" if return_records else "false",
        }
        result = self._request("/folders", params)
        if return_records:
            return self._records(result, "/folders")
        if not isinstance(result, list):
            raise NetworkFailure(f"/folders returned {type(result).__name__}, expected a list")
        return [str(name) if name is not None else "" for name in result]
