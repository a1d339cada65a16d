"""
Supabase data (PostgREST) adapter for appointment rows.
"""

from typing import Any, Callable, Dict, List, Optional

import httpx

from config.app_config import SupabaseConfig, get_config
from services.exceptions import ConfigurationError, FetchError, SessionExpiredError
from utils.logging_config import get_logger


class SupabaseDataClient:
    """
    Read-only adapter for the appointments table.

    ``token_provider`` returns the signed-in user's access token so row level
    security applies; without one the anon key is used.
    """

    def __init__(self, config: Optional[SupabaseConfig] = None,
                 http_client: Optional[httpx.Client] = None,
                 token_provider: Optional[Callable[[], Optional[str]]] = None,
                 table: Optional[str] = None):
        self.logger = get_logger(__name__)
        app_config = get_config()
        self.config = config or app_config.supabase
        if not self.config.url or not self.config.anon_key:
            raise ConfigurationError("Supabase URL and anon key must be configured")

        self.table = table or app_config.appointments.table
        self._http = http_client or httpx.Client(timeout=self.config.timeout_seconds)
        self._token_provider = token_provider

    def _headers(self) -> Dict[str, str]:
        token = self._token_provider() if self._token_provider else None
        return {
            "apikey": self.config.anon_key,
            "Authorization": f"Bearer {token or self.config.anon_key}",
            "Accept": "application/json",
        }

    def list_appointments(self, user_id: str, order_by: str = "date",
                          ascending: bool = True, limit: int = 10) -> List[Dict[str, Any]]:
        """
        Fetch raw appointment rows owned by ``user_id``

        Returns:
            List of row dicts in the requested order

        Raises:
            SessionExpiredError: the access token was rejected (401/403)
            FetchError: network failure, error status or a payload that is not a list of objects
        """
        params = {
            "select": "*",
            "user_id": f"eq.{user_id}",
            "order": f"{order_by}.{'asc' if ascending else 'desc'}",
            "limit": str(limit),
        }
        try:
            response = self._http.get(
                f"{self.config.rest_url}/{self.table}",
                params=params,
                headers=self._headers(),
            )
            if response.status_code in (401, 403):
                raise SessionExpiredError(
                    f"Session token rejected with status {response.status_code}",
                    status_code=response.status_code,
                )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise FetchError(f"Appointment query failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Could not reach the data service: {e}") from e
        except ValueError as e:
            raise FetchError("Appointment payload is not valid JSON") from e

        if not isinstance(payload, list) or not all(isinstance(row, dict) for row in payload):
            raise FetchError("Appointment payload is not a list of records")

        self.logger.debug(f"Fetched {len(payload)} appointment rows", extra={"user_id": user_id})
        return payload

    def close(self) -> None:
        self._http.close()
