"""
Supabase identity (GoTrue) adapter.
Holds the current access token in memory and maps HTTP failures to AuthError.
"""

from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from config.app_config import SupabaseConfig, get_supabase_config
from services.auth_service.models import IdentityUser, Session, TokenResponse
from services.exceptions import AuthError, ConfigurationError
from utils.logging_config import get_logger


def _error_message(response: httpx.Response) -> str:
    """Best human-readable message from a GoTrue error body"""
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"Request failed with status {response.status_code}"

    if isinstance(payload, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Request failed with status {response.status_code}"


class SupabaseAuthClient:
    """
    Adapter for the remote identity service.
    Provides password sign-in, registration, sign-out and session lookup.
    """

    def __init__(self, config: Optional[SupabaseConfig] = None,
                 http_client: Optional[httpx.Client] = None):
        self.logger = get_logger(__name__)
        self.config = config or get_supabase_config()
        if not self.config.url or not self.config.anon_key:
            raise ConfigurationError("Supabase URL and anon key must be configured")

        self._http = http_client or httpx.Client(timeout=self.config.timeout_seconds)
        self._session: Optional[Session] = None

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        return {
            "apikey": self.config.anon_key,
            "Authorization": f"Bearer {access_token or self.config.anon_key}",
            "Content-Type": "application/json",
        }

    def _post(self, path: str, body: Optional[Dict[str, Any]] = None,
              params: Optional[Dict[str, str]] = None,
              access_token: Optional[str] = None) -> httpx.Response:
        try:
            response = self._http.post(
                f"{self.config.auth_url}{path}",
                json=body or {},
                params=params,
                headers=self._headers(access_token),
            )
        except httpx.HTTPError as e:
            raise AuthError(f"Could not reach the authentication service: {e}") from e

        if response.is_error:
            raise AuthError(_error_message(response), status_code=response.status_code)
        return response

    @property
    def current_session(self) -> Optional[Session]:
        return self._session

    def get_session(self) -> Optional[Session]:
        """
        Look up the session held by this client

        Returns:
            Session if the held token is still accepted, None otherwise
        """
        if self._session is None:
            return None

        try:
            response = self._http.get(
                f"{self.config.auth_url}/user",
                headers=self._headers(self._session.access_token),
            )
        except httpx.HTTPError as e:
            raise AuthError(f"Could not reach the authentication service: {e}") from e

        if response.status_code in (401, 403):
            self.logger.info("Held session token rejected; treating as signed out")
            self._session = None
            return None
        if response.is_error:
            raise AuthError(_error_message(response), status_code=response.status_code)

        try:
            user = IdentityUser.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise AuthError("Malformed user payload from the authentication service") from e

        self._session = Session(
            user_id=user.id,
            email=user.email,
            last_sign_in_at=user.last_sign_in_at,
            access_token=self._session.access_token,
            refresh_token=self._session.refresh_token,
            expires_at=self._session.expires_at,
        )
        return self._session

    def sign_in_with_password(self, email: str, password: str) -> Session:
        """
        Authenticate with email and password

        Returns:
            The new Session

        Raises:
            AuthError: bad credentials, unverified account, rate limit, network failure
        """
        response = self._post(
            "/token",
            body={"email": email, "password": password},
            params={"grant_type": "password"},
        )
        try:
            token = TokenResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            raise AuthError("Malformed sign-in response from the authentication service") from e

        self._session = token.to_session()
        self.logger.info("Password sign-in accepted", extra={"user_id": self._session.user_id})
        return self._session

    def sign_up(self, email: str, password: str) -> None:
        """Register a new account; the account must be verified by email before sign-in"""
        self._post("/signup", body={"email": email, "password": password})
        self.logger.info("Registration accepted; awaiting email verification")

    def sign_out(self) -> None:
        """Revoke the held session; the local token is dropped even if the call fails"""
        session, self._session = self._session, None
        if session is None:
            return
        self._post("/logout", access_token=session.access_token)

    def close(self) -> None:
        self._http.close()
