"""
Session, credential and session-state models for the authentication service.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Session:
    """Authenticated identity held for the lifetime of the browser session"""
    user_id: str
    email: str
    last_sign_in_at: Optional[datetime] = None
    access_token: str = field(default="", repr=False)
    refresh_token: str = field(default="", repr=False)
    expires_at: Optional[datetime] = None

    @property
    def short_user_id(self) -> str:
        return f"{self.user_id[:8]}..."

    @property
    def last_sign_in_display(self) -> str:
        if self.last_sign_in_at is None:
            return "Never"
        return self.last_sign_in_at.strftime("%x")

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True once the access token's expiry has passed; unknown expiry never expires"""
        if self.expires_at is None:
            return False
        return (now or datetime.now()) >= self.expires_at


class SessionStatus(Enum):
    """Session store lifecycle states"""
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class SessionState:
    """One observable session store state; ``session`` is set only when authenticated"""
    status: SessionStatus
    session: Optional[Session] = None

    @classmethod
    def unknown(cls) -> 'SessionState':
        return cls(SessionStatus.UNKNOWN)

    @classmethod
    def anonymous(cls) -> 'SessionState':
        return cls(SessionStatus.ANONYMOUS)

    @classmethod
    def authenticated(cls, session: Session) -> 'SessionState':
        return cls(SessionStatus.AUTHENTICATED, session)

    @property
    def is_loading(self) -> bool:
        return self.status is SessionStatus.UNKNOWN

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED


@dataclass
class LoginCredentials:
    """Transient login form values"""
    email: str
    password: str = field(repr=False)


@dataclass
class SignupCredentials:
    """Transient registration form values"""
    email: str
    password: str = field(repr=False)
    confirm_password: str = field(repr=False)


class IdentityUser(BaseModel):
    """``user`` object as returned by the identity service"""
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: str = Field(min_length=1)
    email: str = ""
    last_sign_in_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    """Password grant response from the identity service"""
    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str = ""
    expires_at: Optional[int] = None
    user: IdentityUser

    def to_session(self) -> Session:
        return Session(
            user_id=self.user.id,
            email=self.user.email,
            last_sign_in_at=self.user.last_sign_in_at,
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            expires_at=datetime.fromtimestamp(self.expires_at) if self.expires_at else None,
        )
