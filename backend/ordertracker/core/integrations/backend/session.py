"""
Client-side session: who is signed in.
"""

from typing import Optional

from ordertracker.core.integrations.backend.gateway import BackendGateway
from ordertracker.core.logging import get_logger
from ordertracker.core.exceptions import PersistenceError
from ordertracker.schemas.user import Identity, LoginRequest, UserResponse

logger = get_logger(__name__)


def _identity(user: UserResponse) -> Identity:
    return Identity(
        user_id=user.id,
        role=user.role,
        email=user.email,
        full_name=user.full_name,
    )


class SessionProvider:
    """
    Holds the bearer token and the resolved identity.
    
    identity is None while a resolve is in progress and when signed out;
    resolving tells the two apart.
    """
    
    def __init__(self, gateway: BackendGateway, token: Optional[str] = None):
        self.gateway = gateway
        self.identity: Optional[Identity] = None
        self.resolving = False
        self.gateway.http.set_token(token)
    
    @property
    def token(self) -> Optional[str]:
        return self.gateway.http.token
    
    async def sign_in(self, email: str, password: str) -> Identity:
        """
        Exchange credentials for a token and resolve the identity.
        
        Raises:
            PersistenceError: If the credentials are rejected
        """
        credentials = LoginRequest(email=email, password=password)
        self.resolving = True
        try:
            response = await self.gateway.login(credentials)
            self.gateway.http.set_token(response.token.access_token)
            self.identity = _identity(response.user)
        finally:
            self.resolving = False
        logger.info("Signed in", extra={"user_id": str(self.identity.user_id)})
        return self.identity
    
    async def resolve(self) -> Optional[Identity]:
        """
        Load the identity for a stored token.
        A rejected token signs the session out; other failures propagate.
        """
        if not self.token:
            self.identity = None
            return None
        
        self.resolving = True
        self.identity = None
        try:
            self.identity = _identity(await self.gateway.me())
        except PersistenceError as e:
            if e.status_code not in (401, 403):
                raise
            logger.warning(f"Stored session rejected: {e.message}")
            self.gateway.http.set_token(None)
        finally:
            self.resolving = False
        return self.identity
    
    def sign_out(self) -> None:
        """Drop the token and identity."""
        self.gateway.http.set_token(None)
        self.identity = None
