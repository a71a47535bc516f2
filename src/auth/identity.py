"""
Identity of the user making a request.

Tokens are issued by the account service and carry the user id in ``sub``
and the display name in ``name``.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config import AuthConfig
from src.exceptions import AuthenticationRequiredError
from src.models.campground import AuthorStamp

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class IdentityContext:
    user_id: str
    display_name: str

    def stamp(self) -> AuthorStamp:
        return AuthorStamp(user_id=self.user_id, display_name=self.display_name)


class TokenDecoder:
    def __init__(self, config: Optional[AuthConfig] = None):
        self.config = config or AuthConfig.from_env()

    def encode(self, user_id: str, display_name: str) -> str:
        return jwt.encode(
            {"sub": user_id, "name": display_name},
            self.config.secret_key,
            algorithm=self.config.algorithm,
        )

    def decode(self, token: str) -> Optional[IdentityContext]:
        """
        Decode and validate a token.

        Returns:
            IdentityContext if valid, None otherwise
        """
        try:
            payload = jwt.decode(token, self.config.secret_key, algorithms=[self.config.algorithm])
        except jwt.ExpiredSignatureError:
            logger.warning("Token has expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            return None

        user_id = payload.get("sub")
        display_name = payload.get("name")
        if not user_id or not display_name:
            logger.warning("Token is missing the sub or name claim")
            return None
        return IdentityContext(user_id=str(user_id), display_name=str(display_name))


token_decoder = TokenDecoder()


def get_token_decoder() -> TokenDecoder:
    return token_decoder


def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    decoder: TokenDecoder = Depends(get_token_decoder),
) -> Optional[IdentityContext]:
    if credentials is None:
        return None
    return decoder.decode(credentials.credentials)


def require_identity(identity: Optional[IdentityContext] = Depends(get_identity)) -> IdentityContext:
    if identity is None:
        logger.warning("Rejected unauthenticated request")
        raise AuthenticationRequiredError()
    return identity
