"""Request dependencies shared by the v1 routers."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from phochak.core.settings import settings
from phochak.db.session import get_db
from phochak.models import User

bearer_scheme = HTTPBearer()

SessionDep = Annotated[Session, Depends(get_db)]


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_user_id(subject: str) -> int:
    """Return the numeric account id carried in a token's ``sub`` claim.

    Raises:
        HTTPException: 401 if the subject is not an integer
    """
    try:
        return int(subject)
    except ValueError as err:
        raise _unauthorized() from err


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Resolve the account behind the bearer token.

    Tokens are issued by the login service and signed with the shared
    ``SECRET_KEY``; only the ``sub`` claim is used here.

    Raises:
        HTTPException: 401 if the token is invalid or the account is gone
    """
    try:
        claims = jwt.decode(
            credentials.credentials,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise _unauthorized() from err

    subject = claims.get("sub")
    if subject is None:
        raise _unauthorized()

    user = db.get(User, _decode_user_id(str(subject)))
    if user is None:
        raise _unauthorized("User not found")
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]
