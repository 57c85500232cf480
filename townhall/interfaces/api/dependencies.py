"""FastAPI dependency utilities."""

from collections.abc import Generator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from townhall.infrastructure.security import decode_access_token
from townhall.interfaces.api.container import NotificationServices

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user_id(token: str) -> str:
    """Return the user id carried in the ``sub`` claim of ``token``."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_exception() from exc

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise _credentials_exception()
    return user_id


def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:
    """Return the authenticated user id from the provided token."""

    return resolve_current_user_id(token)


def get_notification_services(request: Request) -> NotificationServices:
    return request.app.state.notifications


def get_db(
    services: NotificationServices = Depends(get_notification_services),
) -> Generator[Session, None, None]:
    """Yield a database session from the application's store and close it afterwards."""

    db = services.session_factory()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "get_current_user_id",
    "get_db",
    "get_notification_services",
    "oauth2_scheme",
    "resolve_current_user_id",
]
