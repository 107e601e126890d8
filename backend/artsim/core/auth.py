"""Acting-user resolution for API requests."""
import logging

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from artsim.core.database import get_db
from artsim.models.user import User

logger = logging.getLogger(__name__)


def get_current_user(
    x_user_id: int | None = Header(default=None),
    session: Session = Depends(get_db),
) -> User:
    """
    Get the User performing the request.

    Authentication happens upstream; this only maps the forwarded user id
    onto a known user row.
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )

    user = session.get(User, x_user_id)
    if not user:
        logger.warning(f"[AUTH] Unknown user id {x_user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )

    return user
