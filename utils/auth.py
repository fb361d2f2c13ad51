"""Resolves the identity a request acts as."""
import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from config import AUTH_HEADER

logger = logging.getLogger(__name__)


def get_owner_id(request: Request) -> str:
    """
    Dependency returning the caller's verified identity.

    Credentials are checked by the authenticating gateway in front of this
    service, which forwards the resulting identity in AUTH_HEADER.
    """
    owner_id = (request.headers.get(AUTH_HEADER) or "").strip()
    if not owner_id:
        logger.warning(f"Rejected {request.method} {request.url.path}: missing {AUTH_HEADER} header.")
        raise HTTPException(status_code=401, detail="Authentication required.")
    return owner_id


OwnerIdDep = Annotated[str, Depends(get_owner_id)]
