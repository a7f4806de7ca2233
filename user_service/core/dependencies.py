"""Shared FastAPI dependencies."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from user_service.core.security import token_subject

logger = logging.getLogger(__name__)

# auto_error=False: the scheme is documented in OpenAPI but requests without a token pass
bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_subject(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str | None:
    """Resolve the subject of an optional bearer token.

    The subject is stored on ``request.state.token_subject``. Missing or
    invalid tokens yield ``None``; no endpoint currently requires one.

    Args:
        request: Incoming request
        credentials: Bearer credentials, if an Authorization header was sent

    Returns:
        The token subject, or None
    """
    subject = None
    if credentials is not None:
        subject = token_subject(credentials.credentials)
        if subject is None:
            logger.debug("Ignoring invalid bearer token")

    request.state.token_subject = subject
    return subject
