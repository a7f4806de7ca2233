"""Tests for shared FastAPI dependencies."""

import asyncio
from types import SimpleNamespace

from fastapi.security import HTTPAuthorizationCredentials

from user_service.core.dependencies import get_token_subject
from user_service.core.security import issue_token


def _request():
    return SimpleNamespace(state=SimpleNamespace())


def test_get_token_subject_without_credentials():
    """Test that a missing token resolves to no subject."""
    request = _request()

    subject = asyncio.run(get_token_subject(request, None))

    assert subject is None
    assert request.state.token_subject is None


def test_get_token_subject_valid_token():
    """Test that a valid token resolves to its subject."""
    request = _request()
    token = issue_token("caller-7")
    credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

    subject = asyncio.run(get_token_subject(request, credentials))

    assert subject == "caller-7"
    assert request.state.token_subject == "caller-7"


def test_get_token_subject_invalid_token():
    """Test that an invalid token is ignored rather than rejected."""
    request = _request()
    credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="not-a-jwt")

    subject = asyncio.run(get_token_subject(request, credentials))

    assert subject is None
    assert request.state.token_subject is None
