"""Unit test fixtures with mocked dependencies."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from shared_kernel.auth import AuthPhase, GrantKind, RequestContext


@pytest.fixture
def mock_session():
    """Create mock async session with transaction support."""
    session = AsyncMock()
    # Mock transaction context manager properly
    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=None)
    mock_transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin = MagicMock(return_value=mock_transaction)
    return session


@pytest.fixture
def session_context() -> RequestContext:
    """A fully signed-in session for identity 1."""
    return RequestContext(user_id=1, grant_kind=GrantKind.SESSION, phase=AuthPhase.FULL)


@pytest.fixture
def api_key_context() -> RequestContext:
    """An API key grant for identity 1."""
    return RequestContext(user_id=1, grant_kind=GrantKind.API_KEY, phase=AuthPhase.FULL)


@pytest.fixture
def pending_context() -> RequestContext:
    """A session still waiting on its one-time code."""
    return RequestContext(
        user_id=1, grant_kind=GrantKind.SESSION, phase=AuthPhase.TOTP_PENDING
    )
