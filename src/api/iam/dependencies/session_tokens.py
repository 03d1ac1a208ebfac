from functools import lru_cache

from infrastructure.settings import get_session_settings
from shared_kernel.auth import DefaultSessionTokenProbe, SessionTokenCodec


@lru_cache
def get_session_token_codec() -> SessionTokenCodec:
    """Get the cached session token codec configured from settings."""
    settings = get_session_settings()
    return SessionTokenCodec(
        secret_key=settings.secret_key.get_secret_value(),
        probe=DefaultSessionTokenProbe(),
        algorithm=settings.algorithm,
        ttl=settings.ttl,
        pending_ttl=settings.pending_ttl,
    )
