"""Supabase client factories."""

from supabase import Client, create_client
from supabase.client import ClientOptions

from src.config.settings import get_settings

_client: Client | None = None


def _options() -> ClientOptions:
    # Server-side clients never hold on to a user session between calls.
    return ClientOptions(auto_refresh_token=False, persist_session=False)


def get_supabase() -> Client:
    """Shared service-role client for table access and admin auth calls."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY, options=_options())
    return _client


def create_auth_client() -> Client:
    """Fresh anon-key client for a single sign-in / sign-up exchange."""
    settings = get_settings()
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY, options=_options())
