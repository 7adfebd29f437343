"""
Supabase clients, created on first use.

The anon client serves public lookups and the status page; it is subject to
row-level security. The service client uses the service_role key, bypasses
RLS and is only handed out behind an admin check. Without a service key the
anon client is returned instead.
"""
from supabase import create_client, Client
from seatfinder.config.settings import settings
from typing import Dict, Optional


class SupabaseClient:
    _clients: Dict[str, Client] = {}

    @classmethod
    def _get(cls, name: str, key: str) -> Client:
        if name not in cls._clients:
            cls._clients[name] = create_client(settings.supabase_url, key)
        return cls._clients[name]

    @classmethod
    def get_client(cls) -> Client:
        return cls._get("anon", settings.supabase_key)

    @classmethod
    def get_service_client(cls) -> Client:
        service_key: Optional[str] = settings.supabase_service_role_key
        if not service_key:
            return cls.get_client()
        return cls._get("service", service_key)

    @classmethod
    def reset_client(cls):
        cls._clients.clear()


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()
