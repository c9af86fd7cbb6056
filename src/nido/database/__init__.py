"""
Módulo de base de datos.

Provee el contrato ListingStore, su implementación sobre Supabase y
un store en memoria.
"""

from nido.database.supabase_client import get_supabase_client, SupabaseClient
from nido.database.repositories import ListingStore, ListingRepository
from nido.database.memory import InMemoryListingStore

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "ListingStore",
    "ListingRepository",
    "InMemoryListingStore",
]
