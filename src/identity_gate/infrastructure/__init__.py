"""Infrastructure layer - Identity provider implementations"""

from .supabase_provider import SupabaseProvider

__all__ = [
    "SupabaseProvider",
]
