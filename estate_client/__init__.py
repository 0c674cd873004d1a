"""Session-aware API client and cached collections for the real-estate booking API."""

from estate_client.client import EstateClient

__all__ = ["EstateClient"]
