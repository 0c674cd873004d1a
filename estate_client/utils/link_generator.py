"""
Generate resource links for properties: media URLs and map links.
"""

from __future__ import annotations

from urllib.parse import quote

from estate_client.domains.models import Property
from estate_client.utils.config import api_base_url

# Shown when a listing has no usable picture.
FALLBACK_IMAGE_URL = "https://images.unsplash.com/photo-1564013799919-ab600027ffc6?w=800&h=600&fit=crop"

_API_PREFIX = "/api/v1"


def media_origin(api_url: str | None = None) -> str:
    """Origin serving uploaded media: the API URL without its /api/v1 suffix."""
    url = (api_url or api_base_url()).rstrip("/")
    if url.endswith(_API_PREFIX):
        url = url[: -len(_API_PREFIX)]
    return url


def resolve_media_url(path: str | None, api_url: str | None = None) -> str | None:
    """
    Turn a stored media path into a fetchable URL.

    Absolute http(s) URLs pass through; server-relative paths are joined onto
    the media origin.

    >>> resolve_media_url("/uploads/a.jpg", "http://localhost:5000/api/v1")
    'http://localhost:5000/uploads/a.jpg'
    """
    if not path:
        return None
    if path.startswith("http"):
        return path
    return f"{media_origin(api_url)}{path}"


def cover_image_url(prop: Property, api_url: str | None = None) -> str:
    """Main picture, else the first extra image, else the stock fallback."""
    media = prop.media
    if media is not None:
        url = resolve_media_url(media.main_picture, api_url)
        if not url and media.more_images:
            url = resolve_media_url(media.more_images[0], api_url)
        if url:
            return url
    return FALLBACK_IMAGE_URL


def property_map_link(prop: Property) -> str:
    """
    Google Maps link for a property.

    Coordinates win; otherwise search by address, then by city name.
    """
    if prop.coordinates is not None:
        c = prop.coordinates
        return f"https://maps.google.com/?q={c.latitude},{c.longitude}"
    query = prop.address or prop.city_name or "Location"
    return f"https://maps.google.com/?q={quote(query, safe='')}"
