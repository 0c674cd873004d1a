#!/usr/bin/env python3
"""
Verification script for the estate API client setup.

This script checks:
1. ESTATE_API_URL is set (or the default is in use)
2. A stored session exists and is complete
3. The properties endpoint answers
4. The bookings endpoint answers with the stored session (optional)
"""

import asyncio
import sys

from estate_client.client import EstateClient
from estate_client.domains.listings import location_label
from estate_client.services.collection_cache import FetchStatus
from estate_client.utils.config import DEFAULT_API_URL, api_base_url, load_config, session_file
from estate_client.utils.link_generator import cover_image_url
from estate_client.utils.logger import setup_logger


def check_env_vars() -> tuple[bool, list[str]]:
    """Report which API URL will be used."""
    url = api_base_url()
    if url == DEFAULT_API_URL:
        return True, [f"[OK] ESTATE_API_URL not set, using default: {url}"]
    return True, [f"[OK] ESTATE_API_URL is set: {url[:40]}..."]


def check_session(client: EstateClient) -> tuple[bool, str]:
    """Check whether a usable session was restored from storage."""
    identity = client.credentials.identity
    if identity is None:
        return False, f"[X] No stored session in {session_file()} (log in to test bookings)"
    return True, f"[OK] Stored session for {identity.email or identity.id} ({identity.role.value})"


async def check_collection(client: EstateClient, name: str) -> tuple[bool, str]:
    """Fetch one collection and report its final status."""
    cache = getattr(client, name)
    await cache.fetch()
    snap = cache.current()
    if snap.status is FetchStatus.READY:
        return True, f"[OK] GET /{name}: {len(snap.items)} item(s)"
    return False, f"[X] GET /{name} failed: {snap.error or snap.status.value}"


async def run_checks() -> bool:
    client = EstateClient(notify_error=lambda message: None)
    all_ok = True

    print("\n1. Environment")
    _, lines = check_env_vars()
    for line in lines:
        print("  " + line)

    print("\n2. Stored session")
    has_session, msg = check_session(client)
    print("  " + msg)

    print("\n3. Properties endpoint")
    ok, msg = await check_collection(client, "properties")
    print("  " + msg)
    all_ok = all_ok and ok
    for prop in client.featured_properties():
        print(f"    - {prop.name or prop.id} ({location_label(prop)}): {cover_image_url(prop, client.gateway.base_url)}")

    if has_session:
        print("\n4. Bookings endpoint")
        ok, msg = await check_collection(client, "bookings")
        print("  " + msg)
        all_ok = all_ok and ok
        if client.credentials.identity is None:
            print("  [X] Stored session was rejected (401) and has been cleared")
        elif client.credentials.identity.is_agent:
            stats = client.agent_dashboard()
            print(f"  [OK] Agent dashboard: {stats.as_dict()}")
    else:
        print("\n4. Bookings endpoint")
        print("  [--] Skipped (no session)")

    return all_ok


def main() -> int:
    load_config()
    setup_logger()
    print("=" * 60)
    print("Estate API client verification")
    print("=" * 60)
    ok = asyncio.run(run_checks())
    print("\n" + "=" * 60)
    print("[OK] All checks passed" if ok else "[X] Some checks failed")
    print("=" * 60)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
