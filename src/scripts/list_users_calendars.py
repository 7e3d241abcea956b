#!/usr/bin/env python3
"""
List calendars from MS365, to pick task and fungible calendars.

Usage:
    uv run python src/scripts/list_users_calendars.py
    uv run python src/scripts/list_users_calendars.py --user someone@example.com
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.calendar import get_graph_client, list_user_calendars


async def print_calendars(user_id: str):
    try:
        calendars = await list_user_calendars(user_id)
    except Exception as e:
        print(f"  Error fetching calendars: {e}")
        return

    if not calendars:
        print("  Calendars: None")
        return

    print(f"  Calendars ({len(calendars)}):")
    for calendar in calendars:
        print(f"    - {calendar['calendar_name']}")
        print(f"      ID: {calendar['calendar_id']}")


async def main(user: str | None = None):
    """List calendars for one user, or for every user in the organization."""
    if user:
        print(f"User: {user}")
        await print_calendars(user)
        print("\nDone!")
        return

    graph = get_graph_client()
    print("Fetching users from MS365...\n")
    users_response = await graph.users.get()
    users = users_response.value if users_response.value else []
    print(f"Found {len(users)} users\n")
    print("=" * 80)

    for graph_user in users:
        print(f"\nUser: {graph_user.display_name} ({graph_user.user_principal_name})")
        await print_calendars(graph_user.id)
        print("-" * 80)

    print("\nDone!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="List MS365 calendars")
    parser.add_argument("--user", help="Only list this user's calendars")
    args = parser.parse_args()

    asyncio.run(main(args.user))
