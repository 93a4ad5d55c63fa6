"""Seed script: registers demo accounts via the REST API.

Usage:
    python scripts/seed.py              # uses http://localhost:9000
    python scripts/seed.py http://host  # custom base URL

The client id is read from CLIENT_ID.
"""

import os
import sys

import httpx

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:9000"
HEADERS = {"clientid": os.environ.get("CLIENT_ID", "")}

USERS = [
    {
        "email": "alice@example.com",
        "firstName": "Alice",
        "lastName": "Smith",
        "dateOfBirth": "1990-04-12",
        "password": "password123",
    },
    {
        "email": "bob@example.com",
        "firstName": "Bob",
        "lastName": "Jones",
        "password": "password123",
    },
]


def register(client: httpx.Client, user: dict) -> None:
    resp = client.post(f"{BASE_URL}/api/auth/register", json=user, headers=HEADERS)
    if resp.status_code == 201:
        print(f"  Registered {user['email']} ({resp.json()['data']['id']})")
    elif resp.status_code == 409:
        print(f"  {user['email']} already exists, skipping")
    else:
        resp.raise_for_status()


def main() -> None:
    print(f"Seeding against {BASE_URL}\n")

    with httpx.Client(timeout=10) as client:
        client.get(f"{BASE_URL}/api/health", headers=HEADERS).raise_for_status()

        print("Users:")
        for user in USERS:
            register(client, user)

    print("\nDone!")


if __name__ == "__main__":
    main()
