#!/usr/bin/env python3
"""
Demo script for the newsletter API.

Walks a running server through the cache-aside list, the ownership check
and the resend-confirmation cooldown. Start the server first:

    python -m newsletter_api.api.app
"""

import os
import time
import uuid

import httpx

BASE_URL = os.getenv("DEMO_BASE_URL", "http://localhost:3000")


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def register_and_sign_in(client: httpx.Client, name: str) -> tuple[int, dict[str, str]]:
    """Register a throwaway user and return its id and auth headers."""
    email = f"{name.lower()}-{uuid.uuid4().hex[:8]}@example.com"
    client.post("/register", json={"name": name, "email": email, "password": "s3cret-pass"}).raise_for_status()
    body = client.post("/signin", json={"email": email, "password": "s3cret-pass"}).raise_for_status().json()
    return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}


def demo_task_cache(client: httpx.Client) -> None:
    """Demonstrate read-through and invalidation on the task list."""
    print_section("Task List Cache")

    for attempt in range(2):
        start = time.time()
        body = client.get("/tasks").json()
        duration = (time.time() - start) * 1000
        print(f"  GET /tasks #{attempt + 1}: cache={body['cache']}, {len(body['data'])} tasks, {duration:.2f}ms")

    task = client.post("/tasks", json={"description": "Write the weekly digest"}).json()
    print(f"\n  ✓ Created task {task['id']}")
    print(f"  GET /tasks after create: cache={client.get('/tasks').json()['cache']}")
    print(f"  GET /tasks again: cache={client.get('/tasks').json()['cache']}")

    client.delete(f"/tasks/{task['id']}")
    print(f"\n  ✓ Deleted task {task['id']}")
    print(f"  GET /tasks after delete: cache={client.get('/tasks').json()['cache']}")


def demo_newsletter_ownership(client: httpx.Client) -> None:
    """Demonstrate that only the author can change a newsletter."""
    print_section("Newsletter Ownership")

    author_id, author = register_and_sign_in(client, "Author")
    _, intruder = register_and_sign_in(client, "Intruder")

    newsletter = client.post(
        "/newsletters",
        json={"title": "Release notes", "description": "What shipped this week"},
        headers=author,
    ).json()
    print(f"\n  ✓ User {author_id} created newsletter {newsletter['id']}")
    print(f"  GET /newsletters: cache={client.get('/newsletters').json()['cache']}")

    response = client.put(f"/newsletters/{newsletter['id']}", json={"title": "Hijacked"}, headers=intruder)
    print(f"\n  Intruder update: {response.status_code} {response.json()['error']}")
    print(f"  GET /newsletters: cache={client.get('/newsletters').json()['cache']} (still cached)")

    response = client.put(f"/newsletters/{newsletter['id']}", json={"title": "Release notes v2"}, headers=author)
    print(f"\n  Author update: {response.status_code} title={response.json()['title']!r}")
    print(f"  GET /newsletters: cache={client.get('/newsletters').json()['cache']}")


def demo_resend_cooldown(client: httpx.Client) -> None:
    """Demonstrate the resend-confirmation cooldown."""
    print_section("Resend Confirmation Cooldown")

    email = f"reader-{uuid.uuid4().hex[:8]}@example.com"
    client.post("/register", json={"name": "Reader", "email": email, "password": "s3cret-pass"}).raise_for_status()

    for attempt in range(2):
        response = client.post("/auth/resend-confirmation", json={"email": email})
        body = response.json()
        if response.status_code == 200:
            print(f"  Attempt {attempt + 1}: ✓ {body['message']} (cooldown {body['cooldown']}s)")
            print(f"    Link: {body['verifyUrl']}")
        else:
            print(f"  Attempt {attempt + 1}: ✗ {response.status_code}, retry after {body['retryAfter']}s")

    response = client.post("/auth/resend-confirmation", json={"email": "nobody@example.com"})
    print(f"\n  Unknown email: {response.status_code} {response.json()['message']}")


def main() -> None:
    """Run all demos."""
    print("\n🚀 Newsletter API Demo")
    print("=" * 70)
    print(f"Server: {BASE_URL}")

    try:
        with httpx.Client(base_url=BASE_URL, timeout=10.0) as client:
            demo_task_cache(client)
            demo_newsletter_ownership(client)
            demo_resend_cooldown(client)

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except httpx.HTTPError as e:
        print(f"\n❌ Error: {e}")
        print("\nMake sure Redis is running and the API is up:")
        print("  docker compose up -d")
        print("  python -m newsletter_api.api.app")


if __name__ == "__main__":
    main()
