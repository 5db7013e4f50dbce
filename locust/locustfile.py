"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Many users, one small event
  locust -f locustfile.py --tags listing      # Paginated, sorted listing
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests

Any authenticated user may create events, so the first ConcurrencyUser to
log in creates the contested event.
"""

import random
import string
import uuid
from datetime import datetime, timezone, timedelta

from locust import HttpUser, task, between, tag

CONTESTED_CAPACITY = 10
CONTESTED_EVENT_ID = None


def random_email():
    return f"load_{uuid.uuid4().hex[:10]}@test.com"


def random_name():
    return "Load " + "".join(random.choices(string.ascii_lowercase, k=6))


def _signup_and_login(client):
    email = random_email()
    password = "loadtest123"
    client.post("/api/auth/register", json={
        "name": random_name(),
        "email": email,
        "password": password,
    })
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    if resp.status_code != 200:
        return {}
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


class ConcurrencyUser(HttpUser):
    """
    All users fight for CONTESTED_CAPACITY seats.

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    Afterwards:
      SELECT COUNT(*) FROM registrations
      WHERE event_id = '<id>' AND status IN ('PENDING', 'CONFIRMED');
    must be <= CONTESTED_CAPACITY.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        global CONTESTED_EVENT_ID
        self.headers = _signup_and_login(self.client)
        self.registered = False

        if self.headers and not CONTESTED_EVENT_ID:
            resp = self.client.post(
                "/api/events",
                json={
                    "name": "Concurrency Test Event",
                    "description": f"{CONTESTED_CAPACITY} seats only",
                    "date": (datetime.now(timezone.utc) + timedelta(days=30)).isoformat(),
                    "location": "Load Test Hall",
                    "capacity": CONTESTED_CAPACITY,
                },
                headers=self.headers,
            )
            if resp.status_code == 201:
                CONTESTED_EVENT_ID = resp.json()["id"]
                print(f"\nCreated event {CONTESTED_EVENT_ID} with {CONTESTED_CAPACITY} seats\n")

    @tag("concurrency")
    @task
    def register_for_contested_event(self):
        if not CONTESTED_EVENT_ID or not self.headers or self.registered:
            return

        with self.client.post(
            f"/api/events/{CONTESTED_EVENT_ID}/register",
            headers=self.headers,
            name="/api/events/[id]/register",
            catch_response=True,
        ) as resp:
            if resp.status_code == 201:
                self.registered = True
                resp.success()
            elif resp.status_code in (400, 409):
                # Full, already registered, or contended past the retry budget
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ListingUser(HttpUser):
    """
    Read traffic on the paginated listing.

    Run: locust -f locustfile.py --tags listing -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("listing")
    @task(3)
    def first_page_by_date(self):
        self.client.get("/api/events?page=1&limit=10", name="/api/events?sort=date")

    @tag("listing")
    @task(1)
    def random_page_sorted(self):
        sort = random.choice(["name", "-date", "capacity", "-created_at"])
        page = random.randint(1, 5)
        self.client.get(f"/api/events?page={page}&limit=10&sort={sort}", name="/api/events?sort=[field]")


class EdgeCaseUser(HttpUser):
    """Requests that must be rejected cleanly, never with a 5xx."""
    wait_time = between(0.5, 1)

    def on_start(self):
        self.headers = _signup_and_login(self.client)

    @tag("edge")
    @task
    def register_for_missing_event(self):
        with self.client.post(
            f"/api/events/{uuid.uuid4()}/register",
            headers=self.headers,
            name="/api/events/[missing]/register",
            catch_response=True,
        ) as resp:
            if resp.status_code in (401, 404):
                resp.success()
            else:
                resp.failure(f"Expected 404, got {resp.status_code}")

    @tag("edge")
    @task
    def create_event_zero_capacity(self):
        with self.client.post(
            "/api/events",
            json={
                "name": "Bad",
                "date": datetime.now(timezone.utc).isoformat(),
                "location": "Nowhere",
                "capacity": 0,
            },
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code in (401, 422):
                resp.success()
            else:
                resp.failure(f"Expected 422, got {resp.status_code}")

    @tag("edge")
    @task
    def sort_by_unknown_field(self):
        with self.client.get("/api/events?sort=password", catch_response=True) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Expected 400, got {resp.status_code}")
