"""Locust load-test: institution search traffic mix.

Mostly repeated popular queries (exercising the response cache) with a
tail of unique filter combinations that always miss, plus an occasional
metrics poll.

Run with::

    pip install "campus-search[load]"
    locust -f docs/examples/locustfile.py --host=http://localhost:8000

Headless run for a quick latency check::

    locust -f docs/examples/locustfile.py \\
        --host=http://localhost:8000 \\
        --users=100 --spawn-rate=10 \\
        --run-time=60s --headless

Endpoints exercised
-------------------
GET /api/search/institutions  – search (popular / unique)
GET /api/admin/metrics        – metrics snapshot

Metrics to watch
----------------
- p95 below 500 ms on cached search
- cache hit rate on the metrics endpoint climbing during the run
- error rate < 0.1 %
"""

from __future__ import annotations

import random

try:
    from locust import HttpUser, between, task
except ImportError as exc:
    raise SystemExit(
        "locust is not installed.  Install it with:  pip install locust"
    ) from exc


POPULAR_WEIGHT = 7
UNIQUE_WEIGHT = 2
METRICS_WEIGHT = 1

POPULAR_QUERIES = [
    "cal tech",
    "state university",
    "community college",
    "ny university",
    "private college",
]
STATES = ["CA", "NY", "TX", "MA", "OH", "GA"]


class SearchUser(HttpUser):
    """Browser-like client; sends Accept-Encoding like a real browser."""

    wait_time = between(0.05, 0.5)

    def on_start(self) -> None:
        self.client.headers.update({"Accept-Encoding": "br, gzip"})

    @task(POPULAR_WEIGHT)
    def popular_search(self) -> None:
        query = random.choice(POPULAR_QUERIES)
        with self.client.get(
            "/api/search/institutions",
            params={"q": query, "page": 1, "limit": 20},
            name="/api/search/institutions [popular]",
            catch_response=True,
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Unexpected status: {resp.status_code}")

    @task(UNIQUE_WEIGHT)
    def filtered_search(self) -> None:
        low = random.randint(0, 40_000)
        params = {
            "q": random.choice(POPULAR_QUERIES),
            "countries": ",".join(random.sample(STATES, k=2)),
            "costMin": low,
            "costMax": low + random.randint(1_000, 30_000),
            "page": random.randint(1, 5),
        }
        with self.client.get(
            "/api/search/institutions",
            params=params,
            name="/api/search/institutions [filtered]",
            catch_response=True,
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Unexpected status: {resp.status_code}")

    @task(METRICS_WEIGHT)
    def metrics_snapshot(self) -> None:
        with self.client.get(
            "/api/admin/metrics",
            params={"minutes": 5},
            name="/api/admin/metrics",
            catch_response=True,
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Unexpected status: {resp.status_code}")
