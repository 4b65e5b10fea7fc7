"""Storefront load testing: Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Mixed workload only:
    locust -f loadtests/locustfile.py MixedWorkloadUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py MixedWorkloadUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest

The server must run with the FakeGateway (no SSLCZ_* variables set) for the
online payment journeys to complete.
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.catalogue import CatalogueUser  # noqa: F401
from loadtests.scenarios.checkout import ShopperUser  # noqa: F401
from loadtests.scenarios.mixed import MixedWorkloadUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Extracts the API error body so you see "Insufficient stock for ..."
    instead of just "400".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Check the target is up and log a start marker."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    try:
        resp = requests.get(f"{environment.host}/health", timeout=5)
        print(f"[LOADTEST] Health: {resp.status_code} {resp.text}")
    except requests.RequestException as e:
        print(f"[LOADTEST] Health check failed: {e}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the overall failure ratio when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    total = environment.stats.total
    print(f"[LOADTEST] Requests: {total.num_requests}, failures: {total.num_failures} ({total.fail_ratio:.1%})\n")
