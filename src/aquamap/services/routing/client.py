"""HTTP client for the water-supply routing backend."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ...config import settings
from ...data.records import load_destinations
from ...models.domain import Destination, Point

logger = logging.getLogger(__name__)


class WaterSupplyClient:
    """Fetches precomputed routes to nearby water supplies.

    Distances and polylines come from the backend; nothing here routes.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.routing_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("Routing backend base URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.routing_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.routing_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.routing_backoff_seconds
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self.transport,
        )

    def _post(self, path: str, payload: dict[str, Any]) -> dict:
        with self._get_client() as client:
            attempt = 0
            while True:
                try:
                    response = client.post(path, json=payload)
                    response.raise_for_status()
                    data = response.json()
                    if not isinstance(data, dict):
                        raise ValueError(f"Unexpected response from {path}: expected a JSON object.")
                    return data
                except httpx.HTTPStatusError as e:
                    if e.response.status_code < 500:
                        raise ValueError(
                            f"Routing backend rejected {path} with status {e.response.status_code}"
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Routing backend at {self.base_url} kept failing on {path}: {e}"
                        ) from e
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TransportError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Failed to connect to routing backend at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * attempt
                    logger.debug(
                        f"Routing backend error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}"
                    )
                    time.sleep(wait_time)

    def polyline_routes(self, current_location: Point, max_routes: int = 50) -> list[Destination]:
        """Routes from ``current_location`` to nearby water supplies, in backend order."""
        data = self._post(
            "/polyline-routes",
            {
                "current_location": {
                    "latitude": current_location.latitude,
                    "longitude": current_location.longitude,
                },
                "max_routes": max_routes,
            },
        )
        routes = data.get("polyline_routes")
        if not isinstance(routes, list):
            raise ValueError("Routing backend response missing 'polyline_routes'.")
        destinations = load_destinations(routes)
        logger.info(f"Loaded {len(destinations)} of {len(routes)} polyline routes")
        return destinations

    def nearest_points(
        self,
        current_location: Point,
        max_points: int = 10,
        max_distance_km: float = 5.0,
    ) -> list[Destination]:
        """Nearest water-supply points without road geometry."""
        data = self._post(
            "/find-nearest-points",
            {
                "current_location": {
                    "latitude": current_location.latitude,
                    "longitude": current_location.longitude,
                },
                "max_points": max_points,
                "max_distance": max_distance_km,
            },
        )
        if data.get("success") is not True:
            return []
        return load_destinations(data.get("nearest_points") or [])


def check_health(base_url: str | None = None, transport: httpx.BaseTransport | None = None) -> bool:
    """Return True when the routing backend answers its health endpoint."""
    base = base_url or settings.routing_base_url
    if not base:
        return False
    try:
        with httpx.Client(base_url=base.rstrip("/"), timeout=5.0, transport=transport) as client:
            response = client.get("/health")
            response.raise_for_status()
            return True
    except httpx.HTTPError:
        return False
