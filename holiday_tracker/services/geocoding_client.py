"""
Geocoding client - free-text place search against a Nominatim-compatible API.
"""

import logging
from typing import List, Optional

import httpx

from holiday_tracker.config.settings import GeocodingSettings
from holiday_tracker.core.exceptions import UpstreamLookupError
from holiday_tracker.models.internal_models import GeocodeCandidate

logger = logging.getLogger(__name__)


class GeocodingClient:
    """
    Thin async wrapper around ``GET {base_url}/search``.

    The client does not rate-limit itself; callers issuing several lookups
    must space them out (see ``GeocodeEnricher``).
    """

    def __init__(
        self,
        settings: GeocodingSettings,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            headers=self._get_headers(),
            timeout=settings.timeout_seconds,
        )

    @property
    def search_url(self) -> str:
        return f"{self.settings.base_url.rstrip('/')}/search"

    def _get_headers(self) -> dict:
        """Headers required by the service's usage policy."""
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "application/json",
        }

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def search(self, query: str) -> List[GeocodeCandidate]:
        """
        Search for places matching ``query``.

        Args:
            query: Free-text place description (e.g., "Mallorca, Spain")

        Returns:
            Candidates in the order the service ranked them, possibly empty

        Raises:
            UpstreamLookupError: network failure, timeout, error status or malformed payload
        """
        params = {
            "format": "json",
            "q": query,
            "limit": self.settings.result_limit,
        }

        try:
            response = await self._client.get(
                self.search_url, params=params, headers=self._get_headers()
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException:
            raise UpstreamLookupError(query, "timeout") from None
        except httpx.HTTPStatusError as e:
            raise UpstreamLookupError(query, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UpstreamLookupError(query, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise UpstreamLookupError(query, "response is not JSON") from e

        if not isinstance(payload, list):
            raise UpstreamLookupError(query, "unexpected response shape")

        candidates = []
        for item in payload:
            try:
                candidates.append(
                    GeocodeCandidate(
                        latitude=float(item["lat"]),
                        longitude=float(item["lon"]),
                        display_name=item.get("display_name"),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise UpstreamLookupError(query, f"malformed candidate: {e}") from e

        logger.debug(f"Geocoding '{query}' returned {len(candidates)} candidates")
        return candidates
