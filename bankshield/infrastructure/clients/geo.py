"""IP geolocation client (ip-api.com compatible)"""

import logging
import httpx
from typing import Optional
from bankshield.config import settings
from bankshield.domain.models import IpLocation

UNKNOWN_LOCATION = "Unknown Location"


class IpLocatorClient:
    """Resolves an IP address to a city/region/country"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.ip_api_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def locate(self, ip: str) -> Optional[IpLocation]:
        """Returns None on any failure; the caller renders Unknown Location"""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(f"{self.base_url}/json/{ip}")
                response.raise_for_status()
                data = response.json()
                if data.get("status") == "fail":
                    logging.warning(f"IP API returned an error: {data.get('message')}")
                    return None
                return IpLocation(
                    city=data["city"],
                    region_name=data["regionName"],
                    country=data["country"],
                )
            except (httpx.HTTPError, KeyError, ValueError, TypeError, AttributeError) as e:
                logging.warning(f"Failed to fetch IP location: {e}")
                return None

    async def describe(self, ip: str) -> str:
        location = await self.locate(ip)
        return location.describe() if location else UNKNOWN_LOCATION
