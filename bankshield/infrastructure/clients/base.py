"""Shared HTTP plumbing for the oracle clients"""

import httpx
from typing import Any, Dict
from bankshield.config import settings
from bankshield.domain.exceptions import OracleError
from bankshield.infrastructure.observability.metrics import oracle_failure_counter, oracle_latency_histogram


class OracleClient:
    """Base client for a JSON-over-HTTP judgment service"""

    oracle_name = "oracle"

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.oracle_api_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST a payload and return the decoded JSON object.

        Raises:
            OracleError: On timeout, HTTP errors, or a non-object response
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                with oracle_latency_histogram.labels(oracle=self.oracle_name).time():
                    response = await client.post(f"{self.base_url}{path}", json=payload)
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise ValueError(f"expected JSON object, got {type(data).__name__}")
                return data

            except httpx.TimeoutException as e:
                oracle_failure_counter.labels(oracle=self.oracle_name).inc()
                raise OracleError(f"{self.oracle_name} timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                oracle_failure_counter.labels(oracle=self.oracle_name).inc()
                raise OracleError(f"{self.oracle_name} error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                oracle_failure_counter.labels(oracle=self.oracle_name).inc()
                raise OracleError(f"{self.oracle_name} unreachable: {e}") from e
            except ValueError as e:
                oracle_failure_counter.labels(oracle=self.oracle_name).inc()
                raise OracleError(f"Invalid response from {self.oracle_name}: {e}") from e
