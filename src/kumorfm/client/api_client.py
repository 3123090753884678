"""HTTP client for the hosted prediction service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests

from kumorfm.core.errors import APIError
from kumorfm.core.graph import LocalGraph
from kumorfm.core.serialization import serialize_graph, to_jsonable
from kumorfm.core.types import ValidationResult
from kumorfm.utils.config import Config
from kumorfm.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.kumorfm.ai"
PREDICT_PATH = "/predict"
VALIDATE_PATH = "/validate"


@dataclass
class RFMConfig:
    """Connection settings passed explicitly to the prediction client."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0  # seconds
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Config) -> RFMConfig:
        """Build from the ``client`` section, falling back to KUMO_API_KEY.

        Raises:
            ValueError: If no API key is configured
        """
        api_key = config.get("client.api_key") or os.getenv("KUMO_API_KEY")
        if not api_key:
            raise ValueError(
                "No API key configured. Set 'client.api_key' in config.yml "
                "or the KUMO_API_KEY environment variable"
            )
        return cls(
            api_key=api_key,
            base_url=config.get("client.base_url", DEFAULT_BASE_URL),
            timeout=float(config.get("client.timeout", 30)),
        )


class RFMApiClient:
    """Thin JSON-over-HTTP client with bearer-token auth.

    Example:
        >>> client = RFMApiClient(RFMConfig(api_key="..."))
        >>> client.request("POST", "/predict", {"query": "PREDICT ..."})
    """

    def __init__(self, config: RFMConfig, session: Optional[requests.Session] = None):
        """Initialize client.

        Args:
            config: Connection settings
            session: Optional requests session (a new one is created if None)
        """
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            **self.config.headers,
            "Authorization": f"Bearer {self.config.api_key}",
        }

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            payload: Optional JSON body

        Returns:
            Decoded response body

        Raises:
            APIError: On transport failure, non-2xx status or invalid JSON
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                json=payload,
                headers=self._headers(),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise APIError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            raise APIError(
                f"Request failed: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise APIError(
                f"Invalid JSON in response from {url}", status_code=response.status_code
            ) from e

    def execute_query(self, query: str, graph: LocalGraph) -> Dict[str, Any]:
        """Run a query string against a graph on the service.

        Returns:
            Raw response body (``predictions`` plus optional ``metadata``)
        """
        payload = {"query": query, "graph": to_jsonable(serialize_graph(graph))}
        return self.request("POST", PREDICT_PATH, payload)

    def validate_graph(self, graph: LocalGraph) -> ValidationResult:
        """Ask the service to validate a graph.

        Unlike :meth:`LocalGraph.validate`, this reports the service's view
        of the graph, which may include checks the local engine does not run.
        """
        body = self.request(
            "POST", VALIDATE_PATH, {"graph": to_jsonable(serialize_graph(graph))}
        )
        return ValidationResult.from_dict(body)

    def close(self) -> None:
        self.session.close()
