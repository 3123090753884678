"""API client example for the kumorfm REST API.

This script demonstrates how to interact with the kumorfm API server.

Prerequisites:
  1. Start the server: kumorfm serve
  2. For predictions, set KUMO_API_KEY before starting the server
"""

import json
from typing import Any, Dict, List, Optional

import requests


class KumorfmClient:
    """Simple client for the kumorfm API."""

    def __init__(self, base_url: str = "http://localhost:8000"):
        """Initialize client.

        Args:
            base_url: Base URL of the API server
        """
        self.base_url = base_url.rstrip("/")

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict:
        response = requests.post(f"{self.base_url}{path}", json=payload)
        response.raise_for_status()
        return response.json()

    def health_check(self) -> Dict:
        """Check API health.

        Returns:
            Health status dict
        """
        response = requests.get(f"{self.base_url}/health")
        response.raise_for_status()
        return response.json()

    def build_graph(self, data: Dict[str, List[Dict[str, Any]]]) -> Dict:
        """Build a graph from raw rows.

        Args:
            data: Table name -> rows

        Returns:
            Serialized graph plus per-table metadata
        """
        return self._post("/api/v1/graph/build", {"data": data})

    def validate_graph(self, graph: Dict) -> Dict:
        return self._post("/api/v1/graph/validate", {"graph": graph})

    def build_query(
        self, predict: str, for_: Optional[List[str]] = None, limit: Optional[int] = None
    ) -> str:
        payload: Dict[str, Any] = {"predict": predict}
        if for_:
            payload["for"] = for_
        if limit is not None:
            payload["limit"] = limit
        return self._post("/api/v1/pql/build", payload)["query"]

    def predict(self, query: str, graph: Dict) -> Dict:
        return self._post("/api/v1/predict", {"query": query, "graph": graph})


def main():
    """Run example API calls."""
    client = KumorfmClient()

    print("=" * 60)
    print("1. Health Check")
    print("=" * 60)
    print(json.dumps(client.health_check(), indent=2))

    print("\n" + "=" * 60)
    print("2. Build Graph")
    print("=" * 60)
    built = client.build_graph(
        {
            "users": [{"user_id": 1}, {"user_id": 2}],
            "orders": [
                {"order_id": 1, "user_id": 1, "amount": 10},
                {"order_id": 2, "user_id": 2, "amount": 20},
            ],
        }
    )
    graph = built["graph"]
    for link in graph["links"]:
        print(f"  {link['srcTable']}.{link['fkey']} -> {link['dstTable']}")

    print("\n" + "=" * 60)
    print("3. Validate Graph")
    print("=" * 60)
    print(json.dumps(client.validate_graph(graph), indent=2))

    print("\n" + "=" * 60)
    print("4. Build Query")
    print("=" * 60)
    query = client.build_query("SUM(orders.amount)", for_=["user_id"])
    print(query)

    print("\n" + "=" * 60)
    print("5. Predict")
    print("=" * 60)
    try:
        print(json.dumps(client.predict(query, graph), indent=2))
    except requests.HTTPError as e:
        print(f"Prediction unavailable: {e}")


if __name__ == "__main__":
    main()
