"""
tree_client.py
--------------
Client for the tree service REST API.

TreeSession wraps an httpx Client; RemoteTree exposes the store operations
and returns plain records as Box objects (dot-access dicts).
"""

from typing import Any, Iterable, Sequence

import httpx
from box import Box


##### Sessions #####
class TreeSession:
    """
    A session with a running tree service.

    Args:
        host_URL (str): The base URL of the service.
            Must include scheme (http:// or https://) and optionally port.
            Examples: "http://localhost:8000", "http://127.0.0.1:40123"
        client (httpx.Client | None): An already configured client to use instead
            of opening a new one (for example FastAPI's TestClient).
        timeout (float): Request timeout in seconds for a new client.
    """
    def __init__(self, host_URL: str, client: httpx.Client | None = None, timeout: float = 5.0):
        self.base_URL = host_URL.rstrip("/")
        self._client = client if client is not None else httpx.Client(base_url=self.base_URL, timeout=timeout)

    def request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Make an HTTP request to the service.
        raise_for_status() is called on the response.

        Args:
            method (str): The HTTP method (GET, POST, PUT, DELETE).
            endpoint (str): The API endpoint (path) to call.
            **kwargs: Additional arguments to pass to httpx request.
            example: session.request("GET", "/folders/children", params={"q": "pdf"})

        Returns:
            httpx.Response: The HTTP response object.
        """
        response = self._client.request(method, "/" + endpoint.lstrip("/"), **kwargs)
        response.raise_for_status()
        return response

    @property
    def is_alive(self) -> bool:
        """Check if the service answers its status endpoint."""
        try:
            resp = self.request("GET", "/status", timeout=2)
            return resp.status_code == 200
        except (httpx.RequestError, httpx.HTTPStatusError):
            return False

    def connect(self):
        """Check that the service is reachable."""
        if not self.is_alive:
            raise ConnectionError(f"Cannot connect to tree service at {self.base_URL}")

    def disconnect(self):
        self._client.close()


def error_detail(exc: httpx.HTTPStatusError) -> str:
    """Extract the service's error message from a failed response."""
    try:
        detail = exc.response.json().get("detail")
    except ValueError:
        detail = None
    if isinstance(detail, list):
        detail = "; ".join(str(item.get("msg", item)) for item in detail)
    return f"{exc.response.status_code}: {detail or exc.response.text}"


##### Connector #####
class RemoteTree:
    """Proxy to the tree store behind a tree service."""

    def __init__(self, session: TreeSession):
        self.session = session
        self.request = self.session.request  # "alias" Now self.request(...) is the same as self.session.request(...)

    @property
    def status(self) -> Box:
        return Box(self.request("GET", "/status").json())

    def list_children(self, path: Sequence[str] = ("root",), query: str = "", sort: str = "name",
                      direction: str = "asc") -> list[Box]:
        """Children of the folder at ``path``, searched and sorted by the service."""
        params: dict[str, Any] = {
            "path": list(path),
            "sort": getattr(sort, "value", sort),
            "direction": getattr(direction, "value", direction),
        }
        if query:
            params["q"] = query
        r = self.request("GET", "/folders/children", params=params)
        return [Box(item) for item in r.json()]

    def breadcrumbs(self, path: Sequence[str] = ("root",)) -> list[Box]:
        r = self.request("GET", "/folders/breadcrumbs", params={"path": list(path)})
        return [Box(item) for item in r.json()]

    def get_node(self, node_id: str) -> Box:
        return Box(self.request("GET", f"/nodes/{node_id}").json())

    def move(self, source_id: str, target_folder_id: str) -> Box:
        r = self.request("POST", f"/nodes/{source_id}/move", json={"target_id": target_folder_id})
        return Box(r.json())

    def upload(self, folder_id: str, items: Iterable[dict[str, Any]]) -> list[str]:
        r = self.request("POST", f"/folders/{folder_id}/uploads", json=list(items))
        return r.json()["ids"]

    def rename(self, node_id: str, new_name: str) -> Box:
        return Box(self.request("PUT", f"/nodes/{node_id}", json={"name": new_name}).json())

    def delete(self, node_id: str) -> None:
        self.request("DELETE", f"/nodes/{node_id}")
