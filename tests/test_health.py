# tests/test_health.py
from typing import Any


def test_health_responds(client: Any) -> None:
    """The health endpoint reports the service is up."""
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
