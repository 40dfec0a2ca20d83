from __future__ import annotations

import pytest

from fauxapi import FauxClient, MockServer, Schema, run
from fauxapi.errors import FauxApiHTTPError


@pytest.fixture
def server(schema: Schema):
    srv = run(schema, host="127.0.0.1", port=0, namespace="/api", log_level="warning")
    try:
        yield srv
    finally:
        srv.stop()


def test_run_starts_a_reachable_server(server: MockServer) -> None:
    assert server.running
    assert server.port > 0
    assert server.url == f"http://127.0.0.1:{server.port}"
    assert server.client().is_alive()


def test_client_round_trip_against_running_server(server: MockServer, schema: Schema) -> None:
    client = server.client()

    ann = client.create("user", name="Ann")
    assert ann == {"name": "Ann", "id": 1}

    client.create("post", {"title": "a", "user_id": ann["id"]})
    client.create("post", title="b")

    assert [p["title"] for p in client.list("post", user_id=ann["id"])] == ["a"]
    assert [p["id"] for p in client.find_many("post", [2, 1])] == [2, 1]

    updated = client.update("user", 1, name="Annie")
    assert updated["name"] == "Annie"
    assert schema.user.find(1).name == "Annie"  # type: ignore[union-attr]

    client.delete("post", 2)
    with pytest.raises(FauxApiHTTPError) as exc_info:
        client.get("post", 2)
    assert exc_info.value.status_code == 404

    assert client.dump()["posts"] == [{"title": "a", "user_id": 1, "id": 1}]
    client.reset()
    assert client.list("user") == []


def test_stop_shuts_the_server_down(schema: Schema) -> None:
    srv = run(schema, port=0, log_level="warning")
    srv.stop()

    assert not srv.running
    assert not FauxClient(srv.url).is_alive()
