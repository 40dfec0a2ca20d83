from __future__ import annotations

import pytest

from fauxapi.db import Db, DbCollection
from fauxapi.errors import DuplicateIdError


def test_insert_assigns_incrementing_ids_and_returns_copies() -> None:
    users = DbCollection("users")

    a = users.insert({"name": "Ann"})
    b = users.insert({"name": "Bob"})

    assert a == {"name": "Ann", "id": 1}
    assert b["id"] == 2

    a["name"] = "mutated"
    assert users.find(1)["name"] == "Ann"  # type: ignore[index]


def test_insert_list_and_explicit_ids_advance_identity() -> None:
    users = DbCollection("users")

    out = users.insert([{"id": 5, "name": "Five"}, {"name": "Next"}])

    assert [r["id"] for r in out] == [5, 6]
    with pytest.raises(DuplicateIdError):
        users.insert({"id": 5})


def test_string_ids_keep_integer_identity() -> None:
    users = DbCollection("users")
    users.insert({"id": "abc"})
    assert users.insert({})["id"] == 1


def test_find_single_list_and_string_ids() -> None:
    users = DbCollection("users", [{"name": "a"}, {"name": "b"}, {"name": "c"}])

    assert users.find("2")["name"] == "b"  # type: ignore[index]
    assert users.find(99) is None
    assert [r["name"] for r in users.find([3, 1])] == ["c", "a"]  # type: ignore[union-attr]
    assert [r["id"] for r in users.find([1, 42])] == [1]  # type: ignore[union-attr]


def test_where_with_mapping_and_predicate() -> None:
    posts = DbCollection("posts", [{"user_id": 1}, {"user_id": 2}, {"user_id": 1}])

    assert [r["id"] for r in posts.where({"user_id": 1})] == [1, 3]
    assert [r["id"] for r in posts.where({"user_id": "2"})] == [2]
    assert [r["id"] for r in posts.where(lambda r: r["id"] > 1)] == [2, 3]
    assert posts.where({"missing": 1}) == []
    with pytest.raises(TypeError):
        posts.where(42)  # type: ignore[arg-type]


def test_update_forms() -> None:
    posts = DbCollection("posts", [{"title": "a"}, {"title": "b"}])

    one = posts.update(2, {"title": "B", "id": 99})
    assert one == {"title": "B", "id": 2}
    assert posts.update(404, {"title": "x"}) is None

    matched = posts.update({"title": "a"}, {"flag": True})
    assert [r["id"] for r in matched] == [1]  # type: ignore[union-attr]

    everything = posts.update({"published": False})
    assert all(r["published"] is False for r in everything)  # type: ignore[union-attr]


def test_remove_forms_and_empty() -> None:
    posts = DbCollection("posts", [{"t": 1}, {"t": 2}, {"t": 2}])

    assert posts.remove(1) == 1
    assert posts.remove({"t": 2}) == 2
    assert len(posts) == 0

    posts.insert([{}, {}])
    assert posts.remove() == 2

    posts.insert({})
    posts.empty()
    assert posts.insert({})["id"] == 1


def test_db_collections_fixtures_and_dump() -> None:
    db = Db({"users": [{"name": "Ann"}]})

    assert "users" in db
    assert db.users is db["users"]
    assert db.create_collection("users") is db.users

    db.create_collections("posts", "comments")
    assert db.collection_names() == ["users", "posts", "comments"]

    db.load_data({"posts": [{"title": "hi"}]})
    assert db.dump() == {
        "users": [{"name": "Ann", "id": 1}],
        "posts": [{"title": "hi", "id": 1}],
        "comments": [],
    }

    db.empty_data()
    assert db.dump()["users"] == []

    with pytest.raises(AttributeError):
        db.nope
    with pytest.raises(KeyError):
        db["nope"]
    with pytest.raises(ValueError):
        db.create_collection("dump")
