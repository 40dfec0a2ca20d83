from __future__ import annotations

import pytest

from fauxapi import Collection, Schema


def _seed(schema: Schema) -> Collection:
    for name, age in (("Cy", 30), ("Ann", 20), ("Bob", 40)):
        schema.user.create(name=name, age=age)
    return schema.user.all()


def test_collection_requires_model_name() -> None:
    with pytest.raises(ValueError):
        Collection("")


def test_sequence_protocol(schema: Schema) -> None:
    users = _seed(schema)

    assert len(users) == 3
    assert users[0].name == "Cy"
    assert isinstance(users[1:], Collection)
    assert [u.name for u in users[1:]] == ["Ann", "Bob"]
    assert users.ids == [1, 2, 3]
    assert bool(Collection("user")) is False


def test_filter_sort_slice_merge(schema: Schema) -> None:
    users = _seed(schema)

    adults = users.filter(lambda u: u.age >= 30)
    assert [u.name for u in adults] == ["Cy", "Bob"]

    by_age = users.sort(key=lambda u: u.age)
    assert [u.name for u in by_age] == ["Ann", "Cy", "Bob"]
    assert [u.id for u in users.sort(reverse=True)] == [3, 2, 1]

    assert users.slice(0, 1).ids == [1]

    merged = users.slice(0, 1).merge(users.slice(2))
    assert merged.ids == [1, 3]


def test_update_and_save_apply_to_every_model(schema: Schema) -> None:
    users = _seed(schema)

    users.update("active", True)
    assert all(r["active"] is True for r in schema.db.users.all())

    users.update({"age": 1})
    assert {r["age"] for r in schema.db.users.all()} == {1}

    with pytest.raises(TypeError, match="needs a value"):
        users.update("name")
    assert {r["name"] for r in schema.db.users.all()} == {"Cy", "Ann", "Bob"}

    for user in users:
        user.attrs["age"] = 0
    users.save()
    assert {r["age"] for r in schema.db.users.all()} == {0}


def test_reload_and_destroy(schema: Schema) -> None:
    users = _seed(schema)
    schema.db.users.update({"age": 99})

    assert {u.age for u in users.reload()} == {99}

    users.slice(0, 2).destroy()
    assert schema.user.all().ids == [3]


def test_to_json(schema: Schema) -> None:
    users = _seed(schema)
    assert users.to_json()[1] == {"name": "Ann", "age": 20, "id": 2}
