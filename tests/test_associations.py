from __future__ import annotations

import pytest

from fauxapi import Collection, Schema
from fauxapi.errors import SchemaError


def test_belongs_to_assign_saved_parent(schema: Schema) -> None:
    ann = schema.user.create(name="Ann")
    post = schema.post.create(title="Hello")

    post.user = ann
    assert post.user_id == ann.id
    post.save()

    reloaded = schema.post.find(post.id)
    assert reloaded.user == ann  # type: ignore[union-attr]
    assert reloaded.user.name == "Ann"  # type: ignore[union-attr]


def test_belongs_to_unsaved_parent_is_saved_with_child(schema: Schema) -> None:
    post = schema.post.new(title="Draft")
    bob = schema.user.new(name="Bob")

    post.user = bob
    assert post.user is bob
    assert post.user_id is None

    post.save()

    assert bob.is_saved()
    assert post.user_id == bob.id
    assert schema.db.posts.find(post.id)["user_id"] == bob.id  # type: ignore[index]


def test_belongs_to_clear_and_direct_key_write(schema: Schema) -> None:
    ann = schema.user.create(name="Ann")
    post = schema.post.create(title="x", user_id=ann.id)

    assert post.user == ann
    post.user = None
    assert post.user_id is None
    assert post.user is None

    post.user = schema.user.new(name="pending")
    post.user_id = ann.id
    assert post.user == ann


def test_belongs_to_with_explicit_type(schema: Schema) -> None:
    ann = schema.user.create(name="Ann")
    post = schema.post.create(title="x", author=ann)

    assert post.author_id == ann.id
    assert post.user_id is None
    assert schema.post.find(post.id).author.name == "Ann"  # type: ignore[union-attr]


def test_belongs_to_rejects_wrong_types(schema: Schema) -> None:
    post = schema.post.new()
    with pytest.raises(TypeError):
        post.user = schema.comment.new()
    with pytest.raises(TypeError):
        post.user = "ann"


def test_belongs_to_new_and_create_helpers(schema: Schema) -> None:
    post = schema.post.create(title="x")

    author = post.new_author(name="Later")
    assert author.is_new()
    assert post.author is author

    user = post.create_user({"name": "Now"})
    assert user.is_saved()
    assert post.user_id == user.id

    post.save()
    assert author.is_saved()
    assert schema.db.posts.find(post.id)["author_id"] == author.id  # type: ignore[index]


def test_has_many_reads_children_by_foreign_key(schema: Schema) -> None:
    ann = schema.user.create(name="Ann")
    bob = schema.user.create(name="Bob")
    schema.post.create(title="a", user_id=ann.id)
    schema.post.create(title="b", user_id=bob.id)
    schema.post.create(title="c", user_id=ann.id)

    posts = ann.posts
    assert isinstance(posts, Collection)
    assert [p.title for p in posts] == ["a", "c"]
    assert ann.post_ids == [1, 3]


def test_has_many_create_and_new_on_saved_owner(schema: Schema) -> None:
    ann = schema.user.create(name="Ann")

    created = ann.create_post(title="saved")
    assert created.user_id == ann.id
    assert created.is_saved()

    drafted = ann.new_post({"title": "draft"})
    assert drafted.is_new()
    assert drafted.user_id == ann.id
    assert ann.post_ids == [created.id]

    drafted.save()
    assert ann.post_ids == [created.id, drafted.id]


def test_has_many_children_of_unsaved_owner_are_saved_with_it(schema: Schema) -> None:
    ann = schema.user.new(name="Ann")
    first = ann.new_post(title="one")
    second = ann.new_post(title="two")

    assert [p.title for p in ann.posts] == ["one", "two"]
    assert len(schema.db.posts) == 0

    ann.save()

    assert first.user_id == ann.id
    assert second.user_id == ann.id
    assert [p.title for p in schema.user.find(ann.id).posts] == ["one", "two"]  # type: ignore[union-attr]


def test_has_many_create_requires_saved_owner(schema: Schema) -> None:
    ann = schema.user.new(name="Ann")
    with pytest.raises(SchemaError, match="save it first"):
        ann.create_post(title="x")


def test_has_many_assignment_replaces_children_on_save(schema: Schema) -> None:
    ann = schema.user.create(name="Ann")
    old = ann.create_post(title="old")
    kept = ann.create_post(title="kept")
    fresh = schema.post.new(title="fresh")

    ann.posts = [kept, fresh]
    assert [p.title for p in ann.posts] == ["kept", "fresh"]

    ann.save()

    assert old.reload().user_id is None
    assert fresh.is_saved()
    assert sorted(ann.post_ids) == sorted([kept.id, fresh.id])


def test_has_many_ids_setter(schema: Schema) -> None:
    ann = schema.user.create(name="Ann")
    a = schema.post.create(title="a")
    b = schema.post.create(title="b")

    ann.post_ids = [b.id, a.id]
    ann.save()

    assert sorted(ann.post_ids) == [a.id, b.id]
    assert schema.post.find(a.id).user_id == ann.id  # type: ignore[union-attr]

    ann.post_ids = []
    ann.save()
    assert ann.post_ids == []


def test_has_many_rejects_foreign_models(schema: Schema) -> None:
    ann = schema.user.create(name="Ann")
    with pytest.raises(TypeError):
        ann.posts = [schema.comment.new()]


def test_destroy_owner_clears_children_foreign_keys(schema: Schema) -> None:
    ann = schema.user.create(name="Ann")
    post = ann.create_post(title="orphan")

    ann.destroy()

    assert schema.user.find(ann.id) is None
    assert post.reload().user_id is None


def test_association_values_in_constructor_attrs(schema: Schema) -> None:
    ann = schema.user.create(name="Ann")
    post = schema.post.new({"title": "x", "user": ann})

    assert "user" not in post.attrs
    assert post.user_id == ann.id

    comment = schema.comment.create(body="hi", post=schema.post.new(title="parent"))
    assert comment.post_id is not None
    assert schema.post.find(comment.post_id).title == "parent"  # type: ignore[union-attr]

    first = schema.post.create(title="a")
    bob = schema.user.create(name="Bob", post_ids=[first.id])
    assert "post_ids" not in bob.attrs
    assert schema.post.find(first.id).user_id == bob.id  # type: ignore[union-attr]


def test_unregistered_association_raises() -> None:
    from fauxapi import Model, belongs_to

    class Orphan(Model):
        parent = belongs_to()

    with pytest.raises(SchemaError, match="not registered"):
        Orphan.parent.get_foreign_key_array()
