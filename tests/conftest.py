from __future__ import annotations

import pytest

from fauxapi import Db, Model, Schema, belongs_to, has_many


class User(Model):
    posts = has_many()


class Post(Model):
    user = belongs_to()
    author = belongs_to("user")
    comments = has_many()


class Comment(Model):
    post = belongs_to()


@pytest.fixture
def schema() -> Schema:
    return Schema(Db()).register_models({"user": User, "post": Post, "comment": Comment})
