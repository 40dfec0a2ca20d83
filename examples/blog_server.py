from __future__ import annotations

import time

import fauxapi
from fauxapi import Db, Model, Schema, belongs_to, has_many


class User(Model):
    posts = has_many()


class Post(Model):
    user = belongs_to()
    comments = has_many()


class Comment(Model):
    post = belongs_to()


def main() -> None:
    fauxapi.configure_logging("info")

    schema = Schema(Db()).register_models({"user": User, "post": Post, "comment": Comment})

    ann = schema.user.create(name="Ann")
    hello = ann.create_post(title="Hello")
    hello.create_comment(body="First!")

    server = fauxapi.run(schema, port=8000)
    client = server.client()
    print(server.url)
    print(client.list("post", user_id=ann.id))

    # Block forever (so the mock backend stays up for a browser)
    while True:
        time.sleep(3600)


if __name__ == "__main__":
    main()
