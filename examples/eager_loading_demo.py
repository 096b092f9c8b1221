"""Eager vs. lazy loading of API relationships.

Builds a few users and posts backed by in-memory "APIs", loads their
relationships both ways and prints how many fetch calls each approach needed.

Usage:
    python examples/eager_loading_demo.py [--verbose]
"""

import argparse
import sys
from typing import Any, Dict, List

from loguru import logger
from rich.console import Console
from rich.table import Table

from api_relations import ApiModel, ApiRelation
from api_relations.utils.config import LoggingConfig
from api_relations.utils.logging import setup_logging

console = Console()

PROFILES = [
    {"user_id": 1, "name": "John Doe", "avatar": "john.jpg"},
    {"user_id": 2, "name": "Jane Smith", "avatar": "jane.jpg"},
    {"user_id": 3, "name": "Bob Johnson", "avatar": "bob.jpg"},
]

COMMENTS = [
    {"post_id": 10, "author": "Alice", "text": "Great post!"},
    {"post_id": 10, "author": "Bob", "text": "Thanks for sharing!"},
    {"post_id": 11, "author": "Charlie", "text": "Interesting read."},
    {"post_id": 12, "author": "David", "text": "Love it!"},
]


class CallCounter:
    """Wrap a dataset as a fetch function and count invocations."""

    def __init__(self, rows: List[Dict[str, Any]], field: str) -> None:
        self.rows = rows
        self.field = field
        self.calls = 0

    def __call__(self, keys: List[Any], foreign_key: str) -> List[Dict[str, Any]]:
        self.calls += 1
        wanted = set(keys)
        return [row for row in self.rows if row[self.field] in wanted]


profiles_api = CallCounter(PROFILES, "user_id")
comments_api = CallCounter(COMMENTS, "post_id")


class User(ApiModel):
    def profile(self) -> ApiRelation:
        return self.has_one_api(profiles_api, "user_id")


class Post(ApiModel):
    def comments(self) -> ApiRelation:
        return self.has_many_api(comments_api, "post_id")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")
    args = parser.parse_args()

    if args.verbose:
        setup_logging(LoggingConfig(level="DEBUG"))
    else:
        logger.remove()
        logger.add(sys.stderr, level="WARNING")

    users = [User(id=user_id) for user_id in (1, 2, 3, 4)]
    posts = [Post(id=post_id) for post_id in (10, 11, 12, 13)]

    for user in users:
        user.get_relation_value("profile")
    lazy_calls = profiles_api.calls

    profiles_api.calls = 0
    users = [User(id=user_id) for user_id in (1, 2, 3, 4)]
    User.eager_load(users, "profile")
    Post.eager_load(posts, "comments")

    table = Table(title="Eager-loaded relationships")
    table.add_column("Parent")
    table.add_column("Relation")
    table.add_column("Value")
    for user in users:
        profile = user.get_relation("profile")
        table.add_row(f"User {user.get_attribute('id')}", "profile", profile["name"] if profile else "-")
    for post in posts:
        comments = post.get_relation("comments")
        authors = ", ".join(comment["author"] for comment in comments) or "-"
        table.add_row(f"Post {post.get_attribute('id')}", "comments", authors)

    console.print(table)
    console.print(
        f"[bold]Lazy loading:[/bold] {lazy_calls} profile fetches for {len(users)} users\n"
        f"[bold]Eager loading:[/bold] {profiles_api.calls} profile fetch, "
        f"{comments_api.calls} comments fetch"
    )


if __name__ == "__main__":
    main()
