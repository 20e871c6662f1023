from __future__ import annotations

import pytest
from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLString,
)

from gqlhttp.config.handler import HandlerSettings
from gqlhttp.observers.errors import ErrorEvent, SlowResponseEvent


def _fail(root, info):
    raise ValueError("resolver exploded")


def _request_path(root, info):
    request = info.context.get("request") if isinstance(info.context, dict) else None
    return None if request is None else request.url.path


@pytest.fixture
def schema() -> GraphQLSchema:
    query = GraphQLObjectType(
        "Query",
        {
            "hello": GraphQLField(
                GraphQLString,
                args={"name": GraphQLArgument(GraphQLString)},
                resolve=lambda root, info, name=None: f"Hello {name or 'world'}",
            ),
            "whoami": GraphQLField(
                GraphQLString, resolve=lambda root, info: root.authorization
            ),
            "requestPath": GraphQLField(GraphQLString, resolve=_request_path),
            "boom": GraphQLField(GraphQLString, resolve=_fail),
        },
    )
    return GraphQLSchema(query=query)


class RecordingObserver:
    """Collects execution events instead of logging them."""

    def __init__(self) -> None:
        self.errors: list[ErrorEvent] = []
        self.slow: list[SlowResponseEvent] = []

    def on_error(self, event: ErrorEvent) -> None:
        self.errors.append(event)

    def on_slow_response(self, event: SlowResponseEvent) -> None:
        self.slow.append(event)


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def compact_settings() -> HandlerSettings:
    return HandlerSettings(PRETTY=False)
