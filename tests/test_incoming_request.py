from __future__ import annotations

import asyncio
from io import BytesIO

import pytest
from starlette.requests import Request

from gqlhttp.adapters.starlette_request import from_starlette
from gqlhttp.decoders.incoming import IncomingRequest


def make_request(method: str, body: bytes = b"", query_string: bytes = b"", headers=None):
    sent = False

    async def receive():
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    scope = {
        "type": "http",
        "method": method,
        "path": "/graphql",
        "query_string": query_string,
        "headers": [
            (k.lower().encode("latin-1"), v.encode("latin-1"))
            for k, v in (headers or {}).items()
        ],
    }
    return Request(scope, receive)


def test_header_lookup_is_case_insensitive() -> None:
    request = IncomingRequest.build("POST", {"Content-Type": "application/json"})

    assert request.header("content-type") == "application/json"
    assert request.header("CONTENT-TYPE") == "application/json"
    assert request.header("Authorization") == ""


def test_method_is_upper_cased() -> None:
    assert IncomingRequest.build("post").method == "POST"


def test_build_accepts_bytes_stream_or_nothing() -> None:
    assert IncomingRequest.build("POST", body=b"abc").read_body() == b"abc"
    assert IncomingRequest.build("POST", body=BytesIO(b"abc")).read_body() == b"abc"
    assert not IncomingRequest.build("POST").has_body
    assert IncomingRequest.build("POST").read_body() == b""


def test_has_body_survives_reading() -> None:
    request = IncomingRequest.build("POST", body=b"abc")
    request.read_body()

    assert request.has_body


def test_form_keeps_blank_values() -> None:
    form = IncomingRequest.build("POST", body=b"query=&operationName=Op").form()

    assert form.getlist("query") == [""]
    assert form["operationName"] == "Op"


def test_from_starlette_reads_post_body() -> None:
    request = make_request(
        "POST",
        body=b'{"query": "{ a }"}',
        query_string=b"operationName=Op",
        headers={"Content-Type": "application/json", "Authorization": "Bearer t"},
    )

    incoming = asyncio.run(from_starlette(request))

    assert incoming.method == "POST"
    assert incoming.has_body
    assert incoming.read_body() == b'{"query": "{ a }"}'
    assert incoming.query_params["operationName"] == "Op"
    assert incoming.header("authorization") == "Bearer t"


def test_from_starlette_leaves_get_body_unread() -> None:
    request = make_request("GET", body=b"ignored", query_string=b"query=%7Ba%7D")

    incoming = asyncio.run(from_starlette(request))

    assert not incoming.has_body
    assert incoming.query_params["query"] == "{a}"


def test_form_rejects_malformed_percent_escape() -> None:
    request = IncomingRequest.build("POST", body=b"query=%zz&operationName=Op")

    with pytest.raises(ValueError):
        request.form()
