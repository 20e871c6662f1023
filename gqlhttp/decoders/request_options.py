"""Decode an incoming HTTP request into GraphQL request options.

Sources, first match wins:

1. ``query`` in the URL query string, whatever the method or body.
2. Nothing for non ``POST`` requests or a ``POST`` without a body.
3. The body, dispatched on the media type of ``Content-Type``:
   ``application/graphql`` (raw document), ``application/x-www-form-urlencoded``
   (same fields as the query string) and ``application/json`` which is also
   the fallback for any other or missing content type.

``Content-Type`` is matched on its first ``;`` token, stripped and lower-cased,
so ``Application/GraphQL`` dispatches like ``application/graphql``.

Decoding never fails: malformed input degrades to empty fields, and a JSON
object keeps every field that is valid on its own.
"""
from __future__ import annotations
from json import loads
from logging import getLogger
from typing import Any
from pydantic import TypeAdapter, ValidationError
from pydantic.types import JsonValue
from starlette.datastructures import ImmutableMultiDict
from gqlhttp.decoders.incoming import IncomingRequest
from gqlhttp.interfaces.schemas import RequestOptions, RequestOptionsCompatibility

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_GRAPHQL = "application/graphql"
CONTENT_TYPE_FORM_URLENCODED = "application/x-www-form-urlencoded"

logger = getLogger(__name__)


def _first(values: ImmutableMultiDict, key: str) -> str:
    found = values.getlist(key)
    return found[0] if found else ""


def _variables(raw: Any) -> dict[str, Any]:
    if isinstance(raw, str):
        try:
            raw = loads(raw)
        except (ValueError, RecursionError):
            return {}
    return raw if isinstance(raw, dict) else {}


def from_values(values: ImmutableMultiDict) -> RequestOptions | None:
    """Options from query string or form fields, ``None`` without a ``query``."""
    query = _first(values, "query")
    if not query:
        return None
    return RequestOptions(
        query=query,
        variables=_variables(_first(values, "variables")),
        operationName=_first(values, "operationName"),
    )


def content_type(request: IncomingRequest) -> str:
    return request.header("Content-Type").split(";")[0].strip().lower()


_PAYLOAD = TypeAdapter(dict[str, JsonValue])
_TEXT = TypeAdapter(str | None)


def _text(payload: dict[str, Any], name: str) -> str:
    try:
        return _TEXT.validate_python(payload.get(name)) or ""
    except ValidationError:
        return ""


def _salvage(body: bytes) -> RequestOptions:
    # Neither shape fits as a whole: keep each field that is valid on its own
    try:
        payload = _PAYLOAD.validate_json(body)
    except ValidationError:
        logger.debug("request body is not a JSON object")
        return RequestOptions()
    return RequestOptions(
        query=_text(payload, "query"),
        variables=_variables(payload.get("variables")),
        operationName=_text(payload, "operationName"),
    )


def _from_json(body: bytes) -> RequestOptions:
    try:
        return RequestOptions.model_validate_json(body)
    except ValidationError:
        pass
    # Probably `variables` was sent as a string instead of an object
    try:
        compatible = RequestOptionsCompatibility.model_validate_json(body)
    except ValidationError:
        return _salvage(body)
    return RequestOptions(
        query=compatible.query,
        variables=_variables(compatible.variables),
        operationName=compatible.operationName,
    )


def decode(request: IncomingRequest) -> RequestOptions:
    options = from_values(request.query_params)
    if options is not None:
        return options

    if request.method != "POST" or not request.has_body:
        return RequestOptions()

    kind = content_type(request)
    try:
        if kind == CONTENT_TYPE_GRAPHQL:
            return RequestOptions(
                query=request.read_body().decode("utf-8", errors="replace")
            )
        if kind == CONTENT_TYPE_FORM_URLENCODED:
            try:
                form = request.form()
            except ValueError:
                return RequestOptions()
            return from_values(form) or RequestOptions()
        return _from_json(request.read_body())
    except OSError as err:
        logger.debug("unable to read request body: %s", err)
        return RequestOptions()
