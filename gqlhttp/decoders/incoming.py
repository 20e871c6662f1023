from __future__ import annotations
from io import BytesIO
from re import compile as re_compile
from typing import BinaryIO, Mapping
from urllib.parse import parse_qsl
from starlette.datastructures import FormData, Headers, QueryParams

_BAD_ESCAPE = re_compile(r"%(?![0-9A-Fa-f]{2})")


class IncomingRequest:
    """Already parsed HTTP request, as far as the options decoder needs it.

    The body is a stream that is read at most once; the bytes are cached so the
    form accessor and any later reader see the same payload.
    """

    method: str
    headers: Headers
    query_params: QueryParams

    def __init__(
        self,
        method: str,
        headers: Headers | None = None,
        query_params: QueryParams | None = None,
        body: BinaryIO | None = None,
    ):
        self.method = method.upper()
        self.headers = headers if headers is not None else Headers()
        self.query_params = query_params if query_params is not None else QueryParams()
        self._stream = body
        self._has_body = body is not None
        self._body: bytes | None = None
        self._form: FormData | None = None

    @classmethod
    def build(
        cls,
        method: str,
        headers: Mapping[str, str] | None = None,
        query_string: str = "",
        body: bytes | BinaryIO | None = None,
    ) -> IncomingRequest:
        if isinstance(body, (bytes, bytearray)):
            body = BytesIO(bytes(body))
        return cls(
            method,
            headers=Headers(headers=dict(headers or {})),
            query_params=QueryParams(query_string),
            body=body,
        )

    @property
    def has_body(self) -> bool:
        return self._has_body

    def header(self, name: str) -> str:
        return self.headers.get(name, "")

    def read_body(self) -> bytes:
        if self._body is None:
            if self._stream is None:
                self._body = b""
            else:
                stream, self._stream = self._stream, None
                self._body = stream.read()
        return self._body

    def form(self) -> FormData:
        if self._form is None:
            # Raises UnicodeDecodeError (a ValueError) on non UTF-8 payloads
            text = self.read_body().decode("utf-8")
            if _BAD_ESCAPE.search(text):
                raise ValueError("invalid percent escape in form body")
            self._form = FormData(
                parse_qsl(text, keep_blank_values=True, errors="strict")
            )
        return self._form
