"""Fetch JSON over HTTP and validate it against a declared schema."""

from __future__ import annotations

import asyncio
from contextlib import nullcontext
from typing import Any, TypeVar

import requests
from pydantic import TypeAdapter, ValidationError

from ..errors import DecodeError, TransportError
from ..logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_REQUEST_TIMEOUT = 10.0


class SchemaDecoder:
    """Issue HTTP requests and decode the responses into typed values.

    Transport failures (connection errors, non-2xx statuses) raise
    :class:`TransportError`; payloads that do not match the schema raise
    :class:`DecodeError`. Blocking ``requests`` calls run in a worker thread.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        max_concurrent_requests: int | None = None,
    ):
        self._session = session or requests.Session()
        self._request_timeout = request_timeout
        self._semaphore = (
            asyncio.Semaphore(max_concurrent_requests)
            if max_concurrent_requests
            else None
        )
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def _adapter(self, schema: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(schema)
        if adapter is None:
            adapter = TypeAdapter(schema)
            self._adapters[schema] = adapter
        return adapter

    def decode(self, text: str | bytes, schema: type[T] | Any, *, url: str = "") -> T:
        try:
            return self._adapter(schema).validate_json(text)
        except ValidationError as e:
            raise DecodeError(
                f"Response from {url} does not match {schema!r}: "
                f"{e.error_count()} validation error(s)",
                url=url,
                errors=e.errors(include_url=False),
            ) from e

    async def get(self, url: str, schema: type[T] | Any) -> T:
        """GET ``url`` and decode the JSON body as ``schema``."""
        _, text = await self._request("GET", url)
        return self.decode(text, schema, url=url)

    async def post(
        self,
        url: str,
        body: Any,
        schema: type[T] | Any,
        *,
        check_status: bool = True,
    ) -> T:
        """POST ``body`` as JSON to ``url`` and decode the reply as ``schema``.

        With ``check_status=False`` an error status is accepted as long as the
        body still decodes as ``schema``; JSON-RPC servers report failures that
        way. Otherwise the status is raised as :class:`TransportError`.
        """
        status_code, text = await self._request(
            "POST", url, check_status=check_status, json=body
        )
        if status_code < 400:
            return self.decode(text, schema, url=url)
        try:
            return self.decode(text, schema, url=url)
        except DecodeError as e:
            raise TransportError(
                f"POST {url} returned HTTP {status_code}",
                url=url,
                status_code=status_code,
            ) from e

    async def _request(
        self, method: str, url: str, *, check_status: bool = True, **kwargs: Any
    ) -> tuple[int, bytes]:
        async with self._semaphore or nullcontext():
            logger.debug("%s %s", method, url)
            return await asyncio.to_thread(
                self._send, method, url, check_status=check_status, **kwargs
            )

    def _send(
        self, method: str, url: str, *, check_status: bool = True, **kwargs: Any
    ) -> tuple[int, bytes]:
        try:
            response = self._session.request(
                method, url, timeout=self._request_timeout, **kwargs
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}", url=url) from e
        if check_status:
            try:
                response.raise_for_status()
            except requests.HTTPError as e:
                raise TransportError(
                    f"{method} {url} returned HTTP {response.status_code}",
                    url=url,
                    status_code=response.status_code,
                ) from e
        return response.status_code, response.content
