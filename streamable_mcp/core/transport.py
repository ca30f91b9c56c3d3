"""JSON-RPC over HTTP transport with bounded exponential-backoff retry.

One POST per attempt. Connection errors, timeouts and 5xx responses are
transient and retried up to `max_retries` times, waiting
`backoff_base_s * 2**attempt` seconds before each retry. Everything else
(other non-2xx statuses, non-JSON bodies, JSON-RPC error envelopes) is
raised immediately.

The response body is read in full before it is parsed; there is no
incremental parsing of the wire response.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from .constants import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_SECONDS, USER_AGENT
from .errors import (
    MalformedResponseError,
    NonTransientTransportError,
    RPCProtocolError,
    TransientTransportError,
    TransportError,
)
from .schemas import RPCRequest, RPCResponse

_BODY_PREVIEW_CHARS = 200


class RPCTransport:
    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_base_s: float = 1.0,
        session: Optional[requests.Session] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.timeout_s = timeout_s
        self.max_retries = max_retries
        self.backoff_base_s = backoff_base_s

        self._session = session or requests.Session()
        headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if extra_headers:
            headers.update(extra_headers)
        self._session.headers.update(headers)

        self._ids = itertools.count(1)
        self._logger = logging.getLogger(__name__)

    def new_request(self, method: str, params: Optional[Dict[str, Any]] = None) -> RPCRequest:
        return RPCRequest(id=next(self._ids), method=method, params=params or {})

    def send(self, url: str, method: str, params: Optional[Dict[str, Any]] = None) -> RPCResponse:
        """Send one JSON-RPC call and return its success envelope.

        Retries of the same call reuse the request (and its id).
        """
        request = self.new_request(method, params)
        self._logger.info("mcp.rpc call", extra={"method": method, "request_id": request.id, "url": url})

        last_error: Optional[TransportError] = None
        for attempt in range(self.max_retries + 1):
            try:
                return self._attempt(url, request)
            except TransientTransportError as e:
                last_error = e
                if attempt >= self.max_retries:
                    break
                delay = self.backoff_base_s * (2 ** attempt)
                self._logger.warning(
                    "mcp.rpc transient failure; retrying (%d/%d)",
                    attempt + 1,
                    self.max_retries,
                    extra={"method": method, "request_id": request.id, "sleep": delay, "error": str(e)},
                )
                time.sleep(delay)

        assert last_error is not None
        self._logger.error(
            "mcp.rpc giving up after %d retries",
            self.max_retries,
            extra={"method": method, "request_id": request.id},
        )
        raise last_error.with_context(url=url)

    def _attempt(self, url: str, request: RPCRequest) -> RPCResponse:
        try:
            resp = self._session.post(url, json=request.model_dump(), timeout=self.timeout_s)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise TransientTransportError(f"{type(e).__name__}: {e}", url=url) from e
        except requests.exceptions.RequestException as e:
            raise NonTransientTransportError(f"{type(e).__name__}: {e}", url=url) from e

        # requests buffers the whole body here.
        body = resp.text
        if not 200 <= resp.status_code < 300:
            error_cls = TransientTransportError if resp.status_code >= 500 else NonTransientTransportError
            raise error_cls(
                f"HTTP {resp.status_code}: {resp.reason}. Body: {body}",
                status_code=resp.status_code,
                reason=resp.reason,
                body=body,
                url=url,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Invalid JSON response: {e}. Response: {body[:_BODY_PREVIEW_CHARS]}...",
                status_code=resp.status_code,
                reason=resp.reason,
                body=body,
                url=url,
            ) from e

        return self._parse_envelope(data, resp, url)

    def _parse_envelope(self, data: Any, resp: requests.Response, url: str) -> RPCResponse:
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected a JSON-RPC object, got {type(data).__name__}",
                status_code=resp.status_code,
                body=resp.text,
                url=url,
            )
        try:
            envelope = RPCResponse.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Invalid JSON-RPC envelope: {e}",
                status_code=resp.status_code,
                body=resp.text,
                url=url,
            ) from e

        if envelope.has_error:
            err = envelope.error
            message = "Unknown error" if err.message is None else str(err.message)
            raise RPCProtocolError(err.code, message, err.data, url=url)
        if not envelope.has_result:
            raise MalformedResponseError(
                "Invalid JSON-RPC response: missing result",
                status_code=resp.status_code,
                body=resp.text,
                url=url,
            )
        return envelope

    def close(self) -> None:
        self._session.close()
