"""Shared transport plumbing for requests-based protocol adapters."""
from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests
from urllib3.exceptions import HTTPError as Urllib3Error
from urllib3.exceptions import ReadTimeoutError

from netexplorer.domain.entities.endpoint import Endpoint
from netexplorer.domain.errors import DecodeError, RequestTimeout, TransportError

READ_CHUNK_SIZE = 64 * 1024


def elapsed_ms(start: float) -> int:
  return int((time.perf_counter() - start) * 1000)


@dataclass(frozen=True)
class HttpReply:
  """A fully read HTTP response; the connection is already released."""

  status_code: int
  headers: Dict[str, str] = field(default_factory=dict)
  content: bytes = b''
  encoding: Optional[str] = None

  @property
  def text(self) -> str:
    return self.content.decode(self.encoding or 'utf-8', errors='replace')


class RequestsProtocolAdapter:
  """Owns one reusable ``requests.Session`` per adapter instance.

  Certificate verification applies only when both the adapter toggle and
  the endpoint's own ``tls_verify`` flag are set.

  ``timeout`` is a deadline for the whole exchange. requests only bounds
  each socket read with it, so the body is streamed and the connection is
  dropped once the deadline passes.
  """

  def __init__(self, tls_verify: bool = True, session: Optional[requests.Session] = None) -> None:
    self._tls_verify = tls_verify
    self._session = session or requests.Session()

  def close(self) -> None:
    self._session.close()

  def _send(
    self,
    endpoint: Endpoint,
    method: str,
    url: str,
    timeout: float,
    headers: Optional[Dict[str, str]] = None,
    json_payload: Any = None,
  ) -> Tuple[HttpReply, int]:
    start = time.perf_counter()
    try:
      response = self._session.request(
        method,
        url,
        headers=headers or {},
        json=json_payload,
        timeout=timeout,
        verify=self._tls_verify and endpoint.tls_verify,
        stream=True,
      )
    except requests.Timeout as exc:
      raise RequestTimeout(timeout) from exc
    except requests.RequestException as exc:
      raise TransportError(str(exc)) from exc

    try:
      content = self._read_body(response, start + timeout, timeout)
    finally:
      response.close()

    reply = HttpReply(
      status_code=response.status_code,
      headers=dict(response.headers),
      content=content,
      encoding=response.encoding,
    )
    return reply, elapsed_ms(start)

  @staticmethod
  def _read_body(response: requests.Response, deadline: float, timeout: float) -> bytes:
    """Read the body as it arrives, giving up once ``deadline`` passes."""
    chunks: List[bytes] = []
    try:
      while True:
        if time.perf_counter() > deadline:
          raise RequestTimeout(timeout)
        chunk = response.raw.read1(READ_CHUNK_SIZE, decode_content=True)
        if not chunk:
          break
        chunks.append(chunk)
    except ReadTimeoutError as exc:
      raise RequestTimeout(timeout) from exc
    except Urllib3Error as exc:
      raise TransportError(str(exc)) from exc
    return b''.join(chunks)

  @staticmethod
  def _decode_json(reply: HttpReply) -> Any:
    text = reply.text
    try:
      return json.loads(text)
    except ValueError as exc:
      raise DecodeError(f'Failed to parse JSON: {exc}', text=text) from exc

  @staticmethod
  def _base_url(endpoint: Endpoint) -> str:
    return endpoint.url.rstrip('/')
