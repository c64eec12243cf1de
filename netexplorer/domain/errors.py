"""Exception taxonomy shared by the explorer layers."""
from __future__ import annotations

from typing import Any, Optional


class ExplorerError(Exception):
  """Base exception for all explorer errors."""


class NotFound(ExplorerError):
  """A requested endpoint or record does not exist."""


class EndpointNotFound(NotFound):
  def __init__(self, endpoint_id: str):
    super().__init__(f'Endpoint not found: {endpoint_id}')
    self.endpoint_id = endpoint_id


class RecordNotFound(NotFound):
  def __init__(self, namespace: str, key: str):
    super().__init__(f'Record {key!r} not found in {namespace}')
    self.namespace = namespace
    self.key = key


class NamespaceMissing(ExplorerError):
  def __init__(self, namespace: str):
    super().__init__(f'Namespace not initialized: {namespace}')
    self.namespace = namespace


class UnsupportedEndpointKind(ExplorerError):
  def __init__(self, kind: str):
    super().__init__(f'Unsupported endpoint type: {kind}')
    self.kind = kind


class TransportError(ExplorerError):
  """Network failure before any response was received."""


class RequestTimeout(TransportError):
  def __init__(self, timeout: float):
    super().__init__(f'Request timed out after {timeout:g}s')
    self.timeout = timeout


class RemoteError(ExplorerError):
  """Well-formed error reported by the remote side."""

  def __init__(
    self,
    message: str,
    status_code: Optional[int] = None,
    payload: Any = None,
  ):
    super().__init__(message)
    self.status_code = status_code
    self.payload = payload


class DecodeError(ExplorerError):
  """Response body could not be parsed as JSON."""

  def __init__(self, message: str, text: str = ''):
    super().__init__(message)
    self.text = text


class ConfigurationError(ExplorerError):
  """An endpoint lacks a credential its kind requires."""


class InvalidRequestError(ExplorerError):
  """A request or edit is malformed."""


class CatalogReadError(ExplorerError):
  """The catalog source document could not be read."""


class LookupUnavailableError(ExplorerError):
  """The secondary lookup database is not available."""
