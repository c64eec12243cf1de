"""FastAPI adapter exposing HTTP endpoints."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, status
from pydantic import BaseModel, Field

from netexplorer.adapters.presentation.json_presenter import JsonPresenter
from netexplorer.application.commands.endpoint_commands import (
  RegisterEndpointCommand,
  UpdateEndpointCommand,
)
from netexplorer.application.commands.explorer_request_command import ExplorerRequestCommand
from netexplorer.domain.entities.endpoint import EndpointKind
from netexplorer.domain.errors import (
  CatalogReadError,
  ConfigurationError,
  ExplorerError,
  InvalidRequestError,
  LookupUnavailableError,
  NotFound,
  UnsupportedEndpointKind,
)
from netexplorer.ports.input.explorer_service import ExplorerService


class EndpointPayload(BaseModel):
  name: str = Field(..., min_length=1, description='Display name')
  kind: EndpointKind = Field(..., description='Endpoint kind')
  url: str = Field(..., description='Base URL, e.g. https://switch1')
  username: Optional[str] = Field(default=None, description='Username (eAPI)')
  password: Optional[str] = Field(default=None, description='Password (eAPI)')
  token: Optional[str] = Field(default=None, description='API token (CloudVision)')
  tls_verify: bool = Field(default=True, description='Verify TLS certificates')
  tags: List[str] = Field(default_factory=list)


class EndpointUpdatePayload(BaseModel):
  """Partial update; omitted fields stay unchanged."""
  name: Optional[str] = None
  kind: Optional[EndpointKind] = None
  url: Optional[str] = None
  username: Optional[str] = None
  password: Optional[str] = None
  token: Optional[str] = None
  tls_verify: Optional[bool] = None
  tags: Optional[List[str]] = None


class ExplorerRequestPayload(BaseModel):
  endpoint_id: str = Field(..., description='Registered endpoint id')
  method: str = Field(default='GET', description='HTTP method, or RUNCMDS for eAPI')
  path: str = Field(default='', description='Request path (CloudVision)')
  body: Optional[Dict[str, Any]] = Field(default=None, description='JSON body; eAPI reads cmds')
  timeout_ms: Optional[int] = Field(default=None, gt=0, description='Overrides the default timeout')

  model_config = {
    'json_schema_extra': {
      'examples': [
        {
          'endpoint_id': 'ep_0123456789abcdef0123456789abcdef',
          'method': 'RUNCMDS',
          'body': {'cmds': ['show version'], 'format': 'json'},
        },
        {
          'endpoint_id': 'ep_fedcba9876543210fedcba9876543210',
          'method': 'GET',
          'path': '/api/resources/inventory/v1/Devices',
        },
      ]
    }
  }


def _status_for(exc: Exception) -> int:
  if isinstance(exc, NotFound):
    return status.HTTP_404_NOT_FOUND
  if isinstance(exc, (InvalidRequestError, ConfigurationError, UnsupportedEndpointKind)):
    return status.HTTP_400_BAD_REQUEST
  if isinstance(exc, ValueError):
    return 422
  if isinstance(exc, (LookupUnavailableError, CatalogReadError)):
    return status.HTTP_503_SERVICE_UNAVAILABLE
  return status.HTTP_500_INTERNAL_SERVER_ERROR


class FastAPIAdapter:
  def __init__(self, explorer_service: ExplorerService, presenter: JsonPresenter):
    self._explorer_service = explorer_service
    self._presenter = presenter
    self.app = FastAPI(
      title='Arista Network Explorer API',
      version='0.1.0',
      description='Register Arista eAPI and CloudVision endpoints, browse the API catalog '
                  'and send ad-hoc requests. Every request is recorded in the query log.',
    )
    self._configure_routes()

  def _configure_routes(self) -> None:
    service = self._explorer_service

    @self.app.get('/api/v1/endpoints', tags=['Endpoints'])
    def list_endpoints():
      return self._respond(service.list_endpoints)

    @self.app.post('/api/v1/endpoints', tags=['Endpoints'], status_code=status.HTTP_201_CREATED)
    def register_endpoint(payload: EndpointPayload):
      """Register an endpoint and add it to the device inventory."""
      return self._respond(lambda: service.register_endpoint(
        RegisterEndpointCommand(**payload.model_dump())
      ))

    @self.app.get('/api/v1/endpoints/{endpoint_id}', tags=['Endpoints'])
    def get_endpoint(endpoint_id: str):
      return self._respond(service.get_endpoint, endpoint_id)

    @self.app.put('/api/v1/endpoints/{endpoint_id}', tags=['Endpoints'])
    def update_endpoint(endpoint_id: str, payload: EndpointUpdatePayload):
      return self._respond(lambda: service.update_endpoint(
        UpdateEndpointCommand(endpoint_id=endpoint_id, **payload.model_dump())
      ))

    @self.app.delete('/api/v1/endpoints/{endpoint_id}', tags=['Endpoints'])
    def delete_endpoint(endpoint_id: str):
      self._respond(service.delete_endpoint, endpoint_id)
      return {'deleted': endpoint_id}

    @self.app.post('/api/v1/endpoints/{endpoint_id}/test', tags=['Endpoints'])
    async def test_connection(endpoint_id: str):
      """Probe the endpoint; failures are reported in the body, never as errors."""
      return self._presenter.payload(await service.test_connection(endpoint_id))

    @self.app.get('/api/v1/catalog', tags=['Catalog'])
    def get_catalog(
      service_name: Optional[str] = Query(default=None, alias='service'),
      category: Optional[str] = None,
      q: Optional[str] = None,
    ):
      """Whole catalog, or one service partition, category or search result."""
      if service_name:
        return self._respond(service.list_catalog_by_service, service_name)
      if category:
        return self._respond(service.list_catalog_by_category, category)
      if q:
        return self._respond(service.search_catalog, q)
      return self._respond(service.get_catalog)

    @self.app.post('/api/v1/catalog/reparse', tags=['Catalog'])
    def reparse_catalog():
      return self._respond(service.reparse_catalog)

    @self.app.post('/api/v1/requests', tags=['Requests'])
    async def run_request(payload: ExplorerRequestPayload):
      """
      Send one request to a registered endpoint.

      - **eapi** endpoints take `body.cmds` and run them as one `runCmds` batch
      - **cloudvision** endpoints take `method`, `path` and an optional JSON `body`

      Transport failures come back as a response with `status` 0 and `error` set.
      """
      try:
        command = ExplorerRequestCommand(
          endpoint_id=payload.endpoint_id,
          method=payload.method.upper(),
          path=payload.path,
          body=payload.body,
          timeout_ms=payload.timeout_ms,
        )
        response = await service.run_request(command)
      except (ExplorerError, ValueError) as exc:
        raise HTTPException(status_code=_status_for(exc), detail=str(exc))
      return self._presenter.payload(response)

    @self.app.get('/api/v1/query-log', tags=['Records'])
    def list_query_log(endpoint_id: Optional[str] = None):
      return self._respond(service.list_query_log, endpoint_id)

    @self.app.get('/api/v1/inventory', tags=['Records'])
    def list_device_inventory():
      return self._respond(service.list_device_inventory)

    @self.app.get('/api/v1/lookup/tables', tags=['Lookup'])
    def list_lookup_tables():
      return self._respond(service.list_lookup_tables)

    @self.app.get('/api/v1/lookup/apis', tags=['Lookup'])
    def list_lookup_apis(service_name: Optional[str] = Query(default=None, alias='service')):
      return self._respond(service.list_lookup_apis, service_name)

    @self.app.get('/api/v1/lookup/search', tags=['Lookup'])
    def search_lookup_apis(q: str = Query(..., min_length=1)):
      return self._respond(service.search_lookup_apis, q)

    @self.app.get('/health', tags=['Health'])
    async def health():
      """Health check endpoint."""
      return {'status': 'healthy'}

  def _respond(self, operation: Callable[..., Any], *args: Any) -> Any:
    try:
      return self._presenter.payload(operation(*args))
    except (ExplorerError, ValueError) as exc:
      raise HTTPException(status_code=_status_for(exc), detail=str(exc))
