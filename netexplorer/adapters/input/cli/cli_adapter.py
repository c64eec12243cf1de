"""CLI adapter for interacting with the explorer service."""
from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Dict, Optional, Tuple

import click

from netexplorer.application.commands.endpoint_commands import (
  RegisterEndpointCommand,
  UpdateEndpointCommand,
)
from netexplorer.application.commands.explorer_request_command import (
  ALLOWED_METHODS,
  ExplorerRequestCommand,
)
from netexplorer.domain.entities.endpoint import EndpointKind
from netexplorer.domain.errors import ExplorerError
from netexplorer.ports.input.explorer_service import ExplorerService
from netexplorer.ports.input.result_presenter import ResultPresenter

KIND_CHOICE = click.Choice([kind.value for kind in EndpointKind])


class CLIAdapter:
  def __init__(self, explorer_service: ExplorerService, presenter: ResultPresenter):
    self._explorer_service = explorer_service
    self._presenter = presenter

  def run(self) -> None:
    self.build_cli()()

  def build_cli(self) -> click.Group:
    cli = click.Group(help='Explore Arista eAPI and CloudVision endpoints.')
    cli.add_command(self._endpoints_group())
    cli.add_command(self._catalog_group())
    cli.add_command(self._request_group())
    cli.add_command(self._log_group())
    cli.add_command(self._inventory_group())
    cli.add_command(self._lookup_group())
    return cli

  def _endpoints_group(self) -> click.Group:
    service = self._explorer_service

    @click.group('endpoints')
    def endpoints() -> None:
      """Manage registered endpoints."""

    @endpoints.command('list')
    def list_endpoints() -> None:
      self._echo(service.list_endpoints)

    @endpoints.command('show')
    @click.argument('endpoint_id')
    def show(endpoint_id: str) -> None:
      self._echo(service.get_endpoint, endpoint_id)

    @endpoints.command('add')
    @click.option('--name', required=True, help='Display name')
    @click.option('--kind', type=KIND_CHOICE, required=True, help='Endpoint kind')
    @click.option('--url', required=True, help='Base URL, e.g. https://switch1')
    @click.option('--username', default=None, help='Username (eAPI)')
    @click.option('--password', default=None, help='Password (eAPI)')
    @click.option('--token', default=None, help='API token (CloudVision)')
    @click.option('--tls-verify/--no-tls-verify', default=True, help='Verify TLS certificates')
    @click.option('--tag', 'tags', multiple=True, help='Tag, repeatable')
    def add(
      name: str,
      kind: str,
      url: str,
      username: Optional[str],
      password: Optional[str],
      token: Optional[str],
      tls_verify: bool,
      tags: Tuple[str, ...],
    ) -> None:
      """Register a new endpoint."""
      command = self._build(
        RegisterEndpointCommand,
        name=name,
        kind=EndpointKind(kind),
        url=url,
        username=username,
        password=password,
        token=token,
        tls_verify=tls_verify,
        tags=list(tags),
      )
      self._echo(service.register_endpoint, command)

    @endpoints.command('update')
    @click.argument('endpoint_id')
    @click.option('--name', default=None)
    @click.option('--kind', type=KIND_CHOICE, default=None)
    @click.option('--url', default=None)
    @click.option('--username', default=None)
    @click.option('--password', default=None)
    @click.option('--token', default=None)
    @click.option('--tls-verify/--no-tls-verify', default=None)
    @click.option('--tag', 'tags', multiple=True, help='Replaces all tags when given')
    def update(
      endpoint_id: str,
      name: Optional[str],
      kind: Optional[str],
      url: Optional[str],
      username: Optional[str],
      password: Optional[str],
      token: Optional[str],
      tls_verify: Optional[bool],
      tags: Tuple[str, ...],
    ) -> None:
      """Edit an endpoint; omitted options stay unchanged."""
      command = self._build(
        UpdateEndpointCommand,
        endpoint_id=endpoint_id,
        name=name,
        kind=EndpointKind(kind) if kind else None,
        url=url,
        username=username,
        password=password,
        token=token,
        tls_verify=tls_verify,
        tags=list(tags) if tags else None,
      )
      self._echo(service.update_endpoint, command)

    @endpoints.command('delete')
    @click.argument('endpoint_id')
    def delete(endpoint_id: str) -> None:
      self._call(service.delete_endpoint, endpoint_id)
      click.echo(f'Deleted {endpoint_id}')

    @endpoints.command('test')
    @click.argument('endpoint_id')
    def test(endpoint_id: str) -> None:
      """Probe an endpoint and record the outcome."""
      result = asyncio.run(service.test_connection(endpoint_id))
      click.echo(self._presenter.present(result))
      if not result.success:
        raise click.exceptions.Exit(1)

    return endpoints

  def _catalog_group(self) -> click.Group:
    service = self._explorer_service

    @click.group('catalog')
    def catalog() -> None:
      """Browse the parsed API catalog."""

    @catalog.command('list')
    @click.option('--service', 'service_name', default=None, help='Only one service partition')
    @click.option('--category', default=None, help='Only one category')
    def list_catalog(service_name: Optional[str], category: Optional[str]) -> None:
      if service_name:
        self._echo(service.list_catalog_by_service, service_name)
      elif category:
        self._echo(service.list_catalog_by_category, category)
      else:
        self._echo(service.get_catalog)

    @catalog.command('search')
    @click.argument('query')
    def search(query: str) -> None:
      self._echo(service.search_catalog, query)

    @catalog.command('reparse')
    def reparse() -> None:
      """Parse the source document again and replace the catalog."""
      self._echo(service.reparse_catalog)

    return catalog

  def _request_group(self) -> click.Group:
    service = self._explorer_service

    @click.group('request')
    def request() -> None:
      """Send requests to registered endpoints."""

    @request.command('run')
    @click.argument('endpoint_id')
    @click.option(
      '--method',
      type=click.Choice(ALLOWED_METHODS, case_sensitive=False),
      default='GET',
      show_default=True,
    )
    @click.option('--path', default='', help='Request path (CloudVision)')
    @click.option('--body', default=None, help='JSON request body')
    @click.option('--cmd', 'cmds', multiple=True, help='eAPI command, repeatable')
    @click.option('--timeout-ms', type=click.IntRange(min=1), default=None)
    def run(
      endpoint_id: str,
      method: str,
      path: str,
      body: Optional[str],
      cmds: Tuple[str, ...],
      timeout_ms: Optional[int],
    ) -> None:
      """Run one request and print the normalized response.

      \b
      Examples:
        request run ep_123 --method RUNCMDS --cmd "show version"
        request run ep_456 --path /api/resources/inventory/v1/Devices
      """
      payload = _parse_body(body)
      if cmds:
        payload = {**(payload or {}), 'cmds': list(cmds)}
      command = self._build(
        ExplorerRequestCommand,
        endpoint_id=endpoint_id,
        method=method.upper(),
        path=path,
        body=payload,
        timeout_ms=timeout_ms,
      )
      response = self._call(lambda: asyncio.run(service.run_request(command)))
      click.echo(self._presenter.present(response))
      if not response.success:
        raise click.exceptions.Exit(1)

    return request

  def _log_group(self) -> click.Group:
    service = self._explorer_service

    @click.group('log')
    def log() -> None:
      """Inspect the query log."""

    @log.command('list')
    @click.option('--endpoint-id', default=None, help='Only records for this endpoint')
    def list_log(endpoint_id: Optional[str]) -> None:
      self._echo(service.list_query_log, endpoint_id)

    return log

  def _inventory_group(self) -> click.Group:
    service = self._explorer_service

    @click.group('inventory')
    def inventory() -> None:
      """Inspect the device inventory."""

    @inventory.command('list')
    def list_inventory() -> None:
      self._echo(service.list_device_inventory)

    return inventory

  def _lookup_group(self) -> click.Group:
    service = self._explorer_service

    @click.group('lookup')
    def lookup() -> None:
      """Query the secondary API lookup database."""

    @lookup.command('tables')
    def tables() -> None:
      self._echo(service.list_lookup_tables)

    @lookup.command('list')
    @click.option('--service', 'service_name', default=None)
    def list_apis(service_name: Optional[str]) -> None:
      self._echo(service.list_lookup_apis, service_name)

    @lookup.command('search')
    @click.argument('keyword')
    def search(keyword: str) -> None:
      self._echo(service.search_lookup_apis, keyword)

    return lookup

  def _echo(self, operation: Callable[..., Any], *args: Any) -> None:
    click.echo(self._presenter.present(self._call(operation, *args)))

  def _call(self, operation: Callable[..., Any], *args: Any) -> Any:
    try:
      return operation(*args)
    except (ExplorerError, ValueError) as exc:
      raise click.ClickException(str(exc)) from exc

  def _build(self, factory: Callable[..., Any], **kwargs: Any) -> Any:
    try:
      return factory(**kwargs)
    except ValueError as exc:
      raise click.UsageError(str(exc)) from exc


def _parse_body(raw: Optional[str]) -> Optional[Dict[str, Any]]:
  if not raw:
    return None
  try:
    body = json.loads(raw)
  except json.JSONDecodeError as exc:
    raise click.BadParameter(f'not valid JSON: {exc}', param_hint='--body') from exc
  if not isinstance(body, dict):
    raise click.BadParameter('must be a JSON object', param_hint='--body')
  return body
