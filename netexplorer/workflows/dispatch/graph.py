"""Request dispatch runner based on LangGraph."""
from __future__ import annotations

from typing import Mapping

from langgraph.graph import END, StateGraph

from netexplorer.application.handlers.protocols import WorkflowRunner
from netexplorer.domain.entities.endpoint import EndpointKind
from netexplorer.ports.output.protocol_adapter import ProtocolAdapter
from netexplorer.ports.output.record_store import RecordStore
from netexplorer.workflows.dispatch.nodes import CONTINUE, STOP, DispatchActions
from netexplorer.workflows.dispatch.state import DispatchState


class DispatchWorkflowRunner(WorkflowRunner):
  """Resolving -> Dispatching -> Completed | Failed, one run per request."""

  def __init__(
    self,
    store: RecordStore,
    adapters: Mapping[EndpointKind, ProtocolAdapter],
    default_timeout: float,
  ) -> None:
    self._actions = DispatchActions(store=store, adapters=adapters, default_timeout=default_timeout)
    self._graph = self._build_graph()

  def _build_graph(self):
    workflow = StateGraph(DispatchState)
    workflow.add_node('resolve', self._actions.resolve)
    workflow.add_node('select_adapter', self._actions.select_adapter)
    workflow.add_node('dispatch', self._actions.dispatch)
    workflow.add_node('record', self._actions.record)

    workflow.set_entry_point('resolve')
    workflow.add_conditional_edges(
      'resolve', self._actions.route, {CONTINUE: 'select_adapter', STOP: END}
    )
    workflow.add_conditional_edges(
      'select_adapter', self._actions.route, {CONTINUE: 'dispatch', STOP: END}
    )
    workflow.add_edge('dispatch', 'record')
    workflow.add_edge('record', END)
    return workflow.compile()

  async def run(self, state: Mapping[str, object]) -> Mapping[str, object]:
    return await self._graph.ainvoke(state)
