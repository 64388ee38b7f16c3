"""LangGraph-based fallback orchestration.

Same semantics as the sequential strategy, expressed as a graph that loops
over candidates until one answers or the canned fallback node is reached.
"""

from collections.abc import Sequence
from typing import Literal, NotRequired, TypedDict, cast

from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, START, StateGraph

from agent_proxy.constants import DEFAULT_CLOUD_PRIORITY, DEFAULT_LOCAL_PRIORITY
from agent_proxy.errors import ProviderError
from agent_proxy.providers.base import ChatProvider
from agent_proxy.providers.registry import ProviderRegistry
from agent_proxy.schemas import ChatRequest, ChatResponse

from .base import (
    ChatOrchestrator,
    candidate_order,
    fallback_after,
    record_candidate_failure,
    tag_selected,
)


class FallbackGraphState(TypedDict):
    request: ChatRequest
    candidates: list[ChatProvider]
    index: int
    errors: list[ProviderError]
    response: NotRequired[ChatResponse]


class LangGraphFallbackOrchestrator(ChatOrchestrator):
    def __init__(
        self,
        registry: ProviderRegistry,
        cloud_priority: Sequence[str] = DEFAULT_CLOUD_PRIORITY,
        local_priority: Sequence[str] = DEFAULT_LOCAL_PRIORITY,
    ) -> None:
        self._registry = registry
        self._cloud_priority = tuple(cloud_priority)
        self._local_priority = tuple(local_priority)

        graph = StateGraph(FallbackGraphState)
        graph.add_node("try_candidate", self._try_candidate)
        graph.add_node("fallback", self._fallback)
        graph.add_conditional_edges(START, self._next_step)
        graph.add_conditional_edges("try_candidate", self._next_step)
        graph.add_edge("fallback", END)
        self._graph = graph.compile()

    def _next_step(self, state: FallbackGraphState) -> Literal["try_candidate", "fallback", "__end__"]:
        if state.get("response") is not None:
            return END
        if state["index"] < len(state["candidates"]):
            return "try_candidate"
        return "fallback"

    def _try_candidate(self, state: FallbackGraphState) -> dict[str, object]:
        provider = state["candidates"][state["index"]]
        try:
            response = provider.generate(state["request"])
        except Exception as e:
            error = record_candidate_failure(provider, e)
            return {"index": state["index"] + 1, "errors": [*state["errors"], error]}
        return {"index": state["index"] + 1, "response": tag_selected(response, provider)}

    def _fallback(self, state: FallbackGraphState) -> dict[str, ChatResponse]:
        return {"response": fallback_after(state["request"], state["errors"])}

    def run(self, request: ChatRequest) -> ChatResponse:
        candidates = candidate_order(self._registry, self._cloud_priority, self._local_priority)
        initial_state: FallbackGraphState = {
            "request": request,
            "candidates": candidates,
            "index": 0,
            "errors": [],
        }
        config: RunnableConfig = {"recursion_limit": len(candidates) + 5}
        result = cast("FallbackGraphState", self._graph.invoke(initial_state, config=config))
        response = result.get("response")
        if response is None:
            raise RuntimeError("LangGraph execution did not return a chat response")
        return response
