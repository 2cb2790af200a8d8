"""
LangGraph-based retrieval funnel for curl generation.

Flow:
    START -> match_services -> search_endpoints -> generate -> END
                  |                   |
                  +-------------------+--> generate_generic -> END

Every stage that comes up empty routes to ``generate_generic``, which asks
the model without any retrieved API documentation.
"""

import json
import logging
from typing import Any, List, Optional, TypedDict

from langchain_core.output_parsers.openai_tools import PydanticToolsParser
from langchain_core.prompts import ChatPromptTemplate
from langgraph.graph import END, START, StateGraph

from aiservice.config import settings
from aiservice.llm.prompts import (
    generate_curl_fallback_prompt_template,
    generate_curl_prompt_template,
)
from aiservice.llm.providers import BaseAIProvider
from aiservice.llm.schemas import GenerateCurlResult
from aiservice.monitoring import get_metrics, get_tracer
from aiservice.rag.knowledgebase import ServiceMatcher
from aiservice.rag.vectorstore import EndpointVectorStore


logger = logging.getLogger(__name__)


# === State Definition ===

class CurlState(TypedDict):
    """State passed between nodes in the graph."""
    # Input
    service_name: str
    service_request: str

    # Retrieval
    matched_ids: List[str]
    endpoints: List[Any]

    # Output
    result: Optional[GenerateCurlResult]
    source: Optional[str]  # "retrieval" | "fallback"


def initial_state(service_name: str, service_request: str) -> CurlState:
    return {
        "service_name": service_name,
        "service_request": service_request,
        "matched_ids": [],
        "endpoints": [],
        "result": None,
        "source": None,
    }


def parse_endpoint_documents(documents) -> List[Any]:
    """Decode each document's JSON payload, keeping search order."""
    return [json.loads(document.page_content) for document in documents]


async def run_structured_chain(
    provider: BaseAIProvider,
    template: ChatPromptTemplate,
    variables: dict,
) -> GenerateCurlResult:
    """Render ``template``, call the schema-bound model, parse its tool call."""
    chain = (
        template
        | provider.model_with_output_parser(GenerateCurlResult)
        | PydanticToolsParser(tools=[GenerateCurlResult], first_tool_only=True)
    )
    result = await chain.ainvoke(variables)

    if result is None:
        raise ValueError("Model did not return a structured curl result")

    return result


# === Graph Builder ===

def build_curl_graph(
    provider: BaseAIProvider,
    matcher: Optional[ServiceMatcher],
    vector_store: Optional[EndpointVectorStore],
    top_k: int = None,
):
    """Build the curl generation state machine for one provider setup."""
    top_k = top_k or settings.RETRIEVAL_TOP_K

    async def match_services_node(state: CurlState) -> CurlState:
        """Narrow the catalog to services resembling the requested name."""
        with get_tracer().trace_run("match_services", inputs={"service_name": state["service_name"]}) as run:
            matched = matcher.match(state["service_name"])
            matched_ids = [service.id for service in matched]
            run.set_output(matched_ids)

        if not matched_ids:
            get_metrics().increment("fuzzy_misses")
            logger.info("No knowledgebase service matches %r", state["service_name"])
        else:
            logger.debug("Matched services for %r: %s", state["service_name"], matched_ids)

        return {**state, "matched_ids": matched_ids}

    async def search_endpoints_node(state: CurlState) -> CurlState:
        """Find endpoint documents of the matched services."""
        with get_tracer().trace_run(
            "search_endpoints",
            run_type="retriever",
            inputs={"query": state["service_request"], "ids": state["matched_ids"]},
        ) as run:
            documents = await vector_store.similarity_search(
                state["service_request"],
                k=top_k,
                ids=state["matched_ids"],
            )
            endpoints = parse_endpoint_documents(documents)
            run.set_output(len(endpoints))

        if not endpoints:
            get_metrics().increment("retrieval_misses")
            logger.info("No endpoint documents found for services %s", state["matched_ids"])

        return {**state, "endpoints": endpoints}

    async def generate_node(state: CurlState) -> CurlState:
        """Generate a curl command grounded in the retrieved endpoints."""
        with get_tracer().trace_run("generate_curl", run_type="llm"):
            result = await run_structured_chain(
                provider,
                generate_curl_prompt_template,
                {
                    "endpoints": json.dumps(state["endpoints"]),
                    "serviceName": state["service_name"],
                    "serviceRequest": state["service_request"],
                },
            )
        return {**state, "result": result, "source": "retrieval"}

    async def generate_generic_node(state: CurlState) -> CurlState:
        """Generate a curl command from the model's own knowledge."""
        get_metrics().increment("fallbacks")
        with get_tracer().trace_run("generate_curl_generic", run_type="llm"):
            result = await generate_curl_generic(
                provider,
                state["service_name"],
                state["service_request"],
            )
        return {**state, "result": result, "source": "fallback"}

    # === Routing Functions ===

    def route_start(state: CurlState) -> str:
        if vector_store is None:
            return "fallback"
        return "match"

    def route_after_match(state: CurlState) -> str:
        if state["matched_ids"]:
            return "search"
        return "fallback"

    def route_after_search(state: CurlState) -> str:
        if state["endpoints"]:
            return "generate"
        return "fallback"

    graph = StateGraph(CurlState)

    graph.add_node("match_services", match_services_node)
    graph.add_node("search_endpoints", search_endpoints_node)
    graph.add_node("generate", generate_node)
    graph.add_node("generate_generic", generate_generic_node)

    graph.add_conditional_edges(
        START,
        route_start,
        {
            "match": "match_services",
            "fallback": "generate_generic",
        }
    )
    graph.add_conditional_edges(
        "match_services",
        route_after_match,
        {
            "search": "search_endpoints",
            "fallback": "generate_generic",
        }
    )
    graph.add_conditional_edges(
        "search_endpoints",
        route_after_search,
        {
            "generate": "generate",
            "fallback": "generate_generic",
        }
    )

    graph.add_edge("generate", END)
    graph.add_edge("generate_generic", END)

    return graph.compile()


async def generate_curl_generic(
    provider: BaseAIProvider,
    service_name: str,
    service_request: str,
) -> GenerateCurlResult:
    """Fallback generation without retrieved context."""
    return await run_structured_chain(
        provider,
        generate_curl_fallback_prompt_template,
        {
            "serviceName": service_name,
            "serviceRequest": service_request,
        },
    )
