"""External search and chat-completion helpers."""

from typing import Any, Callable, Dict, List, Tuple

import requests
from langchain_core.messages import HumanMessage, SystemMessage

from . import config
from .errors import LLMError, SearchError
from .state import ResearchRequest

logger = config.logger

GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"


def _format_hits(hits: List[Dict[str, Any]]) -> str:
    """Render search hits as plain text for prompt embedding."""
    blocks = []
    for hit in hits:
        if not isinstance(hit, dict):
            continue
        title = hit.get("title", "Untitled")
        link = hit.get("link") or hit.get("url", "")
        snippet = hit.get("snippet") or hit.get("content", "")
        blocks.append(f"{title}\n{link}\n{snippet}".strip())
    return "\n\n".join(blocks)


def google_search(query: str, num_results: int | None = None) -> str:
    """Perform web search using the Google Custom Search JSON API."""
    if not (config.GOOGLE_API_KEY and config.GOOGLE_CSE_ID):
        raise SearchError("GOOGLE_API_KEY and GOOGLE_CSE_ID must be set for Google search")

    params = {
        "key": config.GOOGLE_API_KEY,
        "cx": config.GOOGLE_CSE_ID,
        "q": query,
        "num": min(num_results or config.SEARCH_RESULTS_PER_QUERY, 10),
    }
    try:
        response = requests.get(GOOGLE_SEARCH_URL, params=params, timeout=20)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        raise SearchError(str(exc)) from exc

    if not isinstance(payload, dict):
        raise SearchError(f"Unexpected Google search payload: {type(payload).__name__}")

    items = payload.get("items")
    if not isinstance(items, list) or not items:
        return "No good results found."
    return _format_hits(items)


def tavily_search(query: str, num_results: int | None = None) -> str:
    """Perform web search using Tavily."""
    if not config.TAVILY_API_KEY:
        raise SearchError("TAVILY_API_KEY must be set for Tavily search")
    try:
        results = config.create_tavily_tool().invoke(
            {"query": query, "max_results": num_results or config.SEARCH_RESULTS_PER_QUERY}
        )
    except Exception as exc:
        raise SearchError(str(exc)) from exc
    if isinstance(results, str):
        return results
    return _format_hits(results if isinstance(results, list) else [])


def web_search(query: str) -> str:
    """Search the configured provider. Raises SearchError on any failure."""
    if config.SEARCH_PROVIDER == "tavily":
        return tavily_search(query)
    return google_search(query)


def build_queries(templates: List[str], request: ResearchRequest) -> List[str]:
    """Interpolate query templates for one topic.

    Templates may use ``{company}`` and ``{industry}``. When DEFAULT_REGION
    is configured it is appended to the company name, so every query is
    scoped to the same market.
    """
    company = request.get("companyName", "").strip()
    if config.DEFAULT_REGION:
        company = f"{company} {config.DEFAULT_REGION}"
    industry = (request.get("industry") or "").strip()
    return [" ".join(template.format(company=company, industry=industry).split()) for template in templates]


def gather_search_results(
    topic: str,
    queries: List[str],
    search: Callable[[str], str] | None = None,
) -> Tuple[str, int]:
    """Run every query and combine the results into one labelled text blob.

    A failed query is replaced by a placeholder section instead of aborting
    the topic. Returns the combined text and the number of queries that
    produced non-blank results.
    """
    search = search or web_search
    sections = []
    succeeded = 0
    for query in queries:
        try:
            logger.info(f"[{topic}] Searching for: \"{query}\"")
            result = search(query)
        except SearchError as exc:
            logger.warning(f"[{topic}] Search failed for \"{query}\": {exc}")
            sections.append(f"Search failed for query \"{query}\". Error: {exc}")
            continue

        if result and result.strip():
            succeeded += 1
        sections.append(f"Results for query \"{query}\":\n{result}")

    return "\n\n".join(sections), succeeded


def complete(system_prompt: str, user_prompt: str, temperature: float = 0.0, model: str | None = None) -> str:
    """Run one chat completion and return the text content.

    There is no retry or timeout here: a failure becomes an LLMError and
    fails the calling task.
    """
    messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
    try:
        response = config.create_llm(temperature, model).invoke(messages)
    except Exception as exc:
        raise LLMError(str(exc)) from exc

    content = response.content
    if isinstance(content, list):
        content = "".join(part if isinstance(part, str) else part.get("text", "") for part in content)
    return str(content)
