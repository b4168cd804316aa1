"""Configuration and shared objects for the client research workflow."""

import logging
import os
import sys
from functools import lru_cache

from dotenv import load_dotenv
from langchain_openai import ChatOpenAI

# Fix Windows console encoding for Unicode support
if sys.platform == "win32":
    import codecs

    sys.stdout = codecs.getwriter("utf-8")(sys.stdout.buffer, "strict")
    sys.stderr = codecs.getwriter("utf-8")(sys.stderr.buffer, "strict")

# Load environment variables once
load_dotenv()

# Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4-turbo-preview")
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "openai/gpt-4-turbo-preview")
SEARCH_PROVIDER = os.getenv("SEARCH_PROVIDER", "google").lower()
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
GOOGLE_CSE_ID = os.getenv("GOOGLE_CSE_ID")
TAVILY_API_KEY = os.getenv("TAVILY_API_KEY")
SEARCH_RESULTS_PER_QUERY = int(os.getenv("SEARCH_RESULTS_PER_QUERY", "5"))
DEFAULT_REGION = os.getenv("DEFAULT_REGION", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Extraction tasks are factual; the summary is allowed a little latitude.
EXTRACTION_TEMPERATURE = 0.0
SUMMARY_TEMPERATURE = 0.2

# Logging setup
logger = logging.getLogger("client_research")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s - %(message)s"))
    logger.addHandler(handler)
logger.setLevel(LOG_LEVEL)
logger.propagate = False


def validate_api_keys() -> list[str]:
    """Return a list of missing API keys required to run the workflow."""
    missing = []
    if not (OPENAI_API_KEY or OPENROUTER_API_KEY):
        missing.append("OPENAI_API_KEY or OPENROUTER_API_KEY")
    if SEARCH_PROVIDER == "tavily":
        if not TAVILY_API_KEY:
            missing.append("TAVILY_API_KEY")
    else:
        if not GOOGLE_API_KEY:
            missing.append("GOOGLE_API_KEY")
        if not GOOGLE_CSE_ID:
            missing.append("GOOGLE_CSE_ID")
    return missing


@lru_cache(maxsize=None)
def create_llm(temperature: float = EXTRACTION_TEMPERATURE, model: str | None = None):
    """Instantiate ChatOpenAI with OpenRouter when available, else OpenAI.

    Instances are cached per (temperature, model) so the workflow builds each
    client once, on first use rather than at import.
    """
    if OPENROUTER_API_KEY:
        return ChatOpenAI(
            model=model or OPENROUTER_MODEL,
            api_key=OPENROUTER_API_KEY,
            base_url="https://openrouter.ai/api/v1",
            temperature=temperature,
        )
    return ChatOpenAI(model=model or OPENAI_MODEL, temperature=temperature, api_key=OPENAI_API_KEY)


@lru_cache(maxsize=1)
def create_tavily_tool():
    """Instantiate the Tavily search tool used when SEARCH_PROVIDER=tavily."""
    from langchain_community.tools.tavily_search import TavilySearchResults

    return TavilySearchResults(api_key=TAVILY_API_KEY, max_results=SEARCH_RESULTS_PER_QUERY)
