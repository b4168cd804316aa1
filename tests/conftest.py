"""Shared fakes for the search provider and the chat model."""

import json
from typing import Callable, Dict, List

import pytest

from client_research import config, data_sources
from client_research.errors import SearchError

FINANCIAL_RESPONSE = {
    "financialOverview": "Myer reported revenue of $3.3bn with stable margins.",
    "keyMetrics": {"revenue": "$3.3bn", "profitMargin": "1.5%"},
}
MARKET_RESPONSE = {
    "marketAnalysis": "Department store leader in Australia.",
    "marketPosition": "Top two department store",
    "competitors": ["David Jones", "Kmart"],
    "swotAnalysis": {
        "strengths": ["Brand recognition"],
        "weaknesses": ["High fixed costs"],
        "opportunities": ["Online market growth"],
        "threats": ["Industry shift to pure-play online"],
    },
    "strategicConsiderations": "Focus on omnichannel.",
}
NEWS_RESPONSE = {
    "recentDevelopments": [{"date": "2024-03-01", "title": "Half-year results", "description": "Profit up."}]
}
RECENT_RESPONSE = {
    "recentDevelopments": [
        {"date": "2024-05-01", "title": "Apparel Brands merger", "description": "Merger with Premier.",
         "financialImplications": "Acquisition financing"}
    ]
}
EXECUTIVE_RESPONSE = {
    "decisionMakers": {
        "keyPersonnel": [{"name": "Olivia Wirth", "role": "Executive Chair"}],
        "treasuryStructure": "Central treasury",
    }
}
DECISION_MAKERS_RESPONSE = {
    "keyDecisionMakers": [{"name": "Geoff Ashby", "title": "CFO", "background": "Finance executive"}],
    "decisionMakingProcess": "Board approves facilities above $50m.",
    "enhanced": {"boardComposition": {"boardMembers": []}},
}
BANKING_RESPONSE = {
    "bankingOpportunities": [
        {"service": "Acquisition finance", "rationale": "Merger", "urgency": "URGENT", "competitivePosition": "Strong"},
        {"service": "Cash management", "rationale": "Store network", "urgency": "High", "competitivePosition": "Fair"},
    ],
    "bankingRelationships": {"knownBankingPartners": ["NAB"], "painPoints": ["Fees"]},
}
ESG_RESPONSE = {
    "commitments": ["Net zero by 2040"],
    "initiatives": ["Solar rollout"],
    "ratings": {"MSCI": "A"},
    "focus": "Environmental",
}
BENCHMARKING_RESPONSE = {
    "metrics": {"Market Share": "30%"},
    "insights": ["Ahead of peers online"],
    "comparedCompanies": ["David Jones"],
}
CUSTOM_RESPONSE = {"findings": "Suppliers are paid on 60 day terms.", "keyPoints": ["60 day terms"]}

# distinctive phrase in each system prompt -> canned response
RESPONSES = [
    ("senior commercial banking analyst", FINANCIAL_RESPONSE),
    ("market analyst specializing", MARKET_RESPONSE),
    ("tracking company news", NEWS_RESPONSE),
    ("tracking company developments", RECENT_RESPONSE),
    ("specializing in corporate leadership", EXECUTIVE_RESPONSE),
    ("senior executive research analyst", DECISION_MAKERS_RESPONSE),
    ("identifying business banking opportunities", BANKING_RESPONSE),
    ("sustainability analyst", ESG_RESPONSE),
    ("equity analyst benchmarking", BENCHMARKING_RESPONSE),
    ("research analyst supporting", CUSTOM_RESPONSE),
]

SUMMARY_TEXT = "## Summary\nMyer is a department store group with clear financing needs."


class FakeLLM:
    """Stands in for ``data_sources.complete`` and records every call."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, object]] = []
        self.overrides: Dict[str, Callable[[str, str], str]] = {}

    def __call__(self, system_prompt: str, user_prompt: str, temperature: float = 0.0, model=None) -> str:
        self.calls.append({"system": system_prompt, "user": user_prompt, "temperature": temperature})
        for phrase, handler in self.overrides.items():
            if phrase in system_prompt:
                return handler(system_prompt, user_prompt)
        if "executive summary" in system_prompt:
            return SUMMARY_TEXT
        for phrase, payload in RESPONSES:
            if phrase in system_prompt:
                return f"Here is the analysis:\n```json\n{json.dumps(payload)}\n```"
        return "I could not find anything useful."


class FakeSearch:
    """Stands in for ``data_sources.web_search``."""

    def __init__(self) -> None:
        self.queries: List[str] = []
        self.fail_when: Callable[[str], bool] = lambda query: False
        self.blank_when: Callable[[str], bool] = lambda query: False

    def __call__(self, query: str) -> str:
        self.queries.append(query)
        if self.fail_when(query):
            raise SearchError("quota exceeded")
        if self.blank_when(query):
            return ""
        return f"Result about {query}\nhttps://example.com\nSnippet text"


@pytest.fixture(autouse=True)
def _no_region(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "DEFAULT_REGION", "")


@pytest.fixture
def fake_llm(monkeypatch: pytest.MonkeyPatch) -> FakeLLM:
    llm = FakeLLM()
    monkeypatch.setattr(data_sources, "complete", llm)
    return llm


@pytest.fixture
def fake_search(monkeypatch: pytest.MonkeyPatch) -> FakeSearch:
    search = FakeSearch()
    monkeypatch.setattr(data_sources, "web_search", search)
    return search


@pytest.fixture
def myer_request() -> dict:
    return {
        "clientId": "c-001",
        "companyName": "Myer",
        "industry": "Retail",
        "website": "myer.com.au",
        "researchTopics": {
            "customTopics": [
                {"name": "Supplier finance", "searchQuery": "supplier payment terms", "description": "Supplier terms"}
            ]
        },
    }
