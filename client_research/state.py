"""State definition for the client research workflow."""

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, TypedDict


class ResearchTopicConfig(TypedDict, total=False):
    """Optional topics to include; every flag defaults to True."""

    includeESG: bool
    includeBenchmarking: bool
    includeBankingRelationships: bool
    includeDecisionMakers: bool
    customTopics: List[Dict[str, str]]  # name / searchQuery / description


class ResearchRequest(TypedDict, total=False):
    """Caller input. Treated as read-only once a run starts."""

    clientId: str
    companyName: str
    website: str
    industry: str
    researchTopics: ResearchTopicConfig


class SWOTAnalysis(TypedDict):
    strengths: List[str]
    weaknesses: List[str]
    opportunities: List[str]
    threats: List[str]


class RecentDevelopment(TypedDict, total=False):
    date: str
    title: str
    description: str


class BankingOpportunity(TypedDict):
    service: str
    rationale: str
    urgency: str  # high / medium / low
    competitivePosition: str


class ESGProfile(TypedDict, total=False):
    commitments: List[str]
    initiatives: List[str]
    ratings: Dict[str, str]
    focus: str


class PeerComparison(TypedDict, total=False):
    metrics: Dict[str, str]
    insights: List[str]
    comparedCompanies: List[str]


class BankingRelationship(TypedDict, total=False):
    knownBankingPartners: List[str]
    recentRFPs: List[Dict[str, str]]
    bankingSwitchHistory: str
    painPoints: List[str]


class KeyPerson(TypedDict, total=False):
    name: str
    role: str
    background: str


class DecisionMakers(TypedDict, total=False):
    keyPersonnel: List[KeyPerson]
    treasuryStructure: str
    decisionProcess: str
    enhanced: Dict[str, Any]


class ResearchResult(TypedDict, total=False):
    """Best-effort aggregate returned to the caller; every field may be absent."""

    summary: str
    financialOverview: str
    keyMetrics: Dict[str, Any]
    marketAnalysis: str
    marketPosition: str
    competitors: List[str]
    swotAnalysis: SWOTAnalysis
    strategicConsiderations: str
    recentDevelopments: List[RecentDevelopment]
    recentEvents: List[RecentDevelopment]
    bankingOpportunities: List[BankingOpportunity]
    esgProfile: ESGProfile
    corporateValues: List[str]
    peerComparison: PeerComparison
    bankingRelationships: BankingRelationship
    decisionMakers: DecisionMakers
    keyDecisionMakers: List[Dict[str, Any]]
    decisionMakingProcess: str
    industryTrends: List[str]
    growthOpportunities: List[str]
    customResearchTopics: Dict[str, Any]
    error: str


class SliceKey(str, Enum):
    """Accumulator slices. Each one is owned by exactly one task unit."""

    FINANCIAL = "financialData"
    MARKET_POSITION = "marketPositionData"
    NEWS = "newsData"
    RECENT_DEVELOPMENTS = "recentDevelopmentsData"
    EXECUTIVE = "executiveData"
    ENHANCED_EXECUTIVE = "enhancedExecutiveData"
    KEY_DECISION_MAKERS = "keyDecisionMakersData"
    DECISION_MAKING_PROCESS = "decisionMakingProcess"
    BANKING_OPPORTUNITIES = "bankingOpportunitiesData"
    BANKING_RELATIONSHIPS = "bankingRelationshipsData"
    ESG = "esgData"
    BENCHMARKING = "benchmarkingData"
    CUSTOM_TOPICS = "customTopicsData"


class RunStatus(str, Enum):
    PENDING = "pending"
    COLLECTING = "collecting"
    SUMMARIZING = "summarizing"
    DONE = "done"
    FAILED = "failed"


def join_errors(existing: Optional[str], new: Optional[str]) -> Optional[str]:
    """Reducer for the error slot: parallel task failures append, never overwrite."""
    if not new:
        return existing
    if not existing:
        return new
    return f"{existing}; {new}"


class ResearchState(TypedDict):
    """State object for the client research workflow."""

    # Input
    input: ResearchRequest

    # Accumulator slices (one writer each)
    financialData: Optional[Dict[str, Any]]
    marketPositionData: Optional[Dict[str, Any]]
    newsData: Optional[List[RecentDevelopment]]
    recentDevelopmentsData: Optional[List[RecentDevelopment]]
    executiveData: Optional[DecisionMakers]
    enhancedExecutiveData: Optional[Dict[str, Any]]
    keyDecisionMakersData: Optional[List[Dict[str, Any]]]
    decisionMakingProcess: Optional[str]
    bankingOpportunitiesData: Optional[List[BankingOpportunity]]
    bankingRelationshipsData: Optional[BankingRelationship]
    esgData: Optional[ESGProfile]
    benchmarkingData: Optional[PeerComparison]
    customTopicsData: Optional[Dict[str, Any]]

    # Workflow control
    error: Annotated[Optional[str], join_errors]
    status: RunStatus

    # Final output
    output: ResearchResult


def empty_state(request: ResearchRequest) -> ResearchState:
    """Build the initial state for a run: every slice absent, status pending."""
    state: Dict[str, Any] = {key.value: None for key in SliceKey}
    state.update({"input": request, "error": None, "status": RunStatus.PENDING, "output": {}})
    return state  # type: ignore[return-value]


def topic_enabled(request: ResearchRequest, flag: str) -> bool:
    """Optional topics default to enabled when the flag is absent."""
    topics = request.get("researchTopics") or {}
    value = topics.get(flag)
    return True if value is None else bool(value)
