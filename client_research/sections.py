"""Workflow node functions: one research task unit per topic, plus the join steps."""

import json
from functools import wraps
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from . import config, data_sources, parsing, prompts
from .errors import ClientResearchError, ConfigError, NoDataError, ParseError, SummarizerError, ValidationError
from .state import ResearchRequest, ResearchResult, ResearchState, RunStatus, SliceKey, topic_enabled

logger = config.logger

NO_DATA = "No data available"

# unit name -> slices it owns
TASK_REGISTRY: Dict[str, Tuple[SliceKey, ...]] = {}
# unit name -> wrapped node function
TASK_NODES: Dict[str, Callable[[ResearchState], Dict[str, Any]]] = {}
# unit name -> predicate deciding whether the unit runs for a request
TASK_GATES: Dict[str, Callable[[ResearchRequest], bool]] = {}


def _always(_request: ResearchRequest) -> bool:
    return True


def research_task(
    name: str,
    owns: Iterable[SliceKey],
    label: str,
    enabled: Callable[[ResearchRequest], bool] = _always,
):
    """Register a task unit and the accumulator slices it owns.

    Registration refuses a slice already claimed by another unit. The wrapped
    node validates the company name, turns any ClientResearchError into this
    unit's ``error`` message, and refuses to return keys it does not own.
    """
    owned = tuple(owns)

    def decorator(func: Callable[[ResearchState, str], Dict[str, Any]]):
        for other, other_keys in TASK_REGISTRY.items():
            shared = set(owned) & set(other_keys)
            if shared:
                raise ConfigError(f"{name} and {other} both claim {sorted(key.value for key in shared)}")

        allowed = {key.value for key in owned}

        @wraps(func)
        def node(state: ResearchState) -> Dict[str, Any]:
            request = state.get("input") or {}
            company = (request.get("companyName") or "").strip()
            logger.info(f"\n{'=' * 60}")
            logger.info(f"{label.upper()} RESEARCH: {company or '<missing company>'}")
            logger.info(f"{'=' * 60}\n")

            try:
                if not company:
                    raise ValidationError("Company name is required for research")
                update = func(state, company)
            except ClientResearchError as exc:
                message = f"{label} research error: {exc}"
                logger.error(f"[{name}] {message}")
                return {"error": message}

            stray = set(update) - allowed
            if stray:
                raise ConfigError(f"{name} wrote slices it does not own: {sorted(stray)}")
            logger.info(f"[OK] {label} research completed")
            return update

        TASK_REGISTRY[name] = owned
        TASK_NODES[name] = node
        TASK_GATES[name] = enabled
        return node

    return decorator


def enabled_tasks(request: ResearchRequest) -> List[str]:
    """Names of the task units that run for ``request``, in registration order."""
    return [name for name, gate in TASK_GATES.items() if gate(request)]


def _gate(flag: str) -> Callable[[ResearchRequest], bool]:
    return lambda request: topic_enabled(request, flag)


def _industry(state: ResearchState, default: str = "") -> str:
    return (state["input"].get("industry") or default).strip()


def _search(
    topic: str,
    templates: List[str],
    state: ResearchState,
    required: bool = True,
    fallback: Optional[str] = None,
) -> str:
    """Build this topic's queries, run them, and apply the no-data policy.

    With no successful query the topic either fails (``required``), proceeds
    with the placeholders, or swaps in ``fallback`` text for the prompt.
    """
    queries = data_sources.build_queries(templates, state["input"])
    combined, succeeded = data_sources.gather_search_results(topic, queries)
    logger.info(f"[{topic}] {succeeded}/{len(queries)} queries returned results")
    if succeeded == 0:
        if fallback is not None:
            logger.warning(f"[{topic}] No search results; continuing without search data")
            return fallback
        if required:
            raise NoDataError(f"Unable to find {topic} information")
    return combined


def _decode(topic: str, response_text: str) -> Dict[str, Any]:
    """Decode the JSON object in a response; an unusable response decodes to {}."""
    try:
        return parsing.parse_json_response(response_text)
    except ParseError as exc:
        logger.warning(f"[{topic}] Could not parse LLM response ({exc}); using defaults")
        return {}


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value.strip() else None


# ---------------------------------------------------------------------------
# Task units
# ---------------------------------------------------------------------------

FINANCIAL_QUERIES = [
    "{company} annual report financial results revenue profit",
    "{company} debt structure senior subordinated debt maturity",
    "{company} cash flow EBITDA operating free cash flow",
    "{company} credit rating Moody's S&P Fitch",
    "{company} dividend policy payout ratio dividend history",
    "{company} working capital current ratio quick ratio",
    "{company} balance sheet assets liabilities equity",
    "{company} {industry} financial performance metrics",
    "{company} debt service coverage interest coverage ratio",
    "{company} liquidity position cash management",
]


@research_task("financial", owns=[SliceKey.FINANCIAL], label="Financial")
def research_financial(state: ResearchState, company: str) -> Dict[str, Any]:
    """Financial performance, credit and capital structure.

    A response whose JSON cannot be parsed is not fatal here: the overview is
    recovered from the text between the ``"financialOverview"`` and
    ``"keyMetrics"`` markers and the metrics are left empty.
    """
    combined = _search("financial", FINANCIAL_QUERIES, state)

    response_text = data_sources.complete(
        prompts.FINANCIAL_SYSTEM_PROMPT.format(company=company),
        f"Here are the search results about {company}'s financial information:\n\n{combined}",
        temperature=config.EXTRACTION_TEMPERATURE,
    )
    logger.info(f"[financial] Raw LLM response length: {len(response_text)}")

    try:
        parsed = parsing.parse_json_response(response_text)
    except ParseError as exc:
        logger.error(f"[financial] JSON parsing error: {exc}")
        overview = ""
        if '"financialOverview"' in response_text:
            overview = parsing.extract_between(response_text, '"financialOverview"', '"keyMetrics"')
        parsed = {
            "financialOverview": overview or "Failed to parse detailed financial overview from search results",
            "keyMetrics": {},
        }

    return {
        SliceKey.FINANCIAL.value: {
            "overview": _text(parsed.get("financialOverview")) or "No financial overview available",
            "metrics": parsing.parse_key_metrics(parsed),
        }
    }


MARKET_QUERIES = [
    "{company} market position industry analysis",
    "{company} competitors comparison {industry}",
    "{company} SWOT analysis strengths weaknesses",
    "{company} market share {industry}",
]


@research_task("market_positioning", owns=[SliceKey.MARKET_POSITION], label="Market positioning")
def research_market_positioning(state: ResearchState, company: str) -> Dict[str, Any]:
    """Market position, competitors and SWOT.

    Unlike the other topics, an empty search is not fatal: the model is asked
    to synthesize the analysis from general industry knowledge instead.
    """
    industry = _industry(state)
    combined = _search(
        "market positioning",
        MARKET_QUERIES,
        state,
        fallback=prompts.MARKET_NO_DATA_NOTE.format(company=company, industry=industry or "Unknown"),
    )

    response_text = data_sources.complete(
        prompts.MARKET_SYSTEM_PROMPT.format(company=company, industry=industry or "relevant"),
        f"Here are the search results about {company}'s market position and competitors:\n\n{combined}",
        temperature=config.EXTRACTION_TEMPERATURE,
    )
    parsed = _decode("market positioning", response_text)

    return {
        SliceKey.MARKET_POSITION.value: {
            "marketAnalysis": _text(parsed.get("marketAnalysis")),
            "marketPosition": _text(parsed.get("marketPosition")),
            "competitors": parsing.string_list(parsed.get("competitors")),
            "swotAnalysis": parsing.parse_swot(parsed),
            "strategicConsiderations": _text(parsed.get("strategicConsiderations")),
        }
    }


NEWS_QUERIES = [
    "{company} recent news developments last 12 months",
    "{company} press releases announcements",
    "{company} {industry} business updates",
    "{company} recent events",
]


@research_task("news", owns=[SliceKey.NEWS], label="News")
def research_news(state: ResearchState, company: str) -> Dict[str, Any]:
    combined = _search("news", NEWS_QUERIES, state)
    response_text = data_sources.complete(
        prompts.NEWS_SYSTEM_PROMPT.format(company=company),
        f"Here are the search results about {company}'s recent news and developments:\n\n{combined}",
        temperature=config.EXTRACTION_TEMPERATURE,
    )
    return {SliceKey.NEWS.value: parsing.parse_recent_developments(_decode("news", response_text))}


RECENT_DEVELOPMENTS_QUERIES = [
    "{company} recent news last 3 months",
    "{company} financial announcement quarterly results",
    "{company} acquisition merger partnership",
    "{company} executive change leadership",
    "{company} product launch new service",
]


@research_task("recent_developments", owns=[SliceKey.RECENT_DEVELOPMENTS], label="Recent developments")
def research_recent_developments(state: ResearchState, company: str) -> Dict[str, Any]:
    combined = _search("recent developments", RECENT_DEVELOPMENTS_QUERIES, state, required=False)
    response_text = data_sources.complete(
        prompts.RECENT_DEVELOPMENTS_SYSTEM_PROMPT.format(company=company),
        f"Here is the search data about {company}'s recent developments:\n\n{combined}",
        temperature=config.EXTRACTION_TEMPERATURE,
    )
    developments = parsing.parse_recent_developments(_decode("recent developments", response_text))
    return {SliceKey.RECENT_DEVELOPMENTS.value: developments}


EXECUTIVE_QUERIES = [
    "{company} executive team leadership",
    "{company} CEO CFO management",
    "{company} board of directors",
]


@research_task("executive", owns=[SliceKey.EXECUTIVE], label="Executive")
def research_executive(state: ResearchState, company: str) -> Dict[str, Any]:
    combined = _search("executive", EXECUTIVE_QUERIES, state)
    response_text = data_sources.complete(
        prompts.EXECUTIVE_SYSTEM_PROMPT.format(company=company),
        f"Here are the search results about {company}'s executive team:\n\n{combined}",
        temperature=config.EXTRACTION_TEMPERATURE,
    )
    return {SliceKey.EXECUTIVE.value: parsing.parse_decision_makers(_decode("executive", response_text))}


DECISION_MAKERS_QUERIES = [
    "{company} executive team CEO CFO leadership profiles",
    "{company} board of directors independent members composition",
    "{company} annual report executive compensation management",
    "{company} organizational chart reporting structure hierarchy",
    "{company} treasury team finance procurement structure",
    "{company} chief financial officer treasurer financial decisions",
    "{company} decision making process financial approval authority",
    "{company} executives LinkedIn profiles professional background",
    "{company} board memberships other companies directors",
    "{company} executive speaking engagements conferences events",
    "{company} management team educational background MBA qualifications",
    "{company} executive appointments resignations turnover changes",
    "{company} executive tenure length service company stability",
    "{company} succession planning leadership development",
    "{company} executives professional associations {industry}",
    "{company} executive social media presence thought leadership",
    "{company} procurement vendor management structure authority limits",
]


@research_task(
    "decision_makers",
    owns=[SliceKey.KEY_DECISION_MAKERS, SliceKey.ENHANCED_EXECUTIVE, SliceKey.DECISION_MAKING_PROCESS],
    label="Enhanced decision makers",
    enabled=_gate("includeDecisionMakers"),
)
def research_decision_makers(state: ResearchState, company: str) -> Dict[str, Any]:
    """Executive profiles, organizational structure and board composition."""
    combined = _search("decision makers", DECISION_MAKERS_QUERIES, state)
    response_text = data_sources.complete(
        prompts.DECISION_MAKERS_SYSTEM_PROMPT.format(company=company),
        "Here is the comprehensive search data about "
        f"{company}'s leadership team, organizational structure, and executive intelligence:\n\n{combined}",
        temperature=config.EXTRACTION_TEMPERATURE,
    )
    parsed = _decode("decision makers", response_text)

    key_people = parsing.dict_list(parsed.get("keyDecisionMakers"))
    enhanced = parsed.get("enhanced")
    return {
        SliceKey.KEY_DECISION_MAKERS.value: key_people,
        SliceKey.ENHANCED_EXECUTIVE.value: enhanced if isinstance(enhanced, dict) else {},
        SliceKey.DECISION_MAKING_PROCESS.value: _text(parsed.get("decisionMakingProcess")),
    }


BANKING_QUERIES = [
    "{company} banking relationships financial partners",
    "{company} capital raising debt financing",
    "{company} treasury operations banking needs",
    "{company} {industry} typical banking services required",
]


@research_task(
    "banking_opportunities",
    owns=[SliceKey.BANKING_OPPORTUNITIES, SliceKey.BANKING_RELATIONSHIPS],
    label="Banking opportunities",
)
def research_banking_opportunities(state: ResearchState, company: str) -> Dict[str, Any]:
    """Banking service opportunities and known banking relationships.

    Financial and market slices are embedded when they are already present in
    the state this unit sees; in a fan-out run they usually are not.
    """
    existing = {
        "financialOverview": state.get(SliceKey.FINANCIAL.value) or "",
        "marketPosition": state.get(SliceKey.MARKET_POSITION.value) or "",
        "currentData": state.get("output") or {},
    }
    combined = _search("banking opportunities", BANKING_QUERIES, state, required=False)
    response_text = data_sources.complete(
        prompts.BANKING_OPPORTUNITIES_SYSTEM_PROMPT.format(company=company),
        f"Here is the research data and search results about {company}'s banking needs and relationships:\n\n"
        f"EXISTING RESEARCH:\n{json.dumps(existing, indent=2, default=str)}\n\n"
        f"ADDITIONAL SEARCH RESULTS:\n{combined}",
        temperature=config.EXTRACTION_TEMPERATURE,
    )
    parsed = _decode("banking opportunities", response_text)

    update: Dict[str, Any] = {SliceKey.BANKING_OPPORTUNITIES.value: parsing.parse_banking_opportunities(parsed)}
    if topic_enabled(state["input"], "includeBankingRelationships"):
        update[SliceKey.BANKING_RELATIONSHIPS.value] = parsing.parse_banking_relationships(parsed)
    return update


ESG_QUERIES = [
    "{company} ESG sustainability corporate social responsibility values",
    "{company} climate emissions targets environmental initiatives",
    "{company} governance diversity community programs ESG rating",
]


@research_task("esg", owns=[SliceKey.ESG], label="ESG", enabled=_gate("includeESG"))
def research_esg(state: ResearchState, company: str) -> Dict[str, Any]:
    combined = _search("ESG", ESG_QUERIES, state)
    response_text = data_sources.complete(
        prompts.ESG_SYSTEM_PROMPT.format(company=company),
        f"Here are the search results about {company}'s ESG profile and corporate values:\n\n{combined}",
        temperature=config.EXTRACTION_TEMPERATURE,
    )
    return {SliceKey.ESG.value: parsing.parse_esg(_decode("ESG", response_text), source_text=combined)}


BENCHMARKING_QUERIES = [
    "{company} compared to competitors benchmarking industry performance",
    "{company} {industry} peers market share profit margin comparison",
    "{company} industry ranking versus rivals",
]


@research_task(
    "benchmarking",
    owns=[SliceKey.BENCHMARKING],
    label="Peer benchmarking",
    enabled=_gate("includeBenchmarking"),
)
def research_benchmarking(state: ResearchState, company: str) -> Dict[str, Any]:
    industry = _industry(state)
    combined = _search("benchmarking", BENCHMARKING_QUERIES, state)
    response_text = data_sources.complete(
        prompts.BENCHMARKING_SYSTEM_PROMPT.format(company=company, industry=industry or "industry"),
        f"Here are the search results comparing {company} with its peers:\n\n{combined}",
        temperature=config.EXTRACTION_TEMPERATURE,
    )
    return {SliceKey.BENCHMARKING.value: parsing.parse_peer_comparison(_decode("benchmarking", response_text))}


def _custom_topics(request: ResearchRequest) -> List[Dict[str, str]]:
    topics = parsing.dict_list((request.get("researchTopics") or {}).get("customTopics"))
    return [
        topic
        for topic in topics
        if isinstance(topic.get("name"), str)
        and topic["name"].strip()
        and isinstance(topic.get("searchQuery"), str)
        and topic["searchQuery"].strip()
    ]


@research_task(
    "custom_topics",
    owns=[SliceKey.CUSTOM_TOPICS],
    label="Custom topic",
    enabled=lambda request: bool(_custom_topics(request)),
)
def research_custom_topics(state: ResearchState, company: str) -> Dict[str, Any]:
    """One query and one completion per caller-defined topic.

    A topic whose search fails entirely is recorded with an error entry; the
    unit only fails when every topic came back empty.
    """
    results: Dict[str, Any] = {}
    failures = []
    for topic in _custom_topics(state["input"]):
        name = topic["name"]
        description = topic.get("description", "")
        query_template = "{company} " + topic["searchQuery"].replace("{", "{{").replace("}", "}}")
        try:
            combined = _search(f"custom: {name}", [query_template], state)
        except NoDataError as exc:
            failures.append(name)
            results[name] = {"description": description, "error": str(exc)}
            continue

        response_text = data_sources.complete(
            prompts.CUSTOM_TOPIC_SYSTEM_PROMPT.format(company=company, name=name, description=description),
            f"Here are the search results about {company} for \"{name}\":\n\n{combined}",
            temperature=config.EXTRACTION_TEMPERATURE,
        )
        parsed = _decode(f"custom: {name}", response_text)
        results[name] = {
            "description": description,
            "findings": _text(parsed.get("findings")) or "",
            "keyPoints": parsing.string_list(parsed.get("keyPoints")),
        }

    if results and len(failures) == len(results):
        raise NoDataError(f"Unable to find information for custom topics: {', '.join(failures)}")
    return {SliceKey.CUSTOM_TOPICS.value: results}


# ---------------------------------------------------------------------------
# Join steps
# ---------------------------------------------------------------------------


def start_research(state: ResearchState) -> Dict[str, Any]:
    """Entry node: mark the run as collecting before the fan-out."""
    request = state.get("input") or {}
    logger.info(f"\n{'=' * 60}")
    logger.info(f"STARTING CLIENT RESEARCH: {request.get('companyName') or '<missing company>'}")
    logger.info(f"Topics: {', '.join(enabled_tasks(request))}")
    logger.info(f"{'=' * 60}\n")
    return {"status": RunStatus.COLLECTING}


def _industry_trends(swot: Dict[str, List[str]]) -> List[str]:
    candidates = swot.get("opportunities", []) + swot.get("threats", [])
    return [item for item in candidates if "industry" in item.lower() or "market" in item.lower()]


def build_output(state: ResearchState) -> ResearchResult:
    """Project the accumulator slices onto the public result shape."""
    output: ResearchResult = {}

    financial = state.get(SliceKey.FINANCIAL.value)
    if isinstance(financial, dict):
        output["financialOverview"] = financial.get("overview") or ""
        output["keyMetrics"] = financial.get("metrics") or {}

    market = state.get(SliceKey.MARKET_POSITION.value)
    if isinstance(market, dict):
        swot = market.get("swotAnalysis") or parsing.parse_swot(None)
        output["swotAnalysis"] = swot
        output["competitors"] = market.get("competitors") or []
        output["industryTrends"] = _industry_trends(swot)
        output["growthOpportunities"] = list(swot.get("opportunities", []))
        for field in ("marketAnalysis", "marketPosition", "strategicConsiderations"):
            if market.get(field):
                output[field] = market[field]

    news = state.get(SliceKey.NEWS.value)
    developments = state.get(SliceKey.RECENT_DEVELOPMENTS.value)
    if developments or news:
        output["recentDevelopments"] = developments or news
    if news is not None:
        output["recentEvents"] = news

    if state.get(SliceKey.BANKING_OPPORTUNITIES.value) is not None:
        output["bankingOpportunities"] = state[SliceKey.BANKING_OPPORTUNITIES.value]
    if state.get(SliceKey.BANKING_RELATIONSHIPS.value) is not None:
        output["bankingRelationships"] = state[SliceKey.BANKING_RELATIONSHIPS.value]

    esg = state.get(SliceKey.ESG.value)
    if esg is not None:
        output["esgProfile"] = esg
        output["corporateValues"] = list(esg.get("commitments", []))

    if state.get(SliceKey.BENCHMARKING.value) is not None:
        output["peerComparison"] = state[SliceKey.BENCHMARKING.value]
        if not output.get("competitors"):
            output["competitors"] = list(state[SliceKey.BENCHMARKING.value].get("comparedCompanies", []))

    executive = state.get(SliceKey.EXECUTIVE.value)
    enhanced = state.get(SliceKey.ENHANCED_EXECUTIVE.value)
    process = state.get(SliceKey.DECISION_MAKING_PROCESS.value)
    if executive is not None or enhanced:
        decision_makers = dict(executive or {"keyPersonnel": []})
        if enhanced:
            decision_makers["enhanced"] = enhanced
        if process and not decision_makers.get("decisionProcess"):
            decision_makers["decisionProcess"] = process
        output["decisionMakers"] = decision_makers
    if state.get(SliceKey.KEY_DECISION_MAKERS.value):
        output["keyDecisionMakers"] = state[SliceKey.KEY_DECISION_MAKERS.value]
    if process:
        output["decisionMakingProcess"] = process

    if state.get(SliceKey.CUSTOM_TOPICS.value):
        output["customResearchTopics"] = state[SliceKey.CUSTOM_TOPICS.value]

    return output


def aggregate_research(state: ResearchState) -> Dict[str, Any]:
    """Join node: runs once after every task unit settled.

    Fields already present in ``output`` are kept; slices only fill the gaps.
    """
    logger.info(f"\n{'=' * 60}")
    logger.info("AGGREGATING RESEARCH")
    logger.info(f"{'=' * 60}\n")

    output = build_output(state)
    output.update(state.get("output") or {})

    present = [key.value for key in SliceKey if state.get(key.value) is not None]
    logger.info(f"[OK] Slices collected: {', '.join(present) if present else 'none'}")
    if state.get("error"):
        logger.warning(f"Task errors: {state['error']}")
    return {"output": output, "status": RunStatus.SUMMARIZING}


def describe_slice(data: Any) -> str:
    """Prompt-safe rendering of a slice whose shape is not known."""
    if data is None:
        return NO_DATA
    if isinstance(data, str):
        return data
    try:
        return json.dumps(data, default=str)
    except (TypeError, ValueError):
        return "Complex data available (object)"


def summarize_research(state: ResearchState) -> Dict[str, Any]:
    """Terminal node: write the narrative summary without clobbering output.

    ``summary`` is always replaced. ``financialOverview``, ``keyDecisionMakers``
    and ``decisionMakers`` are only filled when the output lacks them. Any
    failure here is raised as SummarizerError and fails the run.
    """
    logger.info(f"\n{'=' * 60}")
    logger.info("GENERATING EXECUTIVE SUMMARY")
    logger.info(f"{'=' * 60}\n")

    request = state.get("input") or {}
    company = (request.get("companyName") or "").strip() or "Unknown company"
    existing: ResearchResult = dict(state.get("output") or {})

    research_data = {
        "company": company,
        "industry": request.get("industry") or "Unknown",
        **existing,
        "additionalContext": {
            "financialRawData": describe_slice(state.get(SliceKey.FINANCIAL.value)),
            "marketPositionRawData": describe_slice(state.get(SliceKey.MARKET_POSITION.value)),
            "newsRawData": describe_slice(state.get(SliceKey.NEWS.value)),
            "recentDevelopmentsRawData": describe_slice(state.get(SliceKey.RECENT_DEVELOPMENTS.value)),
            "bankingOpportunitiesRawData": describe_slice(state.get(SliceKey.BANKING_OPPORTUNITIES.value)),
            "executiveRawData": describe_slice(state.get(SliceKey.EXECUTIVE.value)),
            "esgRawData": describe_slice(state.get(SliceKey.ESG.value)),
            "benchmarkingRawData": describe_slice(state.get(SliceKey.BENCHMARKING.value)),
        },
    }

    try:
        summary = data_sources.complete(
            prompts.SUMMARY_SYSTEM_PROMPT.format(company=company),
            f"Here is the consolidated research data about {company}:\n\n"
            f"{json.dumps(research_data, indent=2, default=str)}",
            temperature=config.SUMMARY_TEMPERATURE,
        )
    except ClientResearchError as exc:
        logger.error(f"Summary generation error: {exc}")
        raise SummarizerError(f"Summary generation error: {exc}") from exc

    key_people = state.get(SliceKey.KEY_DECISION_MAKERS.value) or []
    key_personnel = [
        {
            "name": person.get("name") or "Unknown",
            "role": person.get("title") or person.get("role") or "Unknown",
            "background": person.get("background") or "Unknown",
        }
        for person in key_people
    ]

    financial = state.get(SliceKey.FINANCIAL.value)
    financial_fallback = financial.get("overview") if isinstance(financial, dict) else describe_slice(financial)

    output: ResearchResult = {
        **existing,
        "summary": summary,
        "financialOverview": existing.get("financialOverview") or financial_fallback,
        "keyDecisionMakers": existing.get("keyDecisionMakers") or key_people,
        "decisionMakers": existing.get("decisionMakers") or {"keyPersonnel": key_personnel, "decisionProcess": ""},
    }

    logger.info(f"[OK] Summary completed ({len(summary)} characters)")
    return {"output": output, "status": RunStatus.DONE}
