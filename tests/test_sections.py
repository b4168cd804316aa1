"""Tests for the task units, slice ownership and the join steps."""

import pytest

from client_research import sections
from client_research.errors import ConfigError, LLMError, SummarizerError
from client_research.state import RunStatus, SliceKey, empty_state


def _state(request: dict, **slices):
    state = empty_state(request)
    state.update(slices)
    return state


def test_every_slice_has_exactly_one_owner() -> None:
    owned = [key for keys in sections.TASK_REGISTRY.values() for key in keys]
    assert len(owned) == len(set(owned))
    assert set(owned) == set(SliceKey)


def test_registering_a_claimed_slice_is_rejected() -> None:
    with pytest.raises(ConfigError, match="news"):

        @sections.research_task("news_again", owns=[SliceKey.NEWS], label="News again")
        def news_again(state, company):
            return {}


def test_unit_writing_a_foreign_slice_fails_loudly(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sections, "TASK_REGISTRY", {})
    monkeypatch.setattr(sections, "TASK_NODES", {})
    monkeypatch.setattr(sections, "TASK_GATES", {})

    @sections.research_task("rogue", owns=[SliceKey.ESG], label="Rogue")
    def rogue(state, company):
        return {SliceKey.NEWS.value: []}

    with pytest.raises(ConfigError, match="newsData"):
        rogue(_state({"companyName": "Myer"}))


def test_missing_company_is_reported_as_unit_error(fake_llm, fake_search) -> None:
    update = sections.research_financial(_state({"companyName": "  "}))
    assert update == {"error": "Financial research error: Company name is required for research"}
    assert fake_search.queries == []
    assert fake_llm.calls == []


def test_financial_without_search_data_fails_the_unit(fake_llm, fake_search) -> None:
    fake_search.fail_when = lambda query: True
    update = sections.research_financial(_state({"companyName": "Myer"}))
    assert update == {"error": "Financial research error: Unable to find financial information"}
    assert len(fake_search.queries) == len(sections.FINANCIAL_QUERIES)
    assert fake_llm.calls == []


def test_one_failed_query_does_not_fail_the_unit(fake_llm, fake_search) -> None:
    fake_search.fail_when = lambda query: "credit rating" in query
    update = sections.research_financial(_state({"companyName": "Myer", "industry": "Retail"}))

    financial = update[SliceKey.FINANCIAL.value]
    assert financial["overview"].startswith("Myer reported revenue")
    assert financial["metrics"]["revenue"] == "$3.3bn"
    assert 'Search failed for query "Myer credit rating' in fake_llm.calls[0]["user"]


def test_financial_recovers_overview_from_broken_json(fake_llm, fake_search) -> None:
    fake_llm.overrides["senior commercial banking analyst"] = lambda system, user: (
        '{"financialOverview": "Revenue grew 5% to $3.3bn", "keyMetrics": {"revenue": }'
    )
    financial = sections.research_financial(_state({"companyName": "Myer"}))[SliceKey.FINANCIAL.value]

    assert financial["overview"] == "Revenue grew 5% to $3.3bn"
    assert financial["metrics"] == {}


def test_financial_placeholder_when_nothing_recoverable(fake_llm, fake_search) -> None:
    fake_llm.overrides["senior commercial banking analyst"] = lambda system, user: "Sorry, no data."
    financial = sections.research_financial(_state({"companyName": "Myer"}))[SliceKey.FINANCIAL.value]
    assert financial == {"overview": "Failed to parse detailed financial overview from search results", "metrics": {}}


def test_market_positioning_synthesizes_without_search_data(fake_llm, fake_search) -> None:
    fake_search.blank_when = lambda query: True
    update = sections.research_market_positioning(_state({"companyName": "Myer", "industry": "Retail"}))

    assert "Limited search results available. Company: Myer, Industry: Retail." in fake_llm.calls[0]["user"]
    market = update[SliceKey.MARKET_POSITION.value]
    assert market["competitors"] == ["David Jones", "Kmart"]
    assert market["swotAnalysis"]["strengths"] == ["Brand recognition"]


def test_market_positioning_defaults_on_unparseable_response(fake_llm, fake_search) -> None:
    fake_llm.overrides["market analyst specializing"] = lambda system, user: "Plain prose only."
    market = sections.research_market_positioning(_state({"companyName": "Myer"}))[SliceKey.MARKET_POSITION.value]
    assert market["competitors"] == []
    assert market["swotAnalysis"] == {"strengths": [], "weaknesses": [], "opportunities": [], "threats": []}
    assert market["marketAnalysis"] is None


def test_recent_developments_proceed_without_search_data(fake_llm, fake_search) -> None:
    fake_search.fail_when = lambda query: True
    update = sections.research_recent_developments(_state({"companyName": "Myer"}))
    assert update[SliceKey.RECENT_DEVELOPMENTS.value][0]["title"] == "Apparel Brands merger"
    assert "financialImplications" not in update[SliceKey.RECENT_DEVELOPMENTS.value][0]


def test_llm_failure_becomes_unit_error(fake_llm, fake_search) -> None:
    def broken(system, user):
        raise LLMError("model unavailable")

    fake_llm.overrides["tracking company news"] = broken
    update = sections.research_news(_state({"companyName": "Myer"}))
    assert update == {"error": "News research error: model unavailable"}


def test_banking_relationships_follow_their_flag(fake_llm, fake_search) -> None:
    with_flag = sections.research_banking_opportunities(_state({"companyName": "Myer"}))
    without_flag = sections.research_banking_opportunities(
        _state({"companyName": "Myer", "researchTopics": {"includeBankingRelationships": False}})
    )

    assert with_flag[SliceKey.BANKING_RELATIONSHIPS.value]["knownBankingPartners"] == ["NAB"]
    assert SliceKey.BANKING_RELATIONSHIPS.value not in without_flag
    assert [item["urgency"] for item in without_flag[SliceKey.BANKING_OPPORTUNITIES.value]] == ["medium", "high"]


def test_decision_makers_fill_three_slices(fake_llm, fake_search) -> None:
    update = sections.research_decision_makers(_state({"companyName": "Myer"}))
    assert update[SliceKey.KEY_DECISION_MAKERS.value][0]["name"] == "Geoff Ashby"
    assert update[SliceKey.DECISION_MAKING_PROCESS.value] == "Board approves facilities above $50m."
    assert "boardComposition" in update[SliceKey.ENHANCED_EXECUTIVE.value]
    assert len(fake_search.queries) == len(sections.DECISION_MAKERS_QUERIES)


def test_custom_topics_record_per_topic_failures(fake_llm, fake_search) -> None:
    fake_search.fail_when = lambda query: "obscure" in query
    request = {
        "companyName": "Myer",
        "researchTopics": {
            "customTopics": [
                {"name": "Suppliers", "searchQuery": "supplier terms {odd}", "description": "Terms"},
                {"name": "Obscure", "searchQuery": "obscure topic", "description": "Nothing"},
            ]
        },
    }
    topics = sections.research_custom_topics(_state(request))[SliceKey.CUSTOM_TOPICS.value]

    assert topics["Suppliers"]["findings"] == "Suppliers are paid on 60 day terms."
    assert topics["Obscure"]["error"] == "Unable to find custom: Obscure information"
    assert "Myer supplier terms {odd}" in fake_search.queries


def test_custom_topics_fail_when_every_topic_is_empty(fake_llm, fake_search) -> None:
    fake_search.fail_when = lambda query: True
    request = {"companyName": "Myer", "researchTopics": {"customTopics": [{"name": "A", "searchQuery": "a"}]}}
    update = sections.research_custom_topics(_state(request))
    assert update["error"].startswith("Custom topic research error: Unable to find information for custom topics: A")


def test_enabled_tasks_honour_flags() -> None:
    everything = sections.enabled_tasks({"companyName": "Myer"})
    assert "custom_topics" not in everything
    assert {"esg", "benchmarking", "decision_makers"} <= set(everything)

    trimmed = sections.enabled_tasks(
        {
            "companyName": "Myer",
            "researchTopics": {"includeESG": False, "includeBenchmarking": False, "includeDecisionMakers": False},
        }
    )
    assert trimmed == ["financial", "market_positioning", "news", "recent_developments", "executive", "banking_opportunities"]


def test_aggregate_projects_slices_and_keeps_existing_output() -> None:
    state = _state(
        {"companyName": "Myer"},
        financialData={"overview": "Fresh overview", "metrics": {"revenue": "$3.3bn"}},
        newsData=[{"title": "News", "description": "d"}],
        recentDevelopmentsData=[],
        benchmarkingData={"metrics": {}, "insights": [], "comparedCompanies": ["David Jones"]},
        output={"financialOverview": "Already written"},
    )
    update = sections.aggregate_research(state)
    output = update["output"]

    assert update["status"] == RunStatus.SUMMARIZING
    assert output["financialOverview"] == "Already written"
    assert output["keyMetrics"] == {"revenue": "$3.3bn"}
    assert output["recentDevelopments"] == [{"title": "News", "description": "d"}]
    assert output["competitors"] == ["David Jones"]


def test_summarizer_never_overwrites_existing_fields(fake_llm) -> None:
    existing_decision_makers = {"keyPersonnel": [{"name": "Olivia Wirth", "role": "Executive Chair"}]}
    state = _state(
        {"companyName": "Myer"},
        financialData={"overview": "Slice overview", "metrics": {}},
        keyDecisionMakersData=[{"name": "Geoff Ashby", "title": "CFO"}],
        output={
            "summary": "stale",
            "financialOverview": "Existing overview",
            "decisionMakers": existing_decision_makers,
        },
    )
    update = sections.summarize_research(state)
    output = update["output"]

    assert update["status"] == RunStatus.DONE
    assert output["summary"].startswith("## Summary")
    assert output["financialOverview"] == "Existing overview"
    assert output["decisionMakers"] == existing_decision_makers
    assert output["keyDecisionMakers"] == [{"name": "Geoff Ashby", "title": "CFO"}]
    assert fake_llm.calls[-1]["temperature"] == 0.2


def test_summarizer_fills_gaps_with_sentinels(fake_llm) -> None:
    state = _state({"companyName": "Myer"})
    output = sections.summarize_research(state)["output"]

    assert output["financialOverview"] == "No data available"
    assert output["keyDecisionMakers"] == []
    assert output["decisionMakers"] == {"keyPersonnel": [], "decisionProcess": ""}
    assert '"financialRawData": "No data available"' in fake_llm.calls[-1]["user"]


def test_summarizer_maps_key_people_when_output_lacks_them(fake_llm) -> None:
    state = _state({"companyName": "Myer"}, keyDecisionMakersData=[{"name": "Geoff Ashby", "title": "CFO"}])
    output = sections.summarize_research(state)["output"]
    assert output["decisionMakers"]["keyPersonnel"] == [{"name": "Geoff Ashby", "role": "CFO", "background": "Unknown"}]


def test_summarizer_failure_is_raised(fake_llm) -> None:
    def broken(system, user):
        raise LLMError("timeout")

    fake_llm.overrides["executive summary"] = broken
    with pytest.raises(SummarizerError, match="timeout"):
        sections.summarize_research(_state({"companyName": "Myer"}))


def test_decision_makers_ignore_wrongly_typed_people(fake_llm, fake_search) -> None:
    fake_llm.overrides["senior executive research analyst"] = lambda system, user: (
        '{"keyDecisionMakers": 5, "enhanced": ["not", "an", "object"], "decisionMakingProcess": 3}'
    )
    update = sections.research_decision_makers(_state({"companyName": "Myer"}))

    assert "error" not in update
    assert update[SliceKey.KEY_DECISION_MAKERS.value] == []
    assert update[SliceKey.ENHANCED_EXECUTIVE.value] == {}
    assert update[SliceKey.DECISION_MAKING_PROCESS.value] is None


def test_custom_topics_skip_malformed_entries(fake_llm, fake_search) -> None:
    request = {
        "companyName": "Myer",
        "researchTopics": {
            "customTopics": [
                {"name": "Numbers", "searchQuery": 42},
                {"name": 7, "searchQuery": "query"},
                "not a topic",
                {"name": "Suppliers", "searchQuery": "supplier terms", "description": "Terms"},
            ]
        },
    }
    topics = sections.research_custom_topics(_state(request))[SliceKey.CUSTOM_TOPICS.value]

    assert list(topics) == ["Suppliers"]
    assert fake_search.queries == ["Myer supplier terms"]


def test_custom_topics_gate_ignores_malformed_lists() -> None:
    assert "custom_topics" not in sections.enabled_tasks(
        {"companyName": "Myer", "researchTopics": {"customTopics": [{"name": "Numbers", "searchQuery": 42}]}}
    )
    assert "custom_topics" not in sections.enabled_tasks({"companyName": "Myer", "researchTopics": {"customTopics": 3}})
