"""Extract JSON payloads from free-form LLM responses.

Accepted shapes, tried in order:

1. a fenced block, ```json ... ```, whose inner text is used;
2. the greedy span from the first ``{`` to the last ``}``;
3. anything else fails with ``ParseError("no JSON found")``.

``parse_json_response`` is strict and raises. The ``parse_*`` sub-extractors
are lenient: they accept raw text or an already decoded value and always
return a well-typed default instead of raising.
"""

import json
import re
from typing import Any, Dict, List

from . import config
from .errors import ParseError
from .state import (
    BankingOpportunity,
    BankingRelationship,
    DecisionMakers,
    ESGProfile,
    PeerComparison,
    RecentDevelopment,
    SWOTAnalysis,
)

logger = config.logger

FENCED_JSON = re.compile(r"```json\s*\n(.*?)\n\s*```", re.DOTALL)
BARE_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

URGENCY_LEVELS = ("high", "medium", "low")
DEFAULT_URGENCY = "medium"

ESG_VOCABULARY = {
    "environmental": r"environment|climate|carbon|emission|sustainab|green|renewable",
    "social": r"social|community|diversity|inclusion|employee|people|health|safety",
    "governance": r"governance|board|compliance|ethic|transparency|risk|accountability",
}


def extract_json_text(text: str) -> str:
    """Return the JSON candidate text embedded in an LLM response."""
    if not text:
        raise ParseError("no JSON found")

    fenced = FENCED_JSON.search(text)
    if fenced:
        return fenced.group(1)

    bare = BARE_OBJECT.search(text)
    if bare:
        return bare.group(0)

    raise ParseError("no JSON found")


def parse_json_response(text: str) -> Dict[str, Any]:
    """Extract and strictly decode the JSON object in ``text``."""
    candidate = extract_json_text(text)
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ParseError(f"invalid JSON: {exc.msg} at position {exc.pos}") from exc
    if not isinstance(parsed, dict):
        raise ParseError(f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _load(value: Any) -> Any:
    """Decode ``value`` if it is text; return None when it cannot be decoded."""
    if isinstance(value, str):
        try:
            return parse_json_response(value)
        except ParseError as exc:
            logger.debug(f"Falling back to defaults: {exc}")
            return None
    return value


def string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def dict_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _string_dict(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): str(item) for key, item in value.items() if item is not None}


def _unwrap(data: Any, key: str) -> Any:
    """Accept either the bare value or an object wrapping it under ``key``."""
    if isinstance(data, dict) and key in data:
        return data[key]
    return data


def coerce_urgency(value: Any) -> str:
    """Normalize urgency to high/medium/low, defaulting to medium."""
    if isinstance(value, str) and value.strip().lower() in URGENCY_LEVELS:
        return value.strip().lower()
    return DEFAULT_URGENCY


def determine_esg_focus(text: str) -> str:
    """Pick the dominant ESG pillar by keyword hits."""
    lowered = (text or "").lower()
    scores = {pillar: len(re.findall(pattern, lowered)) for pillar, pattern in ESG_VOCABULARY.items()}
    pillar, score = max(scores.items(), key=lambda item: item[1])
    if score == 0:
        return "Not clearly defined"
    return pillar.capitalize()


def extract_between(text: str, start_marker: str, end_marker: str) -> str:
    """Return the value text after ``start_marker`` and before ``end_marker``.

    The marker itself, the ``:`` separator, a trailing comma and enclosing
    quotes are trimmed. Without ``end_marker`` the value runs to the end of
    the text, last character included.
    """
    start = text.find(start_marker)
    if start == -1:
        return ""
    start += len(start_marker)
    end = text.find(end_marker, start)
    if end == -1:
        end = len(text)
    value = text[start:end].strip().lstrip(":").strip().rstrip(",").strip()
    return value.strip('"').strip()


def parse_swot(value: Any) -> SWOTAnalysis:
    data = _unwrap(_load(value), "swotAnalysis")
    if not isinstance(data, dict):
        data = {}
    return {
        "strengths": string_list(data.get("strengths")),
        "weaknesses": string_list(data.get("weaknesses")),
        "opportunities": string_list(data.get("opportunities")),
        "threats": string_list(data.get("threats")),
    }


def parse_key_metrics(value: Any) -> Dict[str, Any]:
    data = _unwrap(_load(value), "keyMetrics")
    return data if isinstance(data, dict) else {}


def parse_recent_developments(value: Any) -> List[RecentDevelopment]:
    data = _unwrap(_load(value), "recentDevelopments")
    if not isinstance(data, list):
        return []

    developments: List[RecentDevelopment] = []
    for item in data:
        if not isinstance(item, dict) or not (item.get("title") or item.get("description")):
            continue
        development: RecentDevelopment = {
            "title": str(item.get("title") or ""),
            "description": str(item.get("description") or ""),
        }
        if item.get("date"):
            development["date"] = str(item["date"])
        developments.append(development)
    return developments


def parse_banking_opportunities(value: Any) -> List[BankingOpportunity]:
    data = _unwrap(_load(value), "bankingOpportunities")
    if not isinstance(data, list):
        return []

    opportunities: List[BankingOpportunity] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        opportunities.append(
            {
                "service": str(item.get("service") or ""),
                "rationale": str(item.get("rationale") or ""),
                "urgency": coerce_urgency(item.get("urgency")),
                "competitivePosition": str(item.get("competitivePosition") or ""),
            }
        )
    return opportunities


def parse_esg(value: Any, source_text: str = "") -> ESGProfile:
    data = _unwrap(_load(value), "esgProfile")
    if not isinstance(data, dict):
        return {"commitments": [], "initiatives": [], "ratings": {}, "focus": "Not clearly defined"}

    focus = data.get("focus")
    if not isinstance(focus, str) or not focus.strip():
        focus = determine_esg_focus(source_text or json.dumps(data))
    return {
        "commitments": string_list(data.get("commitments")),
        "initiatives": string_list(data.get("initiatives")),
        "ratings": _string_dict(data.get("ratings")),
        "focus": focus,
    }


def parse_peer_comparison(value: Any) -> PeerComparison:
    data = _unwrap(_load(value), "peerComparison")
    if not isinstance(data, dict):
        data = {}
    return {
        "metrics": _string_dict(data.get("metrics")),
        "insights": string_list(data.get("insights")),
        "comparedCompanies": string_list(data.get("comparedCompanies")),
    }


def parse_banking_relationships(value: Any) -> BankingRelationship:
    data = _unwrap(_load(value), "bankingRelationships")
    if not isinstance(data, dict):
        data = {}

    relationship: BankingRelationship = {
        "knownBankingPartners": string_list(data.get("knownBankingPartners")),
        "recentRFPs": [
            {key: str(item[key]) for key in ("date", "description") if item.get(key)}
            for item in dict_list(data.get("recentRFPs"))
            if item.get("description")
        ],
        "painPoints": string_list(data.get("painPoints")),
    }
    if isinstance(data.get("bankingSwitchHistory"), str):
        relationship["bankingSwitchHistory"] = data["bankingSwitchHistory"]
    return relationship


def parse_decision_makers(value: Any) -> DecisionMakers:
    data = _unwrap(_load(value), "decisionMakers")
    if not isinstance(data, dict):
        return {"keyPersonnel": []}

    personnel = []
    for person in dict_list(data.get("keyPersonnel")):
        if not person.get("name"):
            continue
        entry = {"name": str(person["name"]), "role": str(person.get("role") or person.get("title") or "")}
        if person.get("background"):
            entry["background"] = str(person["background"])
        personnel.append(entry)

    result: DecisionMakers = {"keyPersonnel": personnel}
    for key in ("treasuryStructure", "decisionProcess"):
        if isinstance(data.get(key), str) and data[key].strip():
            result[key] = data[key]
    if isinstance(data.get("enhanced"), dict):
        result["enhanced"] = data["enhanced"]
    return result
