"""Execution helpers for running single or batch client research."""

import json
import os
import re
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from . import config
from .state import ResearchRequest, ResearchResult, RunStatus, empty_state
from .workflow import build_workflow

logger = config.logger

ProgressCallback = Callable[[str], None]


def _notify(on_progress: Optional[ProgressCallback], message: str) -> None:
    """Fire-and-forget progress notification."""
    if on_progress is None:
        return
    try:
        on_progress(message)
    except Exception as exc:  # pragma: no cover - callback is caller code
        logger.warning(f"Progress callback failed: {exc}")


def research_client(request: ResearchRequest, on_progress: Optional[ProgressCallback] = None) -> ResearchResult:
    """Run the full research workflow for one company.

    Topic failures never abort the run; they are reported in the result's
    ``error`` field. Only a summarizer failure propagates to the caller.
    """
    company = request.get("companyName") or "<missing company>"
    _notify(on_progress, f"Starting research for {company}")

    logger.info(f"\n{'=' * 70}")
    logger.info("STARTING CLIENT RESEARCH")
    logger.info(f"Company: {company} | Industry: {request.get('industry') or 'n/a'}")
    logger.info(f"{'=' * 70}\n")

    app = build_workflow()
    try:
        final_state = app.invoke(empty_state(request))
    except Exception as exc:
        logger.error(f"Run status: {RunStatus.FAILED.value} ({exc})")
        _notify(on_progress, f"Error during research: {exc}")
        raise

    result: ResearchResult = dict(final_state.get("output") or {})
    if final_state.get("error"):
        result["error"] = final_state["error"]

    logger.info(f"\n{'=' * 70}")
    logger.info(f"RESEARCH COMPLETE (status: {RunStatus(final_state['status']).value})")
    logger.info(f"{'=' * 70}\n")
    _notify(on_progress, f"Research completed for {company}")
    return result


def _bullets(items: List[str]) -> str:
    return "\n".join(f"- {item}" for item in items) if items else "_None identified._"


def render_report(request: ResearchRequest, result: ResearchResult) -> str:
    """Render a research result as a markdown briefing."""
    swot = result.get("swotAnalysis") or {}
    developments = result.get("recentDevelopments") or []
    opportunities = result.get("bankingOpportunities") or []
    people = (result.get("decisionMakers") or {}).get("keyPersonnel") or []

    development_lines = [
        f"**{item.get('date', 'Recent')}: {item.get('title', '')}** {item.get('description', '')}" for item in developments
    ]
    opportunity_lines = [
        f"**{item['service']}** ({item['urgency']}): {item['rationale']}" for item in opportunities
    ]
    people_lines = [f"{person.get('name')}, {person.get('role', '')}" for person in people]

    sections = [
        f"# CLIENT RESEARCH: {request.get('companyName', 'Unknown company')}",
        f"Industry: {request.get('industry') or 'n/a'} | Website: {request.get('website') or 'n/a'}",
        f"Research Date: {datetime.now().strftime('%Y-%m-%d')}",
        "---",
        "## Executive Summary",
        result.get("summary") or "Not completed",
        "## Financial Overview",
        result.get("financialOverview") or "Not available",
        "## Market Analysis",
        result.get("marketAnalysis") or "Not available",
        "### Strengths",
        _bullets(swot.get("strengths", [])),
        "### Weaknesses",
        _bullets(swot.get("weaknesses", [])),
        "### Opportunities",
        _bullets(swot.get("opportunities", [])),
        "### Threats",
        _bullets(swot.get("threats", [])),
        "## Recent Developments",
        _bullets(development_lines),
        "## Banking Opportunities",
        _bullets(opportunity_lines),
        "## Key Decision Makers",
        _bullets(people_lines),
    ]
    if result.get("error"):
        sections += ["---", f"**Errors/Warnings:** {result['error']}"]
    return "\n\n".join(sections) + "\n"


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_") or "company"


def analyze_single_company(request: ResearchRequest, output_dir: str = ".") -> Dict[str, Any]:
    """Research a single company and save the markdown report."""
    company = request.get("companyName", "")
    try:
        result = research_client(request, on_progress=logger.info)

        os.makedirs(output_dir, exist_ok=True)
        report_filename = os.path.join(
            output_dir, f"client_research_{_slug(company)}_{datetime.now().strftime('%Y%m%d')}.md"
        )
        with open(report_filename, "w", encoding="utf-8") as file:
            file.write(render_report(request, result))
        with open(report_filename[:-3] + ".json", "w", encoding="utf-8") as file:
            json.dump(result, file, indent=2, default=str)

        logger.info(f"[OK] Report saved to: {report_filename}")
        return {
            "company": company,
            "status": "Success",
            "filename": report_filename,
            "opportunities": len(result.get("bankingOpportunities") or []),
            "errors": result.get("error", ""),
        }

    except Exception as exc:  # pragma: no cover - runtime logging
        logger.exception(f"Error during execution: {exc}")
        return {"company": company, "status": "Failed", "error": str(exc)}


def analyze_batch(companies_file: str, output_dir: str = "."):
    """Research multiple companies from a JSON list of requests."""
    with open(companies_file, "r", encoding="utf-8") as file:
        requests = json.load(file)

    results = []
    for request in requests:
        results.append(analyze_single_company(request, output_dir))

    return pd.DataFrame(results)


def _parse_custom_topic(value: str) -> Dict[str, str]:
    parts = value.split("::")
    if len(parts) != 3:
        raise ValueError(f"Custom topic must be NAME::QUERY::DESCRIPTION, got: {value}")
    name, query, description = (part.strip() for part in parts)
    return {"name": name, "searchQuery": query, "description": description}


def build_request(args) -> ResearchRequest:
    """Turn parsed CLI arguments into a ResearchRequest."""
    request: ResearchRequest = {
        "companyName": args.company,
        "researchTopics": {
            "includeESG": not args.no_esg,
            "includeBenchmarking": not args.no_benchmarking,
            "includeBankingRelationships": not args.no_banking_relationships,
            "includeDecisionMakers": not args.no_decision_makers,
            "customTopics": [_parse_custom_topic(value) for value in args.custom_topic or []],
        },
    }
    if args.industry:
        request["industry"] = args.industry
    if args.website:
        request["website"] = args.website
    return request


def main(argv: Optional[List[str]] = None):
    """Main entry point for the script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Client Research - prospect research for commercial banking teams",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Single company research:
    client-research --company "Myer" --industry "Retail" --website myer.com.au

  Skip optional topics:
    client-research --company "Myer" --no-esg --no-benchmarking

  Custom topic:
    client-research --company "Myer" --custom-topic "Supply chain::supply chain financing suppliers::Supplier finance needs"

  Batch research:
    client-research --batch companies.json --output-dir ./reports
        """,
    )

    parser.add_argument("--company", type=str, help="Company name")
    parser.add_argument("--industry", type=str, help="Industry of the company")
    parser.add_argument("--website", type=str, help="Company website")
    parser.add_argument("--no-esg", action="store_true", help="Skip ESG research")
    parser.add_argument("--no-benchmarking", action="store_true", help="Skip peer benchmarking")
    parser.add_argument("--no-banking-relationships", action="store_true", help="Skip banking relationships")
    parser.add_argument("--no-decision-makers", action="store_true", help="Skip decision maker research")
    parser.add_argument("--custom-topic", action="append", help="NAME::QUERY::DESCRIPTION (repeatable)")
    parser.add_argument("--batch", type=str, help="Path to JSON file with a list of research requests")
    parser.add_argument("--output-dir", type=str, default=".", help="Output directory for reports (default: current directory)")

    args = parser.parse_args(argv)

    missing_keys = config.validate_api_keys()
    if missing_keys:
        logger.error(f"Missing required environment variables: {', '.join(missing_keys)}")
        return

    if args.batch:
        if not os.path.exists(args.batch):
            logger.error(f"Batch file not found: {args.batch}")
            return

        logger.info(f"Running batch research from: {args.batch}")
        results_df = analyze_batch(args.batch, args.output_dir)

        summary_file = os.path.join(args.output_dir, f"batch_results_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv")
        results_df.to_csv(summary_file, index=False, encoding="utf-8")

        logger.info(f"\n{'=' * 70}")
        logger.info("BATCH RESEARCH COMPLETE")
        logger.info(f"{'=' * 70}")
        logger.info(f"\nResults summary saved to: {summary_file}")
        logger.info("\nSummary:")
        logger.info(results_df.to_string(index=False))

    elif args.company:
        analyze_single_company(build_request(args), args.output_dir)
    else:
        parser.print_help()
        logger.error("Either --company or --batch must be provided")


if __name__ == "__main__":
    main()
