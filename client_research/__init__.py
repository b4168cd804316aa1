"""Client research workflow package."""

from .runner import analyze_batch, analyze_single_company, main, research_client

__all__ = ["research_client", "analyze_single_company", "analyze_batch", "main"]
