"""Custom exceptions for the client research workflow."""


class ClientResearchError(Exception):
    """Base exception for client research."""

    pass


class ConfigError(ClientResearchError):
    """Configuration-related errors."""

    pass


class ValidationError(ClientResearchError):
    """Required request input is missing."""

    pass


class SearchError(ClientResearchError):
    """A single search query failed (network, quota, credentials)."""

    pass


class NoDataError(ClientResearchError):
    """Every search query for a topic failed or came back empty."""

    pass


class LLMError(ClientResearchError):
    """Errors related to LLM API calls."""

    pass


class ParseError(ClientResearchError):
    """No usable JSON object could be extracted from an LLM response."""

    pass


class SummarizerError(ClientResearchError):
    """The terminal summary step failed; this fails the whole run."""

    pass
