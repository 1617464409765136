"""
The `ai` package provides the request layer of lazyshell: provider adapters,
the background transport and the client that ties them together, plus the
editor actions built on top of it.
"""

from .errors import (
    LLMError,
    ParseError,
    PreflightError,
    ProviderError,
    RequestCancelled,
    TransportError,
    UnknownProviderError,
)
from .jobs import CancellationToken
from .llm import LLMClient
from .providers import PROVIDERS, get_provider, normalize
from .assistants.complete import EditorState, QueryAborted, complete, read_query
from .assistants.explain import explain


__all__ = [
    "CancellationToken",
    "EditorState",
    "LLMClient",
    "LLMError",
    "PROVIDERS",
    "ParseError",
    "PreflightError",
    "ProviderError",
    "QueryAborted",
    "RequestCancelled",
    "TransportError",
    "UnknownProviderError",
    "complete",
    "explain",
    "get_provider",
    "normalize",
    "read_query",
]
