"""
Provider adapters: each one knows how to turn a (intro, prompt) pair into an
HTTP request for its backend, and how to read the generated text or the error
message back out of the raw response.
"""

import json
import logging

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import ParseError, UnknownProviderError

logger = logging.getLogger(__name__)

# Characters trimmed from both edges of the generated text.
_EDGE_CHARS = " \r\n`"


def normalize(text: str) -> str:
    """Strips the outer run of whitespace and backticks, leaving interior lines as they are."""
    return text.strip(_EDGE_CHARS)


@dataclass(frozen=True)
class ProviderConfig:
    name: str
    label: str
    url: str
    api_key_env: str
    api_key_url: str
    model: str
    max_tokens: int
    temperature: int = 0
    extra_headers: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ChatRequest:
    intro: str
    prompt: str


@dataclass(frozen=True)
class HttpRequest:
    url: str
    headers: Dict[str, str]
    body: str


@dataclass(frozen=True)
class ParsedResult:
    """Either the normalized generated text or the provider's error message."""

    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _lookup(data: Any, path: Tuple[Union[str, int], ...]) -> Any:
    """Walks `path` through nested dicts/lists, returning None when any step is missing."""
    for key in path:
        if isinstance(key, int):
            if not isinstance(data, list) or len(data) <= key:
                return None
        elif not isinstance(data, dict) or key not in data:
            return None
        data = data[key]
    return data


class LLMProvider(ABC):
    """Common behaviour of the supported backends; subclasses only describe their wire shape."""

    config: ProviderConfig
    text_path: Tuple[Union[str, int], ...] = ()
    error_path: Tuple[Union[str, int], ...] = ("error", "message")

    @property
    def name(self) -> str:
        return self.config.name

    @staticmethod
    def format_system_message(content: str) -> Dict:
        return {"role": "system", "content": content}

    @staticmethod
    def format_user_message(content: str) -> Dict:
        return {"role": "user", "content": content}

    @abstractmethod
    def _headers(self, api_key: str) -> Dict[str, str]:
        pass

    @abstractmethod
    def _body(self, request: ChatRequest) -> Dict:
        pass

    def build_payload(self, request: ChatRequest, api_key: str) -> HttpRequest:
        headers = {"Content-Type": "application/json"}
        headers.update(self._headers(api_key))
        headers.update(self.config.extra_headers)
        body = json.dumps(self._body(request))
        return HttpRequest(url=self.config.url, headers=headers, body=body)

    def parse_response(self, raw: bytes) -> ParsedResult:
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.debug("Response from %s is not valid JSON: %s", self.name, e)
            raise ParseError("Error: Invalid API response format") from e

        if not isinstance(data, dict):
            raise ParseError("Error: Invalid API response format")

        # An error message wins over any content that may also be present.
        error = _lookup(data, self.error_path)
        if error is not None:
            return ParsedResult(error=str(error))

        text = _lookup(data, self.text_path)
        if not isinstance(text, str):
            logger.debug("No text found at %s in the %s response", self.text_path, self.name)
            raise ParseError("Error: Invalid API response format")

        return ParsedResult(text=normalize(text))


class OpenAIProvider(LLMProvider):
    """Chat completion style backend."""

    config = ProviderConfig(
        name="openai",
        label="OpenAI",
        url="https://api.openai.com/v1/chat/completions",
        api_key_env="OPENAI_API_KEY",
        api_key_url="https://platform.openai.com/account/api-keys",
        model="gpt-4o",
        max_tokens=256,
    )
    text_path = ("choices", 0, "message", "content")

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {api_key}"}

    def _body(self, request: ChatRequest) -> Dict:
        return {
            "messages": [
                self.format_system_message(request.intro),
                self.format_user_message(request.prompt),
            ],
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }


class ClaudeProvider(LLMProvider):
    """Messages style backend. The intro travels in a top level `system` field."""

    config = ProviderConfig(
        name="claude",
        label="Claude",
        url="https://api.anthropic.com/v1/messages",
        api_key_env="ANTHROPIC_API_KEY",
        api_key_url="https://console.anthropic.com/",
        model="claude-3-7-sonnet-20250219",
        max_tokens=512,
        extra_headers={"anthropic-version": "2023-06-01"},
    )
    text_path = ("content", 0, "text")

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {"x-api-key": api_key}

    def _body(self, request: ChatRequest) -> Dict:
        return {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "system": request.intro,
            "messages": [self.format_user_message(request.prompt)],
        }


_PROVIDERS = {
    OpenAIProvider.config.name: OpenAIProvider,
    ClaudeProvider.config.name: ClaudeProvider,
}

# Toggle order.
PROVIDERS: List[str] = list(_PROVIDERS)


def get_provider(name: str) -> LLMProvider:
    provider_cls = _PROVIDERS.get(name)
    if provider_cls is None:
        raise UnknownProviderError(f"Error: Unknown LLM provider {name}")
    return provider_cls()
