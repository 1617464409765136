import json
import logging
import os

from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .ai.providers import PROVIDERS, get_provider

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "openai"
PROVIDER_ENV = "LZSH_LLM_PROVIDER"
CONFIG_PATH_ENV = "LZSH_CONFIG"
DEFAULT_CONFIG_PATH = os.path.join("~", ".config", "lazyshell", "config.json")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Config:
    """Settings of one invocation. Toggling returns a new value; the caller persists it."""

    provider: str = DEFAULT_PROVIDER

    def toggled(self) -> "Config":
        # An unrecognized provider toggles back to the first known one.
        if self.provider in PROVIDERS:
            index = (PROVIDERS.index(self.provider) + 1) % len(PROVIDERS)
        else:
            index = 0
        return replace(self, provider=PROVIDERS[index])

    @property
    def label(self) -> str:
        return get_provider(self.provider).config.label


def config_path(environ: Mapping[str, str]) -> str:
    return os.path.expanduser(environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)


def _read_config_file(path: str) -> dict:
    if not os.path.exists(path):
        return {}

    try:
        with open(path, "r") as config_file:
            data = json.load(config_file)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Error reading or parsing {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Error reading or parsing {path}: expected a JSON object")
    return data


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Resolves the active provider.

    The shell session variable wins, then the config file, then the default.
    """
    environ = os.environ if environ is None else environ

    provider = environ.get(PROVIDER_ENV)
    if not provider:
        path = config_path(environ)
        provider = _read_config_file(path).get("provider") or DEFAULT_PROVIDER
        logger.debug("Provider %s read from %s", provider, path)

    return Config(provider=provider)
