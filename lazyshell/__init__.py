"""LLM powered command completion and explanation for the zsh line editor."""

__version__ = "0.1.0"
