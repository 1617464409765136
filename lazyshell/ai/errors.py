class LLMError(RuntimeError):
    """Base class for every failure of a single LLM request."""


class PreflightError(LLMError):
    """A credential or a required tool is missing. Nothing was dispatched."""


class UnknownProviderError(PreflightError):
    pass


class TransportError(LLMError):
    """The HTTP client exited with a non-zero status."""


class ParseError(LLMError):
    """The response did not have the shape the provider is expected to return."""


class ProviderError(LLMError):
    """A well-formed response carrying an API-level error message."""

    def __init__(self, message: str):
        super().__init__(f"API error: {message}")
        self.message = message


class RequestCancelled(LLMError):
    pass
