import logging
import os
import tempfile

from typing import Mapping, Optional

from .errors import (
    LLMError,
    ParseError,
    PreflightError,
    ProviderError,
    RequestCancelled,
    TransportError,
    UnknownProviderError,
)
from .jobs import CancellationToken, Job
from .progress import ProgressPresenter, StatusLine
from .providers import ChatRequest, LLMProvider, get_provider
from .transport import Transport

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Runs one request against the active provider while keeping the terminal responsive.

    The HTTP call runs as a background process writing to a private scratch
    file; the foreground only polls it, drawing a spinner on the status line,
    and reads the answer once the process is gone.
    """

    def __init__(
        self,
        config,
        transport: Optional[Transport] = None,
        status: Optional[StatusLine] = None,
        presenter: Optional[ProgressPresenter] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Initializes the client.

        Args:
            config: The configuration of this invocation, holding the active provider.
            transport: Used to POST the request. Defaults to curl/wget.
            status: Where progress and failures are reported.
            presenter: Draws the spinner while the request runs.
            environ: Where credentials are looked up. Defaults to `os.environ`.
        """
        self.config = config
        self.transport = transport or Transport()
        self.status = status or StatusLine()
        self.presenter = presenter or ProgressPresenter(self.status)
        self.environ = os.environ if environ is None else environ

    def _report(self, error: LLMError) -> LLMError:
        logger.debug("Request failed: %s", type(error).__name__)
        self.status.message(str(error))
        return error

    def preflight(self) -> LLMProvider:
        """Checks that the request can be dispatched at all. Nothing is sent."""
        try:
            provider = get_provider(self.config.provider)
        except UnknownProviderError as e:
            raise self._report(e)

        key_env = provider.config.api_key_env
        if not self.environ.get(key_env):
            raise self._report(
                PreflightError(
                    f"Error: {key_env} is not set\n"
                    f"Get your API key from {provider.config.api_key_url} "
                    f"and then run: export {key_env}=<your API key>"
                )
            )

        if not self.transport.available():
            raise self._report(
                PreflightError(
                    "Error: curl or wget is not installed\n"
                    "Install one of them with your system package manager and try again"
                )
            )

        return provider

    def _wait(self, job: Job, label: str, cancel: Optional[CancellationToken]) -> int:
        try:
            finished = self.presenter.run(job, label, cancel)
        except KeyboardInterrupt:
            job.terminate()
            raise self._report(RequestCancelled("Request cancelled")) from None

        if not finished:
            job.terminate()
            raise self._report(RequestCancelled("Request cancelled"))

        return job.join()

    def request(
        self,
        intro: str,
        prompt: str,
        label: str,
        cancel: Optional[CancellationToken] = None,
    ) -> str:
        """
        Sends (intro, prompt) to the active provider and returns the normalized answer.

        Raises one of the `LLMError` subclasses on failure, after reporting it
        on the status line. A leading `#` in the answer is not interpreted here.
        """
        provider = self.preflight()
        api_key = self.environ[provider.config.api_key_env]
        payload = provider.build_payload(ChatRequest(intro, prompt), api_key)
        logger.debug("Dispatching request to %s (%s)", provider.name, provider.config.model)

        fd, scratch_path = tempfile.mkstemp(prefix="lazyshell-")
        try:
            with os.fdopen(fd, "wb") as output:
                try:
                    job = self.transport.post(payload, output)
                except OSError as e:
                    # The client is on PATH but could not be started
                    logger.debug("Could not start the HTTP client: %s", e)
                    raise self._report(TransportError("Error: API request failed")) from e

            status = self._wait(job, label, cancel)
            if status != 0:
                raise self._report(TransportError("Error: API request failed"))

            with open(scratch_path, "rb") as f:
                raw = f.read()
        except PreflightError as e:
            raise self._report(e)
        finally:
            os.remove(scratch_path)
            logger.debug("Removed scratch file %s", scratch_path)

        try:
            result = provider.parse_response(raw)
        except ParseError as e:
            raise self._report(e)

        if not result.ok:
            raise self._report(ProviderError(result.error))

        return result.text
