import logging
import shutil

from typing import IO, List, Optional

from .errors import PreflightError
from .jobs import Job, JobRunner
from .providers import HttpRequest

logger = logging.getLogger(__name__)

# In order of preference.
HTTP_CLIENTS = ("curl", "wget")


class Transport:
    """POSTs a request with whichever HTTP client program is installed."""

    def __init__(self, runner: Optional[JobRunner] = None):
        self.runner = runner or JobRunner()

    def client(self) -> Optional[str]:
        for name in HTTP_CLIENTS:
            if shutil.which(name):
                return name
        return None

    def available(self) -> bool:
        return self.client() is not None

    def command(self, request: HttpRequest) -> List[str]:
        client = self.client()
        if client == "curl":
            argv = ["curl", "-s", "-X", "POST"]
            for key, value in request.headers.items():
                argv += ["-H", f"{key}: {value}"]
            return argv + ["--data-binary", request.body, request.url]
        if client == "wget":
            argv = ["wget", "-qO-"]
            argv += [f"--header={key}: {value}" for key, value in request.headers.items()]
            return argv + [f"--post-data={request.body}", request.url]

        raise PreflightError("Error: curl or wget is not installed")

    def post(self, request: HttpRequest, output: IO) -> Job:
        """Starts the POST in the background, writing the response body to `output`."""
        argv = self.command(request)
        logger.debug("POST %s with %s", request.url, argv[0])
        return self.runner.start(argv, stdout=output)
