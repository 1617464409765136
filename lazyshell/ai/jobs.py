import logging
import subprocess

from typing import IO, List

logger = logging.getLogger(__name__)


class CancellationToken:
    """A flag the foreground loop polls together with the job liveness."""

    def __init__(self):
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class Job:
    """Handle to one background process. Only valid within a single request."""

    def __init__(self, process: subprocess.Popen):
        self._process = process

    @property
    def pid(self) -> int:
        return self._process.pid

    def is_alive(self) -> bool:
        return self._process.poll() is None

    def join(self) -> int:
        """Blocks until the process exits and returns its exit status."""
        status = self._process.wait()
        logger.debug("Job %d exited with status %d", self.pid, status)
        return status

    def terminate(self):
        if self.is_alive():
            logger.debug("Terminating job %d", self.pid)
            self._process.terminate()
        self._process.wait()


class JobRunner:
    def start(self, argv: List[str], stdout: IO) -> Job:
        """
        Starts `argv` in the background and returns immediately.

        The process runs in its own session so that it is detached from the
        job control of the calling shell, and only its stdout is kept.
        """
        process = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=stdout,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        logger.debug("Started job %d: %s", process.pid, argv[0])
        return Job(process)
