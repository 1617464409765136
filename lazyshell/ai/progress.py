import itertools
import time

from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.live import Live
from rich.text import Text

from .jobs import CancellationToken, Job

SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
TICK_INTERVAL = 0.1


class StatusLine:
    """The single line the user watches: progress is redrawn in place, messages stay."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self._live: Optional[Live] = None

    def redraw(self, text: str):
        if self._live is None:
            # stdout carries the result, leave it alone
            self._live = Live(
                console=self.console,
                auto_refresh=False,
                transient=True,
                redirect_stdout=False,
                redirect_stderr=False,
            )
            self._live.start()
        self._live.update(Text(text), refresh=True)

    def clear(self):
        if self._live is not None:
            self._live.stop()
            self._live = None

    def message(self, text: str):
        self.clear()
        self.console.print(text, markup=False, highlight=False)


class ProgressPresenter:
    def __init__(
        self,
        status: StatusLine,
        frames: Sequence[str] = SPINNER_FRAMES,
        interval: float = TICK_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.status = status
        self.frames = frames
        self.interval = interval
        self._sleep = sleep

    def run(self, job: Job, label: str, cancel: Optional[CancellationToken] = None) -> bool:
        """
        Spins until the job ends. Returns False if it stopped because of `cancel`.

        Liveness is checked before every draw and before every sleep, so a
        finished job is noticed at most one tick late.
        """

        def should_stop() -> bool:
            return not job.is_alive() or (cancel is not None and cancel.cancelled)

        try:
            for glyph in itertools.cycle(self.frames):
                if should_stop():
                    break
                self.status.redraw(f"{glyph} {label}")
                if should_stop():
                    break
                self._sleep(self.interval)
        finally:
            self.status.clear()

        return cancel is None or not cancel.cancelled
