import unittest
from io import StringIO
from unittest.mock import MagicMock, call

from rich.console import Console

from lazyshell.ai.jobs import CancellationToken, Job
from lazyshell.ai.progress import SPINNER_FRAMES, ProgressPresenter, StatusLine


class TestProgressPresenter(unittest.TestCase):
    """Tests for the spinner loop."""

    def setUp(self):
        self.status = MagicMock(spec=StatusLine)
        self.sleep = MagicMock()
        self.presenter = ProgressPresenter(self.status, sleep=self.sleep)
        self.job = MagicMock(spec=Job)

    def test_spins_until_the_job_ends(self):
        """Verify liveness is checked before each draw and each sleep."""
        # draw, sleep, draw, sleep, then the job is gone
        self.job.is_alive.side_effect = [True, True, True, True, False]

        finished = self.presenter.run(self.job, "Query: list files")

        self.assertTrue(finished)
        self.assertEqual(
            self.status.redraw.call_args_list,
            [
                call(f"{SPINNER_FRAMES[0]} Query: list files"),
                call(f"{SPINNER_FRAMES[1]} Query: list files"),
            ],
        )
        self.assertEqual(self.sleep.call_args_list, [call(0.1), call(0.1)])
        self.status.clear.assert_called_once()

    def test_does_not_sleep_after_the_job_ended(self):
        """Verify a completion observed right after a draw skips the sleep."""
        self.job.is_alive.side_effect = [True, False]

        self.presenter.run(self.job, "label")

        self.status.redraw.assert_called_once()
        self.sleep.assert_not_called()

    def test_finished_job_draws_nothing(self):
        self.job.is_alive.return_value = False

        self.assertTrue(self.presenter.run(self.job, "label"))

        self.status.redraw.assert_not_called()
        self.sleep.assert_not_called()
        self.status.clear.assert_called_once()

    def test_frames_wrap_around(self):
        alive = [True] * (2 * len(SPINNER_FRAMES) + 2) + [False]
        self.job.is_alive.side_effect = alive

        self.presenter.run(self.job, "x")

        glyphs = [c.args[0].split(" ")[0] for c in self.status.redraw.call_args_list]
        self.assertEqual(glyphs[: len(SPINNER_FRAMES)], list(SPINNER_FRAMES))
        self.assertEqual(glyphs[len(SPINNER_FRAMES)], SPINNER_FRAMES[0])

    def test_cancellation_stops_the_loop(self):
        """Verify the loop exits on the cancellation token even if the job is alive."""
        self.job.is_alive.return_value = True
        token = CancellationToken()
        self.sleep.side_effect = lambda _: token.cancel()

        finished = self.presenter.run(self.job, "label", cancel=token)

        self.assertFalse(finished)
        self.status.redraw.assert_called_once()
        self.status.clear.assert_called_once()

    def test_status_is_cleared_on_interrupt(self):
        self.job.is_alive.return_value = True
        self.sleep.side_effect = KeyboardInterrupt

        with self.assertRaises(KeyboardInterrupt):
            self.presenter.run(self.job, "label")

        self.status.clear.assert_called_once()


class TestStatusLine(unittest.TestCase):
    def test_message_is_printed_verbatim(self):
        """Verify messages are not interpreted as rich markup."""
        output = StringIO()
        status = StatusLine(Console(file=output, force_terminal=False, width=200))

        status.message("API error: [bold]quota[/bold] exceeded")

        self.assertEqual(output.getvalue(), "API error: [bold]quota[/bold] exceeded\n")

    def test_clear_without_redraw(self):
        status = StatusLine(Console(file=StringIO()))
        status.clear()
