"""Run-and-wait orchestration for VarOmeter experiments.

Strategy:
1. Try to start the run via /api/rungwas.
2. Whether or not that call succeeds (it often times out with HTTP 524 while
   the backend starts the job anyway), poll /api/resultsGwas until the job
   reports a terminal status or the wall-clock budget runs out.

States: TRIGGERING -> POLLING -> COMPLETED | FAILED | TIMED_OUT
"""

import logging
import time
from typing import Any, Callable

from varometer.client import VarOmeterClient
from varometer.endpoints import get_results, run_experiment
from varometer.exceptions import RunFailureError, RunTimeoutError
from varometer.logging_config import get_progress_logger
from varometer.models import AttemptResult, JobStatus, RunState
from varometer.utils import classify_status, extract_status, has_payload

logger = logging.getLogger(__name__)

DEFAULT_RUN_POLL_SECONDS = 20
DEFAULT_WAIT_POLL_SECONDS = 60
DEFAULT_TIMEOUT_SECONDS = 7200


class RunWaiter:
    """Polling state machine for one experiment run.

    Args:
        client: Configured API client
        poll_seconds: Pause between result fetches
        timeout_seconds: Total polling budget, checked after each fetch
        sleep: Function used to pause between polls
        clock: Monotonic clock returning seconds
    """

    def __init__(
        self,
        client: VarOmeterClient,
        poll_seconds: float = DEFAULT_RUN_POLL_SECONDS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.poll_seconds = poll_seconds
        self.timeout_seconds = timeout_seconds
        self._sleep = sleep
        self._clock = clock
        self.state = RunState.IDLE
        self.progress = get_progress_logger()

    def run_and_wait(self, experiment_id: str) -> Any:
        """Trigger the run, then wait for results.

        A failed trigger is reported and polling proceeds regardless.

        Returns:
            Final results response

        Raises:
            RunFailureError: If the job reports FAILED or ERROR
            RunTimeoutError: If no terminal status arrives in time
        """
        self.state = RunState.TRIGGERING
        self.progress.info("Starting VarOmeter run for experiment %s", experiment_id)

        trigger = AttemptResult.capture(run_experiment, self.client, experiment_id)
        if not trigger.ok:
            self.progress.warning(
                "Run trigger failed or timed out; will continue polling results anyway. (%s)",
                trigger.error,
            )

        return self.wait(experiment_id)

    def wait(self, experiment_id: str) -> Any:
        """Poll results until a terminal status, without triggering a run.

        Useful when /api/rungwas timed out but the job is already running.

        Returns:
            Final results response

        Raises:
            RunFailureError: If the job reports FAILED or ERROR
            RunTimeoutError: If no terminal status arrives in time
        """
        self.state = RunState.POLLING
        start = self._clock()
        last_status: str | None = None

        while True:
            elapsed = self._clock() - start
            attempt = AttemptResult.capture(get_results, self.client, experiment_id)

            if not attempt.ok:
                self.progress.info(
                    "Polling error (will retry): %s | Elapsed: %.1f min",
                    attempt.error, elapsed / 60,
                )
            else:
                response = attempt.value
                raw_status = extract_status(response)

                if raw_status is not None:
                    reading = classify_status(raw_status)

                    if reading.raw != last_status:
                        self.progress.info(
                            "Status: %s | Elapsed: %.1f min", reading.raw, elapsed / 60
                        )
                        last_status = reading.raw
                    else:
                        logger.debug("Still %s (elapsed %.1f min)", reading.raw, elapsed / 60)

                    if reading.status is JobStatus.COMPLETED:
                        self.state = RunState.COMPLETED
                        return response
                    if reading.status is JobStatus.FAILED:
                        self.state = RunState.FAILED
                        raise RunFailureError(reading.raw, elapsed_seconds=self._clock() - start)

                elif has_payload(response):
                    # Some result shapes carry no status field at all
                    self.state = RunState.COMPLETED
                    return response
                else:
                    self.progress.info(
                        "Polling... no status field (elapsed %.1f min)", elapsed / 60
                    )

            total = self._clock() - start
            if total > self.timeout_seconds:
                self.state = RunState.TIMED_OUT
                raise RunTimeoutError(
                    self.timeout_seconds,
                    last_status=last_status,
                    elapsed_seconds=total,
                )

            self._sleep(self.poll_seconds)


def run_and_wait(
    client: VarOmeterClient,
    experiment_id: str,
    poll_seconds: float = DEFAULT_RUN_POLL_SECONDS,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> Any:
    """Run a VarOmeter experiment and wait for its results."""
    waiter = RunWaiter(client, poll_seconds=poll_seconds, timeout_seconds=timeout_seconds)
    return waiter.run_and_wait(experiment_id)


def wait_for_results(
    client: VarOmeterClient,
    experiment_id: str,
    poll_seconds: float = DEFAULT_WAIT_POLL_SECONDS,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> Any:
    """Wait for VarOmeter results without triggering a run."""
    waiter = RunWaiter(client, poll_seconds=poll_seconds, timeout_seconds=timeout_seconds)
    return waiter.wait(experiment_id)
