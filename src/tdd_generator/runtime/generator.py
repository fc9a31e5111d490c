from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from ..errors import GenerationError, VerificationError
from ..schemas.status import Result, Status

log = logging.getLogger(__name__)

DEFAULT_ITERATION_LIMIT = 5

StatusCallback = Callable[[Status], object]


class Client(Protocol):
    def send(self, specs: str) -> str: ...


class Runner(Protocol):
    def run(self, code: str) -> str: ...


def _ignore(status: Status) -> None:
    return None


class Generator:
    """
    Generate-test-retry loop.

    Attempt 1 always runs. After a failed attempt the loop continues while
    current_iteration <= iteration_limit, so a run makes at most
    iteration_limit + 1 attempts. Statuses are pushed to on_status in order;
    its return value is ignored.
    """

    def __init__(self, client: Client, runner: Runner):
        self.client = client
        self.runner = runner

    def _generate(self, specification: str, iteration: int) -> str:
        try:
            return self.client.send(specification)
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"code generation failed on attempt {iteration}: {e}", iteration) from e

    def _verify(self, code: str, iteration: int) -> str:
        try:
            return self.runner.run(code)
        except VerificationError:
            raise
        except Exception as e:
            raise VerificationError(f"verification crashed on attempt {iteration}: {e}", iteration) from e

    def _attempt(self, specification: str, iteration: int) -> tuple[str, str]:
        generated = self._generate(specification, iteration)
        log.debug("attempt %d generated %d chars", iteration, len(generated))
        output = self._verify(generated, iteration)
        return generated, output

    def run(
        self,
        specification: str,
        iteration_limit: int = DEFAULT_ITERATION_LIMIT,
        on_status: Optional[StatusCallback] = None,
    ) -> Result:
        if isinstance(iteration_limit, bool) or not isinstance(iteration_limit, int) or iteration_limit < 1:
            raise ValueError(f"iteration_limit must be a positive integer, got {iteration_limit!r}")
        notify = on_status or _ignore

        notify(Status.loading())

        current_iteration = 1
        generated, output = self._attempt(specification, current_iteration)

        if output == "":
            log.info("attempt %d passed", current_iteration)
            notify(Status.success(current_iteration, generated))
            return Result(
                generated_code=generated,
                specifications=specification,
                complies_specifications=True,
                iterations=current_iteration,
            )

        log.info("attempt %d failed", current_iteration)
        notify(Status.failure(current_iteration, output, generated))

        while current_iteration <= iteration_limit:
            generated, output = self._attempt(specification, current_iteration + 1)
            current_iteration += 1

            if output == "":
                log.info("attempt %d passed", current_iteration)
                notify(Status.success(current_iteration, generated))
                break

            log.info("attempt %d failed", current_iteration)
            notify(Status.failure(current_iteration, output, generated))

        complies = output == ""
        if not complies:
            log.warning("iteration budget exhausted after %d attempts", current_iteration)

        return Result(
            generated_code=generated,
            specifications=specification,
            complies_specifications=complies,
            iterations=current_iteration,
        )
