from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class State(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


def derive_state(output: Optional[str]) -> State:
    """
    absent output -> loading
    empty output  -> success
    anything else -> failure
    """
    if output is None:
        return State.LOADING
    if output == "":
        return State.SUCCESS
    return State.FAILURE


class Status(BaseModel):
    """
    Snapshot of one observable step of a generation run.

    `state` always agrees with `output`; build instances with derive() or the
    loading/success/failure helpers instead of passing a state by hand.
    """
    model_config = ConfigDict(frozen=True)

    current_iteration: int = Field(..., ge=1)
    state: State
    output: Optional[str] = None
    generated_code: Optional[str] = None

    @model_validator(mode="after")
    def _state_matches_output(self) -> "Status":
        expected = derive_state(self.output)
        if self.state != expected:
            raise ValueError(f"state {self.state.value!r} does not match output (expected {expected.value!r})")
        return self

    @classmethod
    def derive(cls, iteration: int, output: Optional[str] = None, generated_code: Optional[str] = None) -> "Status":
        return cls(
            current_iteration=iteration,
            state=derive_state(output),
            output=output,
            generated_code=generated_code,
        )

    @classmethod
    def loading(cls) -> "Status":
        return cls.derive(1)

    @classmethod
    def success(cls, iteration: int, generated_code: str) -> "Status":
        return cls.derive(iteration, "", generated_code)

    @classmethod
    def failure(cls, iteration: int, output: str, generated_code: str) -> "Status":
        if not output:
            raise ValueError("failure status needs non-empty output")
        return cls.derive(iteration, output, generated_code)


class Result(BaseModel):
    model_config = ConfigDict(frozen=True)

    generated_code: str
    specifications: str
    complies_specifications: bool
    # number of the last completed attempt
    iterations: int = Field(..., ge=1)
