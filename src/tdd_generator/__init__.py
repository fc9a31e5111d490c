from .errors import GenerationError, GeneratorError, VerificationError
from .runtime.generator import DEFAULT_ITERATION_LIMIT, Client, Generator, Runner
from .schemas.status import Result, State, Status

__all__ = [
    "Client",
    "DEFAULT_ITERATION_LIMIT",
    "GenerationError",
    "Generator",
    "GeneratorError",
    "Result",
    "Runner",
    "State",
    "Status",
    "VerificationError",
]
