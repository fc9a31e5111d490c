import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[3]  # src/tdd_generator/llm/settings.py -> repo root
DOTENV_PATH = REPO_ROOT / ".env"


@dataclass(frozen=True)
class LLMSettings:
    api_base: str
    api_key: str
    model: str
    temperature: float = 0.2


@dataclass(frozen=True)
class GeneratorSettings:
    iteration_limit: int = 5
    runner_timeout_s: float = 30.0
    runs_dir: str = "runs"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_llm_settings() -> LLMSettings:
    load_dotenv(dotenv_path=DOTENV_PATH)
    api_base = os.getenv("OPENAI_API_BASE")
    model = os.getenv("CHAT_MODEL")

    if not api_base:
        raise RuntimeError("OPENAI_API_BASE is not set. Check your .env")
    if not model:
        raise RuntimeError("CHAT_MODEL is not set. Check your .env")

    return LLMSettings(
        api_base=api_base,
        api_key=os.getenv("OPENAI_API_KEY", "local"),
        model=model,
        temperature=_float_env("LLM_TEMP", 0.2),
    )


def load_generator_settings() -> GeneratorSettings:
    load_dotenv(dotenv_path=DOTENV_PATH)
    limit = _int_env("GENERATOR_ITERATION_LIMIT", 5)
    timeout_s = _float_env("RUNNER_TIMEOUT_S", 30.0)

    if limit < 1:
        raise ValueError(f"GENERATOR_ITERATION_LIMIT must be >= 1, got {limit}")
    if timeout_s <= 0:
        raise ValueError(f"RUNNER_TIMEOUT_S must be > 0, got {timeout_s}")

    return GeneratorSettings(
        iteration_limit=limit,
        runner_timeout_s=timeout_s,
        runs_dir=os.getenv("RUNS_DIR") or "runs",
    )
