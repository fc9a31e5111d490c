import pytest

from tdd_generator.llm import settings
from tdd_generator.llm.settings import load_generator_settings, load_llm_settings


def test_llm_settings_from_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_BASE", "http://localhost:8000/v1")
    monkeypatch.setenv("CHAT_MODEL", "qwen2.5-coder")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("LLM_TEMP", "0.7")

    s = load_llm_settings()
    assert s.api_base == "http://localhost:8000/v1"
    assert s.model == "qwen2.5-coder"
    assert s.api_key == "local"
    assert s.temperature == 0.7


@pytest.mark.parametrize("missing", ["OPENAI_API_BASE", "CHAT_MODEL"])
def test_llm_settings_require_endpoint_and_model(monkeypatch, missing):
    monkeypatch.setenv("OPENAI_API_BASE", "http://localhost:8000/v1")
    monkeypatch.setenv("CHAT_MODEL", "qwen2.5-coder")
    monkeypatch.delenv(missing)

    with pytest.raises(RuntimeError, match=missing):
        load_llm_settings()


def test_llm_temp_must_be_numeric(monkeypatch):
    monkeypatch.setenv("OPENAI_API_BASE", "http://localhost:8000/v1")
    monkeypatch.setenv("CHAT_MODEL", "qwen2.5-coder")
    monkeypatch.setenv("LLM_TEMP", "warm")

    with pytest.raises(ValueError):
        load_llm_settings()


def test_generator_settings_defaults(monkeypatch):
    for name in ("GENERATOR_ITERATION_LIMIT", "RUNNER_TIMEOUT_S", "RUNS_DIR"):
        monkeypatch.delenv(name, raising=False)

    s = load_generator_settings()
    assert s.iteration_limit == 5
    assert s.runner_timeout_s == 30.0
    assert s.runs_dir == "runs"


def test_generator_settings_from_env(monkeypatch):
    monkeypatch.setenv("GENERATOR_ITERATION_LIMIT", "3")
    monkeypatch.setenv("RUNNER_TIMEOUT_S", "2.5")
    monkeypatch.setenv("RUNS_DIR", "out/runs")

    s = load_generator_settings()
    assert (s.iteration_limit, s.runner_timeout_s, s.runs_dir) == (3, 2.5, "out/runs")


@pytest.mark.parametrize(
    "name,value",
    [
        ("GENERATOR_ITERATION_LIMIT", "0"),
        ("GENERATOR_ITERATION_LIMIT", "many"),
        ("RUNNER_TIMEOUT_S", "-1"),
    ],
)
def test_generator_settings_reject_bad_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        load_generator_settings()


def test_dotenv_file_is_read_when_settings_load(monkeypatch, tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_text("OPENAI_API_BASE=http://dotenv/v1\nCHAT_MODEL=from-dotenv\nGENERATOR_ITERATION_LIMIT=7\n")
    monkeypatch.setattr(settings, "DOTENV_PATH", dotenv)
    for name in ("OPENAI_API_BASE", "CHAT_MODEL", "GENERATOR_ITERATION_LIMIT"):
        # setenv first so teardown removes whatever load_dotenv writes
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)

    assert settings.load_llm_settings().model == "from-dotenv"
    assert settings.load_generator_settings().iteration_limit == 7


def test_environment_wins_over_dotenv(monkeypatch, tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_text("GENERATOR_ITERATION_LIMIT=7\n")
    monkeypatch.setattr(settings, "DOTENV_PATH", dotenv)
    monkeypatch.setenv("GENERATOR_ITERATION_LIMIT", "2")

    assert settings.load_generator_settings().iteration_limit == 2
