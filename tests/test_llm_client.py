from types import SimpleNamespace

from tdd_generator.llm.client import LLMClient
from tdd_generator.llm.settings import LLMSettings

SETTINGS = LLMSettings(api_base="http://localhost:8000/v1", api_key="local", model="coder", temperature=0.2)


class CompletionsSpy:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_client(content):
    completions = CompletionsSpy(content)
    sdk = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return LLMClient(settings=SETTINGS, client=sdk), completions


def test_does_not_request_on_initialization():
    _, completions = make_client("hi")
    assert completions.calls == []


def test_chat_uses_configured_model_and_temperature():
    client, completions = make_client("hi")
    messages = [{"role": "user", "content": "hello"}]

    assert client.chat(messages) == "hi"
    assert completions.calls == [{"model": "coder", "messages": messages, "temperature": 0.2}]

    client.chat(messages, temperature=0)
    assert completions.calls[-1]["temperature"] == 0


def test_blank_content_becomes_empty_string():
    client, _ = make_client("   ")
    assert client.chat([{"role": "user", "content": "hello"}]) == ""

    client, _ = make_client(None)
    assert client.chat([{"role": "user", "content": "hello"}]) == ""
