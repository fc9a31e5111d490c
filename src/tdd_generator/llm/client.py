from __future__ import annotations

from typing import Any, Dict, List, Optional

from openai import OpenAI

from .settings import LLMSettings, load_llm_settings


class LLMClient:
    """OpenAI-compatible chat client. Nothing is requested until chat() is called."""

    def __init__(self, settings: Optional[LLMSettings] = None, client: Any = None):
        self.settings = settings or load_llm_settings()
        self.client = client or OpenAI(
            base_url=self.settings.api_base,
            api_key=self.settings.api_key,
        )
        self.model = self.settings.model

    def chat(self, messages: List[Dict[str, str]], temperature: Optional[float] = None) -> str:
        if temperature is None:
            temperature = self.settings.temperature

        r = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
        )
        msg = r.choices[0].message

        if msg.content and msg.content.strip():
            return msg.content
        return ""
