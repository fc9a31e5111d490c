from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_fixed

from ..errors import GenerationError
from ..runtime.run_manager import Timer
from ..schemas.code import CodeBlock

log = logging.getLogger(__name__)

SYSTEM = (
    "You write Python code that makes the given tests pass.\n"
    "Your code is saved as candidate.py and the tests run under pytest after\n"
    "`from candidate import *`, so define every public name the tests use\n"
    "and do NOT repeat the tests.\n"
    "Return ONLY valid JSON, no markdown, no commentary.\n"
    f"Schema: {CodeBlock.model_json_schema()}\n"
)

REPAIR_SYSTEM = "Fix the JSON. Return ONLY corrected JSON with a single key: code."


class ChatClient(Protocol):
    def chat(self, messages: List[Dict[str, str]], temperature: Optional[float] = None) -> str: ...


def _strip_fences(text: str) -> str:
    text = re.sub(r"^```(?:json)?\s*", "", text.strip())
    return re.sub(r"\s*```$", "", text)


def parse_code_block(raw: str) -> CodeBlock:
    return CodeBlock.model_validate(json.loads(_strip_fences(raw)))


class LLMCodeClient:
    """
    Code generation backed by a chat model.

    send() asks for a CodeBlock JSON reply and repairs it once if it does not
    parse. Transport or parse failures are retried; when retries run out the
    last error surfaces as GenerationError.
    """

    def __init__(self, llm: Optional[ChatClient] = None):
        if llm is None:
            from .client import LLMClient
            llm = LLMClient()
        self.llm = llm

    @retry(stop=stop_after_attempt(3), wait=wait_fixed(1), reraise=True)
    def _write(self, specs: str) -> CodeBlock:
        raw = self.llm.chat(
            [{"role": "system", "content": SYSTEM},
             {"role": "user", "content": specs}],
            temperature=0,
        )

        try:
            return parse_code_block(raw)
        except (ValueError, ValidationError):
            log.debug("code reply was not valid JSON, asking for a repair")
            fix = self.llm.chat(
                [{"role": "system", "content": REPAIR_SYSTEM},
                 {"role": "user", "content": raw}],
                temperature=0,
            )
            return parse_code_block(fix)

    def send(self, specs: str) -> str:
        try:
            with Timer() as t:
                block = self._write(specs)
        except Exception as e:
            raise GenerationError(f"code writer failed: {e}") from e

        log.debug("code writer replied in %.2fs", t.elapsed_s)
        if not block.code.strip():
            raise GenerationError("code writer returned empty code")
        return block.code
