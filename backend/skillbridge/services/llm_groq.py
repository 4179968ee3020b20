# backend/skillbridge/services/llm_groq.py
from __future__ import annotations
import json
import logging
import re
from typing import List, Dict, Any, Tuple, Optional

import httpx

from skillbridge.config import settings
from skillbridge.errors import ConfigurationError, ModelResponseError, UpstreamModelError

log = logging.getLogger(__name__)

_API_URL = "https://api.groq.com/openai/v1/chat/completions"

MAX_TOTAL_CHARS = 80_000
MAX_TOKENS = 2048

JSON_OBJECT = {"type": "json_object"}

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?|\n?```", re.IGNORECASE)

def _len_msgs(messages: List[Dict[str, str]]) -> int:
    return sum(len(m.get("content", "")) for m in messages)

def _shrink_text(s: str, keep: int) -> str:
    if len(s) <= keep:
        return s
    head = keep // 2
    tail = keep - head
    return s[:head] + "\n...\n[TRIMMED]\n...\n" + s[-tail:]

def _shrink_messages(messages: List[Dict[str, str]], budget: int) -> Tuple[List[Dict[str, str]], bool]:
    total = _len_msgs(messages)
    if total <= budget:
        return messages, False
    sizes = [len(m.get("content", "")) for m in messages]
    total_sizes = sum(sizes) or 1
    per_budget = [max(500, (sizes[i] * budget) // total_sizes) for i in range(len(messages))]
    new_msgs: List[Dict[str, str]] = []
    for i, msg in enumerate(messages):
        new_msgs.append({"role": msg.get("role", "user"), "content": _shrink_text(msg.get("content", ""), per_budget[i])})
    return new_msgs, True

def ensure_configured() -> str:
    """Return the model key or raise before anything goes over the wire."""
    key = settings.groq_api_key
    if not key:
        log.error("GROQ_API_KEY is not set")
        raise ConfigurationError()
    return key

class GroqLLM:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        key = api_key or ensure_configured()
        self.model = model or settings.groq_model
        self._transport = transport
        self._headers = {
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }

    async def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.2,
        response_format: Optional[Dict[str, str]] = None,
    ) -> str:
        msgs = [{"role": m["role"], "content": m["content"]} for m in messages]
        msgs, trimmed = _shrink_messages(msgs, MAX_TOTAL_CHARS)
        if trimmed:
            log.info("Prompt trimmed to %d chars", _len_msgs(msgs))

        payload: Dict[str, Any] = {
            "model": self.model,
            "temperature": temperature,
            "messages": msgs,
            "stream": False,
            "max_tokens": MAX_TOKENS,
        }
        if response_format:
            payload["response_format"] = response_format  # OpenAI-compatible

        try:
            async with httpx.AsyncClient(timeout=settings.llm_timeout_secs, transport=self._transport) as c:
                r = await c.post(_API_URL, headers=self._headers, json=payload)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as e:
            log.error("Groq error %s: %s", e.response.status_code, e.response.text[:500])
            raise UpstreamModelError() from e
        except httpx.HTTPError as e:
            log.error("Groq request failed: %s", e)
            raise UpstreamModelError() from e
        except ValueError as e:
            log.error("Groq returned a non-JSON body: %s", e)
            raise UpstreamModelError() from e
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            log.error("Unexpected Groq payload: %s", str(data)[:500])
            raise UpstreamModelError() from e

async def chat(
    messages: List[Dict[str, str]],
    temperature: float = 0.2,
    response_format: Optional[Dict[str, str]] = None,
) -> str:
    return await GroqLLM().chat(messages, temperature=temperature, response_format=response_format)

def strip_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()

def parse_json_reply(text: str, error_message: str) -> Any:
    """Decode a model reply, tolerating markdown fences around the JSON."""
    try:
        return json.loads(strip_fences(text))
    except (TypeError, ValueError):
        log.warning("Failed to parse model reply: %s", (text or "")[:1000])
        raise ModelResponseError(error_message)
