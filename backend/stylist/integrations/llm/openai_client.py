"""Thin wrapper over the OpenAI SDK: JSON-mode chat completions and text embeddings"""
from __future__ import annotations

import json, re, logging, time
from typing import Any, Dict, List, Optional

from openai import OpenAI

from stylist.core.config import settings
from stylist.integrations.llm.errors import LLMError, LLMResponseError


logger = logging.getLogger(__name__)


_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


'''
Parse a JSON object out of model output.
Models sometimes wrap JSON-mode output in ```json ... ``` fences; strip them first.
'''
def parse_json_response(text: str) -> Any:
    cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", (text or "").strip())).strip()
    try:
        return json.loads(cleaned)
    except ValueError as e:
        raise LLMResponseError(f"LLM response is not valid JSON: {cleaned[:200]!r}") from e



class LLMClient:

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        *,
        model: Optional[str] = None,
        embed_model: Optional[str] = None,
        dimensions: Optional[int] = None,
    ):
        self._client = client
        self.model = model or settings.LLM_MODEL
        self.embed_model = embed_model or settings.EMBED_MODEL
        self.dimensions = dimensions or settings.EMBEDDING_DIMENSIONS


    # SDK client is built on first use so importing the worker needs no API key
    @property
    def client(self) -> OpenAI:
        if self._client is None:
            key = settings.OPENAI_API_KEY
            if key is None or not key.get_secret_value():
                raise LLMError("OPENAI_API_KEY is required")
            self._client = OpenAI(
                api_key=key.get_secret_value(),
                base_url=settings.OPENAI_BASE_URL or None,
                timeout=float(settings.LLM_TIMEOUT_SEC),
            )
        return self._client


    def chat_json(
        self,
        messages: List[Dict[str, Any]],
        *,
        temperature: float = 0.3,
        max_tokens: int = 2000,
    ) -> Dict[str, Any]:
        """
        One chat completion with response_format=json_object; returns the parsed object.
        Raises LLMResponseError on empty content or content that is not a JSON object.
        """
        start = time.perf_counter()
        res = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            response_format={"type": "json_object"},
        )
        latency_ms = int((time.perf_counter() - start) * 1000)

        content = (res.choices[0].message.content or "").strip() if res.choices else ""
        if not content:
            raise LLMResponseError("Empty LLM response")

        data = parse_json_response(content)
        if not isinstance(data, dict):
            raise LLMResponseError(f"Expected a JSON object, got {type(data).__name__}")

        logger.info("llm.chat.ok model=%s latency_ms=%s", self.model, latency_ms)
        return data


    def embed(self, text: str) -> List[float]:
        res = self.client.embeddings.create(model=self.embed_model, input=text[:8000])
        vector = list(res.data[0].embedding) if res.data else []
        if not vector:
            raise LLMResponseError("Empty embedding response")
        if len(vector) != self.dimensions:
            raise LLMResponseError(
                f"Embedding has {len(vector)} dimensions, expected {self.dimensions}")
        return vector
