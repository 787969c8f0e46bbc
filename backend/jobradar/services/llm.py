"""
LLM client - the one place that talks to OpenAI

Wraps AsyncOpenAI chat completions and embeddings behind two calls:
    - complete(messages, ...) -> str
    - embed(texts) -> List[List[float]]

Both raise UpstreamFailure for transport errors, API errors and empty
responses, so callers only ever deal with the domain error taxonomy.
Responses are treated as untrusted text; see parse_json_object().
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from jobradar.config import get_settings
from jobradar.exceptions import UpstreamFailure

logger = logging.getLogger(__name__)
settings = get_settings()

_CODE_FENCE = re.compile(r"```(?:json)?\n?|\n?```")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def strip_code_fences(content: str) -> str:
    return _CODE_FENCE.sub("", content).strip()


def parse_json_object(content: str) -> Dict[str, Any]:
    """
    Parse the outermost JSON object out of a model reply.

    Raises:
        ValueError: no object found or it is not valid JSON
    """
    cleaned = strip_code_fences(content)
    match = _JSON_OBJECT.search(cleaned)
    if not match:
        raise ValueError("No JSON object in response")
    data = json.loads(match.group(0))
    if not isinstance(data, dict):
        raise ValueError("Response JSON is not an object")
    return data


class LLMClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        chat_model: Optional[str] = None,
        embedding_model: Optional[str] = None,
    ):
        self.chat_model = chat_model or settings.chat_model
        self.embedding_model = embedding_model or settings.embedding_model
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=settings.llm_timeout_seconds)
        return self._client

    async def complete(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: Optional[int] = None,
    ) -> str:
        kwargs: Dict[str, Any] = {
            "model": model or self.chat_model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            raise UpstreamFailure(f"Chat completion failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise UpstreamFailure("Empty response from language model")
        return content

    async def embed(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        try:
            response = await self.client.embeddings.create(input=texts, model=self.embedding_model)
        except OpenAIError as e:
            raise UpstreamFailure(f"Embedding request failed: {e}") from e

        if len(response.data) != len(texts):
            raise UpstreamFailure("Embedding response size does not match input")
        return [d.embedding for d in response.data]
