from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Sequence

from openai import OpenAI, OpenAIError

from app.core.config import settings


ChatMessage = dict[str, str]


@dataclass(frozen=True)
class OpenAIUsage:
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    @classmethod
    def from_sdk(cls, usage: Any) -> OpenAIUsage:
        def _n(name: str) -> int:
            return int(getattr(usage, name, 0) or 0)

        return cls(_n("prompt_tokens"), _n("completion_tokens"), _n("total_tokens"))


@dataclass(frozen=True)
class OpenAIChatResponse:
    request_id: str
    response_id: str
    model: str
    message: str
    usage: OpenAIUsage


class OpenAIClientError(RuntimeError):
    pass


class OpenAIClient:
    """
    Minimal chat-completions wrapper used by the cover letter drafter.

    Exactly one request per call: SDK-level retries are disabled and every
    failure surfaces as `OpenAIClientError`.
    """

    def __init__(self, *, api_key: str | None = None, model: str | None = None) -> None:
        key = (api_key or settings.OPENAI_API_KEY or "").strip()
        if not key:
            raise OpenAIClientError("OPENAI_API_KEY is not configured")
        self.model = model or settings.OPENAI_MODEL
        self._client = OpenAI(api_key=key, max_retries=0)

    def chat_completion(
        self,
        *,
        messages: Sequence[ChatMessage],
        request_id: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> OpenAIChatResponse:
        prompt = [m for m in messages if m.get("role") and m.get("content")]
        if not prompt:
            raise OpenAIClientError("Nothing to send: no non-empty chat messages")

        request_id = request_id or uuid.uuid4().hex
        try:
            completion = self._client.chat.completions.create(
                model=self.model,
                messages=prompt,  # type: ignore[arg-type]
                temperature=temperature,
                max_tokens=max_tokens,
                extra_headers={"X-Request-ID": request_id},
            )
        except OpenAIError as exc:
            raise OpenAIClientError(f"OpenAI request {request_id} failed: {exc}") from exc

        if not completion.choices:
            raise OpenAIClientError(f"OpenAI request {request_id} returned no choices")

        return OpenAIChatResponse(
            request_id=request_id,
            response_id=completion.id or request_id,
            model=completion.model or self.model,
            message=completion.choices[0].message.content or "",
            usage=OpenAIUsage.from_sdk(completion.usage),
        )
