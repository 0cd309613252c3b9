"""Text and vision generation against the configured AI provider."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Iterable, Optional, Sequence

import httpx

from toolshed import metrics
from toolshed.config import Settings, get_settings

logger = logging.getLogger(__name__)

LLM_TIMEOUT = 30.0
ANTHROPIC_VERSION = "2023-06-01"

SUPPORTED_PROVIDERS = ("gemini", "openai", "anthropic", "ollama")

DEFAULT_MODELS: dict[str, tuple[str, ...]] = {
    "gemini": ("gemini-2.5-flash", "gemini-2.5-pro"),
    "openai": ("gpt-4.1-mini", "gpt-4o-mini"),
    "anthropic": ("claude-3-5-sonnet-latest", "claude-3-5-haiku-latest"),
    "ollama": ("llama3.2-vision",),
}

DEFAULT_BASE_URLS: dict[str, str] = {
    "gemini": "https://generativelanguage.googleapis.com/v1beta",
    "openai": "https://api.openai.com/v1",
    "anthropic": "https://api.anthropic.com/v1",
    "ollama": "http://localhost:11434",
}

_QUOTA_MARKERS = ("429", "quota", "rate limit", "capacity")


class LLMError(RuntimeError):
    """Raised when no configured model produced a response."""


class LLMQuotaError(LLMError):
    """Raised when the provider refused every model for rate or quota reasons."""


class LLMConfigurationError(LLMError):
    """Raised when the AI client cannot be used with the current settings."""


@dataclasses.dataclass(frozen=True)
class ImageData:
    base64: str
    mime_type: str = "image/jpeg"


@dataclasses.dataclass(frozen=True)
class LLMResult:
    text: str
    provider: str
    model: str


def is_quota_error(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _QUOTA_MARKERS)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _join_text(parts: list[Any]) -> str:
    """Concatenate the string ``text`` fields of content parts, skipping anything else."""

    texts = (_as_dict(part).get("text") for part in parts)
    return "".join(text for text in texts if isinstance(text, str))


class LLMClient:
    """Send a prompt (plus an optional image) to one provider, falling back across models."""

    def __init__(
        self,
        *,
        provider: str,
        api_key: Optional[str] = None,
        models: Iterable[str] = (),
        base_url: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 2048,
        timeout: float = LLM_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._provider = (provider or "gemini").strip().lower()
        if self._provider not in SUPPORTED_PROVIDERS:
            raise LLMConfigurationError(f"Unsupported AI provider: {provider}")
        self._api_key = (api_key or "").strip()
        if not self._api_key and self._provider != "ollama":
            raise LLMConfigurationError(f"API key missing for {self._provider}.")
        self._models = tuple(model.strip() for model in models if model and model.strip())
        if not self._models:
            self._models = DEFAULT_MODELS[self._provider]
        self._base_url = (base_url or DEFAULT_BASE_URLS[self._provider]).rstrip("/")
        self._temperature = max(0.0, float(temperature))
        self._max_tokens = max(1, int(max_tokens))
        self._timeout = timeout
        self._transport = transport

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def models(self) -> Sequence[str]:
        return self._models

    def generate(self, prompt: str, image: Optional[ImageData] = None) -> LLMResult:
        """Return the first successful completion across the configured models."""

        saw_quota = False
        last_error: Optional[Exception] = None
        for model in self._models:
            try:
                text = self._call_model(model, prompt, image)
            except (LLMError, httpx.HTTPError, ValueError) as exc:
                last_error = exc
                quota = is_quota_error(str(exc))
                saw_quota = saw_quota or quota
                metrics.LLM_REQUESTS.labels(
                    provider=self._provider, status="quota" if quota else "error"
                ).inc()
                logger.warning("%s model %s failed: %s", self._provider, model, exc)
                continue

            metrics.LLM_REQUESTS.labels(provider=self._provider, status="success").inc()
            logger.debug("%s model %s returned %s chars", self._provider, model, len(text))
            return LLMResult(text=text, provider=self._provider, model=model)

        if saw_quota:
            raise LLMQuotaError(
                f"{self._provider} model capacity/quota reached after trying "
                f"{', '.join(self._models)}."
            )
        raise LLMError(str(last_error) if last_error else "All configured models failed.")

    def _call_model(self, model: str, prompt: str, image: Optional[ImageData]) -> str:
        if self._provider == "openai":
            return self._call_openai(model, prompt, image)
        if self._provider == "anthropic":
            return self._call_anthropic(model, prompt, image)
        if self._provider == "ollama":
            return self._call_ollama(model, prompt, image)
        return self._call_gemini(model, prompt, image)

    def _post(
        self,
        url: str,
        payload: dict[str, Any],
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            response = client.post(url, json=payload, headers=headers, params=params)
        if response.is_error:
            detail = response.text.strip().replace("\n", " ")[:300]
            raise LLMError(f"{self._provider} {response.status_code}: {detail}")
        body = response.json()
        if not isinstance(body, dict):
            raise ValueError(f"{self._provider} returned a non-object response.")
        return body

    def _call_gemini(self, model: str, prompt: str, image: Optional[ImageData]) -> str:
        parts: list[dict[str, Any]] = [{"text": prompt}]
        if image is not None:
            parts.append({"inline_data": {"mime_type": image.mime_type, "data": image.base64}})
        payload = {
            "contents": [{"parts": parts}],
            "tools": [{"googleSearch": {}}],
            "generationConfig": {
                "temperature": self._temperature,
                "maxOutputTokens": self._max_tokens,
            },
        }
        body = self._post(
            f"{self._base_url}/models/{model}:generateContent",
            payload,
            params={"key": self._api_key},
        )
        candidates = _as_list(body.get("candidates"))
        content = _as_dict(_as_dict(candidates[0]).get("content")) if candidates else {}
        text = _join_text(_as_list(content.get("parts"))).strip()
        if not text:
            raise ValueError("Gemini response did not include text content.")
        return text

    def _call_openai(self, model: str, prompt: str, image: Optional[ImageData]) -> str:
        content: Any = prompt
        if image is not None:
            content = [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{image.mime_type};base64,{image.base64}"},
                },
            ]
        endpoint = self._base_url
        if not endpoint.endswith("/chat/completions"):
            endpoint = f"{endpoint}/chat/completions"
        payload = {
            "model": model,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": content}],
        }
        body = self._post(endpoint, payload, headers={"Authorization": f"Bearer {self._api_key}"})
        choices = _as_list(body.get("choices"))
        if not choices:
            raise ValueError("OpenAI returned no choices.")
        raw = _as_dict(_as_dict(choices[0]).get("message")).get("content")
        if isinstance(raw, list):
            raw = _join_text(raw)
        text = raw.strip() if isinstance(raw, str) else ""
        if not text:
            raise ValueError("OpenAI response did not include text content.")
        return text

    def _call_anthropic(self, model: str, prompt: str, image: Optional[ImageData]) -> str:
        content: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
        if image is not None:
            content.append(
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": image.mime_type,
                        "data": image.base64,
                    },
                }
            )
        payload = {
            "model": model,
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
            "messages": [{"role": "user", "content": content}],
        }
        headers = {"x-api-key": self._api_key, "anthropic-version": ANTHROPIC_VERSION}
        body = self._post(f"{self._base_url}/messages", payload, headers=headers)
        blocks = [entry for entry in _as_list(body.get("content")) if _as_dict(entry).get("type") == "text"]
        text = _join_text(blocks).strip()
        if not text:
            raise ValueError("Anthropic response did not include text content.")
        return text

    def _call_ollama(self, model: str, prompt: str, image: Optional[ImageData]) -> str:
        endpoint = self._base_url
        if not endpoint.endswith("/api/chat"):
            endpoint = f"{endpoint}/api/chat"
        message: dict[str, Any] = {"role": "user", "content": prompt}
        if image is not None:
            message["images"] = [image.base64]
        payload = {
            "model": model,
            "messages": [message],
            "stream": False,
            "options": {
                "temperature": self._temperature,
                "num_predict": self._max_tokens,
            },
        }
        body = self._post(endpoint, payload)
        raw = _as_dict(body.get("message")).get("content")
        text = raw.strip() if isinstance(raw, str) else ""
        if not text:
            raise ValueError("Ollama response did not include content.")
        return text


def build_llm_client(
    settings: Settings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> LLMClient | None:
    """Create the AI client from settings, or ``None`` when it is not configured."""

    settings = settings or get_settings()
    try:
        return LLMClient(
            provider=settings.llm_provider,
            api_key=settings.llm_api_key,
            models=settings.llm_models,
            base_url=settings.llm_base_url,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.llm_timeout,
            transport=transport,
        )
    except LLMConfigurationError as exc:
        logger.debug("AI client unavailable: %s", exc)
        return None


__all__ = [
    "DEFAULT_MODELS",
    "ImageData",
    "LLMClient",
    "LLMConfigurationError",
    "LLMError",
    "LLMQuotaError",
    "LLMResult",
    "build_llm_client",
    "is_quota_error",
]
