"""LLM runtime abstraction layer."""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, Tuple

from toolshed.llm.client import ImageData, LLMResult


class TextGenerator(Protocol):
    """Anything that can turn a prompt (and optional image) into model text."""

    def generate(self, prompt: str, image: Optional[ImageData] = None) -> LLMResult:
        """Return generated text for the supplied prompt."""


class ScriptedLLM:
    """Deterministic stand-in that replays canned responses in order."""

    def __init__(self, responses: Sequence[str], *, provider: str = "scripted", model: str = "stub") -> None:
        if not responses:
            raise ValueError("ScriptedLLM needs at least one response")
        self._responses = list(responses)
        self._provider = provider
        self._model = model
        self.calls: List[Tuple[str, Optional[ImageData]]] = []

    def generate(self, prompt: str, image: Optional[ImageData] = None) -> LLMResult:
        self.calls.append((prompt, image))
        text = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        return LLMResult(text=text, provider=self._provider, model=self._model)


__all__ = ["ScriptedLLM", "TextGenerator"]
