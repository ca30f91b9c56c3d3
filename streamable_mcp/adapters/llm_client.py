from __future__ import annotations

from typing import Protocol, Dict, Any, List, Optional


class LLMClient(Protocol):
    """Abstract interface for the generative-text service used by the assistant."""

    def invoke_text(
        self,
        *,
        messages: List[Dict[str, Any]],
        model_id: Optional[str] = None,
        max_tokens: int = 2000,
    ) -> str:
        ...
