"""Bedrock (Claude) LLM client wrapper with retry/backoff.

This is the generative-text service used by the assistant to decide
whether a question needs an MCP tool and to summarize long tool output.
The MCP core never calls it.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, List, Optional

import boto3

from .config import get_settings
from .errors import LLMInvokeError
from streamable_mcp.adapters.llm_client import LLMClient as LLMClientProtocol


class BedrockLLMClient(LLMClientProtocol):
    def __init__(
        self,
        *,
        region_name: Optional[str] = None,
        model_id: Optional[str] = None,
        fallback_model_id: Optional[str] = None,
        client: Any = None,
        retries: int = 3,
        base_delay_s: float = 2.0,
    ):
        cfg = get_settings()
        self.model_id = model_id or cfg.llm_model_id
        self.fallback_model_id = fallback_model_id or cfg.llm_fallback_model_id
        self.retries = retries
        self.base_delay_s = base_delay_s
        self._client = client or boto3.client("bedrock-runtime", region_name=region_name or cfg.bedrock_region)
        self._logger = logging.getLogger(__name__)

    def invoke(self, *, model_id: str, messages: List[Dict[str, Any]], max_tokens: int = 1000) -> Dict[str, Any]:
        """Invoke a Claude model; retry on throttling with exponential backoff."""
        last_error: Optional[Exception] = None
        payload = {
            "anthropic_version": "bedrock-2023-05-31",
            "max_tokens": max_tokens,
            "messages": messages,
        }

        for attempt in range(self.retries):
            try:
                resp = self._client.invoke_model(modelId=model_id, body=json.dumps(payload))
                return json.loads(resp["body"].read())
            except Exception as e:  # noqa: PERF203
                last_error = e
                if "ThrottlingException" in str(e) and attempt < self.retries - 1:
                    delay = self.base_delay_s * (2 ** attempt)
                    self._logger.warning("bedrock throttled; backing off", extra={"sleep": delay})
                    time.sleep(delay)
                    continue
                break
        raise LLMInvokeError(f"Bedrock invocation failed for {model_id}: {last_error}")

    def invoke_text(
        self,
        *,
        messages: List[Dict[str, Any]],
        model_id: Optional[str] = None,
        max_tokens: int = 2000,
    ) -> str:
        model = model_id or self.model_id
        try:
            data = self.invoke(model_id=model, messages=messages, max_tokens=max_tokens)
        except LLMInvokeError:
            if model_id or not self.fallback_model_id or self.fallback_model_id == model:
                raise
            self._logger.warning("primary model failed; trying fallback %s", self.fallback_model_id)
            data = self.invoke(model_id=self.fallback_model_id, messages=messages, max_tokens=max_tokens)
        try:
            return data["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMInvokeError(f"Unexpected Bedrock response format: {e}") from e
