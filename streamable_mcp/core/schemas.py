from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .constants import JSONRPC_VERSION


class RPCRequest(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: int
    method: str
    params: Dict[str, Any] = Field(default_factory=dict)


class RPCErrorBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    code: Any = None
    message: Any = None
    data: Any = None


class RPCResponse(BaseModel):
    """JSON-RPC response envelope. Exactly one of `result`/`error` is set."""

    model_config = ConfigDict(extra="allow")

    jsonrpc: Optional[str] = None
    id: Any = None
    result: Any = None
    error: Optional[RPCErrorBody] = None

    @property
    def has_result(self) -> bool:
        # `result: null` is a valid success payload, so check presence, not value.
        return "result" in self.model_fields_set

    @property
    def has_error(self) -> bool:
        return self.error is not None


class InputSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = "object"
    properties: Dict[str, Any] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)


class ToolDescriptor(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    description: Optional[str] = None
    input_schema: Optional[InputSchema] = Field(default=None, alias="inputSchema")

    def parameter_names(self) -> List[str]:
        if self.input_schema is None:
            return []
        return list(self.input_schema.properties.keys())


# config.json file layout


class ServerEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    url: str
    description: Optional[str] = None
    enabled: bool = True


class ClientOptions(BaseModel):
    model_config = ConfigDict(extra="allow")

    timeout_ms: Optional[int] = Field(default=None, alias="timeout")
    max_retries: Optional[int] = Field(default=None, alias="maxRetries")
    streaming_chunk_size: Optional[int] = Field(default=None, alias="streamingChunkSize")
    streaming_delay_ms: Optional[int] = Field(default=None, alias="streamingDelayMs")


class LLMOptions(BaseModel):
    model_config = ConfigDict(extra="allow")

    model: Optional[str] = None
    fallback_model: Optional[str] = Field(default=None, alias="fallbackModel")
    region: Optional[str] = None


class ConfigFile(BaseModel):
    model_config = ConfigDict(extra="allow")

    mcp_servers: Optional[List[ServerEntry]] = Field(default=None, alias="mcpServers")
    client: ClientOptions = Field(default_factory=ClientOptions)
    llm: LLMOptions = Field(default_factory=LLMOptions)
