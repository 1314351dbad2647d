"""Initialization messages, capability descriptions and protocol versions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mcpcore.jsonrpc import (
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    new_notification,
    new_request,
    new_response,
)
from mcpcore.types import Notification, NotificationParams, to_jsonable

METHOD_INITIALIZE = "initialize"
METHOD_NOTIFICATIONS_INITIALIZED = "notifications/initialized"

METHOD_TOOLS_LIST = "tools/list"
METHOD_TOOLS_CALL = "tools/call"

METHOD_PROMPTS_LIST = "prompts/list"
METHOD_PROMPTS_GET = "prompts/get"
METHOD_COMPLETION_COMPLETE = "completion/complete"

METHOD_RESOURCES_LIST = "resources/list"
METHOD_RESOURCES_READ = "resources/read"
METHOD_RESOURCES_TEMPLATES_LIST = "resources/templates/list"
METHOD_RESOURCES_SUBSCRIBE = "resources/subscribe"
METHOD_RESOURCES_UNSUBSCRIBE = "resources/unsubscribe"

METHOD_LOGGING_SET_LEVEL = "logging/setLevel"
METHOD_PING = "ping"

PROTOCOL_VERSION_2024_11_05 = "2024-11-05"
PROTOCOL_VERSION_2025_03_26 = "2025-03-26"

SUPPORTED_PROTOCOL_VERSIONS: tuple[str, ...] = (
    PROTOCOL_VERSION_2025_03_26,
    PROTOCOL_VERSION_2024_11_05,
)


@dataclass
class Implementation:
    """The name and version of an MCP implementation."""

    name: str
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}


@dataclass
class RootsCapability:
    """Client support for listing roots."""

    list_changed: bool = False


@dataclass
class SamplingCapability:
    """Client support for sampling from an LLM."""


@dataclass
class PromptsCapability:
    """Server support for prompt templates."""

    list_changed: bool = False


@dataclass
class ResourcesCapability:
    """Server support for readable resources."""

    subscribe: bool = False
    list_changed: bool = False


@dataclass
class ToolsCapability:
    """Server support for callable tools."""

    list_changed: bool = False


@dataclass
class LoggingCapability:
    """Server support for sending log messages."""


@dataclass
class CompletionsCapability:
    """Server support for argument autocompletion."""


def _capability_dict(capability: Any) -> dict[str, Any]:
    result: dict[str, Any] = {}
    if getattr(capability, "subscribe", False):
        result["subscribe"] = True
    if getattr(capability, "list_changed", False):
        result["listChanged"] = True
    return result


@dataclass
class ClientCapabilities:
    """Capabilities a client announces during initialization."""

    roots: RootsCapability | None = None
    sampling: SamplingCapability | None = None
    experimental: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.roots is not None:
            result["roots"] = _capability_dict(self.roots)
        if self.sampling is not None:
            result["sampling"] = _capability_dict(self.sampling)
        if self.experimental:
            result["experimental"] = to_jsonable(self.experimental)
        return result


@dataclass
class ServerCapabilities:
    """Capabilities a server announces in its initialization result."""

    prompts: PromptsCapability | None = None
    resources: ResourcesCapability | None = None
    tools: ToolsCapability | None = None
    logging: LoggingCapability | None = None
    completions: CompletionsCapability | None = None
    experimental: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key in ("prompts", "resources", "tools", "logging", "completions"):
            capability = getattr(self, key)
            if capability is not None:
                result[key] = _capability_dict(capability)
        if self.experimental:
            result["experimental"] = to_jsonable(self.experimental)
        return result


@dataclass
class InitializeResult:
    """The server's answer to an initialize request."""

    protocol_version: str
    server_info: Implementation
    capabilities: ServerCapabilities = field(default_factory=ServerCapabilities)
    instructions: str = ""
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.meta:
            result["_meta"] = to_jsonable(self.meta)
        result["protocolVersion"] = self.protocol_version
        result["serverInfo"] = self.server_info.to_dict()
        result["capabilities"] = self.capabilities.to_dict()
        if self.instructions:
            result["instructions"] = self.instructions
        return result


def is_protocol_version_supported(version: str) -> bool:
    """Tell whether a protocol version is one this package supports."""
    return version in SUPPORTED_PROTOCOL_VERSIONS


def new_initialize_request(
    protocol_version: str,
    client_info: Implementation,
    capabilities: ClientCapabilities,
) -> JSONRPCRequest:
    """Create an initialize request with id 1."""
    params = {
        "protocolVersion": protocol_version,
        "clientInfo": client_info,
        "capabilities": capabilities,
    }
    return new_request(1, METHOD_INITIALIZE, params)


def new_initialize_response(
    request_id: Any,
    protocol_version: str,
    server_info: Implementation,
    capabilities: ServerCapabilities,
    instructions: str,
) -> JSONRPCResponse:
    """Create a response carrying an initialization result."""
    result = InitializeResult(
        protocol_version=protocol_version,
        server_info=server_info,
        capabilities=capabilities,
        instructions=instructions,
    )
    return new_response(request_id, result)


def new_initialized_notification() -> JSONRPCNotification:
    """Create the notification a client sends once initialization is done."""
    return new_notification(
        Notification(method=METHOD_NOTIFICATIONS_INITIALIZED, params=NotificationParams())
    )