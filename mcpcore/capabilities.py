"""Conversion of capability maps into server capability descriptions."""

from __future__ import annotations

from typing import Any, Mapping

from mcpcore.messages import (
    CompletionsCapability,
    Implementation,
    InitializeResult,
    LoggingCapability,
    PromptsCapability,
    ResourcesCapability,
    ServerCapabilities,
    ToolsCapability,
)

INITIALIZE_INSTRUCTIONS = "MCP server is ready"


def _flag(data: Mapping[str, Any], key: str) -> bool:
    return data.get(key) is True


def convert_to_server_capabilities(cap_map: Mapping[str, Any]) -> ServerCapabilities:
    """Build ServerCapabilities from a plain capability map."""
    capabilities = ServerCapabilities()

    tools = cap_map.get("tools")
    if isinstance(tools, Mapping):
        capabilities.tools = ToolsCapability(list_changed=_flag(tools, "listChanged"))

    resources = cap_map.get("resources")
    if isinstance(resources, Mapping):
        capabilities.resources = ResourcesCapability(
            subscribe=_flag(resources, "subscribe"),
            list_changed=_flag(resources, "listChanged"),
        )

    if "prompts" in cap_map:
        prompts = cap_map["prompts"]
        if isinstance(prompts, Mapping):
            capabilities.prompts = PromptsCapability(list_changed=_flag(prompts, "listChanged"))
        else:
            capabilities.prompts = PromptsCapability()

    if isinstance(cap_map.get("logging"), Mapping):
        capabilities.logging = LoggingCapability()

    if isinstance(cap_map.get("completions"), Mapping):
        capabilities.completions = CompletionsCapability()

    experimental = cap_map.get("experimental")
    if isinstance(experimental, Mapping):
        capabilities.experimental = dict(experimental)

    return capabilities


def build_initialize_result(
    protocol_version: str,
    server_info: Implementation,
    cap_map: Mapping[str, Any],
) -> InitializeResult:
    """Build the result returned for an initialize request."""
    return InitializeResult(
        protocol_version=protocol_version,
        server_info=Implementation(name=server_info.name, version=server_info.version),
        capabilities=convert_to_server_capabilities(cap_map),
        instructions=INITIALIZE_INSTRUCTIONS,
    )