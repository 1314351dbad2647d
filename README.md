# mcpcore

Building blocks for a Model Context Protocol (MCP) server. The package
provides the protocol data types, JSON-RPC 2.0 messages and their parsing,
the initialization messages and capabilities, and registries that answer
prompt and resource requests.

## Installation

```
pip install .
```

The package has no runtime dependencies. To install the test dependencies
as well:

```
pip install ".[test]"
```

## Modules

- `mcpcore.types`: the content types (`TextContent`, `ImageContent`,
  `AudioContent`, `EmbeddedResource`) and their `new_*` helpers, plus
  `Notification`, `NotificationParams`, `Annotations`, `Role` and
  `to_jsonable`, which turns any of these objects into plain JSON-ready
  values.
- `mcpcore.resources`: `Resource`, `ResourceTemplate`,
  `new_resource_template`, `TextResourceContents`, `BlobResourceContents`,
  `ReadResourceRequest`, `ReadResourceResult` and `ListResourcesResult`.
  It also includes `URITemplate`, an RFC 6570 template that is validated
  when it is created and that can `expand` variable values.
- `mcpcore.tools`: `Tool` and the input-schema builders (`new_tool`,
  `with_description`, `with_string`, `with_number`, `with_integer`,
  `with_boolean`, `with_object`, `with_array`, along with the property
  options `description`, `required`, `default`, `title`, `enum`,
  `properties`, `items`, `min_items`, `max_items` and `unique_items`).
  It also provides `CallToolResult` with `new_text_result` and
  `new_error_result`, and the decoders `parse_call_tool_result`,
  `parse_content` and `parse_resource_contents`.
- `mcpcore.prompts`: `Prompt`, `PromptArgument`, `PromptMessage` (whose
  `from_dict` picks the concrete content type), `GetPromptRequest`,
  `GetPromptResult` and `ListPromptsResult`.
- `mcpcore.jsonrpc`: `JSONRPCRequest`, `JSONRPCResponse`, `JSONRPCError`
  and `JSONRPCNotification`, each with `to_dict` and `from_dict`. It also
  has the constructors `new_request`, `new_response`,
  `new_error_response`, `new_notification` and
  `new_notification_from_map`, and the parsing helpers
  `parse_message_type`, `parse_message`, `format_message`,
  `is_error_response` and `parse_error`. The standard error codes are
  available as `ERR_CODE_*` constants.
- `mcpcore.messages`: `Implementation`, `ClientCapabilities`,
  `ServerCapabilities` and the individual capability classes, along with
  `InitializeResult`, `is_protocol_version_supported`,
  `new_initialize_request`, `new_initialize_response`,
  `new_initialized_notification` and the method and protocol-version
  constants.
- `mcpcore.capabilities`: `convert_to_server_capabilities` turns a plain
  capability map into `ServerCapabilities`, and `build_initialize_result`
  builds the answer to an initialize request.
- `mcpcore.prompt_manager`: `PromptManager`, which registers prompts and
  answers `prompts/list`, `prompts/get` and `completion/complete`. It also
  provides `build_prompt_messages`, the default rendering for a prompt
  that has no handler.
- `mcpcore.resource_manager`: `ResourceManager`, which registers resources
  and templates, keeps update subscriptions on bounded queues, and
  answers `resources/list`, `resources/read`,
  `resources/templates/list`, `resources/subscribe` and
  `resources/unsubscribe`.
- `mcpcore.errors`: the exception classes (`McpError` and its subclasses)
  and the standard error message strings.

## Examples

Parsing an incoming message:

```python
from mcpcore.jsonrpc import parse_message, format_message

message, kind = parse_message('{"jsonrpc": "2.0", "id": 7, "method": "ping"}')
print(kind.value, format_message(message))   # request Request(ID=7, Method=ping)
```

Serving a prompt:

```python
from mcpcore.jsonrpc import new_request
from mcpcore.prompt_manager import PromptManager
from mcpcore.prompts import Prompt, PromptArgument

manager = PromptManager()
manager.register_prompt(
    Prompt("greeting", description="A greeting", arguments=[PromptArgument("name", required=True)]),
    None,
)

request = new_request(1, "prompts/get", {"name": "greeting", "arguments": {"name": "Ada"}})
print(manager.handle_get_prompt(request).to_dict())
```

Describing a tool:

```python
from mcpcore.tools import new_tool, with_description, with_string, required

tool = new_tool("greet", with_description("Say hello"), with_string("name", required()))
print(tool.to_dict())
# {'name': 'greet', 'description': 'Say hello',
#  'inputSchema': {'type': 'object', 'properties': {'name': {'type': 'string'}}, 'required': ['name']}}
```

When a request handler fails or receives bad parameters, the managers do
not raise an exception. They return a `JSONRPCError` that carries the
matching JSON-RPC error code. The parsing functions, on the other hand,
raise subclasses of `McpError`.

## What the package does not do

- It has no tool registry. You can describe tools and decode their
  results, but no component here dispatches `tools/list` or `tools/call`
  requests to handlers.
- It does not track per-session initialization state. You can build the
  initialize result with `mcpcore.capabilities`, but handling the
  `notifications/initialized` notification is left to the caller.
- It provides no server, transport, session store or logging setup. You
  supply the HTTP or stdio handling and pass decoded requests to the
  managers yourself.

## Running the tests

```
pytest
```