"""Registry of resources and resource templates, and the handlers for resource requests."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from mcpcore.errors import (
    ERR_INVALID_PARAMS,
    ERR_MISSING_PARAMS,
    ERR_RESOURCE_NOT_FOUND,
    TemplateRegistrationError,
)
from mcpcore.jsonrpc import (
    ERR_CODE_INTERNAL,
    ERR_CODE_INVALID_PARAMS,
    ERR_CODE_METHOD_NOT_FOUND,
    JSONRPCError,
    JSONRPCNotification,
    JSONRPCRequest,
    new_error_response,
    new_notification,
)
from mcpcore.resources import (
    ListResourcesResult,
    ReadResourceRequest,
    ReadResourceResult,
    Resource,
    ResourceContents,
    ResourceTemplate,
)
from mcpcore.types import Notification, NotificationParams

METHOD_NOTIFICATIONS_RESOURCES_UPDATED = "notifications/resources/updated"
SUBSCRIPTION_BUFFER_SIZE = 10

ResourceHandler = Callable[[ReadResourceRequest], ResourceContents]
ResourceTemplateHandler = Callable[[ReadResourceRequest], list]
Subscription = "queue.Queue[JSONRPCNotification]"


@dataclass
class _RegisteredResource:
    resource: Resource
    handler: ResourceHandler


@dataclass
class _RegisteredTemplate:
    template: ResourceTemplate
    handler: Optional[ResourceTemplateHandler]


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class ResourceManager:
    """Keeps registered resources and templates and answers resource requests.

    Resource support counts as enabled once the first resource is registered.
    Subscribers receive update notifications on bounded queues; a full queue
    simply misses the notification.
    """

    def __init__(self) -> None:
        self._resources: dict[str, _RegisteredResource] = {}
        self._templates: dict[str, _RegisteredTemplate] = {}
        self._subscribers: dict[str, list[queue.Queue]] = {}
        self._lock = threading.RLock()
        self._sub_lock = threading.RLock()

    def register_resource(self, resource: Resource | None, handler: ResourceHandler) -> None:
        """Register or replace a resource; resources without a URI are ignored."""
        if resource is None or not resource.uri:
            return
        with self._lock:
            self._resources[resource.uri] = _RegisteredResource(resource=resource, handler=handler)

    def register_template(
        self, template: ResourceTemplate | None, handler: ResourceTemplateHandler | None
    ) -> None:
        """Register a resource template, refusing invalid or duplicate ones."""
        with self._lock:
            if template is None:
                raise TemplateRegistrationError("template cannot be nil")
            if not template.name:
                raise TemplateRegistrationError("template name cannot be empty")
            if template.uri_template is None:
                raise TemplateRegistrationError("template URI cannot be empty")
            if template.name in self._templates:
                raise TemplateRegistrationError(f"template {template.name} already exists")
            self._templates[template.name] = _RegisteredTemplate(template=template, handler=handler)

    def get_resource(self, uri: str) -> Resource | None:
        """Return the resource registered under ``uri``, or None."""
        with self._lock:
            registered = self._resources.get(uri)
        return registered.resource if registered is not None else None

    def get_resources(self) -> list[Resource]:
        """Return all registered resources in registration order."""
        with self._lock:
            return [registered.resource for registered in self._resources.values()]

    def get_templates(self) -> list[ResourceTemplate]:
        """Return all registered templates in registration order."""
        with self._lock:
            return [registered.template for registered in self._templates.values()]

    def subscribe(self, uri: str) -> queue.Queue:
        """Subscribe to updates of ``uri`` and return the queue they arrive on."""
        subscription: queue.Queue = queue.Queue(maxsize=SUBSCRIPTION_BUFFER_SIZE)
        with self._sub_lock:
            self._subscribers.setdefault(uri, []).append(subscription)
        return subscription

    def unsubscribe(self, uri: str, subscription: queue.Queue) -> None:
        """Cancel a subscription made with :meth:`subscribe`."""
        with self._sub_lock:
            remaining = [sub for sub in self._subscribers.get(uri, []) if sub is not subscription]
            if remaining:
                self._subscribers[uri] = remaining
            else:
                self._subscribers.pop(uri, None)

    def notify_update(self, uri: str) -> None:
        """Send a resource-updated notification to every subscriber of ``uri``."""
        with self._sub_lock:
            subscribers = list(self._subscribers.get(uri, []))
        notification = new_notification(
            Notification(
                method=METHOD_NOTIFICATIONS_RESOURCES_UPDATED,
                params=NotificationParams(additional_fields={"uri": uri}),
            )
        )
        for subscription in subscribers:
            try:
                subscription.put_nowait(notification)
            except queue.Full:
                continue

    def handle_list_resources(self, request: JSONRPCRequest) -> ListResourcesResult:
        """Answer a resources/list request."""
        return ListResourcesResult(resources=self.get_resources())

    @staticmethod
    def _uri_param(request: JSONRPCRequest) -> str | JSONRPCError:
        params = request.params
        if not isinstance(params, Mapping):
            return new_error_response(request.id, ERR_CODE_INVALID_PARAMS, ERR_INVALID_PARAMS)
        uri = params.get("uri")
        if not isinstance(uri, str):
            return new_error_response(request.id, ERR_CODE_INVALID_PARAMS, ERR_MISSING_PARAMS)
        return uri

    def handle_read_resource(self, request: JSONRPCRequest) -> ReadResourceResult | JSONRPCError:
        """Answer a resources/read request by running the resource's handler."""
        uri = self._uri_param(request)
        if isinstance(uri, JSONRPCError):
            return uri
        with self._lock:
            registered = self._resources.get(uri)
        if registered is None:
            return new_error_response(
                request.id, ERR_CODE_METHOD_NOT_FOUND, f"{ERR_RESOURCE_NOT_FOUND}: {uri}"
            )
        try:
            content = registered.handler(ReadResourceRequest(uri=uri))
        except Exception as exc:
            return new_error_response(request.id, ERR_CODE_INTERNAL, str(exc))
        return ReadResourceResult(contents=[content])

    def handle_list_templates(self, request: JSONRPCRequest) -> dict[str, Any]:
        """Answer a resources/templates/list request."""
        return {"resourceTemplates": self.get_templates()}

    def handle_subscribe(self, request: JSONRPCRequest) -> dict[str, Any] | JSONRPCError:
        """Answer a resources/subscribe request."""
        uri = self._uri_param(request)
        if isinstance(uri, JSONRPCError):
            return uri
        if self.get_resource(uri) is None:
            return new_error_response(
                request.id, ERR_CODE_METHOD_NOT_FOUND, f"resource {uri} not found"
            )
        self.subscribe(uri)
        return {"uri": uri, "subscribeTime": _utc_timestamp()}

    def handle_unsubscribe(self, request: JSONRPCRequest) -> dict[str, Any] | JSONRPCError:
        """Answer a resources/unsubscribe request."""
        uri = self._uri_param(request)
        if isinstance(uri, JSONRPCError):
            return uri
        return {"uri": uri, "unsubscribeTime": _utc_timestamp()}