import re

import pytest

from mcpcore.errors import TemplateRegistrationError
from mcpcore.jsonrpc import (
    ERR_CODE_INTERNAL,
    ERR_CODE_INVALID_PARAMS,
    ERR_CODE_METHOD_NOT_FOUND,
    JSONRPCError,
    new_request,
)
from mcpcore.resource_manager import ResourceManager
from mcpcore.resources import (
    ListResourcesResult,
    ReadResourceResult,
    Resource,
    TextResourceContents,
    new_resource_template,
)

URI = "file:///readme.txt"


def _handler(request):
    return TextResourceContents(uri=URI, text="hello", mime_type="text/plain")


@pytest.fixture
def manager():
    mgr = ResourceManager()
    mgr.register_resource(Resource(name="readme", uri=URI), _handler)
    return mgr


def test_register_and_get(manager):
    resource = manager.get_resource(URI)
    assert resource.name == "readme"
    assert manager.get_resource("file:///missing") is None


def test_register_ignores_empty_uri():
    mgr = ResourceManager()
    mgr.register_resource(Resource(name="x", uri=""), _handler)
    mgr.register_resource(None, _handler)
    assert mgr.get_resources() == []


def test_register_replaces_and_keeps_order(manager):
    manager.register_resource(Resource(name="other", uri="file:///b"), _handler)
    manager.register_resource(Resource(name="readme2", uri=URI), _handler)
    assert [r.uri for r in manager.get_resources()] == [URI, "file:///b"]
    assert manager.get_resource(URI).name == "readme2"


def test_list_resources(manager):
    result = manager.handle_list_resources(new_request(1, "resources/list", None))
    assert isinstance(result, ListResourcesResult)
    assert [r.uri for r in result.resources] == [URI]


def test_read_resource(manager):
    result = manager.handle_read_resource(new_request(2, "resources/read", {"uri": URI}))
    assert isinstance(result, ReadResourceResult)
    assert len(result.contents) == 1
    assert result.contents[0].text == "hello"


def test_read_resource_not_found(manager):
    result = manager.handle_read_resource(new_request(3, "resources/read", {"uri": "file:///x"}))
    assert isinstance(result, JSONRPCError)
    assert result.error.code == ERR_CODE_METHOD_NOT_FOUND
    assert result.error.message == "resource not found: file:///x"


def test_read_resource_bad_params(manager):
    request = new_request(4, "resources/read", None)
    request.params = ["not", "a", "map"]
    result = manager.handle_read_resource(request)
    assert result.error.code == ERR_CODE_INVALID_PARAMS
    assert result.error.message == "invalid parameters"

    missing = manager.handle_read_resource(new_request(5, "resources/read", {}))
    assert missing.error.code == ERR_CODE_INVALID_PARAMS
    assert missing.error.message == "missing required parameters"


def test_read_resource_handler_failure():
    def failing(request):
        raise RuntimeError("disk gone")

    mgr = ResourceManager()
    mgr.register_resource(Resource(name="broken", uri=URI), failing)
    result = mgr.handle_read_resource(new_request(6, "resources/read", {"uri": URI}))
    assert result.error.code == ERR_CODE_INTERNAL
    assert result.error.message == "disk gone"


def test_register_template_and_list():
    mgr = ResourceManager()
    template = new_resource_template("file:///{path}", "files")
    mgr.register_template(template, None)
    assert mgr.get_templates() == [template]
    listed = mgr.handle_list_templates(new_request(7, "resources/templates/list", None))
    assert listed["resourceTemplates"] == [template]


def test_register_template_errors():
    mgr = ResourceManager()
    with pytest.raises(TemplateRegistrationError, match="template cannot be nil"):
        mgr.register_template(None, None)

    template = new_resource_template("file:///{path}", "files")
    mgr.register_template(template, None)
    with pytest.raises(TemplateRegistrationError, match="template files already exists"):
        mgr.register_template(new_resource_template("file:///{other}", "files"), None)

    nameless = new_resource_template("file:///{path}", "")
    with pytest.raises(TemplateRegistrationError, match="template name cannot be empty"):
        mgr.register_template(nameless, None)


def test_subscribe_and_notify(manager):
    subscription = manager.subscribe(URI)
    manager.notify_update(URI)
    notification = subscription.get_nowait()
    assert notification.method == "notifications/resources/updated"
    assert notification.params.additional_fields == {"uri": URI}


def test_unsubscribe_stops_notifications(manager):
    first = manager.subscribe(URI)
    second = manager.subscribe(URI)
    manager.unsubscribe(URI, first)
    manager.notify_update(URI)
    assert first.empty()
    assert second.qsize() == 1


def test_notify_skips_full_queue(manager):
    subscription = manager.subscribe(URI)
    for _ in range(subscription.maxsize + 5):
        manager.notify_update(URI)
    assert subscription.qsize() == subscription.maxsize


def test_handle_subscribe(manager):
    result = manager.handle_subscribe(new_request(8, "resources/subscribe", {"uri": URI}))
    assert result["uri"] == URI
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", result["subscribeTime"])


def test_handle_subscribe_unknown(manager):
    result = manager.handle_subscribe(new_request(9, "resources/subscribe", {"uri": "file:///x"}))
    assert result.error.code == ERR_CODE_METHOD_NOT_FOUND
    assert result.error.message == "resource file:///x not found"


def test_handle_unsubscribe(manager):
    result = manager.handle_unsubscribe(new_request(10, "resources/unsubscribe", {"uri": URI}))
    assert result["uri"] == URI
    assert "unsubscribeTime" in result
    bad = manager.handle_unsubscribe(new_request(11, "resources/unsubscribe", {}))
    assert bad.error.code == ERR_CODE_INVALID_PARAMS