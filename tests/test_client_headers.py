from mortarkit.middleware.client_headers import (
    RestRequest,
    copy_grpc_headers_client_interceptor,
    copy_grpc_headers_http_client_interceptor,
)
from mortarkit.middleware.context_extractor import CallContext


def test_grpc_interceptor_copies_matching_headers():
    ctx = CallContext(
        incoming={"one-of-a-kind": ["1"], "another-kind": ["not extracted"]}
    )
    seen = {}

    def invoker(ctx, method, req, reply, cc, *opts):
        seen["outgoing"] = ctx.outgoing
        return "done"

    interceptor = copy_grpc_headers_client_interceptor(["one", "two"])
    result = interceptor(ctx, "", None, None, None, invoker)
    assert result == "done"
    assert "one-of-a-kind" in seen["outgoing"]
    assert "another-kind" not in seen["outgoing"]
    assert seen["outgoing"]["one-of-a-kind"] == ["1"]


def test_grpc_interceptor_without_incoming_leaves_context():
    ctx = CallContext()
    seen = {}

    def invoker(ctx, method, req, reply, cc, *opts):
        seen["ctx"] = ctx

    copy_grpc_headers_client_interceptor(["one"])(ctx, "m", None, None, None, invoker)
    assert seen["ctx"] == ctx


def test_http_interceptor_copies_matching_headers():
    ctx = CallContext(
        incoming={"one-of-a-kind": ["1", "2"], "another-kind": ["not extracted"]}
    )
    req = RestRequest("GET", "http://somewhere/path", context=ctx)
    seen = {}

    def handler(request):
        seen["headers"] = dict(request.headers)
        return 200

    result = copy_grpc_headers_http_client_interceptor(["one", "two"])(req, handler)
    assert result == 200
    assert "One-Of-A-Kind" in seen["headers"]
    assert "another-kind" not in seen["headers"]
    assert "Another-Kind" not in seen["headers"]
    assert sorted(seen["headers"]["One-Of-A-Kind"]) == ["1", "2"]


def test_http_interceptor_without_incoming_adds_nothing():
    req = RestRequest("GET", "http://somewhere/path")
    result = copy_grpc_headers_http_client_interceptor(["one"])(req, lambda r: r.headers)
    assert result == {}