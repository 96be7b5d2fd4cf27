# mortarkit

Building blocks for services that talk gRPC and REST. It is a library only; you import the parts you need:

- **Monitoring wrappers** (`mortarkit.monitoring`): tag-aware counters, gauges, histograms and timers on top of any metrics backend, with default tags, tags taken from the call context, a registry that creates each metric once, and an error callback. A metric the backend fails to create is replaced by a no-op metric that reports the failure on every use.
- **Protobuf over HTTP** (`mortarkit.httpclient`): calls REST endpoints with protobuf messages encoded as JSON and raises HTTP failures as `StatusError` carrying a gRPC `Code`.
- **Build information** (`mortarkit.buildinfo`): git commit, version, build tag, build time, start time, uptime and host name.
- **Middleware helpers** (`mortarkit.middleware`): header forwarding, log-context extraction from metadata, gateway header matching, and timing of client and server calls.
- **Small utilities**: `split_method_and_package` and `obfuscate` (`mortarkit.textutil`), `MDTraceCarrier` (`mortarkit.carrier`) and `marshal_message_body` (`mortarkit.marshal`).

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Monitoring

```python
from mortarkit.monitoring.builder import builder

reporter = (
    builder()
    .set_tags({"service": "awesome", "version": "v1.0.1"})
    .add_extractors(lambda ctx: {"canary": ctx.get("canary", "false")})
    .do_on_error(lambda err: print("metrics problem:", err))
    .build(my_backend_builder)
)

requests_total = reporter.metrics().counter("requests", "number of requests")
requests_total.with_tags({"endpoint": "/ping"}).with_context({"canary": "true"}).inc()
```

`my_backend_builder` is any object with a `build()` method returning a backend reporter that has `metrics()`, `connect(ctx)` and `close(ctx)`. The object returned by `metrics()` provides `counter(name, desc, *keys)`, `gauge(name, desc, *keys)`, `timer(name, desc, *keys)` and `histogram(name, desc, buckets, *keys)`, each raising when it cannot create the metric. The metrics it returns have `with_tags(tags)`, which gives the object to update (`inc`, `add`, `set`, `dec`, `record`).

Without `do_on_error`, errors are logged as warnings through the `logging` module. Without `set_tags`, metrics start with no default tags.

Metrics are cached by name and by the sorted, distinct set of tag keys, using `calc_id`:

```python
from mortarkit.monitoring.registry import calc_id

calc_id("name", "second", "first")  # "name_first_second"
```

## Protobuf HTTP client

```python
from mortarkit.httpclient import create_protobuf_http_client, StatusError

client = create_protobuf_http_client(None, None, None)
try:
    client.do("POST", "http://service.example.com/ping", request_message, response_message)
except StatusError as err:
    print(err.code, err.message)
```

`create_protobuf_http_client` takes a `requests.Session`, an error mapper and a `JSONPbMarshaller`; `None` picks the defaults. The default marshaller writes unpopulated fields and ignores unknown ones on decoding. `out` may be a protobuf message or a mutable mapping; pass `None` to leave the response body unread.

With `default_error_mapper`, responses with status 200, 201 and 202 are decoded into `out`. Any other status raises `StatusError`: if the body is a JSON `google.rpc.Status` with a non-OK code, that code and message are used; otherwise the mapped code and the body text. Marshalling, connection and decoding failures are raised as `StatusError` too.

## Build information

```python
from mortarkit.buildinfo import BuildValues, get_build_information

info = get_build_information(True, BuildValues(git_commit="1234", version="v0.0.1"))
print(info.to_json())
```

With `include_explanations` set, empty build values read "wasn't provided during build". `build_timestamp` is parsed as RFC 3339; uptime is formatted by `format_duration`, for example `1h2m3.5s` or `250µs`.

## Middleware

Call contexts are `CallContext(incoming=..., outgoing=...)` from `mortarkit.middleware.context_extractor`, holding metadata as mappings of names to lists of values.

- `logger_grpc_incoming_context_extractor(headers)` returns an extractor giving the incoming metadata whose lower-cased names start with one of `headers`, values joined by commas.
- `make_incoming_header_matcher(prefixes)` (`gateway_headers`) keeps headers starting with a prefix and otherwise falls back to `default_header_matcher`.
- `copy_grpc_headers_client_interceptor(prefixes)` and `copy_grpc_headers_http_client_interceptor(prefixes)` (`client_headers`) copy matching incoming metadata to outgoing metadata or to the headers of a `RestRequest`. Prefixes are compared with lower-cased names.
- `monitor_grpc_client_calls_interceptor(metrics)` and `monitor_rest_client_calls_interceptor(metrics)` (`client_monitor`) record a `client_calls_duration` timer tagged with target, path, success and client type.
- `monitor_grpc_interceptor(metrics)` (`server_monitor`) records a `grpc_<method>` timer tagged with the numeric gRPC code from `grpc_code_tag_value`.

## Utilities

```python
from mortarkit.textutil import obfuscate, split_method_and_package

obfuscate("1234567890", 3)                           # "123***890"
split_method_and_package("/package.Service/Method")  # ("/package.Service", "Method")
```

## What it does not do

mortarkit has no command-line program and runs no server. It does not start tracing spans, has no interceptor that writes call logs, and does not wire parts together for you: you pass configuration values such as header prefixes and metric factories in directly. Metrics are only forwarded to the backend you supply; nothing is stored or exported by mortarkit itself.