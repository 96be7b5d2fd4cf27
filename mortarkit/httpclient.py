"""HTTP client that speaks protobuf JSON and reports failures as gRPC statuses."""

from __future__ import annotations

import enum
import json
from collections.abc import Callable, MutableMapping
from http import HTTPStatus
from typing import Any, Optional, Union

import requests
from google.protobuf import json_format
from google.protobuf.message import Message


class Code(enum.IntEnum):
    """gRPC status codes."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    @property
    def label(self) -> str:
        """Conventional display name, such as ``InvalidArgument``."""
        return _LABELS[self]


_LABELS = {
    Code.OK: "OK",
    Code.CANCELLED: "Canceled",
    Code.UNKNOWN: "Unknown",
    Code.INVALID_ARGUMENT: "InvalidArgument",
    Code.DEADLINE_EXCEEDED: "DeadlineExceeded",
    Code.NOT_FOUND: "NotFound",
    Code.ALREADY_EXISTS: "AlreadyExists",
    Code.PERMISSION_DENIED: "PermissionDenied",
    Code.RESOURCE_EXHAUSTED: "ResourceExhausted",
    Code.FAILED_PRECONDITION: "FailedPrecondition",
    Code.ABORTED: "Aborted",
    Code.OUT_OF_RANGE: "OutOfRange",
    Code.UNIMPLEMENTED: "Unimplemented",
    Code.INTERNAL: "Internal",
    Code.UNAVAILABLE: "Unavailable",
    Code.DATA_LOSS: "DataLoss",
    Code.UNAUTHENTICATED: "Unauthenticated",
}

_INT32_MIN, _INT32_MAX = -(2**31), 2**31 - 1


def _code_label(code: Union[Code, int]) -> str:
    if isinstance(code, Code):
        return code.label
    return f"Code({code})"


def _as_code(value: int) -> Union[Code, int]:
    try:
        return Code(value)
    except ValueError:
        return value


class StatusError(Exception):
    """A failed call, carrying a gRPC status code and message."""

    def __init__(self, code: Union[Code, int], message: str, details: Any = ()) -> None:
        super().__init__(code, message)
        self.code = code
        self.message = message
        self.details = tuple(details)

    def __str__(self) -> str:
        return f"rpc error: code = {_code_label(self.code)} desc = {self.message}"


ErrorMapper = Callable[[int], Optional[tuple[Code, str]]]


def _status_text(http_status: int) -> str:
    try:
        return HTTPStatus(http_status).phrase
    except ValueError:
        return ""


_HTTP_TO_GRPC = {
    HTTPStatus.OK: Code.OK,
    HTTPStatus.CREATED: Code.OK,
    HTTPStatus.ACCEPTED: Code.OK,
    HTTPStatus.BAD_REQUEST: Code.INVALID_ARGUMENT,
    HTTPStatus.METHOD_NOT_ALLOWED: Code.UNIMPLEMENTED,
    HTTPStatus.NOT_FOUND: Code.NOT_FOUND,
    HTTPStatus.CONFLICT: Code.ALREADY_EXISTS,
    HTTPStatus.UNAUTHORIZED: Code.UNAUTHENTICATED,
    HTTPStatus.TOO_MANY_REQUESTS: Code.RESOURCE_EXHAUSTED,
    HTTPStatus.NOT_IMPLEMENTED: Code.UNIMPLEMENTED,
    HTTPStatus.INTERNAL_SERVER_ERROR: Code.INTERNAL,
    HTTPStatus.SERVICE_UNAVAILABLE: Code.UNAVAILABLE,
}


def default_error_mapper(http_status: int) -> tuple[Code, str]:
    """Map an HTTP status code to a gRPC code and the standard reason phrase."""
    return _HTTP_TO_GRPC.get(http_status, Code.UNKNOWN), _status_text(http_status)


def _message_to_dict(message: Message) -> dict:
    try:
        return json_format.MessageToDict(message, always_print_fields_with_no_presence=True)
    except TypeError:
        return json_format.MessageToDict(message, including_default_value_fields=True)


def _first_json_value(data: bytes) -> Any:
    text = data.decode("utf-8").lstrip()
    if not text:
        raise EOFError("EOF")
    value, _ = json.JSONDecoder().raw_decode(text)
    return value


class JSONPbMarshaller:
    """Protobuf JSON codec that emits unpopulated fields and ignores unknown ones."""

    def marshal(self, message: Any) -> bytes:
        """Encode a protobuf message, or any JSON-serialisable value, as JSON bytes."""
        if isinstance(message, Message):
            payload = _message_to_dict(message)
        else:
            payload = message
        return json.dumps(payload, separators=(",", ":")).encode("utf-8")

    def unmarshal(self, data: bytes, out: Any) -> None:
        """Decode the first JSON value in ``data`` into ``out`` in place.

        ``out`` is a protobuf message or a mutable mapping. Raises
        :class:`EOFError` when ``data`` holds no value.
        """
        value = _first_json_value(data)
        if isinstance(out, Message):
            json_format.ParseDict(value, out, ignore_unknown_fields=True)
        elif isinstance(out, MutableMapping):
            if not isinstance(value, dict):
                raise ValueError(f"cannot decode {type(value).__name__} into a mapping")
            out.update(value)
        else:
            raise TypeError(f"cannot decode into {type(out).__name__}")


def _decode_status(body: bytes) -> Optional[tuple[Union[Code, int], str, list]]:
    """Read a ``google.rpc.Status`` JSON document; None when absent or not a status."""
    try:
        value = _first_json_value(body)
    except (UnicodeDecodeError, ValueError, EOFError):
        return None
    if not isinstance(value, dict):
        return None
    code = value.get("code", 0)
    if code is None:
        code = 0
    if isinstance(code, bool):
        return None
    if isinstance(code, str):
        try:
            code = int(code)
        except ValueError:
            return None
    if not isinstance(code, int) or not _INT32_MIN <= code <= _INT32_MAX:
        return None
    message = value.get("message") or ""
    details = value.get("details") or []
    if not isinstance(message, str) or not isinstance(details, list):
        return None
    if code == Code.OK:
        return None
    return _as_code(code), message, details


class ProtobufHTTPClient:
    """Calls a REST API with protobuf messages as JSON request and response bodies."""

    def __init__(
        self,
        session: requests.Session,
        error_mapper: ErrorMapper,
        marshaller: JSONPbMarshaller,
    ) -> None:
        self.session = session
        self.error_mapper = error_mapper
        self.marshaller = marshaller

    def do(self, method: str, url: str, message: Any, out: Any = None) -> None:
        """Send ``message`` and decode the reply into ``out``.

        Pass ``out=None`` to leave the response body unread. Every failure is
        raised as :class:`StatusError`.
        """
        try:
            payload = self.marshaller.marshal(message)
        except Exception as exc:
            raise StatusError(Code.UNKNOWN, f"error while marshaling request, {exc}") from exc
        try:
            prepared = self.session.prepare_request(requests.Request(method, url, data=payload))
        except (requests.RequestException, ValueError) as exc:
            raise StatusError(Code.UNKNOWN, f"error while creating an http request, {exc}") from exc
        try:
            response = self.session.send(prepared, stream=True)
        except requests.RequestException as exc:
            raise StatusError(Code.INTERNAL, f"error executing http call, {exc}") from exc
        with response:
            self._raise_for_status(response)
            if out is not None:
                try:
                    self.marshaller.unmarshal(response.content, out)
                except Exception as exc:
                    raise StatusError(Code.UNKNOWN, f"error unmarshalling response, [{exc}]") from exc

    def _raise_for_status(self, response: requests.Response) -> None:
        mapped = self.error_mapper(response.status_code)
        if mapped is None:
            return
        code, text = mapped
        if code == Code.OK:
            return
        try:
            body = response.content
        except (requests.RequestException, OSError) as exc:
            raise StatusError(code, text) from exc
        decoded = _decode_status(body)
        if decoded is not None:
            raise StatusError(*decoded)
        raise StatusError(code, body.decode("utf-8", errors="replace"))


def create_protobuf_http_client(
    session: Optional[requests.Session] = None,
    error_mapper: Optional[ErrorMapper] = None,
    marshaller: Optional[JSONPbMarshaller] = None,
) -> ProtobufHTTPClient:
    """Create a client, filling in a default session, error mapper and marshaller."""
    return ProtobufHTTPClient(
        session=session if session is not None else requests.Session(),
        error_mapper=error_mapper if error_mapper is not None else default_error_mapper,
        marshaller=marshaller if marshaller is not None else JSONPbMarshaller(),
    )


DEFAULT_PROTOBUF_HTTP_CLIENT = create_protobuf_http_client()