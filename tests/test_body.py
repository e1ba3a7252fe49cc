import json

import pytest

from core.body import carries_body, encode_body, is_multipart, parse_buffered_body
from core.headers import HeaderBuilder
from core.request_types import ForwardHeaders, InboundRequest, JsonBody, NoBody, StreamBody


@pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE", "post"])
def test_body_methods(method):
    assert carries_body(method)


@pytest.mark.parametrize("method", ["GET", "HEAD", "OPTIONS"])
def test_methods_without_body(method):
    assert not carries_body(method)


def test_multipart_detection():
    assert is_multipart("multipart/form-data; boundary=xyz")
    assert not is_multipart("application/json")
    assert not is_multipart(None)


def test_json_body_is_parsed():
    body = parse_buffered_body(b'{"name": "kim", "tags": [1, 2]}', "application/json")
    assert body == JsonBody({"name": "kim", "tags": [1, 2]})


def test_empty_body_is_no_body():
    assert parse_buffered_body(b"", "application/json") == NoBody()


@pytest.mark.parametrize("raw", [b"null", b"false", b"0", b'""'])
def test_falsy_json_values_are_no_body(raw):
    assert parse_buffered_body(raw, "application/json") == NoBody()


@pytest.mark.parametrize(("raw", "value"), [(b"{}", {}), (b"[]", []), (b"true", True), (b"1", 1)])
def test_empty_containers_and_truthy_scalars_are_kept(raw, value):
    assert parse_buffered_body(raw, "application/json") == JsonBody(value)


def test_non_json_text_is_kept_as_string():
    assert parse_buffered_body(b"hello there", "text/plain") == JsonBody("hello there")


def test_form_body_becomes_mapping():
    body = parse_buffered_body(b"user=kim&role=a&role=b&empty=", "application/x-www-form-urlencoded")
    assert body == JsonBody({"user": "kim", "role": ["a", "b"], "empty": ""})


def test_json_body_forces_json_content_type_and_keeps_cookie():
    headers = ForwardHeaders(content_type="text/plain", cookie="sid=1")
    content, out_headers = encode_body(JsonBody({"a": 1}), headers, HeaderBuilder())
    assert json.loads(content) == {"a": 1}
    assert out_headers == ForwardHeaders(content_type="application/json", cookie="sid=1")


def test_plain_text_body_is_reencoded_as_json_string():
    # Non-JSON inbound bodies are still sent as JSON.
    content, out_headers = encode_body(JsonBody("hello"), ForwardHeaders("text/plain"), HeaderBuilder())
    assert content == '"hello"'
    assert out_headers.content_type == "application/json"


def test_stream_body_is_passed_through_unchanged():
    async def chunks():
        yield b"--xyz"

    stream = chunks()
    headers = ForwardHeaders(content_type="multipart/form-data; boundary=xyz")
    content, out_headers = encode_body(StreamBody(stream), headers, HeaderBuilder())
    assert content is stream
    assert out_headers is headers


def test_no_body_leaves_headers_alone():
    headers = ForwardHeaders(content_type="text/plain")
    assert encode_body(NoBody(), headers, HeaderBuilder()) == (None, headers)


def test_header_projection_uses_only_content_type_and_cookie():
    inbound = InboundRequest("GET", "/api/x", content_type="text/csv", cookie="a=1")
    headers = HeaderBuilder().build_backend_headers(inbound)
    assert headers.as_dict() == {"Content-Type": "text/csv", "Cookie": "a=1"}


def test_header_projection_omits_missing_headers():
    inbound = InboundRequest("GET", "/api/x")
    assert HeaderBuilder().build_backend_headers(inbound).as_dict() == {}


@pytest.mark.parametrize("raw", [b"NaN", b"Infinity", b"-Infinity", b'{"a": NaN}'])
def test_non_standard_json_literals_are_kept_as_text(raw):
    body = parse_buffered_body(raw, "application/json")
    assert body == JsonBody(raw.decode())
    content, _ = encode_body(body, ForwardHeaders(), HeaderBuilder())
    assert json.loads(content) == raw.decode()


def test_overflowing_number_becomes_null():
    body = parse_buffered_body(b'{"big": 1e999}', "application/json")
    content, _ = encode_body(body, ForwardHeaders(), HeaderBuilder())
    assert content == '{"big":null}'


def test_lone_surrogate_is_escaped_in_outbound_json():
    body = parse_buffered_body(b'{"a": "\\ud800"}', "application/json")
    content, _ = encode_body(body, ForwardHeaders(), HeaderBuilder())
    assert content == '{"a":"\\ud800"}'
    content.encode("utf-8")
