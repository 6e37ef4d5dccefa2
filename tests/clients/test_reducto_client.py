from __future__ import annotations

import json

import httpx
import pytest

from billeffect.clients import ReductoClient
from billeffect.core.errors import ConfigurationError, ParseError, TransportError

BASE_URL = "https://reducto.test"


def _client(handler) -> ReductoClient:
    return ReductoClient(
        BASE_URL,
        "reducto-key",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def _service(parse_payload, *, remote_payload=None, requests=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if request.url.host == "files.test":
            return httpx.Response(200, json=remote_payload)
        if request.url.path == "/upload":
            return httpx.Response(200, json={"file_id": "file-123"})
        if request.url.path == "/parse":
            return httpx.Response(200, json=parse_payload)
        return httpx.Response(404)

    return handler


def test_extract_inline_chunks():
    requests = []
    payload = {
        "result": {"type": "full", "chunks": [{"content": "H.R. 1 Test Act"}, {"content": "SEC. 1"}]},
        "usage": {"num_pages": 3},
    }
    extraction = _client(_service(payload, requests=requests)).extract("bill.pdf", b"%PDF-1.7")

    assert extraction.text == "H.R. 1 Test Act\n\nSEC. 1"
    assert extraction.page_count == 3
    upload, parse = requests
    assert upload.headers["Authorization"] == "Bearer reducto-key"
    assert b"bill.pdf" in upload.content
    assert json.loads(parse.content) == {"input": "file-123"}


def test_extract_follows_url_results():
    payload = {"result": {"type": "url", "url": "https://files.test/result.json"}}
    remote = {"chunks": [{"content": "Remote text"}]}
    extraction = _client(_service(payload, remote_payload=remote)).extract("bill.pdf", b"%PDF")

    assert extraction.text == "Remote text"
    assert extraction.page_count == 1


def test_chunk_fallbacks():
    chunks = [
        {"content": "A"},
        {"content": "", "embed": "B"},
        {"blocks": [{"content": "line1"}, {"content": ""}, {"content": "line2"}]},
        {},
    ]
    assert ReductoClient.chunks_to_text(chunks) == "A\n\nB\n\nline1\nline2"


def test_empty_extraction_is_a_parse_error():
    payload = {"result": {"chunks": [{"content": ""}]}}
    with pytest.raises(ParseError):
        _client(_service(payload)).extract_text("bill.pdf", b"%PDF")


def test_missing_file_id_is_a_parse_error():
    client = _client(lambda request: httpx.Response(200, json={}))
    with pytest.raises(ParseError):
        client.extract("bill.pdf", b"%PDF")


def test_upload_failure_carries_status():
    client = _client(lambda request: httpx.Response(401, text="bad key"))
    with pytest.raises(TransportError) as excinfo:
        client.extract("bill.pdf", b"%PDF")
    assert excinfo.value.status_code == 401
    assert "upload file" in str(excinfo.value)


def test_remote_result_failure_is_a_transport_error():
    payload = {"result": {"type": "url", "url": "https://files.test/result.json"}}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "files.test":
            return httpx.Response(403)
        return _service(payload)(request)

    with pytest.raises(TransportError) as excinfo:
        _client(handler).extract("bill.pdf", b"%PDF")
    assert excinfo.value.status_code == 403


def test_missing_key_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        ReductoClient(BASE_URL, "")


def test_extract_with_patched_request_helper(monkeypatch):
    client = ReductoClient(BASE_URL, "reducto-key")
    responses = [
        {"file_id": "file-9"},
        {"result": {"chunks": [{"embed": "Embedded text"}]}, "usage": {"num_pages": 2}},
    ]
    captured = []

    def fake_request(method, path, *, action, **kwargs):
        captured.append((method, path, action))
        return responses.pop(0)

    monkeypatch.setattr(client, "_request", fake_request)

    extraction = client.extract("bill.pdf", b"%PDF")
    client.close()

    assert extraction.text == "Embedded text"
    assert extraction.page_count == 2
    assert [entry[1] for entry in captured] == ["/upload", "/parse"]
