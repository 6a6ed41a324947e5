"""Unit tests for the HTTP transport (mocked session)."""

from __future__ import annotations

import io
import json
import threading
from unittest.mock import Mock

import pytest
import requests

from pyrus_client.errors import APIError, ContractError, DecodeError, ErrorCode
from pyrus_client.models.payloads import FileUpload, TaskRequest
from pyrus_client.models.responses import ProfileResponse, UploadResponse
from pyrus_client.transport import USER_AGENT, TokenStore, Transport

PROFILE = {"person_id": 1, "first_name": "Bot", "email": "bot@example.com"}


def _auth_response(response_factory, token: str = "fresh-token") -> requests.Response:
    return response_factory(json_body={"access_token": token})


def test_authorized_call_sends_bearer_token_and_user_agent(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [response_factory(json_body=PROFILE)]

    profile = transport.request("GET", "/profile", response_model=ProfileResponse)

    assert profile.person_id == 1
    session.request.assert_called_once()
    call = session.request.call_args
    assert call.args == ("GET", "https://api.test/v4/profile")
    assert call.kwargs["headers"]["Authorization"] == "Bearer stored-token"
    assert call.kwargs["headers"]["User-Agent"] == USER_AGENT
    assert call.kwargs["stream"] is True


def test_empty_token_store_authenticates_first(session: Mock, response_factory) -> None:
    transport = Transport(
        login="bot@example.com",
        security_key="secret-key",
        base_url="https://api.test/v4",
        session=session,
    )
    session.request.side_effect = [
        _auth_response(response_factory),
        response_factory(json_body=PROFILE),
    ]

    transport.request("GET", "/profile", response_model=ProfileResponse)

    assert session.request.call_count == 2
    auth_call, profile_call = session.request.call_args_list
    assert auth_call.args == ("POST", "https://api.test/v4/auth")
    assert "Authorization" not in auth_call.kwargs["headers"]
    assert json.loads(auth_call.kwargs["data"]) == {
        "login": "bot@example.com",
        "security_key": "secret-key",
    }
    assert profile_call.kwargs["headers"]["Authorization"] == "Bearer fresh-token"
    assert transport.tokens.read() == "fresh-token"


def test_401_refreshes_token_and_replays_once(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [
        response_factory(401, json_body={"error_code": "expired_token", "error": "expired"}),
        _auth_response(response_factory),
        response_factory(json_body=PROFILE),
    ]

    profile = transport.request("GET", "/profile", response_model=ProfileResponse)

    assert profile == ProfileResponse.model_validate(PROFILE)
    urls = [call.args[1] for call in session.request.call_args_list]
    assert urls == [
        "https://api.test/v4/profile",
        "https://api.test/v4/auth",
        "https://api.test/v4/profile",
    ]
    replay = session.request.call_args_list[2]
    assert replay.kwargs["headers"]["Authorization"] == "Bearer fresh-token"
    assert transport.tokens.read() == "fresh-token"


def test_second_401_is_surfaced_without_another_retry(
    transport: Transport, session: Mock, response_factory
) -> None:
    expired = {"error_code": "expired_token", "error": "token has expired"}
    session.request.side_effect = [
        response_factory(401, json_body=expired),
        _auth_response(response_factory),
        response_factory(401, json_body=expired),
    ]

    with pytest.raises(APIError) as excinfo:
        transport.request("GET", "/profile", response_model=ProfileResponse)

    assert session.request.call_count == 3
    assert excinfo.value.code is ErrorCode.EXPIRED_TOKEN
    assert excinfo.value.status == 401


def test_failed_authentication_is_not_retried(session: Mock, response_factory) -> None:
    transport = Transport(login="bot", security_key="bad", session=session)
    session.request.side_effect = [
        response_factory(
            401, json_body={"error_code": "invalid_credentials", "error": "bad credentials"}
        ),
    ]

    with pytest.raises(APIError) as excinfo:
        transport.request("GET", "/profile", response_model=ProfileResponse)

    assert session.request.call_count == 1
    assert excinfo.value.code is ErrorCode.INVALID_CREDENTIALS
    assert str(excinfo.value) == "API error: bad credentials (invalid_credentials)"


def test_api_error_keeps_unknown_code_and_404_message(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [
        response_factory(
            404,
            json_body={"error_code": "brand_new_code", "error": "not found", "Message": "gone"},
        )
    ]

    with pytest.raises(APIError) as excinfo:
        transport.request("GET", "/tasks/1", response_model=ProfileResponse)

    assert excinfo.value.code == "brand_new_code"
    assert excinfo.value.message == "gone"
    assert excinfo.value.status == 404


def test_error_status_without_response_model_still_raises(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [
        response_factory(
            403, json_body={"error_code": "access_denied_task", "error": "access denied"}
        )
    ]

    with pytest.raises(APIError) as excinfo:
        transport.request("PUT", "/calls/abc", body={"rating": 5})

    assert excinfo.value.code is ErrorCode.ACCESS_DENIED_TASK


def test_success_without_response_model_skips_parsing(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [response_factory(200, content=b"not json at all")]

    assert transport.request("PUT", "/calls/abc", body={"rating": 5}) is None


def test_invalid_json_raises_decode_error(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [
        response_factory(200, content=b"{broken", headers={"Content-Type": "application/json"})
    ]

    with pytest.raises(DecodeError):
        transport.request("GET", "/profile", response_model=ProfileResponse)


def test_body_not_matching_model_raises_decode_error(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [response_factory(json_body={"first_name": "no id"})]

    with pytest.raises(DecodeError):
        transport.request("GET", "/profile", response_model=ProfileResponse)


def test_json_body_omits_unset_values(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [response_factory(json_body={"task": {"id": 5}})]

    transport.request("POST", "/tasks", body=TaskRequest(text="Hello"))

    call = session.request.call_args
    assert call.kwargs["headers"]["Content-Type"] == "application/json"
    assert json.loads(call.kwargs["data"]) == {"text": "Hello"}


def test_query_params_are_passed_through(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [response_factory(json_body={"tasks": []})]

    transport.request("GET", "/inbox", params={"item_count": "5"})

    assert session.request.call_args.kwargs["params"] == {"item_count": "5"}


def test_file_upload_is_sent_as_multipart(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [response_factory(json_body={"guid": "g-1", "md5_hash": "x"})]
    reader = io.BytesIO(b"payload")

    result = transport.request(
        "POST",
        "/files/upload",
        body=FileUpload(filename="a.txt", reader=reader),
        response_model=UploadResponse,
    )

    assert result.guid == "g-1"
    kwargs = session.request.call_args.kwargs
    assert kwargs["files"] == {"file": ("a.txt", reader)}
    assert "data" not in kwargs
    assert "Content-Type" not in kwargs["headers"]


def test_file_upload_reader_is_rewound_on_replay(
    transport: Transport, session: Mock, response_factory
) -> None:
    reader = io.BytesIO(b"payload")
    uploaded: list[bytes] = []

    def respond(method, url, **kwargs):
        if url.endswith("/auth"):
            return _auth_response(response_factory)
        uploaded.append(kwargs["files"]["file"][1].read())
        if session.request.call_count == 1:
            return response_factory(401, json_body={"error_code": "expired_token"})
        return response_factory(json_body={"guid": "g-2"})

    session.request.side_effect = respond

    transport.request(
        "POST",
        "/files/upload",
        body=FileUpload(filename="a.txt", reader=reader),
        response_model=UploadResponse,
    )

    assert session.request.call_count == 3
    assert uploaded == [b"payload", b"payload"]


def test_file_download_streams_into_writer(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [
        response_factory(
            content=b"file-bytes",
            headers={
                "Content-Type": "application/octet-stream",
                "Content-Disposition": 'attachment; filename="report.pdf"',
            },
        )
    ]
    writer = io.BytesIO()

    filename = transport.request("GET", "/files/download/1", writer=writer)

    assert filename == "report.pdf"
    assert writer.getvalue() == b"file-bytes"


def test_non_json_response_without_attachment_is_rejected(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [
        response_factory(502, content=b"<html>", headers={"Content-Type": "text/html"})
    ]

    with pytest.raises(ContractError, match="attachment was expected"):
        transport.request("GET", "/files/download/1", writer=io.BytesIO())


def test_attachment_without_filename_is_rejected(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [
        response_factory(
            content=b"x",
            headers={"Content-Type": "application/pdf", "Content-Disposition": "attachment"},
        )
    ]

    with pytest.raises(ContractError, match="file doesn't have a name"):
        transport.request("GET", "/files/download/1", writer=io.BytesIO())


def test_file_response_without_writer_is_rejected(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [
        response_factory(
            content=b"x",
            headers={
                "Content-Type": "application/pdf",
                "Content-Disposition": 'attachment; filename="a.pdf"',
            },
        )
    ]

    with pytest.raises(ContractError, match="writer was expected"):
        transport.request("GET", "/profile", response_model=ProfileResponse)


def test_unparseable_content_type_is_decoded_as_json(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [
        response_factory(
            404,
            content=json.dumps({"error_code": "access_denied_task", "error": "denied"}).encode(),
            headers={"Content-Type": "json"},
        )
    ]

    with pytest.raises(APIError) as excinfo:
        transport.request("GET", "/tasks/1", response_model=ProfileResponse)

    assert excinfo.value.code is ErrorCode.ACCESS_DENIED_TASK


def test_json_response_when_file_expected_is_rejected(
    transport: Transport, session: Mock, response_factory
) -> None:
    session.request.side_effect = [response_factory(json_body=PROFILE)]

    with pytest.raises(ContractError, match="attachment was expected"):
        transport.request("GET", "/files/download/1", writer=io.BytesIO())


def test_network_errors_propagate_without_retry(transport: Transport, session: Mock) -> None:
    session.request.side_effect = requests.ConnectionError("boom")

    with pytest.raises(requests.ConnectionError):
        transport.request("GET", "/profile", response_model=ProfileResponse)

    assert session.request.call_count == 1


def test_token_store_allows_concurrent_readers_and_exclusive_writes() -> None:
    store = TokenStore("a")
    results: list[str] = []

    def reader() -> None:
        for _ in range(100):
            results.append(store.read())

    def writer() -> None:
        for i in range(100):
            store.write(f"t{i}")

    threads = [threading.Thread(target=reader) for _ in range(4)]
    threads.append(threading.Thread(target=writer))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.read() == "t99"
    assert len(results) == 400
    assert all(value == "a" or value.startswith("t") for value in results)
