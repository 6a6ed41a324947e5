"""HTTP transport for the Pyrus API.

Handles:
- the shared bearer token (read concurrently, replaced exclusively)
- JSON and multipart request bodies
- one re-authentication and replay when the server answers 401
- telling file downloads apart from JSON and error responses

Known constraint: the replay after a 401 happens exactly once. If the server
still answers 401 with a freshly issued token, that response is surfaced as
an :class:`APIError` instead of trying again.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from email.message import Message
from typing import Any, BinaryIO, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from pyrus_client.errors import (
    APIError,
    ContractError,
    DecodeError,
    EncodeError,
    ErrorEnvelope,
)
from pyrus_client.models.entities import PyrusModel
from pyrus_client.models.payloads import AuthRequest, FileUpload
from pyrus_client.models.responses import AuthResponse

DEFAULT_BASE_URL = "https://api.pyrus.com/v4"
DEFAULT_TIMEOUT = 60.0
USER_AGENT = "Pyrus API python client v0.1.0"
AUTH_PATH = "/auth"

_DOWNLOAD_CHUNK_SIZE = 64 * 1024

ModelT = TypeVar("ModelT", bound=BaseModel)


class _ReadWriteLock:
    """Many concurrent readers or one writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class TokenStore:
    """Holds the bearer token of one client instance.

    Empty until the first authentication. Staleness is never tracked here; the
    transport replaces the token when the server reports it as expired.
    """

    def __init__(self, token: str = "") -> None:
        self._token = token
        self._lock = _ReadWriteLock()

    def read(self) -> str:
        with self._lock.read_locked():
            return self._token

    def write(self, token: str) -> None:
        with self._lock.write_locked():
            self._token = token


class Transport:
    """Sends one logical API call, authenticating on demand."""

    def __init__(
        self,
        *,
        login: str,
        security_key: str,
        base_url: str = DEFAULT_BASE_URL,
        session: requests.Session | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        token_store: TokenStore | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._login = login
        self._security_key = security_key
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout
        self.tokens = token_store or TokenStore()
        self._logger = logger or logging.getLogger(__name__)

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._session.close()

    def authenticate(self, login: str | None = None, security_key: str | None = None) -> str:
        """Exchange credentials for an access token without storing it."""

        body = AuthRequest(
            login=self._login if login is None else login,
            security_key=self._security_key if security_key is None else security_key,
        )
        result = self.request("POST", AUTH_PATH, body=body, response_model=AuthResponse)
        return result.access_token

    def refresh_token(self) -> str:
        """Authenticate with the configured credentials and store the new token."""

        token = self.authenticate()
        self.tokens.write(token)
        self._logger.debug("Access token refreshed")
        return token

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        body: BaseModel | Mapping[str, Any] | FileUpload | None = None,
        response_model: type[ModelT] | None = None,
        writer: BinaryIO | None = None,
    ) -> Any:
        """Perform an API call.

        Args:
            method: HTTP method.
            path: Path relative to the base URL, e.g. ``/tasks/1``.
            params: Query string parameters.
            body: JSON body (model or mapping), or a :class:`FileUpload` for a
                multipart upload.
            response_model: Model to decode a JSON success response into.
            writer: Destination for a file download.

        Returns:
            The decoded ``response_model`` instance, the file name for
            downloads, or ``None`` when no response was requested.

        Raises:
            APIError: The server answered with an error envelope.
            DecodeError: The response body could not be decoded.
            ContractError: The response kind did not match the request.
            requests.RequestException: The request could not be sent.
        """

        return self._perform(method, path, params, body, response_model, writer, replay=True)

    def _perform(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None,
        body: BaseModel | Mapping[str, Any] | FileUpload | None,
        response_model: type[ModelT] | None,
        writer: BinaryIO | None,
        *,
        replay: bool,
    ) -> Any:
        auth = path == AUTH_PATH

        # Authentication calls never look at the token, so they cannot recurse.
        if not auth and not self.tokens.read():
            self.refresh_token()

        with self._send(method, path, params, body, auth=auth) as response:
            if response.status_code == 401 and not auth and replay:
                self._logger.info(
                    "Access token rejected; re-authenticating",
                    extra={"method": method, "path": path},
                )
                self.refresh_token()
                if isinstance(body, FileUpload) and body.reader.seekable():
                    body.reader.seek(0)
                return self._perform(
                    method, path, params, body, response_model, writer, replay=False
                )

            if response_model is None and writer is None and not auth and response.ok:
                return None

            content_type = response.headers.get("Content-Type", "")
            if content_type and _media_type(content_type) != "application/json":
                return self._save_file(response, writer)

            return self._decode_json(response, path, response_model, writer)

    def _send(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None,
        body: BaseModel | Mapping[str, Any] | FileUpload | None,
        *,
        auth: bool,
    ) -> requests.Response:
        url = f"{self._base_url}{path}"
        headers = {"User-Agent": USER_AGENT}
        kwargs: dict[str, Any] = {}

        if isinstance(body, FileUpload):
            kwargs["files"] = {"file": (body.filename, body.reader)}
        elif body is not None:
            headers["Content-Type"] = "application/json"
            kwargs["data"] = self._encode_body(body, path)

        if not auth:
            token = self.tokens.read()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        self._logger.debug("Sending request", extra={"method": method, "path": path})
        try:
            return self._session.request(
                method,
                url,
                params=params or None,
                headers=headers,
                timeout=self._timeout,
                stream=True,
                **kwargs,
            )
        except requests.RequestException as e:
            self._logger.error(
                "Request failed", extra={"method": method, "path": path, "error": str(e)}
            )
            raise

    def _encode_body(self, body: BaseModel | Mapping[str, Any], path: str) -> bytes:
        payload: Any
        if isinstance(body, PyrusModel):
            payload = body.to_payload()
        elif isinstance(body, BaseModel):
            payload = body.model_dump(mode="json", by_alias=True, exclude_none=True)
        else:
            payload = dict(body)
        try:
            return json.dumps(payload, ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            self._logger.error("Error while encoding JSON", extra={"path": path, "error": str(e)})
            raise EncodeError(f"Cannot encode request body for {path}: {e}") from e

    def _save_file(self, response: requests.Response, writer: BinaryIO | None) -> str:
        disposition = response.headers.get("Content-Disposition", "")
        message = Message()
        message["Content-Disposition"] = disposition
        if message.get_content_disposition() != "attachment":
            self._logger.error(
                "Unexpected non-JSON response",
                extra={
                    "status": response.status_code,
                    "content_type": response.headers.get("Content-Type"),
                    "content_disposition": disposition,
                },
            )
            raise ContractError("attachment was expected")

        filename = message.get_filename()
        if not filename:
            raise ContractError("file doesn't have a name")
        if writer is None:
            raise ContractError("writer was expected")

        try:
            for chunk in response.iter_content(chunk_size=_DOWNLOAD_CHUNK_SIZE):
                writer.write(chunk)
        except requests.RequestException as e:
            self._logger.error(
                "Error while downloading a file", extra={"file_name": filename, "error": str(e)}
            )
            raise
        return filename

    def _decode_json(
        self,
        response: requests.Response,
        path: str,
        response_model: type[ModelT] | None,
        writer: BinaryIO | None,
    ) -> Any:
        try:
            payload = response.json()
        except ValueError as e:
            self._logger.error(
                "Error while decoding a response body",
                extra={"path": path, "status": response.status_code, "error": str(e)},
            )
            raise DecodeError(f"Invalid JSON response from {path}: {e}") from e

        if response.status_code != 200:
            try:
                envelope = ErrorEnvelope.model_validate(payload)
            except ValidationError as e:
                raise DecodeError(f"Unexpected error body from {path}: {e}") from e
            error = APIError.from_envelope(envelope, status=response.status_code)
            self._logger.error(
                "API error",
                extra={"path": path, "status": response.status_code, "code": envelope.error_code},
            )
            raise error

        if writer is not None:
            raise ContractError("attachment was expected")
        if response_model is None:
            return None

        try:
            return response_model.model_validate(payload)
        except ValidationError as e:
            self._logger.error(
                "Error while decoding a response body", extra={"path": path, "error": str(e)}
            )
            raise DecodeError(f"Unexpected response from {path}: {e}") from e
        except DecodeError as e:
            self._logger.error(
                "Error while decoding a form field", extra={"path": path, "error": str(e)}
            )
            raise


def _media_type(content_type: str) -> str:
    # A value that is not type/subtype is read as JSON, like an absent header.
    if "/" not in content_type.split(";", 1)[0]:
        return "application/json"
    message = Message()
    message["Content-Type"] = content_type
    return message.get_content_type()
