"""Pyrus API client.

One method per endpoint. Every method goes through :class:`Transport`, which
authenticates on first use and re-authenticates once when a token expires.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from typing import BinaryIO

import requests

from pyrus_client.constants import CallEventType
from pyrus_client.core.config import PyrusSettings
from pyrus_client.models.entities import CatalogItem, Member, Role
from pyrus_client.models.payloads import (
    AddCallDetailsRequest,
    CatalogRequest,
    FileUpload,
    MemberRequest,
    RegisterCallEventRequest,
    RegisterCallRequest,
    RegistryRequest,
    RoleRequest,
    RoleUpdateRequest,
    SyncCatalogRequest,
    TaskCommentRequest,
    TaskRequest,
)
from pyrus_client.models.responses import (
    CatalogResponse,
    CatalogsResponse,
    ContactsResponse,
    DownloadResponse,
    FormRegisterResponse,
    FormResponse,
    FormsResponse,
    ListsResponse,
    MembersResponse,
    ProfileResponse,
    RegisterCallResponse,
    RolesResponse,
    SyncCatalogResponse,
    TaskListResponse,
    TaskResponse,
    UploadResponse,
)
from pyrus_client.transport import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, TokenStore, Transport
from pyrus_client.webhook import DEFAULT_EVENT_BUFFER_SIZE, WebhookReceiver


class PyrusClient:
    """Client for one bot or user account.

    Safe to share between threads: calls only share the token store, which
    is read concurrently and replaced under an exclusive lock.
    """

    def __init__(
        self,
        login: str,
        security_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: requests.Session | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        event_buffer_size: int = DEFAULT_EVENT_BUFFER_SIZE,
        token_store: TokenStore | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if event_buffer_size < 1:
            raise ValueError("event_buffer_size must be a positive integer")
        self._security_key = security_key
        self._event_buffer_size = event_buffer_size
        self._logger = logger or logging.getLogger(__name__)
        self._transport = Transport(
            login=login,
            security_key=security_key,
            base_url=base_url,
            session=session,
            timeout=timeout,
            token_store=token_store,
            logger=self._logger,
        )

    @classmethod
    def from_settings(
        cls,
        settings: PyrusSettings,
        *,
        session: requests.Session | None = None,
        logger: logging.Logger | None = None,
    ) -> PyrusClient:
        return cls(
            settings.login,
            settings.security_key,
            base_url=settings.base_url,
            session=session,
            timeout=settings.timeout_seconds,
            event_buffer_size=settings.event_buffer_size,
            logger=logger,
        )

    @property
    def tokens(self) -> TokenStore:
        return self._transport.tokens

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> PyrusClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # Authentication

    def auth(self, login: str, security_key: str) -> str:
        """Return an access token for the given credentials.

        The token is not stored; the client keeps using its own credentials.
        """

        return self._transport.authenticate(login, security_key)

    # Forms

    def forms(self) -> FormsResponse:
        """Forms where the current user is a manager or a member."""

        return self._transport.request("GET", "/forms", response_model=FormsResponse)

    def form(self, form_id: int) -> FormResponse:
        return self._transport.request("GET", f"/forms/{form_id}", response_model=FormResponse)

    def registry(self, form_id: int, request: RegistryRequest | None = None) -> FormRegisterResponse:
        """Tasks created from a form, filtered by ``request``."""

        return self._transport.request(
            "POST",
            f"/forms/{form_id}/register",
            body=request or RegistryRequest(),
            response_model=FormRegisterResponse,
        )

    # Tasks

    def task(self, task_id: int) -> TaskResponse:
        """A task with all of its comments."""

        return self._transport.request("GET", f"/tasks/{task_id}", response_model=TaskResponse)

    def create_task(self, request: TaskRequest) -> TaskResponse:
        request.check()
        return self._transport.request(
            "POST", "/tasks", body=request, response_model=TaskResponse
        )

    def comment_task(self, task_id: int, request: TaskCommentRequest) -> TaskResponse:
        request.check()
        return self._transport.request(
            "POST", f"/tasks/{task_id}/comments", body=request, response_model=TaskResponse
        )

    # Files

    def upload_file(self, filename: str, reader: BinaryIO) -> UploadResponse:
        """Upload a file; attach it to a task or comment by the returned guid."""

        return self._transport.request(
            "POST",
            "/files/upload",
            body=FileUpload(filename=filename, reader=reader),
            response_model=UploadResponse,
        )

    def download_file(self, file_id: int) -> DownloadResponse:
        buffer = io.BytesIO()
        filename = self._transport.request("GET", f"/files/download/{file_id}", writer=buffer)
        return DownloadResponse(filename=filename, raw_file=buffer.getvalue())

    # Catalogs

    def catalogs(self) -> CatalogsResponse:
        return self._transport.request("GET", "/catalogs", response_model=CatalogsResponse)

    def catalog(self, catalog_id: int) -> CatalogResponse:
        return self._transport.request(
            "GET", f"/catalogs/{catalog_id}", response_model=CatalogResponse
        )

    def create_catalog(
        self, name: str, headers: Sequence[str], items: Sequence[CatalogItem]
    ) -> CatalogResponse:
        body = CatalogRequest(name=name, catalog_headers=list(headers), items=list(items))
        return self._transport.request(
            "PUT", "/catalogs", body=body, response_model=CatalogResponse
        )

    def sync_catalog(
        self,
        catalog_id: int,
        headers: Sequence[str],
        items: Sequence[CatalogItem],
        *,
        apply: bool = False,
    ) -> SyncCatalogResponse:
        """Replace the catalog content.

        With ``apply=False`` the server only reports what would change.
        """

        body = SyncCatalogRequest(apply=apply, catalog_headers=list(headers), items=list(items))
        return self._transport.request(
            "POST", f"/catalogs/{catalog_id}", body=body, response_model=SyncCatalogResponse
        )

    # Organization

    def contacts(self) -> ContactsResponse:
        return self._transport.request("GET", "/contacts", response_model=ContactsResponse)

    def members(self) -> MembersResponse:
        return self._transport.request("GET", "/members", response_model=MembersResponse)

    def create_member(self, request: MemberRequest) -> Member:
        return self._transport.request("POST", "/members", body=request, response_model=Member)

    def update_member(self, member_id: int, request: MemberRequest) -> Member:
        return self._transport.request(
            "PUT", f"/members/{member_id}", body=request, response_model=Member
        )

    def block_member(self, member_id: int) -> Member:
        return self._transport.request("DELETE", f"/members/{member_id}", response_model=Member)

    def roles(self) -> RolesResponse:
        return self._transport.request("GET", "/roles", response_model=RolesResponse)

    def create_role(self, name: str, member_ids: Sequence[int]) -> Role:
        body = RoleRequest(name=name, member_add=list(member_ids))
        return self._transport.request("POST", "/roles", body=body, response_model=Role)

    def update_role(
        self,
        role_id: int,
        *,
        name: str | None = None,
        add: Sequence[int] | None = None,
        remove: Sequence[int] | None = None,
        banned: bool = False,
    ) -> Role:
        body = RoleUpdateRequest(
            name=name,
            member_add=list(add) if add else None,
            member_remove=list(remove) if remove else None,
            banned=banned,
        )
        return self._transport.request("PUT", f"/roles/{role_id}", body=body, response_model=Role)

    def profile(self) -> ProfileResponse:
        return self._transport.request("GET", "/profile", response_model=ProfileResponse)

    # Lists

    def lists(self) -> ListsResponse:
        return self._transport.request("GET", "/lists", response_model=ListsResponse)

    def task_list(
        self, list_id: int, item_count: int = 0, *, include_archived: bool = False
    ) -> TaskListResponse:
        params: dict[str, str] = {}
        if item_count:
            params["item_count"] = str(item_count)
        if include_archived:
            params["include_archived"] = "y"
        return self._transport.request(
            "GET", f"/lists/{list_id}/tasks", params=params, response_model=TaskListResponse
        )

    def inbox(self, item_count: int = 0) -> TaskListResponse:
        params: dict[str, str] = {}
        if item_count:
            params["item_count"] = str(item_count)
        return self._transport.request(
            "GET", "/inbox", params=params, response_model=TaskListResponse
        )

    # Calls

    def register_call(self, request: RegisterCallRequest) -> RegisterCallResponse:
        """Register an incoming call; returns the call guid and the created task."""

        request.check()
        return self._transport.request(
            "POST", "/calls", body=request, response_model=RegisterCallResponse
        )

    def add_call_details(self, call_guid: str, request: AddCallDetailsRequest) -> None:
        self._transport.request("PUT", f"/calls/{call_guid}", body=request)

    def register_call_event(
        self, call_guid: str, event_type: CallEventType, extension: str | None = None
    ) -> None:
        body = RegisterCallEventRequest(event_type=event_type, extension=extension or None)
        self._transport.request("POST", f"/calls/{call_guid}/event", body=body)

    # Webhooks

    def webhook_receiver(self) -> WebhookReceiver:
        """A receiver that verifies calls with this client's security key.

        Serve it with :func:`pyrus_client.server.create_app` or call
        :meth:`WebhookReceiver.handle` from another framework.
        """

        return WebhookReceiver(
            self._security_key, buffer_size=self._event_buffer_size, logger=self._logger
        )
