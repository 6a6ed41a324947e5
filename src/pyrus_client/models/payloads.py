"""Request bodies.

Every optional value defaults to ``None`` and is dropped from the JSON body,
so only what the caller sets is sent. Requests with cross-field rules expose
``check()``; the client calls it before sending.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, BinaryIO

from pydantic import Field

from pyrus_client.constants import (
    ActionType,
    CallEventType,
    CallStatusType,
    ChoiceType,
    DisconnectPartyType,
)
from pyrus_client.errors import RequestValidationError
from pyrus_client.fields import FormField
from pyrus_client.models.entities import CatalogItem, Channel, Person, PyrusModel

MAX_DURATION_MINUTES = 365 * 24 * 60

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def _check_due(due: datetime | None, due_date: str | None, duration: int | None) -> None:
    if due is not None and due_date:
        raise RequestValidationError("use due or due_date, not both")
    if duration and due is None:
        raise RequestValidationError("duration requires due")
    if duration is not None and not 0 <= duration <= MAX_DURATION_MINUTES:
        raise RequestValidationError(f"duration must be between 0 and {MAX_DURATION_MINUTES}")
    if due_date and not _DATE_RE.match(due_date):
        raise RequestValidationError(f"due_date {due_date!r} must be formatted as YYYY-MM-DD")


def _check_people(*groups: list[Person] | None) -> None:
    for group in groups:
        for person in group or []:
            person.check()


def _check_approvals(*steps: list[list[Person]] | None) -> None:
    for step in steps:
        for approvers in step or []:
            _check_people(approvers)


@dataclass(frozen=True, slots=True)
class FileUpload:
    """Marks a request body to be sent as a multipart file upload."""

    filename: str
    reader: BinaryIO


class Attachment(PyrusModel):
    """Attaches a file to a task or comment.

    Use exactly one of ``guid`` (an uploaded file), ``attachment_id`` (an
    existing attachment) or ``url``.
    """

    guid: str | None = None
    root_id: int | None = None
    attachment_id: int | None = None
    url: str | None = None
    name: str | None = None

    def check(self) -> None:
        sources = [s for s in (self.guid, self.attachment_id, self.url) if s]
        if len(sources) > 1:
            raise RequestValidationError(
                "attachment: use guid, attachment_id or url, but not simultaneously"
            )
        if not sources:
            raise RequestValidationError("attachment: use either guid, attachment_id or url")
        if self.root_id and not self.guid:
            raise RequestValidationError("attachment: root_id requires guid")
        if self.guid and not _UUID_RE.match(self.guid):
            raise RequestValidationError(f"attachment: guid {self.guid!r} is not a UUID")
        if self.name and not self.url:
            raise RequestValidationError("attachment: name requires url")


class TaskRequest(PyrusModel):
    """Creates a simple task (``text``) or a form task (``form_id``)."""

    text: str | None = None
    responsible: Person | None = None
    due_date: str | None = None
    due: datetime | None = None
    duration: int | None = None
    subject: str | None = None
    participants: list[Person] | None = None
    subscribers: list[Person] | None = None
    parent_task_id: int | None = None
    list_ids: list[int] | None = None
    attachments: list[Attachment] | None = None
    scheduled_date: str | None = None
    scheduled_datetime_utc: datetime | None = None
    approvals: list[list[Person]] | None = None
    form_id: int | None = None
    fields: list[FormField] | None = None
    fill_defaults: bool | None = None

    def check(self) -> None:
        if self.text and self.form_id:
            raise RequestValidationError("use text or form_id, not both")
        if not self.text and not self.form_id:
            raise RequestValidationError("use either text or form_id")
        _check_due(self.due, self.due_date, self.duration)
        if self.responsible is not None:
            self.responsible.check()
        _check_people(self.participants, self.subscribers)
        _check_approvals(self.approvals)
        for attachment in self.attachments or []:
            attachment.check()
        for form_field in self.fields or []:
            form_field.check()


class TaskCommentRequest(PyrusModel):
    text: str | None = None
    subject: str | None = None
    due_date: str | None = None
    due: datetime | None = None
    duration: int | None = None
    action: ActionType | None = None
    approval_choice: ChoiceType | None = None
    reassign_to: Person | None = None
    approvals_added: list[list[Person]] | None = None
    approvals_removed: list[list[Person]] | None = None
    approvals_rerequested: list[list[Person]] | None = None
    subscribers_added: list[Person] | None = None
    subscribers_removed: list[Person] | None = None
    subscribers_rerequested: list[Person] | None = None
    participants_added: list[Person] | None = None
    participants_removed: list[Person] | None = None
    field_updates: list[FormField] | None = None
    attachments: list[Attachment] | None = None
    added_list_ids: list[int] | None = None
    removed_list_ids: list[int] | None = None
    scheduled_date: str | None = None
    scheduled_datetime_utc: datetime | None = None
    cancel_schedule: bool | None = None
    channel: Channel | None = None
    spent_minutes: int | None = None

    def check(self) -> None:
        _check_due(self.due, self.due_date, self.duration)
        if self.reassign_to is not None:
            self.reassign_to.check()
        _check_approvals(self.approvals_added, self.approvals_removed, self.approvals_rerequested)
        _check_people(
            self.subscribers_added,
            self.subscribers_removed,
            self.subscribers_rerequested,
            self.participants_added,
            self.participants_removed,
        )
        for attachment in self.attachments or []:
            attachment.check()
        for form_field in self.field_updates or []:
            form_field.check()
        if self.scheduled_date and not _DATE_RE.match(self.scheduled_date):
            raise RequestValidationError(
                f"scheduled_date {self.scheduled_date!r} must be formatted as YYYY-MM-DD"
            )


class RegistryRequest(PyrusModel):
    """Filters for the form registry.

    ``field_filters`` maps a field id to a filter expression (for example
    ``"gt2024-01-01"``); each entry is sent as a ``fld<id>`` key next to the
    static filters.
    """

    field_filters: dict[int, str] = Field(default_factory=dict, exclude=True)

    steps: int | None = None
    include_archived: bool = False
    field_ids: list[int] | None = None
    format: str | None = None
    delimiter: str | None = None
    encoding: str | None = None
    simple_format: bool = False
    modified_before: datetime | None = None
    modified_after: datetime | None = None
    created_before: datetime | None = None
    created_after: datetime | None = None
    closed_before: datetime | None = None
    closed_after: datetime | None = None

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, Any] = {
            key: value
            for key, value in super().to_payload().items()
            if value not in (False, 0, "", [])
        }
        # The API expects flags as "y" rather than JSON booleans.
        if self.include_archived:
            payload["include_archived"] = "y"
        if self.simple_format:
            payload["simple_format"] = "y"

        if self.field_filters:
            for field_id, expression in self.field_filters.items():
                payload[f"fld{field_id}"] = expression
        return payload


class MemberRequest(PyrusModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    position: str | None = None
    department_id: int | None = None
    skype: str | None = None
    phone: str | None = None


class RegisterCallRequest(PyrusModel):
    to: str | None = None
    from_: str = Field(default="", alias="from")
    extension: str | None = None
    integration_guid: str = ""
    call_guid: str | None = None
    task_id: int | None = None

    def check(self) -> None:
        if not self.from_:
            raise RequestValidationError("from: cannot be blank")
        if not self.integration_guid:
            raise RequestValidationError("integration_guid: cannot be blank")


class AddCallDetailsRequest(PyrusModel):
    start_time: datetime | None = None
    end_time: datetime | None = None
    rating: int | None = None
    disconnect_party: DisconnectPartyType | None = None
    call_status: CallStatusType | None = None
    file_guid: str = ""


class AuthRequest(PyrusModel):
    login: str
    security_key: str


class CatalogRequest(PyrusModel):
    name: str
    catalog_headers: list[str]
    items: list[CatalogItem]


class SyncCatalogRequest(PyrusModel):
    apply: bool
    catalog_headers: list[str]
    items: list[CatalogItem]


class RoleRequest(PyrusModel):
    name: str
    member_add: list[int]


class RoleUpdateRequest(PyrusModel):
    name: str | None = None
    member_add: list[int] | None = None
    member_remove: list[int] | None = None
    banned: bool = False


class RegisterCallEventRequest(PyrusModel):
    event_type: CallEventType
    extension: str | None = None
