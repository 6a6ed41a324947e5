"""Response bodies, one per endpoint, plus the webhook event."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from pyrus_client.fields import FormField
from pyrus_client.models.entities import (
    CatalogHeader,
    CatalogItem,
    Member,
    Organization,
    PrintForm,
    PyrusModel,
    Role,
    TaskList,
)
from pyrus_client.models.tasks import Task, TaskHeader, TaskWithComments


class AuthResponse(PyrusModel):
    access_token: str


class FormResponse(PyrusModel):
    id: int
    name: str = ""
    steps: dict[int, str] = Field(default_factory=dict)
    fields: list[FormField] = Field(default_factory=list)
    deleted_or_closed: bool = False
    print_forms: list[PrintForm] = Field(default_factory=list)
    folder: list[str] = Field(default_factory=list)


class FormsResponse(PyrusModel):
    forms: list[FormResponse] = Field(default_factory=list)


class FormRegisterResponse(PyrusModel):
    """Tasks created from a form; ``csv`` is filled when CSV format was requested."""

    tasks: list[Task] = Field(default_factory=list)
    csv: str | None = None


class TaskResponse(PyrusModel):
    task: TaskWithComments


class ContactsResponse(PyrusModel):
    organizations: list[Organization] = Field(default_factory=list)


class CatalogResponse(PyrusModel):
    catalog_id: int
    name: str = ""
    version: int = 0
    supervisors: list[int] = Field(default_factory=list)
    deleted: bool = False
    external_version: int = 0
    catalog_headers: list[CatalogHeader] = Field(default_factory=list)
    items: list[CatalogItem] = Field(default_factory=list)


class CatalogsResponse(PyrusModel):
    catalogs: list[CatalogResponse] = Field(default_factory=list)


class SyncCatalogResponse(PyrusModel):
    apply: bool = False
    added: list[CatalogItem] = Field(default_factory=list)
    deleted: list[CatalogItem] = Field(default_factory=list)
    updated: list[CatalogItem] = Field(default_factory=list)
    catalog_headers: list[CatalogHeader] = Field(default_factory=list)


class UploadResponse(PyrusModel):
    guid: str
    md5_hash: str = ""


class DownloadResponse(PyrusModel):
    filename: str
    raw_file: bytes = b""


class ListsResponse(PyrusModel):
    lists: list[TaskList] = Field(default_factory=list)


class TaskListResponse(PyrusModel):
    tasks: list[TaskHeader] = Field(default_factory=list)
    has_more: bool = False


class MembersResponse(PyrusModel):
    members: list[Member] = Field(default_factory=list)


class RolesResponse(PyrusModel):
    roles: list[Role] = Field(default_factory=list)


class ProfileResponse(PyrusModel):
    person_id: int
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    locale: str = ""
    organization_id: int | None = None


class RegisterCallResponse(PyrusModel):
    call_guid: str
    task_id: int | str | None = None


class Event(PyrusModel):
    """An event delivered by a webhook call."""

    model_config = ConfigDict(frozen=True)

    event: str = ""
    access_token: str = ""
    task_id: int = 0
    user_id: int = 0
    task: TaskWithComments | None = None
