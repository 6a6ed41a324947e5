"""Flat Pyrus entities: people, files, catalogs, roles and the like.

None of these contain form fields, so they can be imported by the field codec
without creating a cycle.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pyrus_client.constants import CatalogHeaderType, ChannelType, ChoiceType, PersonType
from pyrus_client.errors import RequestValidationError


class PyrusModel(BaseModel):
    """Base for every payload model.

    Unset optional values are ``None`` and are left out of request bodies.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict[str, object]:
        """Serialize to a JSON-ready dict, omitting unset values."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Person(PyrusModel):
    """A Pyrus user, bot or role."""

    id: int | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    type: PersonType | None = None
    department_id: int | None = None
    department_name: str | None = None

    def check(self) -> None:
        """Validate the person as a request reference (by id or by email)."""

        if self.id and self.email:
            raise RequestValidationError("person: use id or email, not both")
        if not self.id and not self.email:
            raise RequestValidationError("person: use either id or email")
        if self.email and "@" not in self.email:
            raise RequestValidationError(f"person: invalid email {self.email!r}")


class File(PyrusModel):
    """An attachment of a task, a comment or a filled form field."""

    id: int
    name: str = ""
    size: int = 0
    md5: str = ""
    url: str = ""
    version: int = 0
    root_id: int = 0


class Approval(PyrusModel):
    person: Person | None = None
    step: int = 0
    approval_choice: ChoiceType | None = None


class Subscriber(PyrusModel):
    """A person watching a task without taking part in its approval."""

    person: Person | None = None
    approval_choice: ChoiceType | None = None


class Role(PyrusModel):
    id: int
    name: str = ""
    member_ids: list[int] = Field(default_factory=list)
    external_id: int = 0
    banned: bool = False


class Organization(PyrusModel):
    id: int
    name: str = ""
    persons: list[Person] = Field(default_factory=list)
    roles: list[Role] = Field(default_factory=list)


class CatalogItem(PyrusModel):
    """A catalog row. Also the value of a ``catalog`` form field."""

    item_id: int | None = None
    item_ids: list[int] | None = None
    headers: list[str] | None = None
    values: list[str] | None = None
    rows: list[list[str]] | None = None


class CatalogHeader(PyrusModel):
    """A catalog column, e.g. "Name" or "Email"."""

    name: str
    type: CatalogHeaderType = CatalogHeaderType.TEXT


class ChannelUser(PyrusModel):
    # Email is only used by the email channel, name by every other one.
    name: str | None = None
    email: str | None = None


class Channel(PyrusModel):
    """External channel a comment was received from or should be sent to."""

    type: ChannelType
    to: ChannelUser | None = None
    from_: ChannelUser | None = Field(default=None, alias="from")


class TaskList(PyrusModel):
    id: int
    name: str = ""
    children: list[TaskList] = Field(default_factory=list)


class Member(PyrusModel):
    """A member of the organization."""

    id: int
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    type: PersonType | None = None
    banned: bool = False
    position: str = ""
    skype: str = ""
    phone: str = ""


class PrintForm(PyrusModel):
    id: int = Field(alias="print_form_id")
    name: str = Field(default="", alias="print_form_name")
