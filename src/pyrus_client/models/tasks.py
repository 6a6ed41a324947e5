"""Tasks and task comments."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from pyrus_client.constants import ActionType, ChoiceType
from pyrus_client.fields import FormField
from pyrus_client.models.entities import (
    Approval,
    Channel,
    File,
    Person,
    PyrusModel,
    Role,
    Subscriber,
)


class TaskHeader(PyrusModel):
    """Basic information about a task, as returned by task lists."""

    id: int
    create_date: datetime | None = None
    last_modified_date: datetime | None = None
    close_date: datetime | None = None
    author: Person | None = None

    text: str = ""
    responsible: Person | None = None


class Task(TaskHeader):
    """A task without its comments."""

    attachments: list[File] = Field(default_factory=list)
    list_ids: list[int] = Field(default_factory=list)
    parent_task_id: int | None = None
    linked_task_ids: list[int] = Field(default_factory=list)
    last_note_id: int | None = None
    subject: str = ""
    scheduled_date: str | None = None
    scheduled_datetime_utc: datetime | None = None
    subscribers: list[Subscriber] = Field(default_factory=list)

    due_date: str | None = None
    due: datetime | None = None
    duration: int | None = None
    participants: list[Person] = Field(default_factory=list)

    form_id: int | None = None
    fields: list[FormField] = Field(default_factory=list)
    approvals: list[list[Approval]] = Field(default_factory=list)
    current_step: int | None = None

    def find_field(self, field_id: int) -> FormField | None:
        """Return the top-level form field with the given id, if present."""

        for form_field in self.fields:
            if form_field.id == field_id:
                return form_field
        return None


class TaskComment(PyrusModel):
    """A task comment.

    Besides text, a comment records every task update: field updates,
    approvals, reassignments, schedule changes and so on.
    """

    id: int
    text: str = ""
    create_date: datetime | None = None
    author: Person | None = None
    attachments: list[File] = Field(default_factory=list)
    action: ActionType | None = None
    added_list_ids: list[int] = Field(default_factory=list)
    removed_list_ids: list[int] = Field(default_factory=list)
    comment_as_roles: list[Role] = Field(default_factory=list)
    subject: str | None = None
    scheduled_date: str | None = None
    scheduled_datetime_utc: datetime | None = None
    cancel_schedule: bool = False
    spent_minutes: int | None = None
    subscribers_added: list[Person] = Field(default_factory=list)
    subscribers_removed: list[Person] = Field(default_factory=list)
    subscribers_rerequested: list[Person] = Field(default_factory=list)

    reassigned_to: Person | None = None
    participants_added: list[Person] = Field(default_factory=list)
    participants_removed: list[Person] = Field(default_factory=list)
    due_date: str | None = None
    due: datetime | None = None
    duration: int | None = None

    field_updates: list[FormField] = Field(default_factory=list)
    approval_choice: ChoiceType | None = None
    approval_step: int | None = None
    reset_to_step: int | None = None
    changed_step: int | None = None
    approvals_added: list[list[Approval]] = Field(default_factory=list)
    approvals_removed: list[list[Approval]] = Field(default_factory=list)
    approvals_rerequested: list[list[Approval]] = Field(default_factory=list)
    channel: Channel | None = None


class TaskWithComments(Task):
    comments: list[TaskComment] = Field(default_factory=list)
