"""Enumerations shared by the Pyrus API payloads."""

from __future__ import annotations

from enum import Enum


class FieldType(str, Enum):
    """Type tag of a form field. Selects the shape of the field value."""

    TEXT = "text"
    MONEY = "money"
    NUMBER = "number"
    DATE = "date"
    TIME = "time"
    CHECKMARK = "checkmark"
    DUE_DATE = "due_date"
    DUE_DATE_TIME = "due_date_time"
    EMAIL = "email"
    PHONE = "phone"
    FLAG = "flag"
    STEP = "step"
    STATUS = "status"
    CREATION_DATE = "creation_date"
    NOTE = "note"

    CATALOG = "catalog"
    FILE = "file"
    PERSON = "person"
    AUTHOR = "author"
    TABLE = "table"
    MULTIPLE_CHOICE = "multiple_choice"
    TITLE = "title"
    FORM_LINK = "form_link"
    PROJECT = "project"


class PersonType(str, Enum):
    USER = "user"
    BOT = "bot"
    ROLE = "role"


class ChannelType(str, Enum):
    EMAIL = "email"
    TELEGRAM = "telegram"
    FACEBOOK = "facebook"
    VK = "vk"
    VIBER = "viber"
    MOBILE_APP = "mobile_app"
    WEB_WIDGET = "web_widget"
    MOY_SKLAD = "moy_sklad"
    ZADARMA = "zadarma"
    AMO_CRM = "amo_crm"


class ChoiceType(str, Enum):
    """Approval choice of a task participant."""

    APPROVED = "approved"
    ACKNOWLEDGED = "acknowledged"
    REJECTED = "rejected"
    REVOKED = "revoked"
    WAITING = "waiting"


class ActionType(str, Enum):
    FINISHED = "finished"
    REOPENED = "reopened"


class CheckmarkType(str, Enum):
    CHECKED = "checked"
    UNCHECKED = "unchecked"


class FlagType(str, Enum):
    """Like a checkmark, but a flag may also be in the ``none`` state."""

    NONE = "none"
    CHECKED = "checked"
    UNCHECKED = "unchecked"


class StatusType(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class CatalogHeaderType(str, Enum):
    TEXT = "text"
    WORKFLOW = "workflow"


# Calls API only.


class DisconnectPartyType(str, Enum):
    AGENT = "agent"
    CLIENT = "client"
    ERROR = "error"
    OTHER = "other"


class CallStatusType(str, Enum):
    ANSWERED = "answered"
    NO_ANSWER = "no answer"
    BUSY = "busy"
    ERROR = "error"
    OTHER = "other"


class CallEventType(str, Enum):
    SHOW = "show"
