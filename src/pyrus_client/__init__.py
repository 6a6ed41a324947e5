"""Pyrus API client.

Provides:
- a typed client for the Pyrus REST API (tasks, forms, catalogs, files,
  members, roles, lists and telephony)
- a form field codec keyed by the field type tag
- a signed webhook receiver with a bounded event queue
"""

__version__ = "0.1.0"

from pyrus_client.client import PyrusClient
from pyrus_client.constants import (
    ActionType,
    CallEventType,
    CallStatusType,
    CatalogHeaderType,
    ChannelType,
    CheckmarkType,
    ChoiceType,
    DisconnectPartyType,
    FieldType,
    FlagType,
    PersonType,
    StatusType,
)
from pyrus_client.core.config import PyrusSettings
from pyrus_client.core.logging import configure_logging
from pyrus_client.errors import (
    APIError,
    ContractError,
    DecodeError,
    EncodeError,
    ErrorCode,
    FieldDecodeError,
    PyrusError,
    RequestValidationError,
    SignatureError,
)
from pyrus_client.fields import (
    ChoiceOption,
    FormField,
    FormFieldInfo,
    FormLink,
    MultipleChoice,
    Table,
    TableRow,
    Title,
    decode_field_value,
    encode_field_value,
)
from pyrus_client.models.entities import (
    Approval,
    CatalogHeader,
    CatalogItem,
    Channel,
    ChannelUser,
    File,
    Member,
    Organization,
    Person,
    PrintForm,
    Role,
    Subscriber,
    TaskList,
)
from pyrus_client.models.payloads import (
    AddCallDetailsRequest,
    Attachment,
    FileUpload,
    MemberRequest,
    RegisterCallRequest,
    RegistryRequest,
    TaskCommentRequest,
    TaskRequest,
)
from pyrus_client.models.responses import (
    AuthResponse,
    CatalogResponse,
    CatalogsResponse,
    ContactsResponse,
    DownloadResponse,
    Event,
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
from pyrus_client.models.tasks import Task, TaskComment, TaskHeader, TaskWithComments
from pyrus_client.transport import TokenStore, Transport
from pyrus_client.webhook import WebhookReceiver, compute_signature, verify_signature

__all__ = [
    "__version__",
    "APIError",
    "ActionType",
    "AddCallDetailsRequest",
    "Approval",
    "Attachment",
    "AuthResponse",
    "CallEventType",
    "CallStatusType",
    "CatalogHeader",
    "CatalogHeaderType",
    "CatalogItem",
    "CatalogResponse",
    "CatalogsResponse",
    "Channel",
    "ChannelType",
    "ChannelUser",
    "CheckmarkType",
    "ChoiceOption",
    "ChoiceType",
    "ContactsResponse",
    "ContractError",
    "DecodeError",
    "DisconnectPartyType",
    "DownloadResponse",
    "EncodeError",
    "ErrorCode",
    "Event",
    "FieldDecodeError",
    "FieldType",
    "File",
    "FileUpload",
    "FlagType",
    "FormField",
    "FormFieldInfo",
    "FormLink",
    "FormRegisterResponse",
    "FormResponse",
    "FormsResponse",
    "ListsResponse",
    "Member",
    "MemberRequest",
    "MembersResponse",
    "MultipleChoice",
    "Organization",
    "Person",
    "PersonType",
    "PrintForm",
    "ProfileResponse",
    "PyrusClient",
    "PyrusError",
    "PyrusSettings",
    "RegisterCallRequest",
    "RegisterCallResponse",
    "RegistryRequest",
    "RequestValidationError",
    "Role",
    "RolesResponse",
    "SignatureError",
    "StatusType",
    "Subscriber",
    "SyncCatalogResponse",
    "Table",
    "TableRow",
    "Task",
    "TaskComment",
    "TaskCommentRequest",
    "TaskHeader",
    "TaskList",
    "TaskListResponse",
    "TaskRequest",
    "TaskResponse",
    "TaskWithComments",
    "Title",
    "TokenStore",
    "Transport",
    "UploadResponse",
    "WebhookReceiver",
    "compute_signature",
    "configure_logging",
    "decode_field_value",
    "encode_field_value",
    "verify_signature",
]
