"""Exceptions raised by the Pyrus client.

Error codes are documented at https://pyrus.com/en/help/api/errors-and-limits.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(str, Enum):
    """Stable machine-readable error codes returned in the ``error_code`` key."""

    SERVER_ERROR = "server_error"
    INVALID_CREDENTIALS = "invalid_credentials"
    TOKEN_NOT_SPECIFIED = "token_not_specified"
    REVOKED_TOKEN = "revoked_token"
    EXPIRED_TOKEN = "expired_token"
    INVALID_TOKEN = "invalid_token"
    AUTHORIZATION_ERROR = "authorization_error"
    ACCOUNT_BLOCKED = "account_blocked"
    INVALID_FIELD_ID = "invalid_field_id"
    DELETED_FIELD = "deleted_field"
    INVALID_FIELD_NAME = "invalid_field_name"
    INVALID_FIELD_ID_NAME = "invalid_field_id_name"
    NON_UNIQUE_NAME = "non_unique_name"
    FIELD_IDENTITY_MISSING = "field_identity_missing"
    DUPLICATE_FIELD = "duplicate_field"
    INVALID_CATALOG_ID = "invalid_catalog_id"
    INVALID_CATALOG_ITEM_NAME = "invalid_catalog_item_name"
    NON_UNIQUE_CATALOG_ITEM_NAME = "non_unique_catalog_item_name"
    INVALID_CATALOG_ITEM_ID = "invalid_catalog_item_id"
    CATALOG_ITEM_ID_NAME_MISMATCH = "catalog_item_id_name_mismatch"
    INVALID_EMAIL = "invalid_email"
    NON_UNIQUE_EMAIL = "non_unique_email"
    INVALID_PERSON_ID = "invalid_person_id"
    INVALID_PERSON_ID_EMAIL = "invalid_person_id_email"
    FORM_HAS_NO_TASK = "form_has_no_task"
    UNRECOGNIZED_ATTACHMENT_ID = "unrecognized_attachment_id"
    REQUIRED_FIELD_MISSING = "required_field_missing"
    TYPE_IS_NOT_SUPPORTED = "type_is_not_supported"
    CATALOG_IDENTITY_MISSING = "catalog_identity_missing"
    INCORRECT_PARAMETERS_COUNT = "incorrect_parameters_count"
    FILTER_TYPE_IS_NOT_SUPPORTED = "filter_type_is_not_supported"
    STEP_FIELD_DOES_NOT_EXISTS = "step_field_does_not_exists"
    CATALOG_ITEM_ID_MISSING = "catalog_item_id_missing"
    PERSON_IDENTITY_MISSING = "person_identity_missing"
    EITHER_DUE_DATE_OR_DUE_CAN_BE_SET = "either_due_date_or_due_can_be_set"
    NEGATIVE_DURATION = "negative_duration"
    DURATION_IS_TOO_LONG = "duration_is_too_long"
    DUE_MISSING = "due_missing"
    SCHEDULED_DATE_IN_PAST = "scheduled_date_in_past"
    CANNOT_ADD_FORM_PROJECT = "cannot_add_form_project"
    FORM_TEMPLATE_CANT_BE_REMOVED_FROM_TASK = "form_template_cant_be_removed_from_task"
    NO_FILE_IN_REQUEST = "no_file_in_request"
    TOO_LARGE_REQUEST_LENGTH = "too_large_request_length"
    REQUIRED_PARAMETER_MISSING = "required_parameter_missing"
    TOO_MANY_TASK_STEPS = "too_many_task_steps"
    INVALID_VALUE_FORMAT = "invalid_value_format"
    TOO_MANY_COMMENTS = "too_many_comments"
    INVALID_STEP_NUMBER = "invalid_step_number"
    TASK_LIMIT_EXCEEDED = "task_limit_exceeded"
    FIELD_IS_IN_TABLE = "field_is_in_table"
    REQUIRED_TABLE_FIELD_MISSING = "required_table_field_missing"
    DEPARTMENT_CATALOG_CAN_NOT_BE_MODIFIED = "department_catalog_can_not_be_modified"
    CATALOG_DUPLICATE_ROWS = "catalog_duplicate_rows"
    EMPTY_CATALOG_HEADERS = "empty_catalog_headers"
    CAN_NOT_MODIFY_DELETED_CATALOG = "can_not_modify_deleted_catalog"
    CAN_NOT_MODIFY_FIRST_COLUMN = "can_not_modify_first_column"
    CATALOG_HEADERS_ITEMS_MISMATCH = "catalog_headers_items_mismatch"
    TOO_MANY_CATALOG_ITEMS = "too_many_catalog_items"
    CATALOG_ITEM_MAX_LENGTH_EXCEEDED = "catalog_item_max_length_exceeded"
    CATALOG_DUPLICATE_HEADERS = "catalog_duplicate_headers"
    FORM_ID_MISSING = "form_id_missing"
    TEXT_MISSING = "text_missing"
    INVALID_JSON = "invalid_json"
    EMPTY_BODY = "empty_body"
    ACCESS_DENIED_PROJECT = "access_denied_project"
    ACCESS_DENIED_TASK = "access_denied_task"
    ACCESS_DENIED_CLOSE_TASK = "access_denied_close_task"
    ACCESS_DENIED_REOPEN_TASK = "access_denied_reopen_task"
    ACCESS_DENIED_CATALOG = "access_denied_catalog"
    ACCESS_DENIED_FORM = "access_denied_form"
    ACCESS_DENIED_PERSON = "access_denied_person"
    TOO_MANY_REQUESTS = "too_many_requests"
    EMPTY_FILE = "empty_file"
    BAD_MULTIPART_CONTENT = "bad_multipart_content"
    INVALID_TABLE_ROW = "invalid_table_row"
    CANNOT_ADD_EXTERNAL_USER = "cannot_add_external_user"
    UNRECOGNIZED_INTEGRATION_GUID = "unrecognized_integration_guid"
    UNRECOGNIZED_CALL_GUID = "unrecognized_call_guid"
    UNSUPPORTED_ATTACHMENT_FORMAT = "unsupported_attachment_format"


class ErrorEnvelope(BaseModel):
    """Error body shared by every endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    error_code: str = ""
    error: str = ""
    # Only populated for 404 responses.
    message: str = Field(default="", alias="Message")


class PyrusError(Exception):
    """Base error class for the client."""


class APIError(PyrusError):
    """Structured error returned by the server."""

    def __init__(
        self,
        code: ErrorCode | str,
        description: str,
        *,
        message: str = "",
        status: int = 0,
    ) -> None:
        self.code = code
        self.description = description
        self.message = message
        self.status = status
        super().__init__(str(self))

    def __str__(self) -> str:
        code = self.code.value if isinstance(self.code, ErrorCode) else self.code
        return f"API error: {self.description} ({code})"

    @classmethod
    def from_envelope(cls, envelope: ErrorEnvelope, *, status: int = 0) -> APIError:
        code: ErrorCode | str
        try:
            code = ErrorCode(envelope.error_code)
        except ValueError:
            code = envelope.error_code
        return cls(code, envelope.error, message=envelope.message, status=status)


class EncodeError(PyrusError):
    """Raised when a request body cannot be rendered as JSON."""


class DecodeError(PyrusError):
    """Raised when a payload cannot be decoded into the expected shape."""


class FieldDecodeError(DecodeError):
    """Raised when a form field value does not match its declared type tag."""

    def __init__(self, field_id: int | None, field_type: str, reason: str) -> None:
        self.field_id = field_id
        self.field_type = field_type
        self.reason = reason
        super().__init__(
            f"cannot decode value of field {field_id} with type {field_type!r}: {reason}"
        )


class ContractError(PyrusError):
    """The response shape did not match what the caller asked for.

    Examples: a file response without an attachment disposition, or a file
    response to a call that did not provide a writer.
    """


class SignatureError(PyrusError):
    """Webhook signature did not match the request body."""


class RequestValidationError(PyrusError, ValueError):
    """A request failed local validation and was not sent."""
