from typing import ClassVar


class FamcalException(Exception):
    """
    Base class for errors that are reported to the client. The message is for
    the logs, the client only ever sees `code`.
    """

    code: ClassVar[str] = "internal_error"


class InvalidRequest(FamcalException):
    code = "invalid_request"


class InvalidRange(InvalidRequest):
    code = "invalid_range"


class Unauthorized(FamcalException):
    code = "unauthorized"


class InvalidCredentials(Unauthorized):
    code = "invalid_credentials"


class InvalidSetupToken(Unauthorized):
    code = "invalid_setup_token"


class Forbidden(FamcalException):
    code = "forbidden"


class CsrfMismatch(Forbidden):
    code = "csrf"


class NotFound(FamcalException):
    code = "not_found"


class Conflict(FamcalException):
    code = "conflict"


class UsernameTaken(Conflict):
    code = "username_taken"


class CannotRemoveLastAdmin(Conflict):
    code = "cannot_remove_last_admin"


class CannotDeleteLastAdmin(Conflict):
    code = "cannot_delete_last_admin"
