from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    DUPLICATE_CREDENTIAL = "duplicate_credential"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    NOT_FOUND = "not_found"
    STORE_UNAVAILABLE = "store_unavailable"
    CONFIGURATION = "configuration_error"


class AuthError(Exception):
    """Базовая ошибка сервиса. kind и status_code отдаются наружу как есть."""
    kind: ErrorKind = ErrorKind.STORE_UNAVAILABLE
    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    default_message = "Invalid input"


class DuplicateCredential(AuthError):
    kind = ErrorKind.DUPLICATE_CREDENTIAL
    status_code = 400
    default_message = "User already exists"


class InvalidCredentials(AuthError):
    kind = ErrorKind.INVALID_CREDENTIALS
    status_code = 401
    default_message = "Invalid credentials"


class InvalidToken(AuthError):
    kind = ErrorKind.INVALID_TOKEN
    status_code = 401
    default_message = "Not authorized"


class NotFound(AuthError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "User not found"


class StoreUnavailable(AuthError):
    kind = ErrorKind.STORE_UNAVAILABLE
    status_code = 500
    default_message = "Server error"


class ConfigurationError(AuthError):
    # не маппится в ответ: приложение с такой ошибкой не должно стартовать
    kind = ErrorKind.CONFIGURATION
    status_code = 500
    default_message = "Invalid configuration"
