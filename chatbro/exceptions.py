from enum import Enum


class ErrorKind(str, Enum):
    MISSING_MESSAGE = "MissingMessage"
    MISSING_MODEL = "MissingModel"
    UNKNOWN_MODEL = "UnknownModel"
    MISSING_CREDENTIAL = "MissingCredential"
    PROVIDER_ERROR = "ProviderError"


class DispatchError(Exception):
    """Base for everything the dispatcher can fail with.

    Carries the HTTP status the API layer should answer with, so handlers
    never have to branch on the error type.
    """

    kind: ErrorKind
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingMessageError(DispatchError):
    kind = ErrorKind.MISSING_MESSAGE

    def __init__(self, message: str = "Message is required"):
        super().__init__(message)


class MissingModelError(DispatchError):
    kind = ErrorKind.MISSING_MODEL

    def __init__(self, message: str = "Model is required"):
        super().__init__(message)


class UnknownModelError(DispatchError):
    kind = ErrorKind.UNKNOWN_MODEL

    def __init__(self, message: str = "Invalid model specified"):
        super().__init__(message)


class MissingCredentialError(DispatchError):
    kind = ErrorKind.MISSING_CREDENTIAL

    def __init__(self, display_name: str):
        super().__init__(f"{display_name} API key not configured")


class ProviderError(DispatchError):
    kind = ErrorKind.PROVIDER_ERROR
    status_code = 500

    def __init__(self, display_name: str, detail: str):
        super().__init__(f"Failed to get response from AI model: {display_name} API error: {detail}")
        self.detail = detail
