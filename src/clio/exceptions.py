"""Exception hierarchy for clio."""


class ClioError(Exception):
    """Base exception for all clio errors."""

    exit_code: int = 1
    user_message: str = "An error occurred"

    def __init__(
        self,
        message: str | None = None,
        *,
        user_message: str | None = None,
    ) -> None:
        super().__init__(message or self.user_message)
        if user_message:
            self.user_message = user_message


# Template Errors
class TemplateError(ClioError):
    """Template-related errors."""

    user_message = "Template error"


class InvalidTemplateError(TemplateError):
    """Template cannot be parsed."""

    user_message = "Invalid command template"


# Command Errors
class CommandError(ClioError):
    """Command model errors."""

    user_message = "Command error"


class ParameterNotInTemplateError(CommandError):
    """A seed parameter has no placeholder in the template."""

    user_message = "Parameter not found in the command template"

    def __init__(self, name: str) -> None:
        super().__init__(f"param '{name}' not found in the command")
        self.name = name


class ArityMismatchError(CommandError):
    """Wrong number of arguments for the command parameters."""

    user_message = "Invalid number of arguments provided"


class UnknownArgumentError(CommandError):
    """An argument does not match any parameter."""

    user_message = "Unknown argument"

    def __init__(self, name: str) -> None:
        super().__init__(f"argument '{name}' does not match any parameter")
        self.name = name


class FieldTooLongError(CommandError):
    """A command field exceeds its length limit."""

    user_message = "Command field too long"

    def __init__(self, field: str, limit: int, length: int) -> None:
        super().__init__(f"{field} has {length} characters, limit is {limit}")
        self.field = field
        self.limit = limit


class InvalidIDError(ClioError):
    """Identifier is not a valid UUID."""

    user_message = "Invalid command id"


# Store Errors
class StoreError(ClioError):
    """Store-related errors."""

    user_message = "Store error"


class NotFoundError(StoreError):
    """Element not found in the store."""

    user_message = "Not found"


class ElementNotFoundError(NotFoundError):
    """Element not found, as reported by the manager."""

    user_message = "Element not found"


class StoreUnavailableError(StoreError):
    """Store cannot be opened or initialized."""

    user_message = "Cannot open the command store"


class StoreIntegrityError(StoreError):
    """Integrity constraint violated."""

    user_message = "Store integrity error"


class OperationTimeoutError(ClioError):
    """Operation exceeded its deadline."""

    user_message = "Operation timed out. Try again."


# Professor Errors
class ProfessorError(ClioError):
    """Explanation source errors."""

    user_message = "Explanation source error"


class SourceNotConfiguredError(ProfessorError):
    """No explanation source configured."""

    user_message = "Explanations are not configured"


class NoResponseError(ProfessorError):
    """Provider returned no completion."""

    user_message = "No response from the explanation source"


class ProviderAuthError(ProfessorError):
    """Authentication failed."""

    user_message = "Authentication failed. Check your API key."


class ProviderRateLimitError(ProfessorError):
    """Rate limit exceeded."""

    user_message = "Rate limit exceeded. Try again later."


class ProviderTimeoutError(ProfessorError):
    """Request timed out."""

    user_message = "Request timed out. Try again."


# Injection Errors
class InjectionError(ClioError):
    """Terminal injection errors."""

    user_message = "Cannot write to the terminal"


class InjectionFailedError(InjectionError):
    """A byte could not be injected."""

    user_message = "Error injecting text into the terminal"


class UnsupportedPlatformError(InjectionError):
    """Terminal injection is not available on this platform."""

    user_message = "Terminal injection is not supported on this platform"


# Config Errors
class ConfigError(ClioError):
    """Configuration errors."""

    exit_code = 2
    user_message = "Configuration error"


class ConfigValidationError(ConfigError):
    """Configuration validation failed."""

    exit_code = 2
    user_message = "Invalid configuration"
