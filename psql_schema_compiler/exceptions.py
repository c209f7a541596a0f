"""
Custom exception hierarchy for the PSQL schema compiler.

Every error carries a human-readable message plus context about where it
happened, suggestions for fixing it and a stable error code for
programmatic handling.
"""

from typing import Dict, Any, Optional, List


class SchemaCompilerError(Exception):
    """
    Base exception for all schema compiler errors.

    Provides rich context and error recovery guidance.
    """

    default_error_code = "SCHEMA_COMPILER_ERROR"
    default_suggestions: List[str] = []

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        error_code: Optional[str] = None
    ):
        """
        Initialize the exception with context and recovery suggestions.

        Args:
            message: Human-readable error message
            context: Additional context about where/why the error occurred
            suggestions: List of potential solutions or next steps
            error_code: Unique error code for programmatic handling
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or list(self.default_suggestions)
        self.error_code = error_code or self.default_error_code

    def __str__(self) -> str:
        """Return formatted error message with context."""
        lines = [super().__str__()]

        if self.error_code:
            lines.append(f"Error Code: {self.error_code}")

        if self.context:
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestions:
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  • {suggestion}")

        return "\n".join(lines)


def _with_context(kwargs: Dict[str, Any], **values: Any) -> Dict[str, Any]:
    context = dict(kwargs.pop('context', None) or {})
    for key, value in values.items():
        if value is not None:
            context[key] = value
    return context


class ConfigInvalidError(SchemaCompilerError):
    """Raised when the compiler configuration is invalid."""

    default_error_code = "CONFIG_INVALID"
    default_suggestions = [
        "Set a non-empty schema name",
        "Check the configuration file syntax",
    ]

    def __init__(self, message: str, config_file: str = None, **kwargs):
        context = _with_context(kwargs, config_file=config_file)
        super().__init__(message, context=context, **kwargs)


class MissingPrimaryIdentifierError(SchemaCompilerError):
    """Raised when a model or related model has no 'primary' identifier."""

    default_error_code = "MISSING_PRIMARY_IDENTIFIER"
    default_suggestions = [
        "Declare an identifier named 'primary' on the model",
    ]

    def __init__(self, message: str, model: str = None, **kwargs):
        context = _with_context(kwargs, model=model)
        super().__init__(message, context=context, **kwargs)


class MultiFieldPrimaryUnsupportedError(SchemaCompilerError):
    """Raised when a relation participant has a multi-field primary identifier."""

    default_error_code = "MULTI_FIELD_PRIMARY_UNSUPPORTED"
    default_suggestions = [
        "Use a single-field primary identifier on models that take part in relations",
    ]

    def __init__(self, message: str, model: str = None, fields: List[str] = None, **kwargs):
        context = _with_context(kwargs, model=model, fields=fields)
        super().__init__(message, context=context, **kwargs)


class UnsupportedFieldTypeError(SchemaCompilerError):
    """Raised when a field type is neither primitive nor a known enum."""

    default_error_code = "UNSUPPORTED_FIELD_TYPE"
    default_suggestions = [
        "Use one of the primitive field types",
        "Register an enum with the declared type name",
    ]

    def __init__(self, message: str, field: str = None, field_type: str = None, **kwargs):
        context = _with_context(kwargs, field=field, field_type=field_type)
        super().__init__(message, context=context, **kwargs)


class UnknownRelatedModelError(SchemaCompilerError):
    """Raised when a relation points at a model missing from the registry."""

    default_error_code = "UNKNOWN_RELATED_MODEL"
    default_suggestions = [
        "Check the spelling of the related model name",
        "Verify the related model is part of the registry",
    ]

    def __init__(self, message: str, model: str = None, related_model: str = None, **kwargs):
        context = _with_context(kwargs, model=model, related_model=related_model)
        super().__init__(message, context=context, **kwargs)


class MissingRelatedFieldError(SchemaCompilerError):
    """Raised when an identifier names a field its model does not declare."""

    default_error_code = "MISSING_RELATED_FIELD"
    default_suggestions = [
        "Declare the identifier field on the model",
        "Remove the field from the identifier",
    ]

    def __init__(self, message: str, model: str = None, field: str = None, **kwargs):
        context = _with_context(kwargs, model=model, field=field)
        super().__init__(message, context=context, **kwargs)


class NilTableSetError(SchemaCompilerError):
    """Raised when a success hook is registered but no tables were produced."""

    default_error_code = "NIL_TABLE_SET"


class UnexpectedTableSetError(SchemaCompilerError):
    """Raised when a compilation hands back a table set of the wrong size."""

    default_error_code = "UNEXPECTED_TABLE_SET"
    default_suggestions = [
        "Return exactly one table from an enum success hook",
    ]

    def __init__(self, message: str, expected: int = None, actual: int = None, **kwargs):
        context = _with_context(kwargs, expected=expected, actual=actual)
        super().__init__(message, context=context, **kwargs)


class ConflictingTableError(SchemaCompilerError):
    """Raised when two different definitions share one schema-qualified table name."""

    default_error_code = "CONFLICTING_TABLE"
    default_suggestions = [
        "Rename the model whose table collides with a junction table",
    ]

    def __init__(self, message: str, table: str = None, **kwargs):
        context = _with_context(kwargs, table=table)
        super().__init__(message, context=context, **kwargs)


class HookError(SchemaCompilerError):
    """Raised when a compile hook fails."""

    default_error_code = "HOOK_ERROR"
    default_suggestions = [
        "Check the hook implementation",
        "Try compiling without hooks to isolate the problem",
    ]

    def __init__(self, message: str, phase: str = None, original: Exception = None, **kwargs):
        context = _with_context(kwargs, phase=phase)
        super().__init__(message, context=context, **kwargs)
        self.phase = phase
        self.original = original


# --- Registry errors ---

class RegistryError(SchemaCompilerError):
    """Base class for model registry errors."""

    default_error_code = "REGISTRY_ERROR"


class RegistryNotFoundError(RegistryError):
    """Raised when the registry directory does not exist."""

    default_error_code = "REGISTRY_NOT_FOUND"
    default_suggestions = [
        "Check the registry path",
    ]

    def __init__(self, message: str, path: str = None, **kwargs):
        context = _with_context(kwargs, path=path)
        super().__init__(message, context=context, **kwargs)


class EntryNotFoundError(RegistryError):
    """Raised when a registry lookup misses."""

    default_error_code = "REGISTRY_ENTRY_NOT_FOUND"

    def __init__(self, message: str, name: str = None, **kwargs):
        context = _with_context(kwargs, name=name)
        super().__init__(message, context=context, **kwargs)
        self.name = name


class ModelNotFoundError(EntryNotFoundError):
    """Raised when no model with the given name is registered."""

    default_error_code = "MODEL_NOT_FOUND"


class EnumNotFoundError(EntryNotFoundError):
    """Raised when no enum with the given name is registered."""

    default_error_code = "ENUM_NOT_FOUND"


class MalformedEntryError(RegistryError):
    """Raised when a registry entry cannot be parsed into a model or enum."""

    default_error_code = "MALFORMED_REGISTRY_ENTRY"
    default_suggestions = [
        "Check the definition file syntax",
        "Verify required keys (name, fields, identifiers) are present",
    ]

    def __init__(self, message: str, source: str = None, **kwargs):
        context = _with_context(kwargs, source=source)
        super().__init__(message, context=context, **kwargs)
