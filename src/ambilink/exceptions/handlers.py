"""
Centralized error handling utilities.

Each layer translates errors to be more useful at the next level up:

```
┌──────────────────────────────────────┐
│  USER LAYER (CLI)                    │
│  - Formats error.user_message        │
│  - Shows error.recovery_hint         │
└──────────────────────────────────────┘
                  ↑  AmbilinkError
┌──────────────────────────────────────┐
│  APPLICATION LAYER (targets)         │
│  - Catches typed transport errors    │
│  - Logs and recovers locally         │
└──────────────────────────────────────┘
                  ↑  ConnectError, SendError
┌──────────────────────────────────────┐
│  LOW LEVEL (socket, serial, process) │
│  - Raises OSError, SerialException   │
└──────────────────────────────────────┘
```

### Handling Patterns

| Pattern | Code |
|---------|------|
| Log, return fallback | `@handle_errors(operation_name="load groups", re_raise=False, fallback_value=[])` |
| Log and re-raise | `@handle_errors(operation_name="start helper")` |
| Critical section with auto-logging | `with ErrorContext("dispose targets"): ...` |
"""

import logging
from functools import wraps
from typing import Callable, Optional, TypeVar

from .base import AmbilinkError
from .config import ConfigFileInvalidError, ConfigValidationError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def handle_errors(
    *,
    operation_name: str,
    fallback_value: Optional[T] = None,
    re_raise: bool = True,
) -> Callable:
    """
    Decorator for consistent error handling.

    Args:
        operation_name: Name of the operation for logging (e.g., "load groups")
        fallback_value: Value to return if error occurs and re_raise=False
        re_raise: Whether to re-raise the exception after handling

    Returns:
        Decorated function
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)

            except AmbilinkError as e:
                logger.error(f"Failed to {operation_name}: {e.technical_message}")
                if re_raise:
                    raise
                return fallback_value

            except Exception as e:
                logger.error(f"Unexpected error during {operation_name}: {e}", exc_info=True)
                if re_raise:
                    raise
                return fallback_value

        return wrapper
    return decorator


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("dispose bridge", re_raise=False) as ctx:
            handler.dispose()

        if ctx.error:
            print(f"Failed: {ctx.error}")
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True
    ):
        """
        Initialize error context.

        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to module logger)
            re_raise: Whether to re-raise exceptions
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[Exception] = None

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        self.error = exc_val

        if isinstance(exc_val, AmbilinkError):
            self.logger.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=True)

        # True suppresses the exception
        return not self.re_raise


def wrap_pydantic_error(error: Exception, file_path: str) -> AmbilinkError:
    """
    Convert Pydantic validation errors to ambilink exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
            return ConfigValidationError(
                field=field,
                value=first_error.get('input', None),
                error_msg=first_error.get('msg', 'validation failed'),
                file_path=file_path
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            combined_msg = f"{len(errors)} validation errors:\n" + "\n".join(error_lines)
            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=combined_msg,
                file_path=file_path
            )

    return ConfigValidationError(
        field="unknown",
        value=None,
        error_msg=error_msg,
        file_path=file_path
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, AmbilinkError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None
