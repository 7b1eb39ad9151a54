"""
Custom exception hierarchy for ambilink.

## Exception Hierarchy

```
AmbilinkError (base)
├── ConfigurationError
│   ├── ConfigFileInvalidError
│   ├── ConfigValidationError
│   └── ExecutableNotFoundError
├── ProcessError
│   ├── ProcessStartError
│   └── HelperNotRunningError
└── TransportError
    ├── ConnectError
    └── SendError
```

All custom exceptions inherit from `AmbilinkError`, which provides
`user_message`, `technical_message`, `recoverable` and `recovery_hint`.

### Example: Target refuses connection

```python
from ambilink.exceptions import ConnectError

try:
    sock = socket.create_connection((host, port), timeout=timeout)
except OSError as e:
    raise ConnectError(f"{host}:{port}", str(e)) from e

# User sees: "Could not connect to 127.0.0.1:20123"
# Logs show: "Connect to 127.0.0.1:20123 failed: [Errno 111] Connection refused"
```

Transport errors never reach the caller of a target handler: the connection
supervisor catches them, logs the technical message and retries or
re-initialises.
"""

from .base import AmbilinkError
from .config import (
    ConfigFileInvalidError,
    ConfigurationError,
    ConfigValidationError,
    ExecutableNotFoundError,
)
from .handlers import ErrorContext, format_error_for_display, handle_errors, wrap_pydantic_error
from .process import HelperNotRunningError, ProcessError, ProcessStartError
from .transport import ConnectError, SendError, TransportError

__all__ = [
    # Base
    "AmbilinkError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    "ExecutableNotFoundError",
    # Process
    "HelperNotRunningError",
    "ProcessError",
    "ProcessStartError",
    # Transport
    "ConnectError",
    "SendError",
    "TransportError",
    # Handlers
    "ErrorContext",
    "format_error_for_display",
    "handle_errors",
    "wrap_pydantic_error",
]
