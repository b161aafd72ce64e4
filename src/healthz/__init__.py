"""healthz — aggregate process health from independent checks and serve it as JSON."""

from .check import CheckFunc
from .checker import Checker
from .errors import (
    Expired,
    HealthWarning,
    Pending,
    ScopedMultiError,
    is_scoped_multi_error,
    is_warning,
    warn,
)
from .http import create_app, create_router, render
from .models import Runtime, Status, StatusLabel
from .remote import RemoteError, RemoteOptions
