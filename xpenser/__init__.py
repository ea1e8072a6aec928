from .client import XpenserClient, resolve_tag_names
from .config import XpenserConfig, load_config
from .dates import format_xpenser_date
from .errors import (
    ConfigurationError,
    InvalidDateFormat,
    InvalidReportId,
    MalformedResponse,
    RemoteRequestFailure,
    XpenserError,
)
from .models import ExpenseRecord, TagDictionary

__all__ = [
    "XpenserClient",
    "XpenserConfig",
    "ExpenseRecord",
    "TagDictionary",
    "load_config",
    "format_xpenser_date",
    "resolve_tag_names",
    "XpenserError",
    "ConfigurationError",
    "InvalidDateFormat",
    "InvalidReportId",
    "MalformedResponse",
    "RemoteRequestFailure",
]
