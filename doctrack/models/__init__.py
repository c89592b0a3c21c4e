from doctrack.models.directory import Office, User, UserRole  # noqa: F401
from doctrack.models.tracking import (  # noqa: F401
    DeliveryType,
    Document,
    DocumentHistory,
    DocumentStatus,
    HistoryAction,
    Notification,
    Priority,
)
