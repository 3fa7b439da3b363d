from .contracts import EventBus, KV, SQL
from .browser import Document, DomEvent, Navigator, Dialogs, Listener, Subscription
from .paths import PathProvider

__all__ = [
    "EventBus",
    "KV",
    "SQL",
    "Document",
    "DomEvent",
    "Navigator",
    "Dialogs",
    "Listener",
    "Subscription",
    "PathProvider",
]
