from .history import HistoryNavigator

__all__ = ["HistoryNavigator"]
