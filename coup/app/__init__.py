from .legal_actions import available_kinds, legal_actions
from .observations import TableView, build_table_view

__all__ = ["legal_actions", "available_kinds", "TableView", "build_table_view"]
