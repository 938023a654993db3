from prdstudio.domains.table.cache import DocumentCache, DocumentRow, build_custom_data
from prdstudio.domains.table.cells import (
    CellRenderer, CellView, EditTrigger, FIELD_REGISTRY, FieldCapability, HeaderView, RowView,
    capability_for
)
from prdstudio.domains.table.columns import DEFAULT_COLUMNS, MIN_COLUMN_WIDTH, ColumnDescriptor, ColumnModel
from prdstudio.domains.table.edit_session import CellKey, EditPhase, EditSession, EditSessionStore
from prdstudio.domains.table.editors import (
    AssigneeEditor, CellEditor, DueDateEditor, EditorContext, PriorityEditor, StatusEditor,
    TagsEditor, TeamMember, TitleEditor
)
from prdstudio.domains.table.exceptions import (
    CacheFetchError, DocumentMissingError, FieldUpdateError, FieldValidationError, TableError
)
from prdstudio.domains.table.gateway import FieldUpdateGateway
from prdstudio.domains.table.sorting import (
    FilterState, SortDirection, SortState, derive_rows, filter_documents, sort_documents
)
from prdstudio.domains.table.view import DocumentTableView, open_table

__all__ = [
    "DocumentCache", "DocumentRow", "build_custom_data",
    "CellRenderer", "CellView", "EditTrigger", "FIELD_REGISTRY", "FieldCapability",
    "HeaderView", "RowView", "capability_for",
    "DEFAULT_COLUMNS", "MIN_COLUMN_WIDTH", "ColumnDescriptor", "ColumnModel",
    "CellKey", "EditPhase", "EditSession", "EditSessionStore",
    "AssigneeEditor", "CellEditor", "DueDateEditor", "EditorContext", "PriorityEditor",
    "StatusEditor", "TagsEditor", "TeamMember", "TitleEditor",
    "CacheFetchError", "DocumentMissingError", "FieldUpdateError", "FieldValidationError", "TableError",
    "FieldUpdateGateway",
    "FilterState", "SortDirection", "SortState", "derive_rows", "filter_documents", "sort_documents",
    "DocumentTableView", "open_table",
]
