"""
Renderers turning store content into snapshot text.
"""

from .facets import StringFacetDecoder, snap_facet_id_string_docids
from .primitives import debug_repr, display_bitmap, display_float, hex_dump
from .settings import SETTINGS, SettingDefinition, snap_settings
from .tables import FORMATTERS, TableName, full_snap_of_db, get_formatter, resolve_table_name

__all__ = [
    "StringFacetDecoder",
    "snap_facet_id_string_docids",
    "debug_repr",
    "display_bitmap",
    "display_float",
    "hex_dump",
    "SETTINGS",
    "SettingDefinition",
    "snap_settings",
    "FORMATTERS",
    "TableName",
    "full_snap_of_db",
    "get_formatter",
    "resolve_table_name",
]
