"""
Settings aggregator.

Renders the index's computed settings as one line each, in a fixed order
that does not depend on the store. Unset settings still get a line, so
the line count and line names of a settings snapshot never change.
"""

import logging
from dataclasses import dataclass
from typing import Any, List

from ..store.base import ReadTxn
from .primitives import debug_repr


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingDefinition:
    """
    A setting shown in the settings snapshot.

    Attributes:
        name: Setting name, also the line label
        optional: Whether a present value is wrapped as ``Some(...)``
    """
    name: str
    optional: bool = False

    def render(self, value: Any) -> str:
        if value is None:
            return f"{self.name}: None"
        if self.optional:
            return f"{self.name}: Some({debug_repr(value)})"
        return f"{self.name}: {debug_repr(value)}"


SETTINGS: List[SettingDefinition] = [
    SettingDefinition("primary_key", optional=True),
    SettingDefinition("criteria"),
    SettingDefinition("displayed_fields", optional=True),
    SettingDefinition("distinct_field", optional=True),
    SettingDefinition("filterable_fields"),
    SettingDefinition("sortable_fields"),
    SettingDefinition("synonyms"),
    SettingDefinition("authorize_typos"),
    SettingDefinition("min_word_len_one_typo"),
    SettingDefinition("min_word_len_two_typos"),
    SettingDefinition("exact_words", optional=True),
    SettingDefinition("exact_attributes"),
    SettingDefinition("max_values_per_facet", optional=True),
    SettingDefinition("pagination_max_total_hits", optional=True),
    SettingDefinition("searchable_fields", optional=True),
    SettingDefinition("user_defined_searchable_fields", optional=True),
]


def snap_settings(txn: ReadTxn) -> str:
    """Render all settings, one ``name: value`` line each."""
    lines = [definition.render(txn.setting(definition.name)) + "\n" for definition in SETTINGS]
    logger.debug(f"Rendered {len(lines)} settings", extra={"table": "settings"})
    return "".join(lines)
