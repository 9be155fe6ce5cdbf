"""
Business logic and services. Keeps app.py as glue-only (config, blueprints, extensions).

Only the model-free helpers are re-exported here; modules that need the
models (activity_log, dashboard, reports, intake, seeding) are imported
directly so that models.py can use these helpers without a cycle.
"""

from .visibility import is_admin, is_visible, record_is_visible, filter_visible, visible_clause
from .notes import NoteEntry, parse_notes, format_note_entry, format_notes
from .tags import normalize_labels

__all__ = [
    'is_admin',
    'is_visible',
    'record_is_visible',
    'filter_visible',
    'visible_clause',
    'NoteEntry',
    'parse_notes',
    'format_note_entry',
    'format_notes',
    'normalize_labels',
]
