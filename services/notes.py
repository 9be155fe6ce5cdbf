"""
Dated note entries for student profiles.

Notes used to live in a single text field where each entry starts with a
line of the form ``[YYYY-MM-DD] text``. Entries are now stored as rows, and
this module converts between the two shapes so existing text can still be
imported.
"""

import re
from collections import namedtuple

NoteEntry = namedtuple('NoteEntry', ['date', 'content'])

DATE_PREFIX = re.compile(r'^\[(\d{4}-\d{2}-\d{2})\]\s*(.*)')


def parse_notes(blob):
    """
    Split a notes blob into dated entries, in the order they appear.

    Lines after a dated line belong to that entry until the next dated
    line. Non-blank lines before the first dated line become undated
    entries of their own. A dated line with nothing under it still
    produces an entry, with empty content.
    """
    if not blob:
        return []

    entries = []
    current_date = None
    current_lines = []

    for line in blob.split('\n'):
        match = DATE_PREFIX.match(line)
        if match:
            if current_date is not None:
                entries.append(NoteEntry(current_date, '\n'.join(current_lines).strip()))
            current_date = match.group(1)
            current_lines = [match.group(2)] if match.group(2) else []
        elif current_date is not None:
            current_lines.append(line)
        elif line.strip():
            entries.append(NoteEntry('', line.strip()))

    if current_date is not None:
        entries.append(NoteEntry(current_date, '\n'.join(current_lines).strip()))

    return entries


def format_note_entry(date, content):
    """Render one entry in the legacy blob format."""
    if not date:
        return content
    if not content:
        return f'[{date}]'
    return f'[{date}] {content}'


def format_notes(entries):
    """Render entries (newest first) back into a single blob."""
    return '\n'.join(format_note_entry(entry.date, entry.content) for entry in entries)
