"""
Helpers for free-form labels (student tags, interaction topics).
"""


def normalize_labels(value):
    """
    Turn a list of labels, or a legacy comma-joined string, into a sorted
    list of unique, non-blank labels.
    """
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(',')
    labels = set()
    for item in value:
        if item is None:
            continue
        label = str(item).strip()
        if label:
            labels.add(label)
    return sorted(labels)
