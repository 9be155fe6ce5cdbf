from services.notes import NoteEntry, format_note_entry, format_notes, parse_notes
from services.tags import normalize_labels


def test_empty_input_has_no_entries():
    assert parse_notes(None) == []
    assert parse_notes('') == []


def test_single_dated_entry():
    assert parse_notes('[2024-01-01] hello') == [NoteEntry('2024-01-01', 'hello')]


def test_continuation_lines_join_the_current_entry():
    entries = parse_notes('[2024-01-02] line1\nline2\n[2024-01-01] older')
    assert entries == [
        NoteEntry('2024-01-02', 'line1\nline2'),
        NoteEntry('2024-01-01', 'older'),
    ]


def test_undated_text_is_a_legacy_entry():
    assert parse_notes('legacy text with no date') == [NoteEntry('', 'legacy text with no date')]


def test_each_legacy_line_before_first_date_is_its_own_entry():
    entries = parse_notes('first\n\n  second  \n[2024-03-01] dated')
    assert entries == [
        NoteEntry('', 'first'),
        NoteEntry('', 'second'),
        NoteEntry('2024-03-01', 'dated'),
    ]


def test_dated_header_without_content_still_produces_an_entry():
    entries = parse_notes('[2024-01-03]\n[2024-01-02] kept')
    assert entries == [NoteEntry('2024-01-03', ''), NoteEntry('2024-01-02', 'kept')]
    assert parse_notes('[2024-01-01]') == [NoteEntry('2024-01-01', '')]


def test_content_can_start_on_the_line_after_the_date():
    assert parse_notes('[2024-05-05]\nmet for coffee') == [NoteEntry('2024-05-05', 'met for coffee')]


def test_malformed_dates_are_plain_content():
    entries = parse_notes('[2024-1-1] not a date\n[24-01-01] nor this')
    assert entries == [NoteEntry('', '[2024-1-1] not a date'), NoteEntry('', '[24-01-01] nor this')]


def test_formatted_entries_parse_back():
    entries = [
        NoteEntry('2024-02-01', 'Prayed together\nAsked about exams'),
        NoteEntry('2024-01-15', 'First visit'),
        NoteEntry('2024-01-10', ''),
    ]
    assert parse_notes(format_notes(entries)) == entries
    assert parse_notes(format_note_entry('2024-06-30', 'single')) == [NoteEntry('2024-06-30', 'single')]


def test_normalize_labels_accepts_lists_and_comma_strings():
    assert normalize_labels('worship team, small group leader,,worship team') == [
        'small group leader', 'worship team',
    ]
    assert normalize_labels([' mentor ', None, '', 'graduating soon']) == ['graduating soon', 'mentor']
    assert normalize_labels(None) == []
