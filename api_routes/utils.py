"""
Shared request parsing and JSON serialization for the API routes.
"""

from datetime import datetime, date, timezone

from flask import request

from error_handler import ValidationError

TRUE_VALUES = ('true', '1', 'yes', 'on')


def get_payload():
    """Return the request body as a dict, from JSON or form data."""
    if request.is_json:
        data = request.get_json(silent=True)
        if data is None:
            raise ValidationError('Invalid JSON payload')
        if not isinstance(data, dict):
            raise ValidationError('JSON payload must be an object')
        return data
    return request.form.to_dict()


def clean_str(value):
    """Strip strings and turn blanks into None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def require_fields(data, *fields, message=None):
    """Raise ValidationError unless every field has a non-blank value."""
    missing = [field for field in fields if clean_str(data.get(field)) is None]
    if missing:
        raise ValidationError(message or f"Missing required fields: {', '.join(missing)}", field=missing[0])


def parse_choice(value, choices, field, default=None):
    value = clean_str(value)
    if value is None:
        return default
    if value not in choices:
        raise ValidationError(f"Invalid {field} '{value}'. Expected one of: {', '.join(choices)}", field=field)
    return value


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def parse_datetime(value, field, default=None):
    """
    Parse an ISO date or datetime (``YYYY-MM-DD`` or ``YYYY-MM-DDTHH:MM[:SS]``).
    A trailing ``Z`` or a UTC offset is accepted; aware values are converted
    to UTC and stored naive.
    """
    value = clean_str(value)
    if value is None:
        return default
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid date for {field}: '{value}'", field=field)
    if parsed.tzinfo:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.replace(tzinfo=None)


def parse_text(value, field):
    """Accept a string or null for free-text fields that are parsed later."""
    if value is None or isinstance(value, str):
        return value
    raise ValidationError(f"{field} must be a string", field=field)


def parse_labels(value, field):
    """Accept labels as a comma-separated string or a list of strings."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, list) and all(item is None or isinstance(item, str) for item in value):
        return value
    raise ValidationError(f"{field} must be a string or a list of strings", field=field)


def parse_date(value, field, default=None):
    """Parse a ``YYYY-MM-DD`` string into a date."""
    value = clean_str(value)
    if value is None:
        return default
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError(f"Invalid date for {field}: '{value}' (expected YYYY-MM-DD)", field=field)


def parse_int(value, field, default=None, minimum=None):
    if value is None or value == '':
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid number for {field}: '{value}'", field=field)
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}", field=field)
    return number


def iso(value):
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def serialize_staff(staff):
    if staff is None:
        return None
    return {
        'id': staff.id,
        'name': staff.name,
        'email': staff.email,
        'role': staff.role,
        'color': staff.color,
        'created_at': iso(staff.created_at),
    }


def serialize_student(student, with_counts=False):
    data = {
        'id': student.id,
        'name': student.name,
        'email': student.email,
        'phone': student.phone,
        'gender': student.gender,
        'year': student.year,
        'major': student.major,
        'address': student.address,
        'status': student.status,
        'photo': student.photo,
        'tags': student.tags,
        'created_at': iso(student.created_at),
        'updated_at': iso(student.updated_at),
    }
    if with_counts:
        data['counts'] = {
            'interactions': len(student.interactions),
            'follow_ups': len(student.follow_ups),
            'prayer_requests': len(student.prayer_requests),
        }
    return data


def serialize_student_summary(student):
    if student is None:
        return None
    return {'id': student.id, 'name': student.name, 'year': student.year, 'status': student.status}


def serialize_note(entry):
    return {'date': entry.date, 'content': entry.content}


def serialize_interaction(interaction):
    return {
        'id': interaction.id,
        'student_id': interaction.student_id,
        'staff_id': interaction.staff_id,
        'date': iso(interaction.date),
        'type': interaction.type,
        'location': interaction.location,
        'notes': interaction.notes,
        'is_confidential': interaction.is_confidential,
        'topics': interaction.topics,
        'attachments': interaction.attachments,
        'created_at': iso(interaction.created_at),
        'student': serialize_student_summary(interaction.student),
        'staff': serialize_staff(interaction.staff),
    }


def serialize_follow_up(follow_up):
    return {
        'id': follow_up.id,
        'student_id': follow_up.student_id,
        'staff_id': follow_up.staff_id,
        'due_date': iso(follow_up.due_date),
        'priority': follow_up.priority,
        'reason': follow_up.reason,
        'completed': follow_up.completed,
        'completed_at': iso(follow_up.completed_at),
        'created_at': iso(follow_up.created_at),
        'student': serialize_student_summary(follow_up.student),
        'staff': serialize_staff(follow_up.staff),
    }


def serialize_prayer_request(prayer_request):
    return {
        'id': prayer_request.id,
        'student_id': prayer_request.student_id,
        'staff_id': prayer_request.staff_id,
        'date': iso(prayer_request.date),
        'content': prayer_request.content,
        'category': prayer_request.category,
        'status': prayer_request.status,
        'is_private': prayer_request.is_private,
        'created_at': iso(prayer_request.created_at),
        'student': serialize_student_summary(prayer_request.student),
        'staff': serialize_staff(prayer_request.staff),
    }


def serialize_action_item(action_item):
    return {
        'id': action_item.id,
        'student_id': action_item.student_id,
        'staff_id': action_item.staff_id,
        'interaction_id': action_item.interaction_id,
        'description': action_item.description,
        'due_date': iso(action_item.due_date),
        'status': action_item.status,
        'created_at': iso(action_item.created_at),
        'student': serialize_student_summary(action_item.student),
        'staff': serialize_staff(action_item.staff),
    }
