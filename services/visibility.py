"""
Role-based visibility for sensitive records.

Confidential interactions and private prayer requests can only be seen by
the staff member who owns them and by admins. Everything else is visible
to all signed-in staff.
"""

from sqlalchemy import or_, true

ADMIN_ROLE = 'admin'


def is_admin(role):
    """Check if a role has unrestricted access."""
    return role == ADMIN_ROLE


def is_visible(requester_role, requester_id, owner_id, sensitive):
    """Return True when the requester may see a record owned by owner_id."""
    if is_admin(requester_role):
        return True
    return not sensitive or owner_id == requester_id


def record_is_visible(user, record):
    """Apply is_visible to a model instance exposing staff_id and is_sensitive."""
    return is_visible(user.role, user.id, record.staff_id, record.is_sensitive)


def filter_visible(records, user):
    """Filter an already fetched collection down to what the user may see."""
    return [record for record in records if record_is_visible(user, record)]


def visible_clause(model, user):
    """
    SQL form of is_visible, used where only a count is needed.

    Args:
        model: Interaction or PrayerRequest (anything with staff_id and an
            is_sensitive hybrid property)
        user: the requesting Staff member
    """
    if is_admin(user.role):
        return true()
    return or_(model.is_sensitive.is_(False), model.staff_id == user.id)
