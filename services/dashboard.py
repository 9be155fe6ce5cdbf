"""
Dashboard summary for the signed-in staff member.
"""

from datetime import datetime, timedelta

from models import ActionItem, FollowUp, Interaction, PrayerRequest, Student
from services.visibility import is_admin, visible_clause

RECENT_DAYS = 7
UPCOMING_DAYS = 7
LIST_LIMIT = 5


def _owned_by(model, user):
    """Non-admins only count their own follow-ups, tasks and recent activity."""
    if is_admin(user.role):
        return []
    return [model.staff_id == user.id]


def get_dashboard_stats(user, now=None):
    """
    Collect the dashboard counts and short lists for a staff member.

    Returns a dict with model instances in the list entries; callers
    serialize them.
    """
    now = now or datetime.utcnow()
    recent_since = now - timedelta(days=RECENT_DAYS)
    upcoming_until = now + timedelta(days=UPCOMING_DAYS)

    total_students = Student.query.filter_by(status='active').count()

    recent_interactions = Interaction.query.filter(
        Interaction.date >= recent_since,
        visible_clause(Interaction, user),
    ).count()

    overdue_follow_ups = FollowUp.query.filter(
        FollowUp.completed.is_(False),
        FollowUp.due_date < now,
        *_owned_by(FollowUp, user)
    ).count()

    upcoming_follow_ups = FollowUp.query.filter(
        FollowUp.completed.is_(False),
        FollowUp.due_date >= now,
        FollowUp.due_date <= upcoming_until,
        *_owned_by(FollowUp, user)
    ).order_by(FollowUp.due_date.asc()).limit(LIST_LIMIT).all()

    active_prayer_requests = PrayerRequest.query.filter(
        PrayerRequest.status == 'active',
        visible_clause(PrayerRequest, user),
    ).count()

    pending_action_items = ActionItem.query.filter(
        ActionItem.status.in_(['pending', 'in_progress']),
        *_owned_by(ActionItem, user)
    ).count()

    recent_interactions_list = Interaction.query.filter(
        *_owned_by(Interaction, user)
    ).order_by(Interaction.date.desc()).limit(LIST_LIMIT).all()

    return {
        'total_students': total_students,
        'recent_interactions': recent_interactions,
        'overdue_follow_ups': overdue_follow_ups,
        'upcoming_follow_ups': upcoming_follow_ups,
        'active_prayer_requests': active_prayer_requests,
        'pending_action_items': pending_action_items,
        'recent_interactions_list': recent_interactions_list,
    }
