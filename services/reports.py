"""
Aggregate statistics for the reports page.
"""

from datetime import datetime, time

from sqlalchemy import func

from extensions import db
from models import Interaction, Staff, Student

UNKNOWN_STAFF = {'id': None, 'name': 'Unknown', 'color': '#6b7280'}


def interaction_date_filters(start_date=None, end_date=None):
    """
    Inclusive date range over Interaction.date. Only applied when both ends
    are given; the end date covers the whole day.
    """
    if not (start_date and end_date):
        return []
    return [
        Interaction.date >= datetime.combine(start_date, time.min),
        Interaction.date <= datetime.combine(end_date, time(23, 59, 59)),
    ]


def get_report_stats(start_date=None, end_date=None):
    filters = interaction_date_filters(start_date, end_date)
    count = func.count(Interaction.id)

    total_interactions = Interaction.query.filter(*filters).count()
    total_students = Student.query.count()
    active_students = Student.query.filter_by(status='active').count()

    by_type = db.session.query(Interaction.type, count) \
        .filter(*filters) \
        .group_by(Interaction.type) \
        .order_by(count.desc()) \
        .all()

    by_staff = db.session.query(Interaction.staff_id, count) \
        .filter(*filters) \
        .group_by(Interaction.staff_id) \
        .order_by(count.desc()) \
        .all()

    staff_ids = [staff_id for staff_id, _ in by_staff]
    staff_members = Staff.query.filter(Staff.id.in_(staff_ids)).all() if staff_ids else []
    staff_map = {s.id: {'id': s.id, 'name': s.name, 'color': s.color} for s in staff_members}

    return {
        'total_interactions': total_interactions,
        'total_students': total_students,
        'active_students': active_students,
        'interactions_by_type': [{'type': t, 'count': n} for t, n in by_type],
        'interactions_by_staff': [
            {'staff': staff_map.get(staff_id, UNKNOWN_STAFF), 'count': n} for staff_id, n in by_staff
        ],
    }
