"""
Dashboard, reports and calendar routes.
"""

from datetime import datetime, time, timedelta

from flask import Blueprint, jsonify, request
from flask_login import current_user

from decorators import staff_required
from error_handler import ValidationError
from models import FollowUp, Interaction
from services.dashboard import get_dashboard_stats
from services.reports import get_report_stats
from services.visibility import filter_visible, is_admin
from .utils import iso, parse_date, serialize_follow_up, serialize_interaction

bp = Blueprint('dashboard', __name__)

DEFAULT_CALENDAR_DAYS = 31


@bp.route('/dashboard', methods=['GET'])
@staff_required
def dashboard():
    stats = get_dashboard_stats(current_user)
    stats['upcoming_follow_ups'] = [serialize_follow_up(f) for f in stats['upcoming_follow_ups']]
    stats['recent_interactions_list'] = [serialize_interaction(i) for i in stats['recent_interactions_list']]
    return jsonify({'success': True, 'stats': stats})


@bp.route('/reports/stats', methods=['GET'])
@staff_required
def report_stats():
    start_date = parse_date(request.args.get('start_date'), 'start_date')
    end_date = parse_date(request.args.get('end_date'), 'end_date')
    if start_date and end_date and start_date > end_date:
        raise ValidationError('start_date must be on or before end_date', field='start_date')
    return jsonify({'success': True, 'stats': get_report_stats(start_date, end_date)})


@bp.route('/calendar', methods=['GET'])
@staff_required
def calendar_events():
    """
    Interactions and open follow-ups as calendar events between start and
    end (inclusive). Defaults to the next month from today.
    """
    start = parse_date(request.args.get('start'), 'start', default=datetime.utcnow().date())
    end = parse_date(request.args.get('end'), 'end', default=start + timedelta(days=DEFAULT_CALENDAR_DAYS))
    if start > end:
        raise ValidationError('start must be on or before end', field='start')
    range_start = datetime.combine(start, time.min)
    range_end = datetime.combine(end, time(23, 59, 59))

    interactions = Interaction.query.filter(
        Interaction.date >= range_start,
        Interaction.date <= range_end,
    ).order_by(Interaction.date.asc()).all()

    follow_up_query = FollowUp.query.filter(
        FollowUp.completed.is_(False),
        FollowUp.due_date >= range_start,
        FollowUp.due_date <= range_end,
    )
    if not is_admin(current_user.role):
        follow_up_query = follow_up_query.filter_by(staff_id=current_user.id)
    follow_ups = follow_up_query.order_by(FollowUp.due_date.asc()).all()

    events = []
    for interaction in filter_visible(interactions, current_user):
        events.append({
            'kind': 'interaction',
            'id': interaction.id,
            'date': iso(interaction.date),
            'title': f"{interaction.type} with {interaction.student.name}",
            'color': interaction.staff.color if interaction.staff else None,
            'student_id': interaction.student_id,
        })
    for follow_up in follow_ups:
        events.append({
            'kind': 'follow_up',
            'id': follow_up.id,
            'date': iso(follow_up.due_date),
            'title': f"Follow up with {follow_up.student.name}",
            'priority': follow_up.priority,
            'student_id': follow_up.student_id,
        })
    events.sort(key=lambda event: event['date'])

    return jsonify({'success': True, 'start': start.isoformat(), 'end': end.isoformat(), 'events': events})
