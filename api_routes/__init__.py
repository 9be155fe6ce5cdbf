"""
API Routes Package

This package contains all JSON API routes organized by functional area.
Each module focuses on one part of the ministry tracker.
"""

from flask import Blueprint

# Create the main API blueprint
api_blueprint = Blueprint('api', __name__)

# Import all route modules to register their routes
from . import (
    students,
    interactions,
    follow_ups,
    prayer_requests,
    action_items,
    staff,
    dashboard,
    public
)

# Register all blueprints with the main API blueprint
api_blueprint.register_blueprint(students.bp, url_prefix='')
api_blueprint.register_blueprint(interactions.bp, url_prefix='')
api_blueprint.register_blueprint(follow_ups.bp, url_prefix='')
api_blueprint.register_blueprint(prayer_requests.bp, url_prefix='')
api_blueprint.register_blueprint(action_items.bp, url_prefix='')
api_blueprint.register_blueprint(staff.bp, url_prefix='')
api_blueprint.register_blueprint(dashboard.bp, url_prefix='')
api_blueprint.register_blueprint(public.bp, url_prefix='')
