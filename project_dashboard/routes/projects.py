"""Project routes for the Project Analytics Dashboard API.

This module provides the JSON project list and the export download.
Routes call the service layer; they handle HTTP concerns only.
"""
import io

from flask import Blueprint, Response, current_app, jsonify, request, send_file

from project_dashboard.auth import signed_in_required
from project_dashboard.exceptions import DataUnavailable
from project_dashboard.services import export_service, project_service, view_service

projects_bp = Blueprint('projects', __name__)


@projects_bp.route('/api/projects', methods=['GET'])
@signed_in_required
def get_projects():
    """Get all projects, newest first.

    Returns:
        JSON array of projects, 401 if not signed in, or 500 with an
        error object if the database cannot be read.
    """
    try:
        projects = project_service.fetch_projects()
    except DataUnavailable as e:
        current_app.logger.error('Project API fetch failed: %s', e.message)
        return jsonify({'error': e.message}), 500
    return jsonify(projects)


@projects_bp.route('/projects/export', methods=['GET'])
@signed_in_required
def export_projects():
    """Export the filtered and sorted project table.

    Accepts the same view query parameters as the dashboard; pagination
    is ignored so the whole filtered list is exported.

    Query params:
        format: 'csv', 'json' or 'html' (default: csv).

    Returns:
        File download, 204 if no projects match, 400 for an unknown
        format, or 503 if the database cannot be read.
    """
    fmt = (request.args.get('format') or export_service.FORMAT_CSV).lower()
    if fmt not in export_service.EXPORT_FORMATS:
        return jsonify({
            'error': f"Invalid export format: {fmt}. "
                     f"Must be one of: {export_service.EXPORT_FORMATS}"
        }), 400

    try:
        projects = project_service.fetch_projects()
    except DataUnavailable as e:
        current_app.logger.error('Export fetch failed: %s', e.message)
        return jsonify({'error': e.message}), 503

    state = view_service.view_state_from_args(request.args)
    view = view_service.derive_view(projects, state)
    if view.filtered_count == 0:
        return Response(status=204)

    export = export_service.serialize(
        view.filtered,
        fmt,
        base=current_app.config.get('EXPORT_FILENAME_BASE', 'project_data'),
    )

    return send_file(
        io.BytesIO(export.content),
        mimetype=export.mimetype,
        as_attachment=True,
        download_name=export.filename,
    )
