"""Dashboard routes for the Project Analytics Dashboard.

Provides the main dashboard view: stats, filter controls, the sortable
paginated project table and the export menu. Table controls travel as
query parameters, so every view is a bookmarkable URL.
"""
from flask import Blueprint, current_app, render_template, request, url_for

from project_dashboard.auth import current_auth
from project_dashboard.exceptions import DataUnavailable
from project_dashboard.models import (
    display_value,
    format_date_long,
    source_type,
    stage_class,
)
from project_dashboard.services import project_service, session_state, view_service

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.app_template_filter('display')
def _display_filter(value):
    return display_value(value)


@dashboard_bp.app_template_filter('long_date')
def _long_date_filter(value):
    return format_date_long(value)


@dashboard_bp.app_template_filter('source_type')
def _source_type_filter(value):
    return source_type(value)


@dashboard_bp.app_template_filter('stage_class')
def _stage_class_filter(value):
    return stage_class(value)


def _fetch_store() -> session_state.FetchStore:
    return current_app.extensions['fetch_store']


def _load_projects() -> session_state.FetchState:
    """Fetch the project list, keeping the last good rows on failure.

    The first request loads; later requests refresh. When another
    request is already fetching, its pending state is returned as is.

    Returns:
        Settled or pending FetchState.
    """
    store = _fetch_store()
    state, started = store.start()
    if not started:
        return state
    try:
        projects = project_service.fetch_projects()
    except DataUnavailable as e:
        current_app.logger.error('Dashboard fetch failed: %s', e.message)
        return store.finish(session_state.fetch_failed(state, e.message))
    except Exception:
        store.finish(session_state.fetch_failed(state, DataUnavailable().message))
        raise
    return store.finish(session_state.fetch_succeeded(state, projects))


def _get_dashboard_data(projects, state: view_service.ViewState) -> dict:
    """Derive everything the dashboard template needs.

    The requested page is clamped to the available pages before the
    rows are sliced.

    Returns:
        Dictionary of template variables.
    """
    view = view_service.derive_view(projects, state)
    clamped = view_service.clamp_page(state, view.total_pages)
    if clamped is not state:
        state = clamped
        view = view_service.derive_view(projects, state)

    def view_url(new_state=None, **overrides):
        args = view_service.view_state_to_args(new_state or state, **overrides)
        return url_for('dashboard.dashboard', **args)

    def export_url(fmt):
        args = view_service.view_state_to_args(state, page='', format=fmt)
        return url_for('projects.export_projects', **args)

    sort_urls = {
        key: view_url(view_service.toggle_sort(state, key))
        for key in view_service.SORTABLE_FIELDS
    }

    return {
        'state': state,
        'view': view,
        'options': view_service.filter_options(projects),
        'sortable_fields': view_service.SORTABLE_FIELDS,
        'page_size_options': view_service.PAGE_SIZE_OPTIONS,
        'sort_urls': sort_urls,
        'clear_url': view_url(view_service.clear_filters(state)),
        'view_url': view_url,
        'export_url': export_url,
    }


@dashboard_bp.route('/')
@dashboard_bp.route('/dashboard')
def dashboard():
    """Render the dashboard, the sign-in prompt, loading or error panel.

    A failed reload keeps showing the rows of the last successful load
    with the error above the table; only a failure with nothing loaded
    yet shows the error panel.

    Query params:
        search, stage, type, source, sort, dir, page, per_page
        (see view_service.view_state_from_args).

    Returns:
        Rendered HTML page.
    """
    auth = current_auth()
    if not auth.is_signed_in:
        return render_template('sign_in.html')

    fetch = _load_projects()
    screen = session_state.select_screen(auth, fetch)
    if screen == session_state.SCREEN_LOADING:
        return render_template('loading.html')
    if screen == session_state.SCREEN_ERROR:
        return render_template('error.html', message=fetch.error), 503

    state = view_service.view_state_from_args(
        request.args,
        current_app.config.get('DEFAULT_PAGE_SIZE', view_service.DEFAULT_PAGE_SIZE),
    )
    data = _get_dashboard_data(list(fetch.projects), state)
    return render_template(
        'dashboard.html',
        auth=auth,
        fetch=fetch,
        refresh_url=request.full_path.rstrip('?'),
        **data,
    )
