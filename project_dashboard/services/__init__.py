"""Business logic services package.

This package contains service modules that implement business logic.
Routes call services; services interact with models.
This separation keeps routes thin and logic testable.
"""
from project_dashboard.services.project_service import (
    fetch_projects,
    count_projects,
)
from project_dashboard.services.view_service import (
    ViewState,
    FilterOptions,
    ProjectView,
    derive_view,
    filter_options,
    filter_projects,
    sort_projects,
    set_search,
    set_filter,
    toggle_sort,
    set_page,
    set_page_size,
    clear_filters,
    clamp_page,
    view_state_from_args,
)
from project_dashboard.services.export_service import (
    ExportFile,
    serialize,
)

__all__ = [
    # Project service
    'fetch_projects',
    'count_projects',
    # View service
    'ViewState',
    'FilterOptions',
    'ProjectView',
    'derive_view',
    'filter_options',
    'filter_projects',
    'sort_projects',
    'set_search',
    'set_filter',
    'toggle_sort',
    'set_page',
    'set_page_size',
    'clear_filters',
    'clamp_page',
    'view_state_from_args',
    # Export service
    'ExportFile',
    'serialize',
]
