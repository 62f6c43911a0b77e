"""View service for deriving the dashboard table from a project list.

This module turns the raw project list plus the user's table controls
(search, filters, sort, pagination) into the rows to display. All
functions are pure: the ViewState is an immutable value and every
change to it goes through a reducer that returns a new state.
"""
import math
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence

from project_dashboard.models import (
    display_value,
    is_blank,
    parse_date_added,
    source_type,
)


# Columns the table can be sorted by (internal -> header label)
SORTABLE_FIELDS = {
    'id': 'ID',
    'project_name': 'Project Name',
    'location': 'Location',
    'project_type': 'Type',
    'stage': 'Stage',
    'stakeholders': 'Stakeholders',
    'source_link': 'Source',
    'project_value': 'Project Value',
    'date_added': 'Date Added',
}

SORT_DIRECTIONS = ('asc', 'desc')

PAGE_SIZE_OPTIONS = [10, 25, 50, 100]

DEFAULT_SORT_FIELD = 'date_added'
DEFAULT_SORT_DIRECTION = 'desc'
DEFAULT_PAGE_SIZE = 25

# Filter kinds accepted by set_filter (kind -> ViewState attribute)
FILTER_KINDS = {
    'stage': 'filter_stage',
    'type': 'filter_type',
    'source': 'filter_source',
}


@dataclass(frozen=True)
class ViewState:
    """Full set of user-adjustable table controls at a point in time."""
    search_term: str = ''
    filter_stage: str = ''
    filter_type: str = ''
    filter_source: str = ''
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: str = DEFAULT_SORT_DIRECTION
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def has_active_filters(self) -> bool:
        """True when search or any filter narrows the list."""
        return bool(
            self.search_term or self.filter_stage
            or self.filter_type or self.filter_source
        )


@dataclass(frozen=True)
class FilterOptions:
    """Unique values offered in the filter dropdowns."""
    stages: list = field(default_factory=list)
    types: list = field(default_factory=list)
    sources: list = field(default_factory=list)


@dataclass(frozen=True)
class ProjectView:
    """Result of deriving the table from projects and a ViewState.

    Attributes:
        rows: Projects on the current page.
        total_pages: ceil(filtered_count / page_size); 0 when nothing matches.
        filtered: Every matching project in sort order, unpaginated.
            This is what gets exported.
        filtered_count: Number of matching projects.
        total_count: Number of projects before filtering.
        start_index: Zero-based offset of the first row on the page.
        end_index: Offset one past the last row on the page.
    """
    rows: list
    total_pages: int
    filtered: list
    filtered_count: int
    total_count: int
    start_index: int
    end_index: int


# ============================================================================
# Option extraction and filtering
# ============================================================================

def filter_options(projects: Sequence[Mapping[str, Any]]) -> FilterOptions:
    """Collect the dropdown options for the stage, type and source filters.

    Options come from the full project list, independent of the
    filters currently applied.

    Args:
        projects: Raw project records.

    Returns:
        FilterOptions with each list de-duplicated and sorted ascending.
    """
    stages = {display_value(p.get('stage')) for p in projects}
    types = {display_value(p.get('project_type')) for p in projects}
    sources = {source_type(p.get('source_link')) for p in projects}
    return FilterOptions(
        stages=sorted(stages),
        types=sorted(types),
        sources=sorted(sources),
    )


def _searchable_text(project: Mapping[str, Any]) -> str:
    """Concatenate every field's display value, lower-cased."""
    return ' '.join(display_value(v) for v in project.values()).lower()


def matches(project: Mapping[str, Any], state: ViewState) -> bool:
    """Check whether a project passes the search term and all filters.

    The search runs against the sentinel-substituted text, so a search
    for "specified" matches any project with a blank field.
    """
    if state.search_term:
        if state.search_term.lower() not in _searchable_text(project):
            return False
    if state.filter_stage and display_value(project.get('stage')) != state.filter_stage:
        return False
    if state.filter_type and display_value(project.get('project_type')) != state.filter_type:
        return False
    if state.filter_source and source_type(project.get('source_link')) != state.filter_source:
        return False
    return True


def filter_projects(projects: Sequence[Mapping[str, Any]],
                    state: ViewState) -> list:
    """Return the projects passing the search and filters, in input order."""
    return [p for p in projects if matches(p, state)]


# ============================================================================
# Sorting
# ============================================================================

def _sort_key(value: Any, sort_field: str) -> Optional[tuple]:
    """Build the comparison key for a value, or None if it is missing.

    Keys are tagged tuples so values of different types never get
    compared directly.
    """
    if sort_field == 'date_added':
        parsed = parse_date_added(value)
        if parsed is None:
            return None
        return (0, parsed)
    if is_blank(value):
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, value)
    return (2, str(value).lower())


def sort_projects(projects: Sequence[Mapping[str, Any]], sort_field: str,
                  sort_direction: str = 'asc') -> list:
    """Sort projects by a field, keeping missing values last.

    Projects whose value is missing (blank, sentinel, or an unparseable
    date) always follow those with a value, whichever the direction.
    Ties and missing values keep their input order.

    Args:
        projects: Project records to sort.
        sort_field: Field to sort by. Unknown fields fall back to date_added.
        sort_direction: 'asc' or 'desc'.

    Returns:
        New list of projects in display order.
    """
    if sort_field not in SORTABLE_FIELDS:
        sort_field = DEFAULT_SORT_FIELD

    present = []
    missing = []
    for project in projects:
        key = _sort_key(project.get(sort_field), sort_field)
        if key is None:
            missing.append(project)
        else:
            present.append((key, project))

    # sorted() is stable with reverse=True as well
    present = sorted(
        present,
        key=lambda item: item[0],
        reverse=sort_direction == 'desc',
    )
    return [project for _, project in present] + missing


# ============================================================================
# Pagination and the full derivation
# ============================================================================

def total_pages_for(count: int, page_size: int) -> int:
    """Number of pages needed to show count rows."""
    return math.ceil(count / max(page_size, 1))


def derive_view(projects: Sequence[Mapping[str, Any]],
                state: ViewState) -> ProjectView:
    """Derive the rows to display from projects and the table controls.

    Filters, then sorts, then slices out the current page. The page is
    not checked against total_pages; callers clamp it with clamp_page.

    Args:
        projects: Raw project records, as fetched.
        state: Current table controls.

    Returns:
        ProjectView with the page rows and pagination details.
    """
    filtered = sort_projects(
        filter_projects(projects, state),
        state.sort_field,
        state.sort_direction,
    )
    page_size = max(state.page_size, 1)
    filtered_count = len(filtered)

    start_index = min(max((state.page - 1) * page_size, 0), filtered_count)
    end_index = min(start_index + page_size, filtered_count)
    if state.page < 1:
        # Pages before the first one are empty rather than wrapping
        end_index = start_index

    return ProjectView(
        rows=filtered[start_index:end_index],
        total_pages=total_pages_for(filtered_count, page_size),
        filtered=filtered,
        filtered_count=filtered_count,
        total_count=len(projects),
        start_index=start_index,
        end_index=end_index,
    )


# ============================================================================
# ViewState reducers
# ============================================================================

def set_search(state: ViewState, term: str) -> ViewState:
    """Set the search term and return to the first page."""
    return replace(state, search_term=term or '', page=1)


def set_filter(state: ViewState, kind: str, value: str) -> ViewState:
    """Set one of the stage/type/source filters and return to page 1.

    Raises:
        ValueError: If kind is not a known filter.
    """
    if kind not in FILTER_KINDS:
        raise ValueError(
            f"Invalid filter: {kind}. Must be one of: {list(FILTER_KINDS)}"
        )
    return replace(state, **{FILTER_KINDS[kind]: value or '', 'page': 1})


def toggle_sort(state: ViewState, sort_field: str) -> ViewState:
    """Sort by a column header click.

    Clicking the current sort column flips the direction; clicking a
    different column sorts it ascending.

    Raises:
        ValueError: If sort_field is not sortable.
    """
    if sort_field not in SORTABLE_FIELDS:
        raise ValueError(
            f"Invalid sort field: {sort_field}. "
            f"Must be one of: {list(SORTABLE_FIELDS)}"
        )
    if sort_field == state.sort_field:
        direction = 'asc' if state.sort_direction == 'desc' else 'desc'
    else:
        direction = 'asc'
    return replace(state, sort_field=sort_field, sort_direction=direction, page=1)


def set_page(state: ViewState, page: int) -> ViewState:
    """Move to a page. The value is not validated here."""
    return replace(state, page=page)


def set_page_size(state: ViewState, page_size: int) -> ViewState:
    """Change the number of rows per page and return to page 1.

    Raises:
        ValueError: If page_size is not one of PAGE_SIZE_OPTIONS.
    """
    if page_size not in PAGE_SIZE_OPTIONS:
        raise ValueError(
            f"Invalid page size: {page_size}. Must be one of: {PAGE_SIZE_OPTIONS}"
        )
    return replace(state, page_size=page_size, page=1)


def clear_filters(state: ViewState) -> ViewState:
    """Clear the search term and all filters.

    Sort order and page size are kept.
    """
    return replace(
        state,
        search_term='',
        filter_stage='',
        filter_type='',
        filter_source='',
        page=1,
    )


def clamp_page(state: ViewState, total_pages: int) -> ViewState:
    """Keep the page within 1..total_pages (page 1 when there are none)."""
    page = min(max(state.page, 1), max(total_pages, 1))
    if page == state.page:
        return state
    return replace(state, page=page)


def _parse_int(value: Optional[str], default: int) -> int:
    """Parse an integer from a string value, falling back to default."""
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def view_state_from_args(args: Mapping[str, str],
                         default_page_size: int = DEFAULT_PAGE_SIZE) -> ViewState:
    """Build a ViewState from request query parameters.

    Malformed values are ignored in favour of the defaults, so a
    hand-edited URL never produces an error page.

    Query params:
        search, stage, type, source: search term and filters.
        sort: Sort field. dir: 'asc' or 'desc'.
        page: 1-based page number. per_page: rows per page.
    """
    sort_field = args.get('sort') or DEFAULT_SORT_FIELD
    if sort_field not in SORTABLE_FIELDS:
        sort_field = DEFAULT_SORT_FIELD

    sort_direction = (args.get('dir') or '').lower()
    if sort_direction not in SORT_DIRECTIONS:
        sort_direction = DEFAULT_SORT_DIRECTION

    page_size = _parse_int(args.get('per_page'), default_page_size)
    if page_size not in PAGE_SIZE_OPTIONS:
        page_size = default_page_size

    return ViewState(
        search_term=args.get('search', ''),
        filter_stage=args.get('stage', ''),
        filter_type=args.get('type', ''),
        filter_source=args.get('source', ''),
        sort_field=sort_field,
        sort_direction=sort_direction,
        page=_parse_int(args.get('page'), 1),
        page_size=page_size,
    )


def view_state_to_args(state: ViewState, **overrides) -> dict:
    """Convert a ViewState back to query parameters for building links.

    Default and empty values are left out to keep URLs short.

    Args:
        state: State to encode.
        **overrides: Query parameters to set on top of the state.
    """
    args = {
        'search': state.search_term,
        'stage': state.filter_stage,
        'type': state.filter_type,
        'source': state.filter_source,
        'sort': state.sort_field if state.sort_field != DEFAULT_SORT_FIELD else '',
        'dir': state.sort_direction if state.sort_direction != DEFAULT_SORT_DIRECTION else '',
        'page': state.page if state.page != 1 else '',
        'per_page': state.page_size if state.page_size != DEFAULT_PAGE_SIZE else '',
    }
    args.update(overrides)
    return {k: v for k, v in args.items() if v not in ('', None)}
