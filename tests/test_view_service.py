"""Tests for the view service layer.

Covers filter option extraction, search and filter predicates, the
missing-last sort, pagination, and the ViewState reducers. These are
pure functions, so no application context is needed.
"""
import pytest

from project_dashboard.models import NOT_SPECIFIED, SourceType
from project_dashboard.services.view_service import (
    PAGE_SIZE_OPTIONS,
    SORTABLE_FIELDS,
    ViewState,
    clamp_page,
    clear_filters,
    derive_view,
    filter_options,
    filter_projects,
    set_filter,
    set_page,
    set_page_size,
    set_search,
    sort_projects,
    toggle_sort,
    view_state_from_args,
    view_state_to_args,
)


def _ids(projects):
    return [p['id'] for p in projects]


def _make_projects(count):
    return [
        {'id': i, 'project_name': f'Project {i:03d}', 'date_added': '2024-01-01'}
        for i in range(1, count + 1)
    ]


class TestFilterOptions:
    """Tests for filter_options function."""

    def test_unique_sorted_values(self, sample_projects):
        options = filter_options(sample_projects)

        assert options.stages == ['Approved', 'In Planning', NOT_SPECIFIED, 'Proposed']
        assert options.types == ['Commercial', 'Industrial', 'Mixed Use', NOT_SPECIFIED]
        assert options.sources == [
            NOT_SPECIFIED, SourceType.PDF, SourceType.TEXAS, SourceType.WEBSITE,
        ]

    def test_duplicates_collapse(self):
        projects = [
            {'id': 1, 'stage': 'Approved'},
            {'id': 2, 'stage': 'Approved'},
            {'id': 3, 'stage': ''},
            {'id': 4},
        ]
        assert filter_options(projects).stages == ['Approved', NOT_SPECIFIED]

    def test_independent_of_filters(self, sample_projects):
        """Options come from the full list, not the filtered view."""
        state = ViewState(filter_stage='Approved')
        view = derive_view(sample_projects, state)
        assert view.filtered_count == 1
        assert len(filter_options(sample_projects).stages) == 4

    def test_empty_list(self):
        options = filter_options([])
        assert options.stages == []
        assert options.types == []
        assert options.sources == []


class TestSearch:
    """Tests for the search predicate."""

    def test_empty_term_matches_everything(self, sample_projects):
        assert _ids(filter_projects(sample_projects, ViewState())) == [1, 2, 3, 4]

    def test_case_insensitive_match_in_stakeholders(self, sample_projects):
        """'acme' matches a project whose only 'Acme' is in stakeholders."""
        result = filter_projects(sample_projects, ViewState(search_term='acme'))
        assert _ids(result) == [2]

    def test_matches_any_field(self, sample_projects):
        assert _ids(filter_projects(sample_projects, ViewState(search_term='frisco'))) == [4]
        assert _ids(filter_projects(sample_projects, ViewState(search_term='$12M'))) == [3]

    def test_fields_are_joined_in_record_order(self, sample_projects):
        """The id leads the searchable text, followed by each field."""
        result = filter_projects(sample_projects, ViewState(search_term='3 dallas'))
        assert _ids(result) == [3]
        result = filter_projects(sample_projects, ViewState(search_term='school 4'))
        assert result == []

    def test_sentinel_text_is_searchable(self, sample_projects):
        """Searching 'specified' matches every project with a blank field."""
        result = filter_projects(sample_projects, ViewState(search_term='specified'))
        assert _ids(result) == [2, 3, 4]

    def test_no_match(self, sample_projects):
        assert filter_projects(sample_projects, ViewState(search_term='zzz')) == []


class TestFilters:
    """Tests for the stage/type/source filters."""

    def test_stage_filter(self, sample_projects):
        result = filter_projects(sample_projects, ViewState(filter_stage='Proposed'))
        assert _ids(result) == [3]

    def test_stage_filter_matches_sentinel(self, sample_projects):
        result = filter_projects(sample_projects, ViewState(filter_stage=NOT_SPECIFIED))
        assert _ids(result) == [4]

    def test_type_filter(self, sample_projects):
        result = filter_projects(sample_projects, ViewState(filter_type='Industrial'))
        assert _ids(result) == [2]

    def test_source_filter(self, sample_projects):
        assert _ids(filter_projects(sample_projects, ViewState(filter_source='Texas'))) == [1]
        assert _ids(filter_projects(sample_projects, ViewState(filter_source='PDF'))) == [2]
        assert _ids(filter_projects(sample_projects, ViewState(filter_source=NOT_SPECIFIED))) == [4]

    def test_filters_combine(self, sample_projects):
        state = ViewState(search_term='tx', filter_type='Commercial')
        assert _ids(filter_projects(sample_projects, state)) == [1]

    def test_stage_filter_narrows(self, sample_projects):
        base = ViewState(search_term='a')
        unfiltered = len(filter_projects(sample_projects, base))
        for stage in filter_options(sample_projects).stages + ['No Such Stage']:
            narrowed = set_filter(base, 'stage', stage)
            assert len(filter_projects(sample_projects, narrowed)) <= unfiltered


class TestSortProjects:
    """Tests for sort_projects function."""

    def test_date_desc_puts_missing_last(self):
        projects = [
            {'id': 1, 'date_added': '2024-01-05'},
            {'id': 2, 'date_added': ''},
            {'id': 3, 'date_added': '2024-03-01'},
        ]
        assert _ids(sort_projects(projects, 'date_added', 'desc')) == [3, 1, 2]

    def test_date_asc_puts_missing_last(self):
        projects = [
            {'id': 1, 'date_added': '2024-01-05'},
            {'id': 2, 'date_added': ''},
            {'id': 3, 'date_added': '2024-03-01'},
        ]
        assert _ids(sort_projects(projects, 'date_added', 'asc')) == [1, 3, 2]

    def test_unparseable_date_is_missing(self, sample_projects):
        assert _ids(sort_projects(sample_projects, 'date_added', 'desc')) == [3, 1, 2, 4]
        assert _ids(sort_projects(sample_projects, 'date_added', 'asc')) == [1, 3, 2, 4]

    def test_dates_compare_by_timestamp_not_text(self):
        projects = [
            {'id': 1, 'date_added': '2024-03-01'},
            {'id': 2, 'date_added': '12/31/2023'},
        ]
        assert _ids(sort_projects(projects, 'date_added', 'asc')) == [2, 1]

    def test_text_sort_is_case_insensitive(self, sample_projects):
        result = sort_projects(sample_projects, 'project_name', 'asc')
        assert _ids(result) == [1, 3, 4, 2]

    @pytest.mark.parametrize('direction', ['asc', 'desc'])
    @pytest.mark.parametrize('field', list(SORTABLE_FIELDS))
    def test_missing_last_for_every_field(self, sample_projects, field, direction):
        result = sort_projects(sample_projects, field, direction)
        seen_missing = False
        for project in result:
            value = project.get(field)
            if field == 'date_added':
                missing = value in ('', 'TBD', None)
            else:
                missing = value is None or str(value).strip() == ''
            if missing:
                seen_missing = True
            else:
                assert not seen_missing, f'{field} {direction}: present after missing'

    def test_missing_values_keep_input_order(self):
        projects = [
            {'id': 1, 'location': ''},
            {'id': 2, 'location': 'Austin'},
            {'id': 3, 'location': None},
            {'id': 4, 'location': NOT_SPECIFIED},
        ]
        assert _ids(sort_projects(projects, 'location', 'desc')) == [2, 1, 3, 4]

    def test_ties_keep_input_order(self):
        projects = [
            {'id': 1, 'stage': 'approved'},
            {'id': 2, 'stage': 'Approved'},
            {'id': 3, 'stage': 'APPROVED'},
        ]
        assert _ids(sort_projects(projects, 'stage', 'asc')) == [1, 2, 3]
        assert _ids(sort_projects(projects, 'stage', 'desc')) == [1, 2, 3]

    def test_id_sorts_numerically(self):
        projects = [{'id': 10}, {'id': 9}, {'id': 100}]
        assert _ids(sort_projects(projects, 'id', 'asc')) == [9, 10, 100]

    def test_unknown_field_falls_back_to_date_added(self, sample_projects):
        result = sort_projects(sample_projects, 'not_a_field', 'desc')
        assert _ids(result) == [3, 1, 2, 4]

    def test_does_not_mutate_input(self, sample_projects):
        before = list(sample_projects)
        sort_projects(sample_projects, 'project_name', 'desc')
        assert sample_projects == before


class TestDeriveView:
    """Tests for derive_view function."""

    def test_pagination_scenario(self):
        """60 results at 25 per page is 3 pages; page 3 holds 50..59."""
        projects = _make_projects(60)
        state = ViewState(sort_field='id', sort_direction='asc', page=3, page_size=25)

        view = derive_view(projects, state)

        assert view.total_pages == 3
        assert view.filtered_count == 60
        assert len(view.rows) == 10
        assert view.rows == projects[50:60]
        assert view.start_index == 50
        assert view.end_index == 60

    def test_no_matches_means_zero_pages(self, sample_projects):
        view = derive_view(sample_projects, ViewState(search_term='zzz'))
        assert view.total_pages == 0
        assert view.rows == []
        assert view.total_count == 4

    def test_page_past_the_end_is_empty(self):
        view = derive_view(_make_projects(5), ViewState(page=4, page_size=10))
        assert view.rows == []
        assert view.total_pages == 1

    def test_page_before_the_first_is_empty(self):
        view = derive_view(_make_projects(5), ViewState(page=0, page_size=10))
        assert view.rows == []

    def test_filtered_is_unpaginated(self):
        view = derive_view(_make_projects(30), ViewState(page_size=10))
        assert len(view.rows) == 10
        assert len(view.filtered) == 30

    def test_rows_are_filtered_subsequence_in_sort_order(self, sample_projects):
        state = ViewState(search_term='tx', sort_field='project_name', sort_direction='desc')
        view = derive_view(sample_projects, state)
        expected = sort_projects(
            filter_projects(sample_projects, state), 'project_name', 'desc'
        )
        assert view.rows == expected
        for row in view.rows:
            assert row in sample_projects

    def test_idempotent(self, sample_projects):
        state = ViewState(search_term='a', sort_field='stage', page_size=10)
        assert derive_view(sample_projects, state) == derive_view(sample_projects, state)

    def test_malformed_records_do_not_raise(self):
        projects = [{'id': 1}, {'id': 2, 'stage': 42, 'date_added': 7}, {}]
        view = derive_view(projects, ViewState(search_term='x', sort_field='stage'))
        assert view.filtered_count == 0
        view = derive_view(projects, ViewState(sort_field='date_added'))
        assert view.filtered_count == 3


class TestReducers:
    """Tests for ViewState reducer functions."""

    def test_defaults(self):
        state = ViewState()
        assert state.sort_field == 'date_added'
        assert state.sort_direction == 'desc'
        assert state.page == 1
        assert state.page_size == 25
        assert not state.has_active_filters

    def test_set_search_resets_page(self):
        state = set_search(ViewState(page=3), 'acme')
        assert state.search_term == 'acme'
        assert state.page == 1
        assert state.has_active_filters

    def test_set_filter(self):
        state = ViewState(page=2)
        assert set_filter(state, 'stage', 'Approved').filter_stage == 'Approved'
        assert set_filter(state, 'type', 'Commercial').filter_type == 'Commercial'
        assert set_filter(state, 'source', 'PDF').filter_source == 'PDF'
        assert set_filter(state, 'source', 'PDF').page == 1

    def test_set_filter_invalid_kind(self):
        with pytest.raises(ValueError, match='Invalid filter'):
            set_filter(ViewState(), 'location', 'Austin')

    def test_toggle_sort_same_field_flips(self):
        state = toggle_sort(ViewState(), 'date_added')
        assert state.sort_direction == 'asc'
        assert toggle_sort(state, 'date_added').sort_direction == 'desc'

    def test_toggle_sort_new_field_ascending(self):
        state = toggle_sort(ViewState(page=4), 'stage')
        assert state.sort_field == 'stage'
        assert state.sort_direction == 'asc'
        assert state.page == 1

    def test_toggle_sort_invalid_field(self):
        with pytest.raises(ValueError, match='Invalid sort field'):
            toggle_sort(ViewState(), 'password')

    def test_set_page_is_not_validated(self):
        assert set_page(ViewState(), 99).page == 99

    def test_set_page_size(self):
        state = set_page_size(ViewState(page=5), 50)
        assert state.page_size == 50
        assert state.page == 1

    def test_set_page_size_invalid(self):
        with pytest.raises(ValueError, match='Invalid page size'):
            set_page_size(ViewState(), 7)

    def test_clear_filters_keeps_sort_and_page_size(self):
        state = ViewState(
            search_term='acme', filter_stage='Approved', filter_type='Commercial',
            filter_source='PDF', sort_field='stage', sort_direction='asc',
            page=3, page_size=50,
        )
        cleared = clear_filters(state)
        assert cleared == ViewState(sort_field='stage', sort_direction='asc', page_size=50)

    def test_reducers_do_not_mutate(self):
        state = ViewState()
        set_search(state, 'x')
        toggle_sort(state, 'stage')
        assert state == ViewState()

    @pytest.mark.parametrize('page,total,expected', [
        (5, 3, 3),
        (0, 3, 1),
        (-2, 3, 1),
        (2, 3, 2),
        (4, 0, 1),
    ])
    def test_clamp_page(self, page, total, expected):
        assert clamp_page(ViewState(page=page), total).page == expected

    def test_clamp_page_returns_same_state_when_valid(self):
        state = ViewState(page=2)
        assert clamp_page(state, 3) is state


class TestViewStateArgs:
    """Tests for building a ViewState from query parameters."""

    def test_empty_args_give_defaults(self):
        assert view_state_from_args({}) == ViewState()

    def test_all_args(self):
        args = {
            'search': 'acme', 'stage': 'Approved', 'type': 'Commercial',
            'source': 'PDF', 'sort': 'stage', 'dir': 'asc', 'page': '2',
            'per_page': '50',
        }
        assert view_state_from_args(args) == ViewState(
            search_term='acme', filter_stage='Approved', filter_type='Commercial',
            filter_source='PDF', sort_field='stage', sort_direction='asc',
            page=2, page_size=50,
        )

    def test_malformed_args_fall_back(self):
        args = {'sort': 'nope', 'dir': 'sideways', 'page': 'x', 'per_page': '7'}
        assert view_state_from_args(args) == ViewState()

    def test_round_trip_through_args(self):
        state = ViewState(search_term='acme', sort_field='stage', sort_direction='asc',
                          page=2, page_size=PAGE_SIZE_OPTIONS[-1])
        assert view_state_from_args(view_state_to_args(state)) == state

    def test_defaults_are_omitted(self):
        assert view_state_to_args(ViewState()) == {}
