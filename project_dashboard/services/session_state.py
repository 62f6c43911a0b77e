"""Dashboard session state: fetch lifecycle and screen selection.

The project list is fetched on the first dashboard load and again on
every reload (manual refresh). A refresh keeps the previous rows on
screen until it settles (stale-while-revalidate); a refresh requested
while another is still pending is ignored. FetchStore holds the last
state for every request the process serves.
"""
import threading
from dataclasses import dataclass, field, replace
from typing import Optional

from project_dashboard.auth import AuthState


# Screens the dashboard can show
SCREEN_LOADING = 'loading'
SCREEN_SIGN_IN = 'sign_in'
SCREEN_ERROR = 'error'
SCREEN_DASHBOARD = 'dashboard'


@dataclass(frozen=True)
class FetchState:
    """Result of fetching the project list, and whether one is pending.

    Attributes:
        projects: Last successfully fetched projects.
        loading: Initial load in progress (nothing to show yet).
        refreshing: Manual refresh in progress; projects stay visible.
        error: Message from the last failed fetch, if any.
        loaded: True once any fetch has succeeded.
    """
    projects: tuple = field(default_factory=tuple)
    loading: bool = False
    refreshing: bool = False
    error: Optional[str] = None
    loaded: bool = False

    @property
    def in_flight(self) -> bool:
        return self.loading or self.refreshing


def begin_load(state: FetchState) -> FetchState:
    """Start the initial load, clearing any previous error."""
    return replace(state, loading=True, error=None)


def begin_refresh(state: FetchState) -> tuple[FetchState, bool]:
    """Start a manual refresh unless a fetch is already pending.

    Returns:
        Tuple of (new state, started). When started is False the
        caller must not issue a fetch.
    """
    if state.in_flight:
        return state, False
    return replace(state, refreshing=True, error=None), True


def fetch_succeeded(state: FetchState, projects) -> FetchState:
    """Replace the whole project list with a fresh result."""
    return FetchState(projects=tuple(projects), loaded=True)


def fetch_failed(state: FetchState, message: str) -> FetchState:
    """Record a failed fetch, keeping any previously loaded projects."""
    return replace(state, loading=False, refreshing=False, error=message)


def select_screen(auth: AuthState, fetch: FetchState) -> str:
    """Pick which screen to render.

    Auth takes priority: a loading screen while the session is being
    resolved, the sign-in prompt when signed out. After that a failed
    fetch with nothing to show is an error; a failed refresh still
    shows the previous rows.
    """
    if not auth.is_loaded:
        return SCREEN_LOADING
    if not auth.is_signed_in:
        return SCREEN_SIGN_IN
    if fetch.loading:
        return SCREEN_LOADING
    if fetch.error and not fetch.loaded:
        return SCREEN_ERROR
    return SCREEN_DASHBOARD


class FetchStore:
    """The dashboard's FetchState, shared by all requests of one app.

    Every signed-in user sees the same projects table, so the last
    successful fetch is kept per application and shown while a newer
    fetch is pending or after one fails.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._state = FetchState()

    @property
    def state(self) -> FetchState:
        with self._lock:
            return self._state

    def start(self) -> tuple[FetchState, bool]:
        """Begin the initial load or a refresh.

        Returns:
            Tuple of (state, started). When started is False another
            request is already fetching and the caller shows state as
            it is.
        """
        with self._lock:
            if self._state.in_flight:
                return self._state, False
            if self._state.loaded:
                self._state, started = begin_refresh(self._state)
            else:
                self._state, started = begin_load(self._state), True
            return self._state, started

    def finish(self, state: FetchState) -> FetchState:
        """Store the settled state of the fetch started with start()."""
        with self._lock:
            self._state = state
            return state

    def reset(self, state: Optional[FetchState] = None) -> None:
        with self._lock:
            self._state = state or FetchState()
