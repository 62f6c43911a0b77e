"""Project model for the Project Analytics Dashboard.

This module defines the Project model which represents a construction
project record read from the projects table, along with the helpers that
interpret its free-text fields for display, filtering and sorting.
"""
from datetime import datetime, timezone
from typing import Any, Optional

from project_dashboard import db


# Display/compare substitute for any absent or blank field
NOT_SPECIFIED = 'Not specified'

# Alternate date layouts seen in scraped data, tried after ISO 8601
_DATE_FORMATS = ['%m/%d/%Y', '%Y/%m/%d', '%B %d, %Y', '%b %d, %Y']


class SourceType:
    """Classification of a project's source link.

    Values are plain strings so they can be used directly as filter
    option values in the dashboard.
    """
    PDF = "PDF"
    TEXAS = "Texas"
    WEBSITE = "Website"
    NOT_SPECIFIED = NOT_SPECIFIED

    # Texas Department of Licensing and Regulation project registry
    TEXAS_PREFIX = "https://www.tdlr.texas.gov/TABS/"

    ALL = [PDF, TEXAS, WEBSITE, NOT_SPECIFIED]


class StageClass:
    """Display buckets for a project's free-text stage."""
    APPROVED = "approved"
    PROPOSED = "proposed"
    COMPLETED = "completed"
    DEFAULT = "default"

    ALL = [APPROVED, PROPOSED, COMPLETED, DEFAULT]


class Project(db.Model):
    """SQLAlchemy model for dashboard projects.

    Every descriptive column is free text and nullable; the data is
    scraped from public sources and loaded by an external process, so
    this application only ever reads it.

    Attributes:
        id: Primary key, auto-incrementing integer.
        project_name: Name/title of the project.
        location: City, county or address of the project.
        project_type: Category such as "Commercial" or "Infrastructure".
        stage: Free-text lifecycle stage ("Approved", "In Planning", ...).
        stakeholders: Owners, developers and contractors involved.
        project_value: Estimated value, stored as text ("$4.5M").
        date_added: Date the record was scraped, as an ISO-ish string.
        source_link: URL of the page or document the record came from.
    """
    __tablename__ = 'projects'

    # Primary key
    id: int = db.Column(db.Integer, primary_key=True)

    # Project identification
    project_name: Optional[str] = db.Column(db.Text, nullable=True)
    location: Optional[str] = db.Column(db.Text, nullable=True)

    # Categorical fields
    project_type: Optional[str] = db.Column(db.Text, nullable=True)
    stage: Optional[str] = db.Column(db.Text, nullable=True)

    # Details
    stakeholders: Optional[str] = db.Column(db.Text, nullable=True)
    project_value: Optional[str] = db.Column(db.Text, nullable=True)

    # Provenance
    date_added: Optional[str] = db.Column(db.Text, nullable=True)
    source_link: Optional[str] = db.Column(db.Text, nullable=True)

    def __repr__(self) -> str:
        """Return string representation of the project."""
        return f'<Project {self.id}: {self.project_name}>'

    @property
    def source_type(self) -> str:
        """Derived classification of the source link."""
        return source_type(self.source_link)

    def to_dict(self) -> dict:
        """Convert project to dictionary representation.

        This is the record shape the view and export services operate
        on. Values are passed through untouched, blanks included.

        Returns:
            Dictionary with all project fields.
        """
        return {
            'id': self.id,
            'project_name': self.project_name,
            'location': self.location,
            'project_type': self.project_type,
            'stage': self.stage,
            'stakeholders': self.stakeholders,
            'project_value': self.project_value,
            'date_added': self.date_added,
            'source_link': self.source_link,
        }


# ============================================================================
# Field helpers
# ============================================================================

def is_blank(value: Any) -> bool:
    """Check whether a field value counts as absent.

    None, empty and whitespace-only strings, and the literal sentinel
    text are all treated as absent.
    """
    if value is None:
        return True
    text = str(value).strip()
    return text == '' or text == NOT_SPECIFIED


def display_value(value: Any) -> str:
    """Return the user-facing string for a field value.

    Args:
        value: Raw field value from a project record.

    Returns:
        The value as a string, or NOT_SPECIFIED when it is blank.
    """
    if is_blank(value):
        return NOT_SPECIFIED
    return str(value)


def source_type(source_link: Optional[str]) -> str:
    """Classify a source URL.

    The ".pdf" suffix check runs before the Texas prefix check, so a
    PDF hosted on the Texas registry is classified as PDF.

    Args:
        source_link: URL string or None.

    Returns:
        One of the SourceType values.
    """
    if is_blank(source_link):
        return SourceType.NOT_SPECIFIED
    source_link = str(source_link).strip()
    if source_link.endswith('.pdf'):
        return SourceType.PDF
    if source_link.startswith(SourceType.TEXAS_PREFIX):
        return SourceType.TEXAS
    return SourceType.WEBSITE


def stage_class(stage: Optional[str]) -> str:
    """Classify a free-text stage into a display bucket.

    Matching is a case-insensitive substring test, checked in order:
    approved, then proposed/planning, then completed.
    """
    lowered = (stage or '').lower()
    if 'approved' in lowered:
        return StageClass.APPROVED
    if 'proposed' in lowered or 'planning' in lowered:
        return StageClass.PROPOSED
    if 'completed' in lowered:
        return StageClass.COMPLETED
    return StageClass.DEFAULT


def parse_date_added(value: Any) -> Optional[datetime]:
    """Parse a date_added string into a naive UTC datetime.

    Args:
        value: Raw date_added value.

    Returns:
        Parsed datetime, or None if the value is blank or unparseable.
    """
    if is_blank(value):
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        parsed = None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            for fmt in _DATE_FORMATS:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
        if parsed is None:
            return None

    # Aware and naive datetimes cannot be compared with each other
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def format_date_short(value: Any) -> str:
    """Format date_added as a US short date (1/5/2024) for exports."""
    parsed = parse_date_added(value)
    if parsed is None:
        return NOT_SPECIFIED
    return f'{parsed.month}/{parsed.day}/{parsed.year}'


def format_date_long(value: Any) -> str:
    """Format date_added as "Jan 5, 2024" for the dashboard table."""
    parsed = parse_date_added(value)
    if parsed is None:
        return NOT_SPECIFIED
    return f'{parsed.strftime("%b")} {parsed.day}, {parsed.year}'
