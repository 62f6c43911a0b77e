"""SQLAlchemy models package.

This package contains all database models for the application.
Models are imported here and exposed for use throughout the app.
"""
from project_dashboard.models.project import (
    NOT_SPECIFIED,
    Project,
    SourceType,
    StageClass,
    display_value,
    format_date_long,
    format_date_short,
    is_blank,
    parse_date_added,
    source_type,
    stage_class,
)

__all__ = [
    'NOT_SPECIFIED',
    'Project',
    'SourceType',
    'StageClass',
    'display_value',
    'format_date_long',
    'format_date_short',
    'is_blank',
    'parse_date_added',
    'source_type',
    'stage_class',
]
