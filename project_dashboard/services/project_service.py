"""Project service for reading the project list.

This module provides the one data access operation the dashboard
needs: fetch every project, newest first. Routes call these functions;
they interact with models and database.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from project_dashboard import db
from project_dashboard.exceptions import DataUnavailable
from project_dashboard.models import Project

logger = logging.getLogger(__name__)


def fetch_projects() -> list[dict]:
    """Fetch all projects ordered by date_added, newest first.

    The fetch is all-or-nothing: either every row is returned or
    DataUnavailable is raised.

    Returns:
        List of project dicts (see Project.to_dict).

    Raises:
        DataUnavailable: If the database query fails.
    """
    try:
        projects = (
            db.session.query(Project)
            .order_by(Project.date_added.desc())
            .all()
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Database error while fetching projects')
        raise DataUnavailable() from e

    logger.debug('Fetched %d projects', len(projects))
    return [p.to_dict() for p in projects]


def count_projects() -> int:
    """Count stored projects.

    Raises:
        DataUnavailable: If the database query fails.
    """
    try:
        return db.session.query(Project).count()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception('Database error while counting projects')
        raise DataUnavailable() from e
