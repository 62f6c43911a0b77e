"""Pytest fixtures for the Project Analytics Dashboard tests.

This module provides fixtures for setting up test database and application
context. Uses an in-memory SQLite database to ensure test isolation and
avoid affecting development data.
"""
import pytest

from project_dashboard import create_app, db
from project_dashboard.config import Config
from project_dashboard.models import Project


class TestConfig(Config):
    """Test configuration using in-memory SQLite database.

    This ensures tests are isolated from development data and run quickly.
    """
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret-key'
    SIGN_IN_URL = 'https://id.example.com/sign-in'
    SIGN_IN_SECRET = 'test-provider-secret'
    EXPORT_FILENAME_BASE = 'project_data'


@pytest.fixture(scope='function')
def app():
    """Create and configure a test application instance.

    Uses an in-memory SQLite database to ensure each test starts with
    a clean database. Tables are created fresh for each test function.

    Yields:
        Flask application configured for testing.
    """
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create a test client for the application.

    Args:
        app: Flask application fixture.

    Returns:
        Flask test client for making HTTP requests.
    """
    return app.test_client()


@pytest.fixture(scope='function')
def signed_in_client(client):
    """Test client with a signed-in user in its session."""
    with client.session_transaction() as session:
        session['user_id'] = 'user_123'
        session['first_name'] = 'Dana'
        session['last_name'] = 'Reyes'
    return client


@pytest.fixture
def sample_projects():
    """Provide project records as returned by Project.to_dict.

    Covers blank and sentinel fields, an unparseable date, and every
    source link classification.

    Returns:
        List of project dicts.
    """
    return [
        {
            'id': 1,
            'project_name': 'Austin Office Tower',
            'location': 'Austin, TX',
            'project_type': 'Commercial',
            'stage': 'Approved',
            'stakeholders': 'Lone Star Builders',
            'project_value': '$80M',
            'date_added': '2024-01-05',
            'source_link': 'https://www.tdlr.texas.gov/TABS/Search/Project/TABS2024001',
        },
        {
            'id': 2,
            'project_name': 'Houston Distribution Center',
            'location': 'Houston, TX',
            'project_type': 'Industrial',
            'stage': 'In Planning',
            'stakeholders': 'Acme Development Co',
            'project_value': '',
            'date_added': '',
            'source_link': 'https://example-city.gov/agendas/item-2.pdf',
        },
        {
            'id': 3,
            'project_name': 'dallas Town Square',
            'location': '',
            'project_type': 'Mixed Use',
            'stage': 'Proposed',
            'stakeholders': 'Trinity Realty Group',
            'project_value': '$12M',
            'date_added': '2024-03-01',
            'source_link': 'https://news.example.com/construction/3',
        },
        {
            'id': 4,
            'project_name': 'Frisco Elementary School',
            'location': 'Frisco, TX',
            'project_type': None,
            'stage': None,
            'stakeholders': '   ',
            'project_value': '$27.5M',
            'date_added': 'TBD',
            'source_link': None,
        },
    ]


@pytest.fixture
def stored_projects(app, sample_projects):
    """Insert the sample projects into the database.

    Returns:
        The sample project dicts that were stored.
    """
    with app.app_context():
        for data in sample_projects:
            db.session.add(Project(**data))
        db.session.commit()
    return sample_projects
