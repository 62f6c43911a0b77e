#!/usr/bin/env python3
"""Reset the dashboard's projects table to freshly generated data.

Drops every row of the projects table, generates a new batch with
seed_data and prints the stage and source breakdown the dashboard
filters will show.

Usage:
    python scripts/reset_db.py [--count N] [--yes]

WARNING: This deletes ALL existing project data!
"""
import argparse
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from project_dashboard import create_app, db
from project_dashboard.models import Project
from project_dashboard.services import count_projects
from scripts.seed_data import print_summary, seed_database


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--count', type=int, default=40,
                        help='number of projects to generate (default: 40)')
    parser.add_argument('--yes', action='store_true',
                        help='skip the confirmation prompt')
    return parser.parse_args(argv)


def reset_projects(count: int) -> tuple[int, int]:
    """Replace every stored project with count generated ones.

    Returns:
        Tuple of (deleted, created).
    """
    db.create_all()
    deleted = db.session.query(Project).delete()
    db.session.commit()
    return deleted, seed_database(count)


def main(argv=None):
    args = parse_args(argv)
    app = create_app()

    with app.app_context():
        db.create_all()
        existing = count_projects()
        if existing and not args.yes:
            answer = input(f"Delete {existing} projects and reseed? [y/N]: ")
            if answer.lower() != 'y':
                print("Aborted.")
                return

        deleted, created = reset_projects(args.count)
        print(f"Replaced {deleted} projects with {created} generated ones:")
        print_summary()


if __name__ == "__main__":
    main()
