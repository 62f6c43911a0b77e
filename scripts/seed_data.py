#!/usr/bin/env python3
"""Seed data script for the Project Analytics Dashboard.

Generates realistic fake construction projects for development. The
mix deliberately includes blank fields, unparseable dates and every
kind of source link so each filter and the "Not specified" handling
can be seen in the dashboard.

Usage:
    python scripts/seed_data.py

The script is idempotent - it checks for existing projects and skips
seeding if data already exists. Use reset_db.py to clear and reseed.
"""
import random
import sys
from collections import Counter
from datetime import date, timedelta
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from project_dashboard import create_app, db
from project_dashboard.models import Project, SourceType, display_value, source_type


# Sample data constants
CITIES = [
    "Austin, TX",
    "Houston, TX",
    "Dallas, TX",
    "San Antonio, TX",
    "Fort Worth, TX",
    "El Paso, TX",
    "Round Rock, TX",
    "Georgetown, TX",
    "Frisco, TX",
    "McKinney, TX",
]

PROJECT_TYPES = [
    "Commercial",
    "Residential",
    "Mixed Use",
    "Infrastructure",
    "Industrial",
    "Healthcare",
    "Education",
]

STAGES = [
    "Approved",
    "Proposed",
    "In Planning",
    "Under Construction",
    "Completed",
    "Permit Approved",
    "Design",
]

DEVELOPERS = [
    "Acme Development Co",
    "Lone Star Builders",
    "Hill Country Partners",
    "Trinity Realty Group",
    "Gulf Coast Constructors",
    "Red River Holdings",
]

# Project name templates by type
PROJECT_TEMPLATES = {
    "Commercial": ["{city} Office Tower", "{city} Retail Center Phase {num}"],
    "Residential": ["{city} Apartments", "The Residences at {city}"],
    "Mixed Use": ["{city} Town Square", "{city} Mixed Use Redevelopment"],
    "Infrastructure": ["{city} Water Treatment Expansion", "FM {num} Road Widening"],
    "Industrial": ["{city} Distribution Center", "{city} Logistics Park Building {num}"],
    "Healthcare": ["{city} Medical Office Building", "{city} Regional Hospital Addition"],
    "Education": ["{city} ISD Elementary School No. {num}", "{city} College Science Hall"],
}


def generate_project_name(project_type: str, city: str, counter: int) -> str:
    """Generate a realistic project name based on type."""
    template = random.choice(PROJECT_TEMPLATES[project_type])
    return template.format(city=city.split(",")[0], num=counter)


def generate_source_link(counter: int) -> str | None:
    """Generate a source link covering every SourceType."""
    kind = random.choice(["pdf", "texas", "texas_pdf", "website", None])
    if kind == "pdf":
        return f"https://example-city.gov/agendas/2025/item-{counter}.pdf"
    if kind == "texas":
        return f"{SourceType.TEXAS_PREFIX}Search/Project/TABS{2025000 + counter}"
    if kind == "texas_pdf":
        return f"{SourceType.TEXAS_PREFIX}Documents/TABS{2025000 + counter}.pdf"
    if kind == "website":
        return f"https://news.example.com/construction/{counter}"
    return None


def generate_value() -> str | None:
    """Generate an estimated value as free text."""
    if random.random() < 0.2:
        return None
    millions = random.choice([1.2, 4.5, 12, 27.5, 80, 150])
    return f"${millions}M"


def create_seed_projects(count: int = 40) -> list[dict]:
    """Generate list of seed project data dictionaries."""
    today = date.today()
    projects = []

    for counter in range(1, count + 1):
        city = random.choice(CITIES)
        project_type = random.choice(PROJECT_TYPES)
        stakeholders = ", ".join(random.sample(DEVELOPERS, random.randint(1, 3)))

        # Roughly one in ten dates is missing or garbled
        roll = random.random()
        if roll < 0.05:
            date_added = ""
        elif roll < 0.1:
            date_added = "TBD"
        else:
            date_added = (today - timedelta(days=random.randint(0, 180))).isoformat()

        projects.append({
            "project_name": generate_project_name(project_type, city, counter),
            "location": city if random.random() > 0.1 else None,
            "project_type": project_type if random.random() > 0.1 else None,
            "stage": random.choice(STAGES) if random.random() > 0.1 else "",
            "stakeholders": stakeholders,
            "project_value": generate_value(),
            "date_added": date_added,
            "source_link": generate_source_link(counter),
        })

    return projects


def seed_database(count: int = 40) -> int:
    """Create the projects table if needed and insert seed projects.

    Returns:
        Number of projects created.
    """
    db.create_all()

    created_count = 0
    for data in create_seed_projects(count):
        project = Project(**data)
        db.session.add(project)
        created_count += 1

    db.session.commit()
    return created_count


def print_summary() -> None:
    """Print how the stored projects split across stages and sources."""
    projects = db.session.query(Project).all()
    stages = Counter(display_value(p.stage) for p in projects)
    for stage, stage_count in sorted(stages.items()):
        print(f"  - {stage}: {stage_count}")

    sources = Counter(source_type(p.source_link) for p in projects)
    for source, source_count in sorted(sources.items()):
        print(f"  - Source {source}: {source_count}")


def main():
    """Main entry point for seed script."""
    app = create_app()

    with app.app_context():
        db.create_all()

        # Check if projects already exist
        existing_count = db.session.query(Project).count()
        if existing_count > 0:
            print(f"Database already contains {existing_count} projects.")
            print("To reseed, run: python scripts/reset_db.py")
            return

        print("Seeding database with fake projects...")
        count = seed_database()
        print(f"Created {count} projects.")

        print_summary()

        print("\nSeed complete!")


if __name__ == "__main__":
    main()
