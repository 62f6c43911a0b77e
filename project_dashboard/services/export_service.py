"""Export service for downloading the project table.

This module serializes an ordered list of projects (normally the
filtered and sorted, but not paginated, table) to CSV, JSON or a
printable HTML report. Routes call these functions and turn the
result into a file download.
"""
import csv
import io
import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from flask import render_template

from project_dashboard.models import (
    StageClass,
    display_value,
    format_date_short,
    is_blank,
    source_type,
    stage_class,
)

logger = logging.getLogger(__name__)


FORMAT_CSV = 'csv'
FORMAT_JSON = 'json'
FORMAT_HTML = 'html'

EXPORT_FORMATS = [FORMAT_CSV, FORMAT_JSON, FORMAT_HTML]

MIMETYPES = {
    FORMAT_CSV: 'text/csv',
    FORMAT_JSON: 'application/json',
    FORMAT_HTML: 'text/html',
}

# CSV export column headers (order matters)
CSV_FIELDNAMES = [
    'ID',
    'Project Name',
    'Location',
    'Project Type',
    'Stage',
    'Stakeholders',
    'Project Value',
    'Source Link',
    'Date Added',
]

# Text columns, in CSV order, between ID and Date Added
CSV_TEXT_FIELDS = [
    'project_name',
    'location',
    'project_type',
    'stage',
    'stakeholders',
    'project_value',
    'source_link',
]

# The report only has three stage styles; completed is shown as default
REPORT_STAGE_CLASSES = {
    StageClass.APPROVED: 'stage-approved',
    StageClass.PROPOSED: 'stage-proposed',
}


@dataclass(frozen=True)
class ExportFile:
    """A serialized export ready for download."""
    content: bytes
    filename: str
    mimetype: str


def export_filename(base: str, fmt: str, today: Optional[date] = None) -> str:
    """Build the suggested download filename.

    Args:
        base: Filename prefix, e.g. "project_data".
        fmt: One of EXPORT_FORMATS.
        today: Export date; defaults to today.

    Returns:
        "{base}_{YYYY-MM-DD}.csv", "{base}_{YYYY-MM-DD}.json" or
        "{base}_report_{YYYY-MM-DD}.html".
    """
    stamp = (today or date.today()).isoformat()
    if fmt == FORMAT_HTML:
        return f'{base}_report_{stamp}.html'
    return f'{base}_{stamp}.{fmt}'


def projects_to_csv(projects: Sequence[Mapping[str, Any]]) -> str:
    """Serialize projects to CSV.

    Every text column is sentinel-substituted and quoted, with embedded
    quotes doubled. The numeric ID and the short date (or the sentinel)
    are left bare. Rows keep the input order.

    Args:
        projects: Project records in the order they should appear.

    Returns:
        CSV-formatted string with a header row.
    """
    output = io.StringIO()
    # The date cell is unquoted, so it has its own writer that ends the row
    text_writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator=',')
    date_writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
    output.write(','.join(CSV_FIELDNAMES) + '\n')

    for project in projects:
        row = [project.get('id')]
        row.extend(display_value(project.get(f)) for f in CSV_TEXT_FIELDS)
        text_writer.writerow(row)
        date_writer.writerow([format_date_short(project.get('date_added'))])

    return output.getvalue()


def projects_to_json(projects: Sequence[Mapping[str, Any]]) -> str:
    """Serialize projects to pretty-printed JSON.

    Records are written exactly as given; blanks are not replaced with
    the sentinel.
    """
    return json.dumps([dict(p) for p in projects], indent=2, ensure_ascii=False)


def _report_row(project: Mapping[str, Any]) -> dict:
    """Prepare one project for the HTML report template."""
    link = project.get('source_link')
    return {
        'project_name': display_value(project.get('project_name')),
        'location': display_value(project.get('location')),
        'project_type': display_value(project.get('project_type')),
        'stage': display_value(project.get('stage')),
        'stage_class': REPORT_STAGE_CLASSES.get(
            stage_class(project.get('stage')), 'stage-default'
        ),
        'stakeholders': display_value(project.get('stakeholders')),
        'project_value': display_value(project.get('project_value')),
        'source_link': None if is_blank(link) else str(link).strip(),
        'source_type': source_type(link),
        'date_added': format_date_short(project.get('date_added')),
    }


def projects_to_html(projects: Sequence[Mapping[str, Any]],
                     today: Optional[date] = None) -> str:
    """Render projects as a self-contained printable HTML report.

    Requires an application context for template rendering.

    Args:
        projects: Project records in display order.
        today: Generation date shown in the header; defaults to today.

    Returns:
        Complete HTML document as a string.
    """
    generated_on = today or date.today()
    return render_template(
        'exports/report.html',
        rows=[_report_row(p) for p in projects],
        total=len(projects),
        generated_on=f'{generated_on.month}/{generated_on.day}/{generated_on.year}',
    )


def serialize(projects: Sequence[Mapping[str, Any]], fmt: str,
              base: str = 'project_data',
              today: Optional[date] = None) -> ExportFile:
    """Serialize projects to a downloadable file.

    Args:
        projects: Project records in the order they should appear.
        fmt: One of EXPORT_FORMATS.
        base: Filename prefix.
        today: Export date for the filename and report header.

    Returns:
        ExportFile with UTF-8 content, filename and MIME type.

    Raises:
        ValueError: If fmt is not a supported format.
    """
    fmt = (fmt or '').lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(
            f"Invalid export format: {fmt}. Must be one of: {EXPORT_FORMATS}"
        )

    if fmt == FORMAT_CSV:
        content = projects_to_csv(projects)
    elif fmt == FORMAT_JSON:
        content = projects_to_json(projects)
    else:
        content = projects_to_html(projects, today)

    logger.info('Exported %d projects as %s', len(projects), fmt)
    return ExportFile(
        content=content.encode('utf-8'),
        filename=export_filename(base, fmt, today),
        mimetype=MIMETYPES[fmt],
    )
