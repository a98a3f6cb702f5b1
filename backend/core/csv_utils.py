"""
CSV helpers for imports and templates.

Imports are simple: the first row is the header, each later row becomes a
dict keyed by the (optionally mapped) header. Rows whose column count differs
from the header are skipped rather than guessed at.
"""
import csv
import io
import logging
import re

from .exceptions import CSVParseError

logger = logging.getLogger(__name__)


def normalize_header(header):
    return header.strip().strip('"').strip()


def parse_csv_text(text, field_mapping=None, snake_case_headers=False):
    """
    Turn CSV text into a list of row dicts.

    Args:
        text: Raw CSV content
        field_mapping: Optional {lowercased header: field name} map; headers not in
            the map are lowercased and used as-is
        snake_case_headers: Lowercase headers and join words with underscores
            ("Short Name" -> "short_name") when no mapping is given

    Raises:
        CSVParseError: if there is no header row or no data rows
    """
    if text.startswith('\ufeff'):
        text = text[1:]

    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        raise CSVParseError('CSV file must contain at least a header row and one data row')

    reader = csv.reader(lines)
    raw_headers = [normalize_header(h) for h in next(reader)]

    if field_mapping is not None:
        headers = [field_mapping.get(h.lower(), h.lower()) for h in raw_headers]
    elif snake_case_headers:
        headers = [re.sub(r"\s+", "_", h.lower()) for h in raw_headers]
    else:
        headers = raw_headers

    rows = []
    skipped = 0
    for values in reader:
        if len(values) != len(headers):
            skipped += 1
            continue
        rows.append({header: value.strip() for header, value in zip(headers, values)})

    if skipped:
        logger.warning(f"Skipped {skipped} CSV rows with a mismatched column count")

    return rows


def build_csv(headers, rows=None):
    """Write headers and rows (lists or dicts keyed by header) to CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(headers)
    for row in rows or []:
        if isinstance(row, dict):
            writer.writerow([row.get(h, '') for h in headers])
        else:
            writer.writerow(row)
    return buffer.getvalue()


def read_uploaded_csv(request, file_field='file', text_field='csv_data'):
    """
    Get CSV text from a multipart upload or a JSON/text field.

    Raises:
        CSVParseError: if neither is present or the file is not UTF-8
    """
    upload = request.FILES.get(file_field) if hasattr(request, 'FILES') else None
    if upload is not None:
        if upload.name and not upload.name.lower().endswith('.csv'):
            raise CSVParseError('Please upload a valid CSV file.')
        try:
            return upload.read().decode('utf-8')
        except UnicodeDecodeError:
            raise CSVParseError('CSV file must be UTF-8 encoded.')

    text = request.data.get(text_field) if hasattr(request.data, 'get') else None
    if not text:
        raise CSVParseError('No CSV data provided.')
    return text
