"""CSV upload -> team list (all rows or nothing)."""
from __future__ import annotations

import csv
import io
import logging
from decimal import Decimal, InvalidOperation

from apps.thermometer.errors import CsvValidationError, ValidationError
from apps.thermometer.models.campaign import Team

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "image_url", "total_raised")

SAMPLE_CSV = """name,image_url,total_raised
Team Alpha,https://example.com/alpha.jpg,2500.00
Team Beta,https://example.com/beta.jpg,3200.50
Team Gamma,,1800.00
PUP ALL NIGHT: THE PM PACK,,6987.00
UnderDogs,https://example.com/underdogs.png,5010.00
Hairball Wizards,,4101.25
"""


def _decode(data: bytes) -> str:
    try:
        # utf-8-sig: Excel prepends a BOM
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise CsvValidationError(0, None, f"file is not valid UTF-8 (byte {e.start})")


def _bind_columns(header: list[str]) -> dict[str, int]:
    """Column name -> index. First occurrence wins, unknown columns are ignored."""
    index: dict[str, int] = {}
    for i, raw in enumerate(header):
        index.setdefault(raw.strip(), i)
    for col in REQUIRED_COLUMNS:
        if col not in index:
            raise CsvValidationError(0, col, "required column is missing")
    return index


def _parse_amount(raw: str, row: int) -> float:
    text = raw.strip()
    if not text:
        raise CsvValidationError(row, "total_raised", "amount is empty")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise CsvValidationError(row, "total_raised", f"not a number: {text[:40]!r}")
    if not amount.is_finite():
        raise CsvValidationError(row, "total_raised", "must be a finite number")
    if amount < 0:
        raise CsvValidationError(row, "total_raised", "must be non-negative")
    return float(amount)


def parse_teams_csv(data: bytes) -> list[Team]:
    """Parse an uploaded CSV. Raises CsvValidationError on the first bad row."""
    reader = csv.reader(io.StringIO(_decode(data), newline=""))
    row_no = 0
    try:
        header = next(reader, None)
        if not header:
            raise CsvValidationError(0, "name", "header row is missing")
        columns = _bind_columns(header)
        teams: list[Team] = []
        for record in reader:
            if not any(cell.strip() for cell in record):
                continue
            row_no += 1
            cells = {
                col: (record[idx] if idx < len(record) else "")
                for col, idx in columns.items()
                if col in REQUIRED_COLUMNS
            }
            name = cells["name"].strip()
            if not name:
                raise CsvValidationError(row_no, "name", "team name is empty")
            amount = _parse_amount(cells["total_raised"], row_no)
            try:
                teams.append(Team(name=name, image_url=cells["image_url"].strip() or None, total_raised=amount))
            except ValidationError as e:
                raise CsvValidationError(row_no, e.field, e.reason)
    except csv.Error as e:
        raise CsvValidationError(row_no + 1, None, f"malformed CSV: {e}")
    logger.info("csv_parsed rows=%s", len(teams))
    return teams
