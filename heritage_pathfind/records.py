"""Person records read from the relationship table, and how duplicates merge."""

import csv
import logging
import re
from dataclasses import dataclass, replace
from typing import Iterator, Optional, TextIO

from .constants import (
    CSV_DELIMITER, PERSON_ID_COLUMN, SPOUSE_ID_COLUMN, FATHER_ID_COLUMN,
    MOTHER_ID_COLUMN, NAME_COLUMN, REQUIRED_COLUMNS,
)

logger = logging.getLogger(__name__)

ID_PATTERN = re.compile(r"[+-]?[0-9]+")

# Record attributes holding the id of a relative, in edge construction order.
RELATIVE_FIELDS = ("spouse_id", "father_id", "mother_id")


class RowParseError(ValueError):
    """A row of the relationship table could not be turned into a record."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}")


@dataclass(frozen=True)
class PersonRecord:
    person_id: int
    name: str
    spouse_id: Optional[int] = None
    father_id: Optional[int] = None
    mother_id: Optional[int] = None


def merge_records(existing: PersonRecord, update: PersonRecord) -> PersonRecord:
    """
    Combines a later row for the same person into the record known so far.

    Relative ids present in `update` win; ids missing from `update` never
    erase what `existing` already holds. Identifier and name stay those of
    `existing`.

    Args:
        existing (PersonRecord): The canonical record built from earlier rows.
        update (PersonRecord): A record parsed from a later row with the same id.

    Returns:
        PersonRecord: A new record; neither argument is modified.
    """
    changes = {
        field: getattr(update, field)
        for field in RELATIVE_FIELDS
        if getattr(update, field) is not None
    }
    return replace(existing, **changes)


def _parse_id(value, column, line_number, required=False):
    value = (value or "").strip()
    if not value:
        if required:
            raise RowParseError(line_number, f"missing {column}")
        return None
    if not ID_PATTERN.fullmatch(value):
        raise RowParseError(line_number, f"{column} is not an integer: {value!r}")
    return int(value)


def parse_row(row: dict, line_number: int) -> PersonRecord:
    """
    Converts one `csv.DictReader` row into a `PersonRecord`.

    Empty relative columns become None. A row with too many or too few
    fields, or with a non-numeric id, raises `RowParseError`.
    """
    if None in row:
        raise RowParseError(line_number, "row has more fields than the header")
    if None in row.values():
        raise RowParseError(line_number, "row has fewer fields than the header")

    return PersonRecord(
        person_id=_parse_id(row[PERSON_ID_COLUMN], PERSON_ID_COLUMN, line_number, required=True),
        name=row[NAME_COLUMN],
        spouse_id=_parse_id(row[SPOUSE_ID_COLUMN], SPOUSE_ID_COLUMN, line_number),
        father_id=_parse_id(row[FATHER_ID_COLUMN], FATHER_ID_COLUMN, line_number),
        mother_id=_parse_id(row[MOTHER_ID_COLUMN], MOTHER_ID_COLUMN, line_number),
    )


def read_records(stream: TextIO, delimiter: str = CSV_DELIMITER) -> Iterator[PersonRecord]:
    """
    Streams person records from a delimited relationship table.

    The header row is mandatory and must name every column in
    `REQUIRED_COLUMNS`; any other columns are ignored.

    Args:
        stream: An open text stream (opened with newline='').
        delimiter (str): Field separator, ';' unless configured otherwise.

    Yields:
        PersonRecord: One record per data row, in file order.

    Raises:
        RowParseError: On a missing header, missing columns or a malformed row.
    """
    reader = csv.DictReader(stream, delimiter=delimiter)
    try:
        if not reader.fieldnames:
            raise RowParseError(1, "missing header row")

        missing = [column for column in REQUIRED_COLUMNS if column not in reader.fieldnames]
        if missing:
            raise RowParseError(1, f"header is missing column(s): {', '.join(missing)}")

        for row in reader:
            record = parse_row(row, reader.line_num)
            logger.debug(f"Parsed line {reader.line_num}: {record}")
            yield record
    except csv.Error as e:
        raise RowParseError(max(reader.line_num, 1), str(e)) from e
    except UnicodeDecodeError as e:
        # Decoding runs ahead of the reader; the bad bytes are at or past this line.
        raise RowParseError(reader.line_num + 1, f"not valid text: {e}") from e
