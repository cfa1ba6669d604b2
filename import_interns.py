"""
Provision intern records from a CSV file.

Usage: python import_interns.py interns.csv

Expected columns: name,college,email,field,start_date,end_date (dates as YYYY-MM-DD).
Rows whose email already has a record are left untouched.
"""
import csv
import sys
from datetime import datetime
from typing import Iterable, List, Tuple

from dotenv import load_dotenv

from src.certifier.config.settings import DATABASE_URL, normalize_email
from src.certifier.db.session import Database
from src.certifier.repositories.intern_repository import InternRepository

REQUIRED_COLUMNS = ("name", "college", "email", "field", "start_date", "end_date")


def parse_intern_rows(rows: Iterable[dict]) -> Tuple[List[dict], List[str]]:
    """Split CSV rows into clean records and human-readable errors."""
    records, errors = [], []
    for line_no, row in enumerate(rows, start=2):
        missing = [col for col in REQUIRED_COLUMNS if not (row.get(col) or "").strip()]
        if missing:
            errors.append(f"line {line_no}: missing {', '.join(missing)}")
            continue
        try:
            start_date = datetime.strptime(row["start_date"].strip(), "%Y-%m-%d").date()
            end_date = datetime.strptime(row["end_date"].strip(), "%Y-%m-%d").date()
        except ValueError as e:
            errors.append(f"line {line_no}: {e}")
            continue
        if start_date >= end_date:
            errors.append(f"line {line_no}: start_date must be before end_date")
            continue
        records.append({
            "name": row["name"].strip(),
            "college": row["college"].strip(),
            "email": normalize_email(row["email"]),
            "field": row["field"].strip(),
            "start_date": start_date,
            "end_date": end_date,
        })
    return records, errors


def import_interns(repository: InternRepository, records: Iterable[dict]) -> Tuple[int, int]:
    created = skipped = 0
    for record in records:
        if repository.find_by_email(record["email"]) is not None:
            skipped += 1
            continue
        repository.create(**record)
        created += 1
    return created, skipped


def main(argv: List[str]) -> int:
    load_dotenv()
    if len(argv) != 2:
        print("Usage: python import_interns.py <interns.csv>")
        return 1

    with open(argv[1], newline="", encoding="utf-8") as f:
        records, errors = parse_intern_rows(csv.DictReader(f))

    for error in errors:
        print(f"Skipping {error}")

    database = Database(DATABASE_URL)
    database.connect()
    try:
        with database.session() as session:
            created, skipped = import_interns(InternRepository(session), records)
    finally:
        database.disconnect()

    print(f"Imported {created} interns, {skipped} already present, {len(errors)} invalid rows.")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
