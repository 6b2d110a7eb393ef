"""CSV encoding of snapshots, the durable report format."""

from __future__ import annotations

import csv
import io
from datetime import UTC, date, datetime

from ...domain.entities import CredentialRecord, Snapshot
from ...domain.entities.credential_record import OWNER_SEPARATOR
from ...domain.exceptions import ReportFormatError
from ...domain.value_objects import CredentialKind

FIELDNAMES = ("DisplayName", "ExpiryDate", "Type", "OwnerName", "OwnerEmail")
DATE_FORMAT = "%Y-%m-%d"


def encode_snapshot(snapshot: Snapshot) -> bytes:
    """Serialize records as CSV with a header row."""
    buffer = io.StringIO(newline="")
    writer = csv.DictWriter(buffer, fieldnames=FIELDNAMES, lineterminator="\n")
    writer.writeheader()
    for record in snapshot.records:
        writer.writerow(
            {
                "DisplayName": record.application_name,
                "ExpiryDate": record.expiry_date.strftime(DATE_FORMAT),
                "Type": str(record.kind),
                "OwnerName": _join(record.owner_names),
                "OwnerEmail": _join(record.owner_emails),
            }
        )
    return buffer.getvalue().encode("utf-8")


def decode_snapshot(name: str, data: bytes, *, generated_at: datetime | None = None) -> Snapshot:
    """
    Parse CSV produced by :func:`encode_snapshot`.

    Raises:
        ReportFormatError: On a missing column or an unparseable row.
    """
    text = data.decode("utf-8-sig")
    reader = csv.DictReader(io.StringIO(text, newline=""))
    missing = [f for f in FIELDNAMES if f not in (reader.fieldnames or [])]
    if missing:
        msg = f"Report {name} is missing columns: {', '.join(missing)}"
        raise ReportFormatError(msg)

    records: list[CredentialRecord] = []
    for line_no, row in enumerate(reader, start=2):
        try:
            records.append(
                CredentialRecord(
                    application_name=row["DisplayName"],
                    expiry_date=datetime.strptime(row["ExpiryDate"], DATE_FORMAT).date(),
                    kind=CredentialKind(row["Type"]),
                    owner_names=_split(row["OwnerName"]),
                    owner_emails=_split(row["OwnerEmail"]),
                )
            )
        except (ValueError, TypeError) as e:
            msg = f"Report {name} has an invalid row at line {line_no}: {e}"
            raise ReportFormatError(msg) from e

    return Snapshot(name=name, records=tuple(records), generated_at=generated_at or datetime.now(UTC))


def _join(values: tuple[str, ...]) -> str:
    """Join owner values with the separator, quoting any that contain it."""
    return OWNER_SEPARATOR.join(_quote(v) if any(c in v for c in ';"') else v for v in values)


def _quote(value: str) -> str:
    escaped = value.replace('"', '""')
    return f'"{escaped}"'


def _split(value: str | None) -> tuple[str, ...]:
    """Inverse of :func:`_join`."""
    if not value:
        return ()
    reader = csv.reader([value], delimiter=OWNER_SEPARATOR.strip(), skipinitialspace=True)
    return tuple(part.strip() for part in next(reader, []) if part.strip())


def format_date(value: date) -> str:
    """Render a date the way the report does."""
    return value.strftime(DATE_FORMAT)
