"""Member records in the relational store.

The record writer is the one fatal stage of a submission: a submission
without a stored row has failed, whatever happened to its images.  The
listing reader backs ``GET /community``.

``created_at`` is assigned by the database default and is never sent by
this service.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from supabase import Client

from neighbors.core.errors import PersistenceError, QueryError
from neighbors.core.outcome import Fatal, Ok

logger = logging.getLogger(__name__)

LISTING_COLUMNS: tuple[str, ...] = (
    "name",
    "firstname",
    "lastname",
    "email",
    "location",
    "activity",
    "image_url",
    "original_image_url",
    "created_at",
)

ORDER_COLUMN = "created_at"


@dataclass(frozen=True)
class MemberRecord:
    """Row written once per successful submission."""

    name: str
    email: str
    firstname: str | None = None
    lastname: str | None = None
    location: str | None = None
    activity: str | None = None
    image_url: str | None = None
    original_image_url: str | None = None

    def to_row(self) -> dict[str, Any]:
        return asdict(self)


class RecordStore(Protocol):
    """Collaborator providing table insert and ordered select."""

    def insert(self, row: dict[str, Any]) -> None:
        """Insert one row or raise ``PersistenceError``."""
        ...

    def select(
        self,
        columns: tuple[str, ...],
        order_by: str,
        descending: bool = True,
    ) -> list[dict[str, Any]]:
        """Return all rows projected to *columns* or raise ``QueryError``."""
        ...


class SupabaseRecordStore:
    """:class:`RecordStore` backed by a Supabase (PostgREST) table."""

    def __init__(self, client: Client, table: str) -> None:
        self._client = client
        self.table = table

    def insert(self, row: dict[str, Any]) -> None:
        try:
            self._client.table(self.table).insert([row]).execute()
        except Exception as e:
            raise PersistenceError(f"Insert into {self.table} failed: {e}") from e

    def select(
        self,
        columns: tuple[str, ...],
        order_by: str,
        descending: bool = True,
    ) -> list[dict[str, Any]]:
        try:
            response = (
                self._client.table(self.table)
                .select(",".join(columns))
                .order(order_by, desc=descending)
                .execute()
            )
        except Exception as e:
            raise QueryError(f"Select from {self.table} failed: {e}") from e
        return list(response.data or [])


def write_record(store: RecordStore, record: MemberRecord) -> Ok[MemberRecord] | Fatal:
    """Insert exactly one member record.

    Returns:
        ``Ok(record)`` on success, ``Fatal(PersistenceError)`` otherwise.
    """
    try:
        store.insert(record.to_row())
    except PersistenceError as e:
        logger.error(f"Record insert failed for {record.email}: {e}", exc_info=True)
        return Fatal(e)
    except Exception as e:
        logger.error(f"Record insert failed for {record.email}: {e}", exc_info=True)
        return Fatal(PersistenceError(f"Unexpected insert failure: {e}"))

    logger.info(
        f"Stored member {record.name!r} <{record.email}> "
        f"(image_url={record.image_url}, original_image_url={record.original_image_url})"
    )
    return Ok(record)


def list_records(store: RecordStore) -> list[dict[str, Any]]:
    """Return every member record, newest first.

    Raises:
        QueryError: If the store rejects the query.
    """
    try:
        rows = store.select(LISTING_COLUMNS, ORDER_COLUMN, descending=True)
    except QueryError:
        raise
    except Exception as e:
        raise QueryError(f"Unexpected listing failure: {e}") from e
    logger.debug(f"Listed {len(rows)} member records")
    return rows
