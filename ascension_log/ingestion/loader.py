"""
Record Loader
=============

Feeds JSON log records into a TimelineStore.

Data-quality problems never abort a load: a record that does not match
its model, names an unknown type or is rejected by the store is skipped,
logged at WARNING and reported as an Error carrying the record index.
The records around it are still applied.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Union
import json
import logging

from pydantic import ValidationError

from ..contracts.base import AscensionLogError, Error, ErrorCode, InvalidArgumentError
from ..data_tables import DataTables
from ..timeline.store import TimelineStore, TurnIterationMode
from .records import RECORD_TYPES

logger = logging.getLogger(__name__)

LogDocument = Union[Sequence[Any], Mapping[str, Any]]


@dataclass
class LoadResult:
    """The store built from a document and the records it had to skip."""
    store: TimelineStore
    errors: List[Error] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.errors


def document_records(document: LogDocument) -> Sequence[Any]:
    """The record list of a document: the document itself or its "records"."""
    records = document.get("records", []) if isinstance(document, Mapping) else document
    if not isinstance(records, list):
        raise InvalidArgumentError.of(
            ErrorCode.INVALID_VALUE,
            "A log document is a list of records or an object with a \"records\" list."
        )
    return records


class RecordLoader:
    """Applies records to a fresh store, one at a time, in document order."""

    def __init__(
        self,
        detailed: bool = True,
        turn_iteration_mode: TurnIterationMode = TurnIterationMode.MAFIA,
        data_tables: Optional[DataTables] = None
    ):
        self.detailed = detailed
        self.turn_iteration_mode = turn_iteration_mode
        self.data_tables = data_tables

    def load(self, records: Sequence[Any]) -> LoadResult:
        store = TimelineStore(self.detailed, self.turn_iteration_mode, self.data_tables)
        result = LoadResult(store)
        for index, raw in enumerate(records):
            error = self._apply(store, raw)
            if error is not None:
                error = error.with_context("record_index", str(index))
                logger.warning("Skipped record %d: %s", index, error.message)
                result.errors.append(error)
        logger.debug("Loaded %d records, %d skipped", len(records), len(result.errors))
        return result

    def _apply(self, store: TimelineStore, raw: Any) -> Optional[Error]:
        if not isinstance(raw, Mapping):
            return Error.create(
                ErrorCode.MALFORMED_RECORD,
                f"A record must be an object, got {type(raw).__name__}."
            )
        record_type = raw.get("type")
        model = RECORD_TYPES.get(record_type) if isinstance(record_type, str) else None
        if model is None:
            return Error.create(
                ErrorCode.UNKNOWN_RECORD_TYPE,
                f"Unknown record type '{record_type}'.",
                record_type=record_type
            )
        try:
            record = model.model_validate(raw)
        except ValidationError as e:
            return Error.create(
                ErrorCode.MALFORMED_RECORD,
                f"Malformed '{record_type}' record: {e.error_count()} invalid field(s).",
                record_type=record_type,
                fields=", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            )
        try:
            record.apply(store)
        except AscensionLogError as e:
            return e.error.with_context("record_type", record_type)
        return None


def load_records(
    records: Sequence[Any],
    detailed: bool = True,
    turn_iteration_mode: TurnIterationMode = TurnIterationMode.MAFIA,
    data_tables: Optional[DataTables] = None
) -> LoadResult:
    return RecordLoader(detailed, turn_iteration_mode, data_tables).load(records)


def read_document(path: str) -> LogDocument:
    """Parse a JSON log document from disk."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
