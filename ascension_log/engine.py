"""
Engine Orchestration Module

One entry point wiring the layers: records go through the loader into a
TimelineStore, the store builds its summary once, and every product
(rundown, full log, summary, sub-interval slice) is read from there.

DESIGN PRINCIPLES:
==================
1. Layers communicate ONLY through contracts
2. The summary is created exactly once, at construction
3. Data-quality errors travel with the log, they never abort it
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Union
import logging

from .contracts.base import Error
from .data_tables import DataTables, DEFAULT_DATA_TABLES
from .ingestion.loader import LogDocument, RecordLoader, document_records, read_document
from .rendering.formats import LogOutputFormat
from .rendering.renderer import Renderer
from .summary.log_summary import LogSummary
from .timeline.store import TimelineStore, TurnIterationMode

logger = logging.getLogger(__name__)

OutputFormat = Union[LogOutputFormat, str]


@dataclass
class AscensionLogConfig:
    """Configuration of one log."""
    detailed: bool = True
    turn_iteration_mode: TurnIterationMode = None
    data_tables: DataTables = None
    show_notes: bool = True

    def __post_init__(self):
        self.turn_iteration_mode = self.turn_iteration_mode or TurnIterationMode.MAFIA
        self.data_tables = self.data_tables or DEFAULT_DATA_TABLES


def _as_format(output_format: OutputFormat) -> LogOutputFormat:
    if isinstance(output_format, LogOutputFormat):
        return output_format
    return LogOutputFormat.parse(output_format)


class AscensionLog:
    """
    A loaded, summarized ascension log.

    LAYER FLOW:
    ===========
    1. Ingestion: records -> TimelineStore (+ data-quality errors)
    2. Timeline: store builds intervals and its summary
    3. Rendering: reconciler + interleaver + format strategy -> text
    """

    def __init__(
        self,
        store: TimelineStore,
        errors: Sequence[Error] = (),
        config: Optional[AscensionLogConfig] = None
    ):
        self._config = config or AscensionLogConfig()
        self._store = store
        self._errors = tuple(errors)
        if not store.is_summary_created:
            store.create_summary()

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def load(cls, document: LogDocument, config: Optional[AscensionLogConfig] = None) -> AscensionLog:
        """
        Build a log from a JSON document.

        An object document may carry "detailed" and "turn_iteration_mode"
        keys overriding the configuration.
        """
        config = config or AscensionLogConfig()
        if isinstance(document, dict):
            if "detailed" in document:
                config = replace(config, detailed=bool(document["detailed"]))
            if "turn_iteration_mode" in document:
                config = replace(
                    config,
                    turn_iteration_mode=TurnIterationMode.parse(document["turn_iteration_mode"])
                )
        loader = RecordLoader(config.detailed, config.turn_iteration_mode, config.data_tables)
        result = loader.load(document_records(document))
        return cls(result.store, result.errors, config)

    @classmethod
    def from_file(cls, path: str, config: Optional[AscensionLogConfig] = None) -> AscensionLog:
        return cls.load(read_document(path), config)

    # =========================================================================
    # PRODUCTS
    # =========================================================================

    @property
    def store(self) -> TimelineStore:
        return self._store

    @property
    def config(self) -> AscensionLogConfig:
        return self._config

    @property
    def errors(self) -> tuple:
        """Data-quality errors collected while loading."""
        return self._errors

    @property
    def summary(self) -> LogSummary:
        return self._store.get_log_summary()

    def renderer(self, output_format: OutputFormat = LogOutputFormat.TEXT) -> Renderer:
        return Renderer(_as_format(output_format).strategy, self._config.show_notes)

    def rundown(self, output_format: OutputFormat = LogOutputFormat.TEXT) -> List[str]:
        """One text block per emitted interval."""
        return self.renderer(output_format).turn_rundown(self._store)

    def full_log(
        self,
        output_format: OutputFormat = LogOutputFormat.TEXT,
        ascension_start_date: Optional[str] = None
    ) -> str:
        return self.renderer(output_format).full_log(self._store, ascension_start_date)

    def slice(self, start_turn: int, end_turn: int) -> AscensionLog:
        """The log restricted to turns [start_turn, end_turn]."""
        sub_store = self._store.get_sub_interval_log_data(start_turn, end_turn)
        logger.debug("Sliced turns %d-%d", start_turn, end_turn)
        return AscensionLog(sub_store, (), self._config)
