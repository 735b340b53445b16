"""Folds per-source busy markers into the weekly grid."""

from typing import Dict, List, Sequence

from .logging import get_logger
from .models import (
    CANONICAL_SLOTS,
    AnalysisResult,
    GridCell,
    SlotRef,
    SourceSchedule,
    Weekday,
)

DOCUMENT_MODE = 'documents'
FRIEND_MODE = 'friends'


def empty_grid() -> Dict[str, Dict[str, GridCell]]:
    """Build the full 7 x 7 grid with every cell free."""
    return {
        day.value: {slot.label: GridCell() for slot in CANONICAL_SLOTS}
        for day in Weekday
    }


class WeeklyAggregator:
    """Builds the weekly grid and derives free and busy slots.

    Aggregation never fails: markers naming a day or slot outside the grid
    are dropped.
    """

    def __init__(self, logger=None):
        self.log = logger or get_logger(__name__)

    def build_grid(self, sources: Sequence[SourceSchedule]) -> Dict[str, Dict[str, GridCell]]:
        """
        Mark busy cells from all sources.

        Args:
            sources: Fully materialized source schedules, in processing order

        Returns:
            Grid mapping day -> slot label -> GridCell
        """
        grid = empty_grid()

        for source in sources:
            self.log.debug("folding_source", source=source.name, busy_slots=len(source.busy_slots))
            for marker in source.busy_slots:
                weekday = Weekday.from_string(marker.day)
                cell = grid[weekday.value].get(marker.time) if weekday else None
                if cell is None:
                    self.log.debug("marker_dropped", source=source.name, day=marker.day, time=marker.time)
                    continue
                cell.occupy(source.name)

        return grid

    def analyze(self, sources: Sequence[SourceSchedule], mode: str = DOCUMENT_MODE) -> AnalysisResult:
        """
        Aggregate sources and derive free/busy slot lists.

        In document mode every occupied cell is busy. In friend mode cells
        occupied by some but not all sources are partially busy, and cells
        occupied by everyone are listed separately as fully busy.

        Args:
            sources: Source schedules
            mode: DOCUMENT_MODE or FRIEND_MODE

        Returns:
            AnalysisResult
        """
        if mode not in (DOCUMENT_MODE, FRIEND_MODE):
            raise ValueError(f"Unknown analysis mode: {mode}")

        grid = self.build_grid(sources)
        # Occupants are deduplicated by name, so a repeated name counts once
        total = len({source.name for source in sources})

        free_slots: List[SlotRef] = []
        busy_slots: List[SlotRef] = []
        fully_busy: List[SlotRef] = []

        for day, slots in grid.items():
            for label, cell in slots.items():
                if not cell.is_busy:
                    free_slots.append(SlotRef(day, label))
                elif mode == DOCUMENT_MODE or len(cell.occupants) < total:
                    busy_slots.append(SlotRef(day, label, list(cell.occupants)))
                else:
                    fully_busy.append(SlotRef(day, label, list(cell.occupants)))

        result = AnalysisResult(
            mode=mode,
            weekly_grid=grid,
            free_slots=free_slots,
            busy_slots=busy_slots,
            fully_busy_slots=fully_busy,
            sources=list(sources),
        )
        self._log_summary(result)
        return result

    def _log_summary(self, result: AnalysisResult) -> None:
        for day, slots in result.weekly_grid.items():
            busy = sum(1 for cell in slots.values() if cell.is_busy)
            self.log.debug("day_summary", day=day, busy=busy, free=len(slots) - busy)

        self.log.info(
            "analysis_complete",
            mode=result.mode,
            sources=len(result.sources),
            free_slots=len(result.free_slots),
            busy_slots=len(result.busy_slots),
            fully_busy_slots=len(result.fully_busy_slots),
        )
