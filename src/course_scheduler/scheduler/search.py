"""Backtracking CSP search over the scheduling state."""

import logging
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from .constants import (
    DEFAULT_NODE_LIMIT,
    NO_CLASSROOM_CAPACITY_REASON,
    NO_VALID_ASSIGNMENT_REASON,
    SEARCH_ABORTED_REASON,
)
from .heuristics import (
    Value,
    consistent_domain,
    domain_size,
    has_capacity,
    order_domain_values,
    select_unassigned_section,
)
from .models import (
    Assignment,
    Conflict,
    LCVMode,
    Section,
    UnassignedSection,
    UnscheduledReason,
)
from .state import SchedulingState

logger = logging.getLogger(__name__)

# How often (in nodes) progress is logged at debug level
PROGRESS_LOG_INTERVAL = 10_000


class SearchAborted(Exception):
    """Raised inside the search when the node budget, time limit or cancel hook fires."""


@dataclass
class SearchOutcome:
    """Result of one search over a scheduling state."""

    success: bool
    assignments: list[Assignment] = field(default_factory=list)
    unassigned: list[UnassignedSection] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)
    backtrack_count: int = 0
    node_count: int = 0
    aborted: bool = False


@dataclass
class _Frame:
    """One level of the depth-first search."""

    section: Section
    values: Iterator[Value]
    current: Value | None = None


class BacktrackingSearch:
    """Depth-first backtracking with MRV variable and LCV value ordering.

    Each node selects the unassigned section with the fewest consistent values,
    tries its values least-constraining first and descends after every
    successful assign. A child that fails is undone with unassign and counted
    as a backtrack. The first complete schedule found is returned.

    The search uses an explicit frame stack instead of Python recursion, so
    depth is not bound by the interpreter recursion limit.

    When no complete schedule exists, or the search is stopped by
    ``max_nodes``, ``time_limit`` or ``should_cancel``, the largest partial
    schedule visited is restored into the state and returned with the
    remaining sections reported as unassigned.

    Worst-case running time is exponential in the number of sections; the
    heuristics only reduce backtracking in practice.
    """

    def __init__(
        self,
        state: SchedulingState,
        lcv_mode: LCVMode = LCVMode.FULL,
        max_nodes: int | None = DEFAULT_NODE_LIMIT,
        time_limit: float | None = None,
        should_cancel: Callable[[], bool] | None = None,
    ) -> None:
        """Initialize the search.

        Args:
            state: Fresh scheduling state for this run
            lcv_mode: Conflict channels counted by the LCV score
            max_nodes: Maximum number of search nodes, None for unlimited
            time_limit: Maximum wall-clock seconds, None for unlimited
            should_cancel: Callback polled at every node; returning True
                           stops the search
        """
        self.state = state
        self.lcv_mode = lcv_mode
        self.max_nodes = max_nodes
        self.time_limit = time_limit
        self.should_cancel = should_cancel

        # Statistics
        self.backtrack_count = 0
        self.node_count = 0

        # section_id -> reason recorded when all its values were exhausted
        self.failure_reasons: dict[str, str] = {}
        # Sections that no classroom can hold; never entered into the search
        self.set_aside: list[Section] = []

        self._best: list[Assignment] = []
        self._started_at = 0.0

    def solve(self) -> SearchOutcome:
        """Run the search once and report the outcome."""
        self._started_at = time.monotonic()
        self._set_aside_oversized_sections()

        aborted = False
        frames: list[_Frame] = []
        try:
            complete = self._search(frames)
        except SearchAborted as e:
            logger.warning(f"Search aborted: {e}")
            aborted = True
            complete = False

        if not complete:
            self._unwind(frames)
            self._restore_best()

        unassigned = self._collect_unassigned(aborted)
        conflicts = self.state.detect_conflicts()
        if conflicts:
            logger.error(f"Scheduling state has {len(conflicts)} residual conflicts")

        return SearchOutcome(
            success=complete and not unassigned,
            assignments=self.state.get_assignments(),
            unassigned=unassigned,
            conflicts=conflicts,
            backtrack_count=self.backtrack_count,
            node_count=self.node_count,
            aborted=aborted,
        )

    def _set_aside_oversized_sections(self) -> None:
        """Remove sections larger than every classroom from the search."""
        for section in self.state.get_unassigned_sections():
            if not has_capacity(self.state, section):
                self.state.unassigned.discard(section.id)
                self.set_aside.append(section)
        if self.set_aside:
            logger.info(
                f"{len(self.set_aside)} sections exceed every classroom capacity"
            )

    def _search(self, frames: list[_Frame]) -> bool:
        """Depth-first search. Returns True once every section is assigned."""
        if not self.state.unassigned:
            return True

        frame = self._open_frame()
        if frame is None:
            return False
        frames.append(frame)

        while frames:
            frame = frames[-1]

            if frame.current is not None:
                # The subtree below this value failed
                self.state.unassign(frame.section, *frame.current)
                frame.current = None
                self.backtrack_count += 1

            for value in frame.values:
                if self.state.is_consistent(frame.section, *value):
                    self.state.assign(frame.section, *value)
                    frame.current = value
                    break

            if frame.current is None:
                self.failure_reasons[frame.section.id] = NO_VALID_ASSIGNMENT_REASON
                frames.pop()
                continue

            if not self.state.unassigned:
                return True

            child = self._open_frame()
            if child is not None:
                frames.append(child)

        return False

    def _open_frame(self) -> _Frame | None:
        """Enter a search node: select a section and order its values.

        Returns:
            New frame, or None when no unassigned section has a value left
        """
        # Record before the budget check so an abort keeps the latest assign
        if self.state.assigned_count > len(self._best):
            self._best = self.state.get_assignments()
        self._check_budget()
        self.node_count += 1

        if self.node_count % PROGRESS_LOG_INTERVAL == 0:
            logger.debug(
                f"Search progress: {self.node_count} nodes, "
                f"{self.backtrack_count} backtracks, best {len(self._best)} placed"
            )

        section = select_unassigned_section(self.state)
        if section is None:
            return None

        domain = consistent_domain(self.state, section)
        ordered = order_domain_values(self.state, section, domain, self.lcv_mode)
        return _Frame(section=section, values=iter(ordered))

    def _check_budget(self) -> None:
        if self.max_nodes is not None and self.node_count >= self.max_nodes:
            raise SearchAborted(f"node limit of {self.max_nodes} reached")
        if self.time_limit is not None:
            elapsed = time.monotonic() - self._started_at
            if elapsed > self.time_limit:
                raise SearchAborted(f"time limit of {self.time_limit}s exceeded")
        if self.should_cancel is not None and self.should_cancel():
            raise SearchAborted("cancelled by caller")

    def _unwind(self, frames: list[_Frame]) -> None:
        """Undo every value still held on the frame stack, deepest first."""
        while frames:
            frame = frames.pop()
            if frame.current is not None:
                self.state.unassign(frame.section, *frame.current)
                frame.current = None

    def _restore_best(self) -> None:
        """Replay the largest partial schedule seen into the (empty) state."""
        if not self._best:
            return
        logger.info(f"Restoring best partial schedule with {len(self._best)} sections")
        for assignment in self._best:
            self.state.assign(
                assignment.section,
                assignment.classroom,
                assignment.day,
                assignment.time_slot,
            )

    def _collect_unassigned(self, aborted: bool) -> list[UnassignedSection]:
        """Build the unassigned report in seeded input order."""
        largest = max((c.capacity for c in self.state.classrooms), default=0)
        set_aside_ids = {s.id for s in self.set_aside}

        report: list[UnassignedSection] = []
        for section in self.state.sections:
            if section.id in set_aside_ids:
                report.append(
                    UnassignedSection(
                        section=section,
                        reason=UnscheduledReason.NO_CLASSROOM_CAPACITY,
                        details=NO_CLASSROOM_CAPACITY_REASON.format(
                            required=section.required_capacity, largest=largest
                        ),
                    )
                )
            elif section.id in self.state.unassigned:
                if aborted and domain_size(self.state, section) > 0:
                    report.append(
                        UnassignedSection(
                            section=section,
                            reason=UnscheduledReason.SEARCH_ABORTED,
                            details=SEARCH_ABORTED_REASON.format(nodes=self.node_count),
                        )
                    )
                else:
                    report.append(
                        UnassignedSection(
                            section=section,
                            reason=UnscheduledReason.NO_VALID_ASSIGNMENT,
                            details=self.failure_reasons.get(
                                section.id, NO_VALID_ASSIGNMENT_REASON
                            ),
                        )
                    )
        return report
