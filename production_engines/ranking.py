"""
Module: production_engines.ranking
Responsibility:
    Order and filter project collections for list views: a multi-key
    comparator (primary key, optional secondary date key, direction) and a
    free-text filter predicate.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - A project missing the sort date sorts after every project that has it,
      in BOTH directions.  Direction flips value comparisons only.
    - Two missing dates compare equal; sorting is stable, so they keep
      their input order.
    - ``compare`` is a total order: antisymmetric and transitive.
    - Location compares case-insensitively; a missing location is "".
    - Filtering and ranking are independent stages.

Failure modes:
    - ValueError from RankingConfig when the secondary key is not a date
      key.

Usage:
    from production_engines.ranking import RankingConfig, RankingKey, sort_projects

    config = RankingConfig(RankingKey.LOCATION, secondary_key=RankingKey.SHIP)
    ordered = sort_projects(filter_projects(projects, "bay 3"), config)
"""

from __future__ import annotations

import functools
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from production_engines.tracer import traced_engine
from production_kernel.domain.project import Project
from production_kernel.logging_config import get_logger

logger = get_logger("engines.ranking")


class RankingKey(str, Enum):
    """Sortable columns; values match the list view's column ids."""

    LOCATION = "location"
    QC_START = "qcStart"
    SHIP = "ship"

    @property
    def is_date(self) -> bool:
        return self is not RankingKey.LOCATION

    @property
    def attribute(self) -> str:
        return _KEY_ATTRIBUTES[self]


_KEY_ATTRIBUTES: dict[RankingKey, str] = {
    RankingKey.LOCATION: "location",
    RankingKey.QC_START: "qc_start",
    RankingKey.SHIP: "ship",
}


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class RankingConfig:
    """
    Sort configuration for a project list.

    Contract:
        ``secondary_key`` must be a date key (or None).  It breaks ties on
        the primary key.
    """

    primary_key: RankingKey
    secondary_key: RankingKey | None = None
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        object.__setattr__(self, "primary_key", RankingKey(self.primary_key))
        object.__setattr__(self, "direction", SortDirection(self.direction))
        if self.secondary_key is not None:
            secondary = RankingKey(self.secondary_key)
            if not secondary.is_date:
                raise ValueError(
                    f"secondary_key must be a date key, got {secondary.value!r}"
                )
            object.__setattr__(self, "secondary_key", secondary)

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC

    def toggled(self, key: RankingKey) -> RankingConfig:
        """
        Column-header click: same key flips direction, a new key starts
        descending.
        """
        if key is self.primary_key:
            flipped = SortDirection.ASC if self.descending else SortDirection.DESC
            return RankingConfig(key, self.secondary_key, flipped)
        secondary = self.secondary_key if self.secondary_key is not key else None
        return RankingConfig(key, secondary, SortDirection.DESC)


def _sign(a: date | str, b: date | str) -> int:
    return (a > b) - (a < b)


def _compare_dates(a: date | None, b: date | None, descending: bool) -> int:
    # Missing dates are infinitely late regardless of direction.
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    result = _sign(a, b)
    return -result if descending else result


def _location_key(project: Project) -> str:
    return (project.location or "").casefold()


def compare(a: Project, b: Project, config: RankingConfig) -> int:
    """
    Three-way comparison of two projects under ``config``.

    Returns -1 when ``a`` sorts first, 1 when ``b`` sorts first, 0 when
    they are equal under every configured key.
    """
    primary = config.primary_key
    if primary is RankingKey.LOCATION:
        result = _sign(_location_key(a), _location_key(b))
        if config.descending:
            result = -result
    else:
        result = _compare_dates(
            getattr(a, primary.attribute),
            getattr(b, primary.attribute),
            config.descending,
        )
    if result:
        return result

    secondary = config.secondary_key
    if secondary is None or secondary is primary:
        return 0
    return _compare_dates(
        getattr(a, secondary.attribute),
        getattr(b, secondary.attribute),
        config.descending,
    )


@traced_engine("ranking", "1.0", fingerprint_fields=("config",))
def sort_projects(projects: Iterable[Project], config: RankingConfig) -> list[Project]:
    """Stable sort of ``projects`` under ``config``."""
    ordered = sorted(
        projects,
        key=functools.cmp_to_key(lambda a, b: compare(a, b, config)),
    )
    logger.debug("projects_ranked", extra={
        "primary_key": config.primary_key.value,
        "secondary_key": config.secondary_key.value if config.secondary_key else None,
        "direction": config.direction.value,
        "count": len(ordered),
    })
    return ordered


def matches_query(project: Project, query: str) -> bool:
    """
    Case-insensitive substring match against project number, name and
    location.  A blank query matches every project.
    """
    needle = query.strip().casefold()
    if not needle:
        return True
    haystacks = (project.project_number, project.name, project.location)
    return any(needle in (h or "").casefold() for h in haystacks)


def filter_projects(projects: Iterable[Project], query: str) -> list[Project]:
    """Projects matching ``query``, input order preserved."""
    return [p for p in projects if matches_query(p, query)]
