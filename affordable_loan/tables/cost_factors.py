"""Region × property-state → acquisition cost factor lookup.

Loads a versioned data set from data/cost_factors.json. Rates are the
general ones per Spanish autonomous community:
  NEW          → IVA 10% + AJD (IGIC / IPSI in Canarias, Ceuta, Melilla)
  SECOND_HAND  → ITP

The table is built once and never mutated, so concurrent reads need no
locking. Lookups are total: a region that lacks either property state is
rejected when the table is built, not when it is queried.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from affordable_loan.errors import UnknownPropertyStateError, UnknownRegionError
from affordable_loan.money import Money
from affordable_loan.schemas.loan import CostFactor, PropertyState

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_COST_TABLE_PATH = _DATA_DIR / "cost_factors.json"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _normalize_region(region: str) -> str:
    """'  Andalucia ' → 'andalucia'."""
    return region.strip().lower()


def _parse_state(property_state: PropertyState | str) -> PropertyState:
    try:
        return PropertyState(property_state)
    except ValueError as exc:
        raise UnknownPropertyStateError(str(property_state)) from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class CostTable:
    """Immutable lookup from (region, property state) to CostFactor."""

    __slots__ = ("_factors", "_version")

    def __init__(
        self,
        factors: Mapping[str, Mapping[PropertyState, CostFactor]],
        version: str,
    ) -> None:
        frozen: dict[str, MappingProxyType[PropertyState, CostFactor]] = {}
        for region, by_state in factors.items():
            key = _normalize_region(region)
            if key in frozen:
                msg = f"Duplicate region key {region!r} (normalizes to {key!r})"
                raise ValueError(msg)
            for state in PropertyState:
                if state not in by_state:
                    raise UnknownPropertyStateError(state.value, region=key)
            frozen[key] = MappingProxyType(dict(by_state))
        self._factors = MappingProxyType(frozen)
        self._version = version

    @property
    def version(self) -> str:
        return self._version

    @property
    def regions(self) -> tuple[str, ...]:
        return tuple(sorted(self._factors))

    def resolve(self, region: str, property_state: PropertyState | str) -> CostFactor:
        """Return the cost factor for a region and property state.

        Raises:
            UnknownRegionError: region key is not in the table.
            UnknownPropertyStateError: state is not one of new / second_hand.
        """
        state = _parse_state(property_state)
        by_state = self._factors.get(_normalize_region(region))
        if by_state is None:
            raise UnknownRegionError(region)
        return by_state[state]

    def __contains__(self, region: object) -> bool:
        return isinstance(region, str) and _normalize_region(region) in self._factors

    def __len__(self) -> int:
        return len(self._factors)


def build_cost_table(data: Mapping) -> CostTable:
    """Build a CostTable from the JSON document structure.

    Expected shape::

        {"version": "2025.1",
         "regions": {"madrid": {"description": "...",
                                "new": {"acquisition_tax_percent": "10.75",
                                        "fixed_fees_estimate": "2500.00"},
                                "second_hand": {...}}}}
    """
    factors: dict[str, dict[PropertyState, CostFactor]] = {}
    for region, info in data.get("regions", {}).items():
        key = _normalize_region(region)
        if key in factors:
            msg = f"Duplicate region key {region!r} (normalizes to {key!r})"
            raise ValueError(msg)
        by_state: dict[PropertyState, CostFactor] = {}
        for state in PropertyState:
            entry = info.get(state.value)
            if entry is None:
                continue
            by_state[state] = CostFactor(
                region=key,
                property_state=state,
                acquisition_tax_percent=Decimal(str(entry["acquisition_tax_percent"])),
                fixed_fees_estimate=Money.from_decimal(str(entry.get("fixed_fees_estimate", "0"))),
                description=info.get("description"),
            )
        factors[key] = by_state
    return CostTable(factors, version=str(data.get("version", "unversioned")))


@lru_cache(maxsize=8)
def load_cost_table(path: Path | None = None) -> CostTable:
    """Load and cache the cost table (the packaged data set when path is None)."""
    source = path or DEFAULT_COST_TABLE_PATH
    with open(source, encoding="utf-8") as f:
        data = json.load(f)
    table = build_cost_table(data)
    logger.info("Cost table loaded: version=%s regions=%d source=%s", table.version, len(table), source)
    return table
