"""
Read-only access to the static reference tables.

Tables (pandas DataFrames, camelCase columns):
  components          componentId, greenMarkCategory?, a1a3Factor
  country_components  countryId, componentId, greenMarkCategory?, a1a3Factor
  ports               countryId, seaDistanceKm
  vehicles            vehicleId, mode, emissionFactor
  reference_values    buildingType, referenceValue

Emission factors are kgCO2e per tonne (materials) and per tonne-km (vehicles).
"""
import os
import re
import logging
from typing import Dict, Hashable, Iterable, List, Optional, Tuple

import pandas as pd

from .config import read_table
from .constants import CATALOGUE_DIR, MODE_MARITIME, MODE_ROAD

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {
    "components": ["componentId"],
    "country_components": ["countryId", "componentId"],
    "ports": ["countryId"],
    "vehicles": ["vehicleId", "mode"],
    "reference_values": ["buildingType", "referenceValue"],
}

_MODE_SPLIT = re.compile(r"[;,|]")


def unique(items: Iterable[Hashable]) -> list:
    """Order-preserving de-duplication (first occurrence wins)."""
    seen = set()
    out = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


def parse_modes(raw) -> Tuple[str, ...]:
    """'Road;Maritime' / ['Road'] / 'Road' -> ('Road', 'Maritime')"""
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return ()
    if isinstance(raw, (list, tuple, set)):
        return tuple(str(m).strip() for m in raw if str(m).strip())
    return tuple(m.strip() for m in _MODE_SPLIT.split(str(raw)) if m.strip())


def _clean(value):
    """NaN cells -> None."""
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    return value


def _as_frame(table, name: str) -> pd.DataFrame:
    df = table.copy() if isinstance(table, pd.DataFrame) else pd.DataFrame(list(table))
    missing = [c for c in REQUIRED_COLUMNS[name] if c not in df.columns]
    if missing and not df.empty:
        raise ValueError(f"Catalogue table '{name}' missing columns: {missing}")
    for c in REQUIRED_COLUMNS[name]:
        if c not in df.columns:
            df[c] = pd.Series(dtype=object)
    return df


class ReferenceCatalogue:
    def __init__(
        self,
        components,
        country_components,
        ports,
        vehicles,
        reference_values,
    ):
        """
        Each table may be a DataFrame or an iterable of dicts. The inputs are
        copied and every listing/lookup is built once up front.
        """
        self.components = _as_frame(components, "components")
        self.country_components = _as_frame(country_components, "country_components")
        self.ports = _as_frame(ports, "ports")
        self.vehicles = _as_frame(vehicles, "vehicles")
        self.reference_values = _as_frame(reference_values, "reference_values")

        self._component_ids = unique(
            [str(c) for c in self.components["componentId"]]
            + [str(c) for c in self.country_components["componentId"]]
        )
        self._country_ids = unique(
            [str(c) for c in self.country_components["countryId"]]
            + [str(c) for c in self.ports["countryId"]]
        )

        self._vehicle_modes: Dict[str, Tuple[str, ...]] = {}
        self._vehicle_factors: Dict[str, float] = {}
        for _, v in self.vehicles.iterrows():
            vid = str(v["vehicleId"])
            self._vehicle_modes[vid] = parse_modes(v["mode"])
            factor = _clean(v.get("emissionFactor"))
            if factor is not None:
                self._vehicle_factors[vid] = float(factor)

        self._marine_vehicle_ids = unique(
            vid for vid, modes in self._vehicle_modes.items() if MODE_MARITIME in modes
        )
        self._road_vehicle_ids = unique(
            vid for vid, modes in self._vehicle_modes.items() if MODE_ROAD in modes
        )

        # Country-specific entries are applied last so they win on collision.
        self._category_by_component: Dict[str, Optional[str]] = {}
        for table in (self.components, self.country_components):
            for _, c in table.iterrows():
                self._category_by_component[str(c["componentId"])] = _clean(c.get("greenMarkCategory"))

        self._global_factor: Dict[str, float] = {}
        for _, c in self.components.iterrows():
            factor = _clean(c.get("a1a3Factor"))
            if factor is not None:
                self._global_factor[str(c["componentId"])] = float(factor)

        self._country_factor: Dict[Tuple[str, str], float] = {}
        for _, c in self.country_components.iterrows():
            factor = _clean(c.get("a1a3Factor"))
            if factor is not None:
                self._country_factor[(str(c["countryId"]), str(c["componentId"]))] = float(factor)

        self._sea_distance: Dict[str, float] = {}
        for _, p in self.ports.iterrows():
            dist = _clean(p.get("seaDistanceKm"))
            country = str(p["countryId"])
            if dist is not None and country not in self._sea_distance:
                self._sea_distance[country] = float(dist)

        self._reference_options: List[Tuple[str, float]] = [
            (
                f"{r['buildingType']} ({_format_number(r['referenceValue'])}kgCO₂eq/m² GFA)",
                float(r["referenceValue"]),
            )
            for _, r in self.reference_values.iterrows()
        ]

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def component_ids(self) -> List[str]:
        """All component ids, global first, then country-specific, de-duplicated."""
        return list(self._component_ids)

    def country_ids(self) -> List[str]:
        return list(self._country_ids)

    def marine_vehicle_ids(self) -> List[str]:
        return list(self._marine_vehicle_ids)

    def road_vehicle_ids(self) -> List[str]:
        return list(self._road_vehicle_ids)

    def reference_value_options(self) -> List[Tuple[str, float]]:
        """(display label, value) pairs in table order."""
        return list(self._reference_options)

    # ------------------------------------------------------------------
    # Lookups (None when the id is unknown)
    # ------------------------------------------------------------------

    def green_mark_category(self, component_id: str) -> Optional[str]:
        return self._category_by_component.get(component_id)

    def reference_value_label(self, value) -> Optional[str]:
        try:
            target = float(value)
        except (TypeError, ValueError):
            return None
        for label, v in self._reference_options:
            if v == target:
                return label
        return None

    def a1a3_factor(self, component_id: str, country_id: Optional[str] = None) -> Optional[float]:
        if country_id is not None and (country_id, component_id) in self._country_factor:
            return self._country_factor[(country_id, component_id)]
        return self._global_factor.get(component_id)

    def vehicle_emission_factor(self, vehicle_id: str) -> Optional[float]:
        return self._vehicle_factors.get(vehicle_id)

    def vehicle_modes(self, vehicle_id: str) -> Tuple[str, ...]:
        return self._vehicle_modes.get(vehicle_id, ())

    def sea_distance_km(self, country_id: str) -> Optional[float]:
        return self._sea_distance.get(country_id)

    # ------------------------------------------------------------------
    # Defaults
    # ------------------------------------------------------------------

    def first_global_component_id(self) -> Optional[str]:
        if self.components.empty:
            return None
        return str(self.components["componentId"].iloc[0])

    def default_reference_value(self) -> Optional[float]:
        if not self._reference_options:
            return None
        return self._reference_options[0][1]


def _format_number(value) -> str:
    """1000.0 -> '1000', 12.5 -> '12.5' (labels read like the source table)."""
    number = float(value)
    return str(int(number)) if number.is_integer() else str(number)


def _find_table(directory: str, stem: str) -> str:
    for ext in (".csv", ".xlsx"):
        path = os.path.join(directory, stem + ext)
        if os.path.exists(path):
            return path
    raise FileNotFoundError(f"Catalogue table '{stem}' (.csv/.xlsx) not found in {directory}")


def load_catalogue(directory: str = CATALOGUE_DIR) -> ReferenceCatalogue:
    """
    Load all five reference tables from a directory of .csv or .xlsx files.
    """
    tables: Dict[str, pd.DataFrame] = {}
    for name in REQUIRED_COLUMNS:
        path = _find_table(directory, name)
        tables[name] = read_table(path)
        logger.debug(f"Loaded {len(tables[name])} rows from {path}")

    catalogue = ReferenceCatalogue(**tables)
    logger.info(
        f"Catalogue loaded from {directory}: {len(catalogue.component_ids())} components, "
        f"{len(catalogue.country_ids())} countries, {len(catalogue.vehicles)} vehicles"
    )
    return catalogue
