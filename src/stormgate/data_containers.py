"""
Copyright (C) 2025 Laurent Courty

This program is free software; you can redistribute it and/or
modify it under the terms of the GNU General Public License
as published by the Free Software Foundation; either version 2
of the License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.
"""

from __future__ import annotations

from datetime import datetime

import numpy as np
from pydantic import BaseModel, ConfigDict, model_validator

from stormgate.const import UnitSystem, FlowUnits
from stormgate.units import unit_system_for


class AnalysisOptions(BaseModel):
    """Analysis switches of a run"""

    model_config = ConfigDict(frozen=True)

    allow_ponding: bool = False
    skip_steady_state: bool = False
    ignore_rainfall: bool = False
    ignore_rdii: bool = False
    ignore_snowmelt: bool = False
    ignore_groundwater: bool = False
    ignore_routing: bool = False
    ignore_quality: bool = False


class RoutingParameters(BaseModel):
    """Time steps and tolerances of the flow routing"""

    model_config = ConfigDict(frozen=True)

    route_step: float = 20.0  # s
    min_route_step: float = 0.5  # s
    lengthening_step: float = 0.0  # s
    start_dry_days: float = 0.0
    courant_factor: float = 0.0
    min_surf_area: float = 0.0  # ft2
    min_slope: float = 0.0
    head_tol: float = 0.005  # ft
    sys_flow_tol: float = 0.05
    lat_flow_tol: float = 0.05


class ContinuityErrors(BaseModel):
    """Continuity errors computed by the mass balance at the end of a run (percent)"""

    model_config = ConfigDict(frozen=True)

    runoff_error: float = 0.0
    gw_error: float = 0.0
    flow_error: float = 0.0
    qual_error: float = 0.0


class ProjectOptions(BaseModel):
    """Configuration data of a project."""

    model_config = ConfigDict(frozen=True)

    unit_system: UnitSystem = UnitSystem.US
    flow_units: FlowUnits = FlowUnits.CFS
    start_datetime: datetime = datetime(2000, 1, 1)
    end_datetime: datetime = datetime(2000, 1, 2)
    report_start_datetime: datetime | None = None
    analysis: AnalysisOptions = AnalysisOptions()
    routing: RoutingParameters = RoutingParameters()
    continuity: ContinuityErrors = ContinuityErrors()

    @model_validator(mode="before")
    @classmethod
    def set_unit_system(cls, data):
        """The unit system follows from the flow units"""
        if not isinstance(data, dict):
            return data
        flow_units = data.get("flow_units", FlowUnits.CFS)
        unit_system = unit_system_for(flow_units)
        if data.get("unit_system") is None:
            return {**data, "unit_system": unit_system}
        if UnitSystem(data["unit_system"]) != unit_system:
            raise ValueError(
                f"flow units {FlowUnits(flow_units).name} do not belong to unit system "
                f"{UnitSystem(data['unit_system']).name}"
            )
        return data

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_datetime < self.start_datetime:
            raise ValueError("end_datetime is before start_datetime")
        return self

    @property
    def report_start(self) -> datetime:
        if self.report_start_datetime is None:
            return self.start_datetime
        return self.report_start_datetime

    @property
    def total_duration(self) -> float:
        """Duration of the run in milliseconds, truncated to the second"""
        seconds = (self.end_datetime - self.start_datetime).total_seconds()
        return float(int(seconds)) * 1000.0


# Snapshots of the statistics. All values are in user units. #


class NodeStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    avg_depth: float
    max_depth: float
    max_depth_date: datetime | None
    max_rpt_depth: float
    vol_flooded: float
    time_flooded: float  # h
    time_surcharged: float  # h
    time_courant_critical: float  # h
    tot_lat_flow: float
    max_lat_flow: float
    max_inflow: float
    max_overflow: float
    max_ponded_vol: float
    max_inflow_date: datetime | None
    max_overflow_date: datetime | None


class StorageStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    init_vol: float
    avg_vol: float
    max_vol: float
    max_flow: float
    evap_losses: float
    exfil_losses: float
    max_vol_date: datetime | None


class OutfallStats(BaseModel):
    """total_load holds one value per pollutant.
    The array is a fresh copy owned by the caller.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    avg_flow: float
    max_flow: float
    total_load: np.ndarray
    total_periods: int


class LinkStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_flow: float
    max_flow_date: datetime | None
    max_veloc: float
    max_depth: float
    time_normal_flow: float  # h
    time_inlet_control: float
    time_surcharged: float
    time_full_upstream: float
    time_full_dnstream: float
    time_full_flow: float
    time_capacity_limited: float
    time_courant_critical: float
    flow_turns: int
    flow_turn_sign: int


class PumpStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    utilized: float
    min_flow: float
    avg_flow: float
    max_flow: float
    volume: float
    energy: float
    off_curve_low: float
    off_curve_high: float
    start_ups: int
    total_periods: int


class SubcatchStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    precip: float  # depth
    runon: float
    evap: float
    infil: float
    runoff: float
    max_flow: float


class RoutingTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    dw_inflow: float
    ww_inflow: float
    gw_inflow: float
    ii_inflow: float
    ex_inflow: float
    flooding: float
    outflow: float
    evap_loss: float
    seep_loss: float
    reacted: float
    init_storage: float
    final_storage: float
    pct_error: float


class RunoffTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    rainfall: float  # depths
    evap: float
    infil: float
    runoff: float  # volumes
    drains: float
    runon: float
    init_storage: float  # depths
    final_storage: float
    init_snow_cover: float
    final_snow_cover: float
    snow_removed: float
    pct_error: float


class GagePrecipitation(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: float
    rainfall: float
    snowfall: float
