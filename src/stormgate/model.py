# coding=utf8
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

Records of the network model.
All values are stored in canonical units (ft, ft2, ft3, cfs, ft/s).
Fields documented as solver-owned are written by the solver at each step
and only read by the gateway.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import numpy as np

from stormgate.const import (
    DefaultValues,
    NodeType,
    LinkType,
    OutfallType,
    GageDataSource,
    PollutantUnits,
)


@dataclass
class NamedObject:
    """Any object of the model: a stable index and an immutable id"""

    id: str


@dataclass
class Gage(NamedObject):
    data_source: GageDataSource = GageDataSource.TIMESERIES
    is_used: bool = False
    co_gage: int = -1  # gage sharing the same rainfall series
    snow_factor: float = 1.0
    # solver-owned
    rainfall: float = 0.0  # current intensity (ft/s)
    is_snowing: bool = False
    # staged value supplied by the caller (ft/s)
    external_rain: float = 0.0

    def get_precip(self) -> tuple[float, float]:
        """Return the current (rainfall, snowfall) in ft/s"""
        if self.data_source == GageDataSource.EXTERNAL:
            precip = self.external_rain
        else:
            precip = self.rainfall
        if self.is_snowing:
            return 0.0, precip * self.snow_factor
        return precip, 0.0


@dataclass
class Pollutant(NamedObject):
    units: PollutantUnits = PollutantUnits.MG_PER_L
    mcf: float = 1.0  # mass conversion factor


@dataclass
class OutfallBoundary:
    boundary_type: OutfallType = OutfallType.FREE
    stage: float = 0.0  # staged value set by the caller (ft)


@dataclass
class Node(NamedObject):
    node_type: NodeType = NodeType.JUNCTION
    invert_elev: float = 0.0
    full_depth: float = 0.0
    surcharge_depth: float = 0.0
    ponded_area: float = 0.0
    init_depth: float = 0.0
    outfall: Optional[OutfallBoundary] = None
    # solver-owned
    inflow: float = 0.0
    outflow: float = 0.0
    losses: float = 0.0
    new_volume: float = 0.0
    overflow: float = 0.0
    new_depth: float = 0.0
    new_lat_flow: float = 0.0


@dataclass
class Link(NamedObject):
    link_type: LinkType = LinkType.CONDUIT
    node1: int = -1  # upstream node index
    node2: int = -1  # downstream node index
    direction: int = 1  # -1 if the conduit slope is adverse
    offset1: float = 0.0
    offset2: float = 0.0
    q0: float = 0.0  # initial flow
    q_limit: float = 0.0  # 0 means no limit
    c_loss_inlet: float = 0.0
    c_loss_outlet: float = 0.0
    c_loss_avg: float = 0.0
    setting: float = 1.0
    target_setting: float = 1.0
    # solver-owned
    new_flow: float = 0.0
    new_depth: float = 0.0
    new_volume: float = 0.0
    surf_area1: float = 0.0
    surf_area2: float = 0.0
    froude: float = 0.0


@dataclass
class SubArea:
    """One of the three runoff sub-areas of a subcatchment"""

    n: float  # Manning's n
    d_store: float = 0.0  # depression storage (ft)
    f_area: float = 0.0  # fraction of the non-LID area
    alpha: float = 0.0  # routing coefficient, derived


@dataclass
class Subcatchment(NamedObject):
    gage: int = -1
    out_node: int = -1
    out_subcatch: int = -1
    width: float = 0.0
    area: float = 0.0
    frac_imperv: float = 0.0
    slope: float = 0.0
    curb_length: float = 0.0
    # fraction of impervious area without depression storage
    pct_zero: float = DefaultValues.PCT_ZERO
    # impervious w/o depression storage, impervious with, pervious
    sub_areas: list[SubArea] = field(
        default_factory=lambda: [
            SubArea(n=DefaultValues.N_IMPERV),
            SubArea(n=DefaultValues.N_IMPERV),
            SubArea(n=DefaultValues.N_PERV),
        ]
    )
    # solver-owned
    rainfall: float = 0.0
    evap_loss: float = 0.0
    infil_loss: float = 0.0
    runon: float = 0.0
    new_runoff: float = 0.0
    new_snow_depth: float = 0.0
    surface_buildup: np.ndarray = field(default_factory=lambda: np.zeros(0))
    conc_ponded: np.ndarray = field(default_factory=lambda: np.zeros(0))


# Solver-owned accumulators #


@dataclass
class NodeStatsRecord:
    avg_depth: float = 0.0  # sum over the routing steps
    max_depth: float = 0.0
    max_depth_date: Optional[datetime] = None
    max_rpt_depth: float = 0.0
    vol_flooded: float = 0.0
    time_flooded: float = 0.0  # s
    time_surcharged: float = 0.0  # s
    time_courant_critical: float = 0.0  # s
    tot_lat_flow: float = 0.0
    max_lat_flow: float = 0.0
    max_inflow: float = 0.0
    max_overflow: float = 0.0
    max_ponded_vol: float = 0.0
    max_inflow_date: Optional[datetime] = None
    max_overflow_date: Optional[datetime] = None


@dataclass
class StorageStatsRecord:
    init_vol: float = 0.0
    avg_vol: float = 0.0  # sum over the routing steps
    max_vol: float = 0.0
    max_flow: float = 0.0
    evap_losses: float = 0.0
    exfil_losses: float = 0.0
    max_vol_date: Optional[datetime] = None


@dataclass
class OutfallStatsRecord:
    avg_flow: float = 0.0  # sum over the periods with flow
    max_flow: float = 0.0
    total_load: np.ndarray = field(default_factory=lambda: np.zeros(0))
    total_periods: int = 0


@dataclass
class LinkStatsRecord:
    max_flow: float = 0.0
    max_flow_date: Optional[datetime] = None
    max_veloc: float = 0.0
    max_depth: float = 0.0
    time_normal_flow: float = 0.0  # all times in s
    time_inlet_control: float = 0.0
    time_surcharged: float = 0.0
    time_full_upstream: float = 0.0
    time_full_dnstream: float = 0.0
    time_full_flow: float = 0.0
    time_capacity_limited: float = 0.0
    time_courant_critical: float = 0.0
    flow_turns: int = 0
    flow_turn_sign: int = 0


@dataclass
class PumpStatsRecord:
    utilized: float = 0.0
    min_flow: float = 0.0
    avg_flow: float = 0.0  # sum over the periods with flow
    max_flow: float = 0.0
    volume: float = 0.0
    energy: float = 0.0
    off_curve_low: float = 0.0
    off_curve_high: float = 0.0
    start_ups: int = 0
    total_periods: int = 0


@dataclass
class SubcatchStatsRecord:
    precip: float = 0.0  # volume (ft3)
    runon: float = 0.0
    evap: float = 0.0
    infil: float = 0.0
    runoff: float = 0.0
    max_flow: float = 0.0


@dataclass
class RoutingTotalsRecord:
    dw_inflow: float = 0.0
    ww_inflow: float = 0.0
    gw_inflow: float = 0.0
    ii_inflow: float = 0.0
    ex_inflow: float = 0.0
    flooding: float = 0.0
    outflow: float = 0.0
    evap_loss: float = 0.0
    seep_loss: float = 0.0
    reacted: float = 0.0
    init_storage: float = 0.0
    final_storage: float = 0.0
    pct_error: float = 0.0  # fraction


@dataclass
class RunoffTotalsRecord:
    rainfall: float = 0.0  # all volumes in ft3
    evap: float = 0.0
    infil: float = 0.0
    runoff: float = 0.0
    drains: float = 0.0
    runon: float = 0.0
    init_storage: float = 0.0
    final_storage: float = 0.0
    init_snow_cover: float = 0.0
    final_snow_cover: float = 0.0
    snow_removed: float = 0.0
    pct_error: float = 0.0  # fraction


@dataclass
class StatsStore:
    """Everything the statistics and mass balance collaborators accumulate"""

    nodes: list[NodeStatsRecord] = field(default_factory=list)
    node_inflow_volume: list[float] = field(default_factory=list)
    storages: dict[int, StorageStatsRecord] = field(default_factory=dict)  # by node index
    outfalls: dict[int, OutfallStatsRecord] = field(default_factory=dict)  # by node index
    links: list[LinkStatsRecord] = field(default_factory=list)
    pumps: dict[int, PumpStatsRecord] = field(default_factory=dict)  # by link index
    subcatchments: list[SubcatchStatsRecord] = field(default_factory=list)
    routing: RoutingTotalsRecord = field(default_factory=RoutingTotalsRecord)
    runoff: RunoffTotalsRecord = field(default_factory=RunoffTotalsRecord)
    step_count: int = 0  # number of routing steps
    total_area: float = 0.0  # total subcatchment area (ft2)
