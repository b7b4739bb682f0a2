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
"""

import numpy as np

from stormgate.const import (
    DefaultValues,
    ObjectType,
    NodeType,
    LinkType,
    PollutantUnits,
    Quantity,
    SubcatchPollutant,
)
from stormgate.data_containers import (
    NodeStats,
    StorageStats,
    OutfallStats,
    LinkStats,
    PumpStats,
    SubcatchStats,
    RoutingTotals,
    RunoffTotals,
    GagePrecipitation,
)
from stormgate.gateway_error import (
    AllocationError,
    PropertyOutOfRangeError,
    WrongObjectTypeError,
)
from stormgate.model import StatsStore
from stormgate.registry import ObjectRegistry
from stormgate.units import UnitConverter


def new_buffer(size: int) -> np.ndarray:
    """Allocate a result array owned by the caller"""
    try:
        return np.zeros(size, dtype=np.float64)
    except MemoryError:
        raise AllocationError()


def safe_divide(numerator: float, denominator: float) -> float:
    """Averages of empty periods are zero"""
    if denominator > 0:
        return numerator / denominator
    return 0.0


class StatisticsReader:
    """Convert the solver results and the accumulated statistics to
    user units.
    The lifecycle and the indices are checked by the gateway.
    """

    def __init__(self, registry: ObjectRegistry, converter: UnitConverter, stats: StatsStore):
        self.registry = registry
        self.converter = converter
        self.stats = stats

    def _ucf(self, quantity: Quantity) -> float:
        return self.converter.factor(quantity)

    # Instantaneous values #

    def get_subcatch_pollutant(self, subcatch_index: int, kind: SubcatchPollutant) -> np.ndarray:
        subcatch = self.registry.get(ObjectType.SUBCATCH, subcatch_index)
        n_pollutants = self.registry.count(ObjectType.POLLUT)
        try:
            kind = SubcatchPollutant(kind)
        except ValueError:
            raise PropertyOutOfRangeError(f"unknown subcatchment pollutant result <{kind}>")
        result = new_buffer(n_pollutants)
        if kind == SubcatchPollutant.BUILDUP:
            area = subcatch.area * self._ucf(Quantity.LANDAREA)
            if area > 0:
                result[:] = subcatch.surface_buildup[:n_pollutants] / area
        else:
            result[:] = subcatch.conc_ponded[:n_pollutants] / DefaultValues.LITERS_PER_FT3
        return result

    def get_gage_precipitation(self, gage_index: int) -> GagePrecipitation:
        gage = self.registry.get(ObjectType.GAGE, gage_index)
        rainfall, snowfall = gage.get_precip()
        ucf = self._ucf(Quantity.RAINFALL)
        return GagePrecipitation(
            total=(rainfall + snowfall) * ucf,
            rainfall=rainfall * ucf,
            snowfall=snowfall * ucf,
        )

    # Cumulative values #

    def get_node_stats(self, node_index: int) -> NodeStats:
        rec = self.stats.nodes[node_index]
        length = self._ucf(Quantity.LENGTH)
        flow = self._ucf(Quantity.FLOW)
        volume = self._ucf(Quantity.VOLUME)
        seconds_per_hour = DefaultValues.SECONDS_PER_HOUR
        return NodeStats(
            avg_depth=safe_divide(rec.avg_depth * length, self.stats.step_count),
            max_depth=rec.max_depth * length,
            max_depth_date=rec.max_depth_date,
            max_rpt_depth=rec.max_rpt_depth * length,
            vol_flooded=rec.vol_flooded * volume,
            time_flooded=rec.time_flooded / seconds_per_hour,
            time_surcharged=rec.time_surcharged / seconds_per_hour,
            time_courant_critical=rec.time_courant_critical / seconds_per_hour,
            tot_lat_flow=rec.tot_lat_flow * volume,
            max_lat_flow=rec.max_lat_flow * flow,
            max_inflow=rec.max_inflow * flow,
            max_overflow=rec.max_overflow * flow,
            max_ponded_vol=rec.max_ponded_vol * volume,
            max_inflow_date=rec.max_inflow_date,
            max_overflow_date=rec.max_overflow_date,
        )

    def get_node_total_inflow(self, node_index: int) -> float:
        return self.stats.node_inflow_volume[node_index] * self._ucf(Quantity.VOLUME)

    def get_storage_stats(self, node_index: int) -> StorageStats:
        node = self.registry.get(ObjectType.NODE, node_index)
        if node.node_type != NodeType.STORAGE or node_index not in self.stats.storages:
            raise WrongObjectTypeError(f"node <{node.id}> is not a storage unit")
        rec = self.stats.storages[node_index]
        volume = self._ucf(Quantity.VOLUME)
        return StorageStats(
            init_vol=rec.init_vol * volume,
            avg_vol=safe_divide(rec.avg_vol * volume, self.stats.step_count),
            max_vol=rec.max_vol * volume,
            max_flow=rec.max_flow * self._ucf(Quantity.FLOW),
            evap_losses=rec.evap_losses * volume,
            exfil_losses=rec.exfil_losses * volume,
            max_vol_date=rec.max_vol_date,
        )

    def get_outfall_stats(self, node_index: int) -> OutfallStats:
        node = self.registry.get(ObjectType.NODE, node_index)
        if node.node_type != NodeType.OUTFALL or node_index not in self.stats.outfalls:
            raise WrongObjectTypeError(f"node <{node.id}> is not an outfall")
        rec = self.stats.outfalls[node_index]
        flow = self._ucf(Quantity.FLOW)
        pollutants = self.registry.records(ObjectType.POLLUT)
        total_load = new_buffer(len(pollutants))
        for p, pollutant in enumerate(pollutants):
            load = rec.total_load[p] * DefaultValues.LITERS_PER_FT3 * pollutant.mcf
            if pollutant.units == PollutantUnits.COUNT_PER_L and load > 0:
                load = np.log10(load)
            total_load[p] = load
        return OutfallStats(
            avg_flow=safe_divide(rec.avg_flow * flow, rec.total_periods),
            max_flow=rec.max_flow * flow,
            total_load=total_load,
            total_periods=rec.total_periods,
        )

    def get_link_stats(self, link_index: int) -> LinkStats:
        rec = self.stats.links[link_index]
        length = self._ucf(Quantity.LENGTH)
        seconds_per_hour = DefaultValues.SECONDS_PER_HOUR
        return LinkStats(
            max_flow=rec.max_flow * self._ucf(Quantity.FLOW),
            max_flow_date=rec.max_flow_date,
            max_veloc=rec.max_veloc * length,
            max_depth=rec.max_depth * length,
            time_normal_flow=rec.time_normal_flow / seconds_per_hour,
            time_inlet_control=rec.time_inlet_control / seconds_per_hour,
            time_surcharged=rec.time_surcharged / seconds_per_hour,
            time_full_upstream=rec.time_full_upstream / seconds_per_hour,
            time_full_dnstream=rec.time_full_dnstream / seconds_per_hour,
            time_full_flow=rec.time_full_flow / seconds_per_hour,
            time_capacity_limited=rec.time_capacity_limited / seconds_per_hour,
            time_courant_critical=rec.time_courant_critical / seconds_per_hour,
            flow_turns=rec.flow_turns,
            flow_turn_sign=rec.flow_turn_sign,
        )

    def get_pump_stats(self, link_index: int) -> PumpStats:
        link = self.registry.get(ObjectType.LINK, link_index)
        if link.link_type != LinkType.PUMP or link_index not in self.stats.pumps:
            raise WrongObjectTypeError(f"link <{link.id}> is not a pump")
        rec = self.stats.pumps[link_index]
        flow = self._ucf(Quantity.FLOW)
        return PumpStats(
            utilized=rec.utilized,
            min_flow=rec.min_flow * flow,
            avg_flow=safe_divide(rec.avg_flow * flow, rec.total_periods),
            max_flow=rec.max_flow * flow,
            volume=rec.volume * self._ucf(Quantity.VOLUME),
            energy=rec.energy,
            off_curve_low=rec.off_curve_low,
            off_curve_high=rec.off_curve_high,
            start_ups=rec.start_ups,
            total_periods=rec.total_periods,
        )

    def get_subcatch_stats(self, subcatch_index: int) -> SubcatchStats:
        subcatch = self.registry.get(ObjectType.SUBCATCH, subcatch_index)
        rec = self.stats.subcatchments[subcatch_index]
        volume = self._ucf(Quantity.VOLUME)
        return SubcatchStats(
            precip=safe_divide(rec.precip * self._ucf(Quantity.RAINDEPTH), subcatch.area),
            runon=rec.runon * volume,
            evap=rec.evap * volume,
            infil=rec.infil * volume,
            runoff=rec.runoff * volume,
            max_flow=rec.max_flow * self._ucf(Quantity.FLOW),
        )

    def get_system_routing_stats(self) -> RoutingTotals:
        rec = self.stats.routing
        volume = self._ucf(Quantity.VOLUME)
        return RoutingTotals(
            dw_inflow=rec.dw_inflow * volume,
            ww_inflow=rec.ww_inflow * volume,
            gw_inflow=rec.gw_inflow * volume,
            ii_inflow=rec.ii_inflow * volume,
            ex_inflow=rec.ex_inflow * volume,
            flooding=rec.flooding * volume,
            outflow=rec.outflow * volume,
            evap_loss=rec.evap_loss * volume,
            seep_loss=rec.seep_loss * volume,
            reacted=rec.reacted * volume,
            init_storage=rec.init_storage * volume,
            final_storage=rec.final_storage * volume,
            pct_error=rec.pct_error * 100.0,
        )

    def get_system_runoff_stats(self) -> RunoffTotals:
        rec = self.stats.runoff
        volume = self._ucf(Quantity.VOLUME)
        depth = safe_divide(self._ucf(Quantity.RAINDEPTH), self.stats.total_area)
        return RunoffTotals(
            rainfall=rec.rainfall * depth,
            evap=rec.evap * volume,
            infil=rec.infil * volume,
            runoff=rec.runoff * volume,
            drains=rec.drains * volume,
            runon=rec.runon * volume,
            init_storage=rec.init_storage * depth,
            final_storage=rec.final_storage * depth,
            init_snow_cover=rec.init_snow_cover * depth,
            final_snow_cover=rec.final_snow_cover * depth,
            snow_removed=rec.snow_removed * depth,
            pct_error=rec.pct_error * 100.0,
        )
