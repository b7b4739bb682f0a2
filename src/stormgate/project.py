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

from datetime import datetime, timedelta
from typing import Self

import numpy as np

from stormgate.const import ObjectType, NodeType, LinkType
from stormgate.data_containers import ProjectOptions
from stormgate.forcing import BoundaryForcing
from stormgate.gateway_error import NotOpenError, SimulationRunningError, ValidationError
from stormgate.lid import LidGroup
from stormgate.lifecycle import LifecycleState, LifecycleGuard
from stormgate.model import (
    StatsStore,
    NodeStatsRecord,
    StorageStatsRecord,
    OutfallStatsRecord,
    LinkStatsRecord,
    PumpStatsRecord,
    SubcatchStatsRecord,
)
from stormgate.registry import ObjectRegistry
from stormgate.statistics import StatisticsReader
from stormgate.units import UnitConverter
from stormgate.validation import Validator
import stormgate.messenger as msgr


class Project:
    """An open model and its run state.
    The project owns the lifecycle transitions. The records are shared with
    the solver, which writes the results and advances the routing time.
    """

    def __init__(
        self,
        registry: ObjectRegistry,
        options: ProjectOptions,
        lid_groups: dict[int, LidGroup] | None = None,
    ):
        self.registry = registry
        self.options = options
        self.lid_groups: dict[int, LidGroup] = lid_groups or {}
        self.converter = UnitConverter(options.unit_system, options.flow_units)
        self.state = LifecycleState.OPEN
        self.guard = LifecycleGuard(lambda: self.state)
        self.validator = Validator(self.registry, self.lid_groups)
        self.stats = StatsStore()
        self.forcing = BoundaryForcing(self.registry, self.converter, self.get_current_datetime)
        self.statistics = StatisticsReader(self.registry, self.converter, self.stats)
        # elapsed routing time in milliseconds
        self.new_routing_time = 0.0
        self._size_pollutant_arrays()
        self._reset_stats()

    @property
    def start_datetime(self) -> datetime:
        return self.options.start_datetime

    def get_current_datetime(self) -> datetime:
        return self.start_datetime + timedelta(milliseconds=self.new_routing_time)

    def _size_pollutant_arrays(self):
        """Give every subcatchment one buildup and concentration value per pollutant"""
        n_pollutants = self.registry.count(ObjectType.POLLUT)
        for subcatch in self.registry.records(ObjectType.SUBCATCH):
            if subcatch.surface_buildup.shape != (n_pollutants,):
                subcatch.surface_buildup = np.zeros(n_pollutants)
            if subcatch.conc_ponded.shape != (n_pollutants,):
                subcatch.conc_ponded = np.zeros(n_pollutants)

    def _reset_stats(self):
        """Create the empty accumulators of a run"""
        registry = self.registry
        nodes = registry.records(ObjectType.NODE)
        links = registry.records(ObjectType.LINK)
        subcatchments = registry.records(ObjectType.SUBCATCH)
        n_pollutants = registry.count(ObjectType.POLLUT)
        stats = self.stats
        stats.nodes = [NodeStatsRecord() for _ in nodes]
        stats.node_inflow_volume = [0.0] * len(nodes)
        stats.storages = {
            i: StorageStatsRecord() for i, n in enumerate(nodes) if n.node_type == NodeType.STORAGE
        }
        stats.outfalls = {
            i: OutfallStatsRecord(total_load=np.zeros(n_pollutants))
            for i, n in enumerate(nodes)
            if n.node_type == NodeType.OUTFALL
        }
        stats.links = [LinkStatsRecord() for _ in links]
        stats.pumps = {
            i: PumpStatsRecord() for i, lnk in enumerate(links) if lnk.link_type == LinkType.PUMP
        }
        stats.subcatchments = [SubcatchStatsRecord() for _ in subcatchments]
        stats.step_count = 0
        stats.total_area = sum(s.area for s in subcatchments)

    def set_options(self, options: ProjectOptions) -> None:
        """Replace the options. The units of a project never change."""
        self.guard.check_not_started()
        if (options.unit_system, options.flow_units) != (
            self.options.unit_system,
            self.options.flow_units,
        ):
            raise ValidationError("the units of an open project cannot be changed")
        self.options = options

    def uncommitted_controls(self) -> list[str]:
        return [c.id for c in self.registry.records(ObjectType.LID) if not c.is_committed]

    def start(self) -> Self:
        """Begin a run"""
        if self.state == LifecycleState.CLOSED:
            raise NotOpenError()
        if self.state == LifecycleState.STARTED:
            raise SimulationRunningError("simulation already started")
        uncommitted = self.uncommitted_controls()
        if uncommitted:
            raise ValidationError(f"uncommitted LID controls: {', '.join(uncommitted)}")
        self._reset_stats()
        self.new_routing_time = 0.0
        self.state = LifecycleState.STARTED
        msgr.verbose(f"Simulation started at {self.start_datetime}")
        return self

    def advance(self, seconds: float) -> None:
        """Move the routing clock, as done by the solver after each step"""
        self.guard.check_started()
        self.new_routing_time += seconds * 1000.0
        self.stats.step_count += 1

    def end(self) -> None:
        if self.state != LifecycleState.STARTED:
            msgr.debug("end() called on a project that is not started")
            return
        self.state = LifecycleState.OPEN
        msgr.verbose(f"Simulation ended at {self.get_current_datetime()}")

    def close(self) -> None:
        self.end()
        self.state = LifecycleState.CLOSED
