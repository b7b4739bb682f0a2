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

Access to the parameters, results and statistics of an open project.
Every operation resolves its arguments in the same order:
lifecycle state, object index, property, unit conversion, then field access.
"""

from datetime import datetime

import numpy as np

from stormgate.const import (
    DefaultValues,
    ObjectType,
    NodeType,
    LinkType,
    LidLayer,
    NodeProperty,
    LinkProperty,
    SubcatchProperty,
    LidUnitProperty,
    LidUnitOption,
    LidLayerProperty,
    NodeResult,
    LinkResult,
    SubcatchResult,
    SubcatchPollutant,
    LidUnitResult,
    LidGroupResult,
    SimulationTime,
    SimulationUnit,
    AnalysisSetting,
    SimulationParam,
    Quantity,
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
    ProjectOptions,
)
import stormgate.dispatch as dispatch
from stormgate.gateway_error import (
    PropertyOutOfRangeError,
    ObjectIndexError,
    UndefinedLidGroupError,
    ValidationError,
    get_error_message,
)
from stormgate.lid import LidControl, LidGroup, LidUnit
from stormgate.project import Project
import stormgate.messenger as msgr


# Parameter and result tables of the objects reachable by the generic accessors
PARAM_TABLES = {
    ObjectType.NODE: (dispatch.NODE_PARAMS, NodeProperty),
    ObjectType.LINK: (dispatch.LINK_PARAMS, LinkProperty),
    ObjectType.SUBCATCH: (dispatch.SUBCATCH_PARAMS, SubcatchProperty),
}

RESULT_TABLES = {
    ObjectType.NODE: (dispatch.NODE_RESULTS, NodeResult),
    ObjectType.LINK: (dispatch.LINK_RESULTS, LinkResult),
    ObjectType.SUBCATCH: (dispatch.SUBCATCH_RESULTS, SubcatchResult),
}

ANALYSIS_FIELDS = {
    AnalysisSetting.ALLOW_POND: "allow_ponding",
    AnalysisSetting.SKIP_STEADY: "skip_steady_state",
    AnalysisSetting.IGNORE_RAIN: "ignore_rainfall",
    AnalysisSetting.IGNORE_RDII: "ignore_rdii",
    AnalysisSetting.IGNORE_SNOW: "ignore_snowmelt",
    AnalysisSetting.IGNORE_GW: "ignore_groundwater",
    AnalysisSetting.IGNORE_ROUTE: "ignore_routing",
    AnalysisSetting.IGNORE_QUAL: "ignore_quality",
}

# (options section, field name)
SIMULATION_PARAM_FIELDS = {
    SimulationParam.ROUTE_STEP: ("routing", "route_step"),
    SimulationParam.MIN_ROUTE_STEP: ("routing", "min_route_step"),
    SimulationParam.LENGTH_STEP: ("routing", "lengthening_step"),
    SimulationParam.START_DRY_DAYS: ("routing", "start_dry_days"),
    SimulationParam.COURANT_FACTOR: ("routing", "courant_factor"),
    SimulationParam.MIN_SURF_AREA: ("routing", "min_surf_area"),
    SimulationParam.MIN_SLOPE: ("routing", "min_slope"),
    SimulationParam.RUNOFF_ERROR: ("continuity", "runoff_error"),
    SimulationParam.GW_ERROR: ("continuity", "gw_error"),
    SimulationParam.FLOW_ERROR: ("continuity", "flow_error"),
    SimulationParam.QUAL_ERROR: ("continuity", "qual_error"),
    SimulationParam.HEAD_TOL: ("routing", "head_tol"),
    SimulationParam.SYS_FLOW_TOL: ("routing", "sys_flow_tol"),
    SimulationParam.LAT_FLOW_TOL: ("routing", "lat_flow_tol"),
}

SIMULATION_TIME_FIELDS = {
    SimulationTime.START_DATE: "start_datetime",
    SimulationTime.END_DATE: "end_datetime",
    SimulationTime.REPORT_DATE: "report_start_datetime",
}


def _enum_member(enum_class, value, what: str):
    try:
        return enum_class(value)
    except ValueError:
        raise PropertyOutOfRangeError(f"unknown {what} <{value}>")


class ParameterGateway:
    """Read and write the model of an open project in user units.
    Errors are raised as GatewayError subclasses.
    """

    def __init__(self, project: Project):
        self.project = project
        self.registry = project.registry
        self.guard = project.guard
        self.converter = project.converter

    def _get_record(self, object_type: ObjectType, index: int):
        return self.registry.get(object_type, index)

    # Enumeration #

    def count_objects(self, object_type: ObjectType) -> int:
        return self.registry.count(object_type)

    def get_object_id(self, object_type: ObjectType, index: int) -> str:
        self.guard.check_open()
        return self.registry.get_id(object_type, index)

    def get_object_index(self, object_type: ObjectType, object_id: str) -> int:
        self.guard.check_open()
        return self.registry.find_index(object_type, object_id)

    # Topology #

    def get_node_type(self, index: int) -> NodeType:
        self.guard.check_open()
        return NodeType(self._get_record(ObjectType.NODE, index).node_type)

    def get_link_type(self, index: int) -> LinkType:
        self.guard.check_open()
        return LinkType(self._get_record(ObjectType.LINK, index).link_type)

    def get_link_connections(self, index: int) -> tuple[int, int]:
        """Return the upstream and downstream node indices"""
        self.guard.check_open()
        link = self._get_record(ObjectType.LINK, index)
        return link.node1, link.node2

    def get_link_direction(self, index: int) -> int:
        self.guard.check_open()
        return self._get_record(ObjectType.LINK, index).direction

    def get_subcatch_out_connection(self, index: int) -> tuple[ObjectType, int]:
        """Return the type and index of the object receiving the runoff.
        A subcatchment without outlet loads to itself.
        """
        self.guard.check_open()
        subcatch = self._get_record(ObjectType.SUBCATCH, index)
        if subcatch.out_subcatch >= 0:
            return ObjectType.SUBCATCH, subcatch.out_subcatch
        if subcatch.out_node >= 0:
            return ObjectType.NODE, subcatch.out_node
        return ObjectType.SUBCATCH, index

    # Generic parameters #

    def get_param(self, object_type: ObjectType, index: int, prop: int) -> float:
        self.guard.check_open()
        table, prop_enum = self._param_table(object_type)
        record = self._get_record(object_type, index)
        accessor = dispatch.lookup(table, prop, prop_enum.__name__)
        return accessor.read(record, self.converter)

    def set_param(self, object_type: ObjectType, index: int, prop: int, value: float) -> None:
        """Tables without any live property refuse a running simulation
        before checking the index.
        """
        self.guard.check_open()
        table, prop_enum = self._param_table(object_type)
        if all(accessor.structural for accessor in table.values()):
            self.guard.check_not_started()
        record = self._get_record(object_type, index)
        accessor = dispatch.lookup(table, prop, prop_enum.__name__)
        if accessor.structural:
            self.guard.check_not_started()
        accessor.write(record, value, self.converter)
        msgr.debug(f"{ObjectType(object_type).name} {record.id}: {prop} set to {value}")
        if accessor.revalidate and ObjectType(object_type) == ObjectType.SUBCATCH:
            self.project.validator.validate_subcatchment(index)

    def _param_table(self, object_type):
        try:
            return PARAM_TABLES[ObjectType(object_type)]
        except (ValueError, KeyError):
            raise PropertyOutOfRangeError(f"no parameters for object type <{object_type}>")

    def get_node_param(self, index: int, prop: NodeProperty) -> float:
        return self.get_param(ObjectType.NODE, index, prop)

    def set_node_param(self, index: int, prop: NodeProperty, value: float) -> None:
        self.set_param(ObjectType.NODE, index, prop, value)

    def get_link_param(self, index: int, prop: LinkProperty) -> float:
        return self.get_param(ObjectType.LINK, index, prop)

    def set_link_param(self, index: int, prop: LinkProperty, value: float) -> None:
        self.set_param(ObjectType.LINK, index, prop, value)

    def get_subcatch_param(self, index: int, prop: SubcatchProperty) -> float:
        return self.get_param(ObjectType.SUBCATCH, index, prop)

    def set_subcatch_param(self, index: int, prop: SubcatchProperty, value: float) -> None:
        self.set_param(ObjectType.SUBCATCH, index, prop, value)

    # Simulation settings #

    def get_simulation_unit(self, kind: SimulationUnit) -> int:
        self.guard.check_open()
        kind = _enum_member(SimulationUnit, kind, "simulation unit")
        options = self.project.options
        if kind == SimulationUnit.SYSTEM_UNIT:
            return options.unit_system
        return options.flow_units

    def get_analysis_setting(self, setting: AnalysisSetting) -> bool:
        self.guard.check_open()
        setting = _enum_member(AnalysisSetting, setting, "analysis setting")
        return getattr(self.project.options.analysis, ANALYSIS_FIELDS[setting])

    def get_simulation_param(self, param: SimulationParam) -> float:
        self.guard.check_open()
        param = _enum_member(SimulationParam, param, "simulation parameter")
        section, field_name = SIMULATION_PARAM_FIELDS[param]
        return getattr(getattr(self.project.options, section), field_name)

    def get_simulation_datetime(self, kind: SimulationTime) -> datetime:
        self.guard.check_open()
        kind = _enum_member(SimulationTime, kind, "simulation time")
        options = self.project.options
        if kind == SimulationTime.REPORT_DATE:
            return options.report_start
        return getattr(options, SIMULATION_TIME_FIELDS[kind])

    def set_simulation_datetime(self, kind: SimulationTime, value: datetime | str) -> None:
        """value is a datetime or a string formatted as MM/DD/YYYY HH:MM:SS.
        The total duration follows the new start or end date.
        """
        self.guard.check_not_started()
        kind = _enum_member(SimulationTime, kind, "simulation time")
        options_data = self.project.options.model_dump()
        try:
            if isinstance(value, str):
                value = datetime.strptime(value, DefaultValues.DATETIME_FORMAT)
            options_data[SIMULATION_TIME_FIELDS[kind]] = value
            options = ProjectOptions.model_validate(options_data)
        except ValueError as err:
            raise ValidationError(f"invalid {kind.name}: {err}")
        self.project.set_options(options)
        msgr.debug(f"{kind.name} set to {value}, total duration {options.total_duration} ms")

    @staticmethod
    def get_error_message(code: int) -> str:
        return get_error_message(code)

    # LID controls #

    def _get_lid_control(self, index: int) -> LidControl:
        return self._get_record(ObjectType.LID, index)

    def get_lid_control_param(
        self, control_index: int, layer: LidLayer, prop: LidLayerProperty
    ) -> float:
        self.guard.check_open()
        control = self._get_lid_control(control_index)
        accessor = dispatch.lookup(dispatch.LID_LAYER_PARAMS, (layer, prop), "LID layer")
        return accessor.read(control.get_layer(layer), self.converter)

    def set_lid_control_param(
        self, control_index: int, layer: LidLayer, prop: LidLayerProperty, value: float
    ) -> None:
        """Write a layer property then commit the control.
        A failed commit keeps the written value and raises ValidationError.
        """
        self.guard.check_not_started()
        control = self._get_lid_control(control_index)
        accessor = dispatch.lookup(dispatch.LID_LAYER_PARAMS, (layer, prop), "LID layer")
        accessor.write(control.get_layer(layer), value, self.converter)
        control.is_committed = False
        self.project.validator.validate_lid_control(control_index)

    def validate_lid_control(self, control_index: int) -> None:
        self.guard.check_not_started()
        self._get_lid_control(control_index)
        self.project.validator.validate_lid_control(control_index)

    def get_lid_control_overflow(self, control_index: int) -> bool:
        self.guard.check_open()
        return self._get_lid_control(control_index).surface.can_overflow

    def set_lid_control_overflow(self, control_index: int, can_overflow: bool) -> None:
        self.guard.check_not_started()
        control = self._get_lid_control(control_index)
        control.surface.can_overflow = bool(can_overflow)
        control.is_committed = False
        self.project.validator.validate_lid_control(control_index)

    # LID units #

    def _get_lid_group(self, subcatch_index: int) -> LidGroup:
        self._get_record(ObjectType.SUBCATCH, subcatch_index)
        try:
            return self.project.lid_groups[subcatch_index]
        except KeyError:
            raise UndefinedLidGroupError()

    def _get_lid_unit(self, subcatch_index: int, unit_index: int) -> LidUnit:
        group = self._get_lid_group(subcatch_index)
        if not 0 <= unit_index < len(group.units):
            raise ObjectIndexError(
                f"LID unit index {unit_index} out of range [0, {len(group.units)})"
            )
        return group.units[unit_index]

    def get_lid_unit_count(self, subcatch_index: int) -> int:
        self.guard.check_open()
        self._get_record(ObjectType.SUBCATCH, subcatch_index)
        group = self.project.lid_groups.get(subcatch_index)
        if group is None:
            return 0
        return len(group.units)

    def get_lid_unit_param(
        self, subcatch_index: int, unit_index: int, prop: LidUnitProperty
    ) -> float:
        self.guard.check_open()
        unit = self._get_lid_unit(subcatch_index, unit_index)
        accessor = dispatch.lookup(dispatch.LID_UNIT_PARAMS, prop, "LID unit")
        return accessor.read(unit, self.converter)

    def set_lid_unit_param(
        self, subcatch_index: int, unit_index: int, prop: LidUnitProperty, value: float
    ) -> None:
        self.guard.check_not_started()
        unit = self._get_lid_unit(subcatch_index, unit_index)
        accessor = dispatch.lookup(dispatch.LID_UNIT_PARAMS, prop, "LID unit")
        accessor.write(unit, value, self.converter)
        self.project.validator.validate_lid_group(subcatch_index)

    def get_lid_unit_option(
        self, subcatch_index: int, unit_index: int, option: LidUnitOption
    ) -> int:
        self.guard.check_open()
        unit = self._get_lid_unit(subcatch_index, unit_index)
        accessor = dispatch.lookup(dispatch.LID_UNIT_OPTIONS, option, "LID unit option")
        return int(accessor.getter(unit))

    def set_lid_unit_option(
        self, subcatch_index: int, unit_index: int, option: LidUnitOption, value: int
    ) -> None:
        self.guard.check_not_started()
        unit = self._get_lid_unit(subcatch_index, unit_index)
        accessor = dispatch.lookup(dispatch.LID_UNIT_OPTIONS, option, "LID unit option")
        accessor.setter(unit, int(value))
        self.project.validator.validate_lid_group(subcatch_index)

    def get_lid_unit_flux_rate(
        self, subcatch_index: int, unit_index: int, layer: LidLayer
    ) -> float:
        """Flux rate of a layer at the previous step"""
        self.guard.check_open()
        unit = self._get_lid_unit(subcatch_index, unit_index)
        if layer not in dispatch.LID_FLUX_LAYERS:
            raise PropertyOutOfRangeError(f"no flux rate for LID layer <{layer}>")
        return self.converter.to_user(unit.old_flux_rates[layer], Quantity.LENGTH)

    def get_lid_unit_result(
        self, subcatch_index: int, unit_index: int, result: LidUnitResult
    ) -> float:
        self.guard.check_open()
        unit = self._get_lid_unit(subcatch_index, unit_index)
        accessor = dispatch.lookup(dispatch.LID_UNIT_RESULTS, result, "LID unit result")
        return accessor.read(unit, self.converter)

    def get_lid_group_result(self, subcatch_index: int, result: LidGroupResult) -> float:
        self.guard.check_open()
        group = self._get_lid_group(subcatch_index)
        accessor = dispatch.lookup(dispatch.LID_GROUP_RESULTS, result, "LID group result")
        return accessor.read(group, self.converter)

    # Instantaneous results #

    def get_result(self, object_type: ObjectType, index: int, result: int) -> float:
        self.guard.check_started()
        try:
            table, result_enum = RESULT_TABLES[ObjectType(object_type)]
        except (ValueError, KeyError):
            raise PropertyOutOfRangeError(f"no results for object type <{object_type}>")
        record = self._get_record(object_type, index)
        accessor = dispatch.lookup(table, result, result_enum.__name__)
        return accessor.read(record, self.converter)

    def get_node_result(self, index: int, result: NodeResult) -> float:
        return self.get_result(ObjectType.NODE, index, result)

    def get_link_result(self, index: int, result: LinkResult) -> float:
        return self.get_result(ObjectType.LINK, index, result)

    def get_subcatch_result(self, index: int, result: SubcatchResult) -> float:
        return self.get_result(ObjectType.SUBCATCH, index, result)

    def get_subcatch_pollutant(self, index: int, kind: SubcatchPollutant) -> np.ndarray:
        """Return a new array with one value per pollutant"""
        self.guard.check_started()
        self._get_record(ObjectType.SUBCATCH, index)
        return self.project.statistics.get_subcatch_pollutant(index, kind)

    def get_gage_precipitation(self, index: int) -> GagePrecipitation:
        self.guard.check_started()
        self._get_record(ObjectType.GAGE, index)
        return self.project.statistics.get_gage_precipitation(index)

    def get_current_datetime_str(self) -> str:
        self.guard.check_started()
        return self.project.get_current_datetime().strftime(DefaultValues.DATETIME_FORMAT)

    # Cumulative statistics #

    def get_node_stats(self, index: int) -> NodeStats:
        self.guard.check_open()
        self._get_record(ObjectType.NODE, index)
        return self.project.statistics.get_node_stats(index)

    def get_node_total_inflow(self, index: int) -> float:
        self.guard.check_open()
        self._get_record(ObjectType.NODE, index)
        return self.project.statistics.get_node_total_inflow(index)

    def get_storage_stats(self, index: int) -> StorageStats:
        self.guard.check_open()
        self._get_record(ObjectType.NODE, index)
        return self.project.statistics.get_storage_stats(index)

    def get_outfall_stats(self, index: int) -> OutfallStats:
        self.guard.check_open()
        self._get_record(ObjectType.NODE, index)
        return self.project.statistics.get_outfall_stats(index)

    def get_link_stats(self, index: int) -> LinkStats:
        self.guard.check_open()
        self._get_record(ObjectType.LINK, index)
        return self.project.statistics.get_link_stats(index)

    def get_pump_stats(self, index: int) -> PumpStats:
        self.guard.check_open()
        self._get_record(ObjectType.LINK, index)
        return self.project.statistics.get_pump_stats(index)

    def get_subcatch_stats(self, index: int) -> SubcatchStats:
        self.guard.check_open()
        self._get_record(ObjectType.SUBCATCH, index)
        return self.project.statistics.get_subcatch_stats(index)

    def get_system_routing_stats(self) -> RoutingTotals:
        self.guard.check_open()
        return self.project.statistics.get_system_routing_stats()

    def get_system_runoff_stats(self) -> RunoffTotals:
        self.guard.check_open()
        return self.project.statistics.get_system_runoff_stats()

    # Live forcing #

    def set_link_setting(self, index: int, setting: float) -> float:
        self.guard.check_open()
        self._get_record(ObjectType.LINK, index)
        return self.project.forcing.set_link_setting(index, setting)

    def set_node_inflow(self, index: int, flow_rate: float) -> None:
        self.guard.check_open()
        self._get_record(ObjectType.NODE, index)
        self.project.forcing.set_node_inflow(index, flow_rate)

    def set_outfall_stage(self, index: int, stage: float) -> None:
        self.guard.check_open()
        self._get_record(ObjectType.NODE, index)
        self.project.forcing.set_outfall_stage(index, stage)

    def get_outfall_stage(self, index: int) -> float:
        self.guard.check_open()
        self._get_record(ObjectType.NODE, index)
        return self.project.forcing.get_outfall_stage(index)

    def set_gage_precipitation(self, index: int, total_precip: float) -> None:
        self.guard.check_open()
        self._get_record(ObjectType.GAGE, index)
        self.project.forcing.set_gage_precipitation(index, total_precip)
