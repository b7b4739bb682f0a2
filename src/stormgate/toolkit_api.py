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

Status-code interface over the parameter gateway.
Getters return an (ErrorCode, value) pair, setters return an ErrorCode.
On error the value is the zero of its type and nothing is raised.
"""

from functools import wraps

from stormgate.gateway import ParameterGateway
from stormgate.gateway_error import ErrorCode, GatewayError, get_error_message
from stormgate.project import Project
import stormgate.messenger as msgr


def _report(err: GatewayError) -> ErrorCode:
    msgr.debug(f"{err.code.name}: {err.msg}")
    return err.code


def getter(default):
    """Wrap a gateway getter, returning default on error"""

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args):
            try:
                return ErrorCode.NONE, func(self, *args)
            except GatewayError as err:
                return _report(err), default

        return wrapper

    return decorator


def setter(func):
    """Wrap a gateway setter"""

    @wraps(func)
    def wrapper(self, *args):
        try:
            func(self, *args)
        except GatewayError as err:
            return _report(err)
        return ErrorCode.NONE

    return wrapper


class ToolkitAPI:
    """Mirror of ParameterGateway reporting errors as status codes"""

    def __init__(self, project: Project):
        self.gateway = ParameterGateway(project)

    @staticmethod
    def get_error_message(code: int) -> str:
        return get_error_message(code)

    # Enumeration and topology #

    @getter(0)
    def count_objects(self, object_type):
        return self.gateway.count_objects(object_type)

    @getter("")
    def get_object_id(self, object_type, index):
        return self.gateway.get_object_id(object_type, index)

    @getter(-1)
    def get_object_index(self, object_type, object_id):
        return self.gateway.get_object_index(object_type, object_id)

    @getter(-1)
    def get_node_type(self, index):
        return self.gateway.get_node_type(index)

    @getter(-1)
    def get_link_type(self, index):
        return self.gateway.get_link_type(index)

    @getter((-1, -1))
    def get_link_connections(self, index):
        return self.gateway.get_link_connections(index)

    @getter(0)
    def get_link_direction(self, index):
        return self.gateway.get_link_direction(index)

    @getter((-1, -1))
    def get_subcatch_out_connection(self, index):
        return self.gateway.get_subcatch_out_connection(index)

    # Simulation settings #

    @getter(0)
    def get_simulation_unit(self, kind):
        return self.gateway.get_simulation_unit(kind)

    @getter(0)
    def get_analysis_setting(self, setting):
        return int(self.gateway.get_analysis_setting(setting))

    @getter(0.0)
    def get_simulation_param(self, param):
        return self.gateway.get_simulation_param(param)

    @getter((1900, 1, 1, 0, 0, 0))
    def get_simulation_datetime(self, kind):
        """Return (year, month, day, hour, minute, second)"""
        dt = self.gateway.get_simulation_datetime(kind)
        return dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second

    @setter
    def set_simulation_datetime(self, kind, value):
        self.gateway.set_simulation_datetime(kind, value)

    # Parameters #

    @getter(0.0)
    def get_node_param(self, index, prop):
        return self.gateway.get_node_param(index, prop)

    @setter
    def set_node_param(self, index, prop, value):
        self.gateway.set_node_param(index, prop, value)

    @getter(0.0)
    def get_link_param(self, index, prop):
        return self.gateway.get_link_param(index, prop)

    @setter
    def set_link_param(self, index, prop, value):
        self.gateway.set_link_param(index, prop, value)

    @getter(0.0)
    def get_subcatch_param(self, index, prop):
        return self.gateway.get_subcatch_param(index, prop)

    @setter
    def set_subcatch_param(self, index, prop, value):
        self.gateway.set_subcatch_param(index, prop, value)

    # LID #

    @getter(0)
    def get_lid_unit_count(self, subcatch_index):
        return self.gateway.get_lid_unit_count(subcatch_index)

    @getter(0.0)
    def get_lid_unit_param(self, subcatch_index, unit_index, prop):
        return self.gateway.get_lid_unit_param(subcatch_index, unit_index, prop)

    @setter
    def set_lid_unit_param(self, subcatch_index, unit_index, prop, value):
        self.gateway.set_lid_unit_param(subcatch_index, unit_index, prop, value)

    @getter(0)
    def get_lid_unit_option(self, subcatch_index, unit_index, option):
        return self.gateway.get_lid_unit_option(subcatch_index, unit_index, option)

    @setter
    def set_lid_unit_option(self, subcatch_index, unit_index, option, value):
        self.gateway.set_lid_unit_option(subcatch_index, unit_index, option, value)

    @getter(0)
    def get_lid_control_overflow(self, control_index):
        return int(self.gateway.get_lid_control_overflow(control_index))

    @setter
    def set_lid_control_overflow(self, control_index, can_overflow):
        self.gateway.set_lid_control_overflow(control_index, can_overflow)

    @getter(0.0)
    def get_lid_control_param(self, control_index, layer, prop):
        return self.gateway.get_lid_control_param(control_index, layer, prop)

    @setter
    def set_lid_control_param(self, control_index, layer, prop, value):
        self.gateway.set_lid_control_param(control_index, layer, prop, value)

    @getter(0.0)
    def get_lid_unit_flux_rate(self, subcatch_index, unit_index, layer):
        return self.gateway.get_lid_unit_flux_rate(subcatch_index, unit_index, layer)

    @getter(0.0)
    def get_lid_unit_result(self, subcatch_index, unit_index, result):
        return self.gateway.get_lid_unit_result(subcatch_index, unit_index, result)

    @getter(0.0)
    def get_lid_group_result(self, subcatch_index, result):
        return self.gateway.get_lid_group_result(subcatch_index, result)

    # Results #

    @getter("")
    def get_current_datetime_str(self):
        return self.gateway.get_current_datetime_str()

    @getter(0.0)
    def get_node_result(self, index, result):
        return self.gateway.get_node_result(index, result)

    @getter(0.0)
    def get_link_result(self, index, result):
        return self.gateway.get_link_result(index, result)

    @getter(0.0)
    def get_subcatch_result(self, index, result):
        return self.gateway.get_subcatch_result(index, result)

    @getter(None)
    def get_subcatch_pollutant(self, index, kind):
        return self.gateway.get_subcatch_pollutant(index, kind)

    @getter(None)
    def get_gage_precipitation(self, index):
        """Return a (total, rainfall, snowfall) tuple"""
        precip = self.gateway.get_gage_precipitation(index)
        return precip.total, precip.rainfall, precip.snowfall

    @getter(None)
    def get_node_stats(self, index):
        return self.gateway.get_node_stats(index)

    @getter(0.0)
    def get_node_total_inflow(self, index):
        return self.gateway.get_node_total_inflow(index)

    @getter(None)
    def get_storage_stats(self, index):
        return self.gateway.get_storage_stats(index)

    @getter(None)
    def get_outfall_stats(self, index):
        return self.gateway.get_outfall_stats(index)

    @getter(None)
    def get_link_stats(self, index):
        return self.gateway.get_link_stats(index)

    @getter(None)
    def get_pump_stats(self, index):
        return self.gateway.get_pump_stats(index)

    @getter(None)
    def get_subcatch_stats(self, index):
        return self.gateway.get_subcatch_stats(index)

    @getter(None)
    def get_system_routing_stats(self):
        return self.gateway.get_system_routing_stats()

    @getter(None)
    def get_system_runoff_stats(self):
        return self.gateway.get_system_runoff_stats()

    @staticmethod
    def free_outfall_stats(outfall_stats) -> None:
        """No-op kept for parity with the C toolkit.
        The snapshot and its arrays are garbage collected once the caller
        drops its references.
        """

    @staticmethod
    def free_array(array) -> None:
        """No-op kept for parity with the C toolkit, see free_outfall_stats"""

    # Forcing #

    @setter
    def set_link_setting(self, index, setting):
        self.gateway.set_link_setting(index, setting)

    @setter
    def set_node_inflow(self, index, flow_rate):
        self.gateway.set_node_inflow(index, flow_rate)

    @setter
    def set_outfall_stage(self, index, stage):
        self.gateway.set_outfall_stage(index, stage)

    @getter(0.0)
    def get_outfall_stage(self, index):
        return self.gateway.get_outfall_stage(index)

    @setter
    def set_gage_precipitation(self, index, total_precip):
        self.gateway.set_gage_precipitation(index, total_precip)
