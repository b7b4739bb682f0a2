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

Live boundary conditions supplied by the caller.
Values are staged on the records and picked up by the solver at its next
evaluation.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from stormgate.const import (
    DefaultValues,
    ObjectType,
    NodeType,
    LinkType,
    OutfallType,
    GageDataSource,
    Quantity,
)
from stormgate.gateway_error import WrongObjectTypeError
from stormgate.registry import ObjectRegistry
from stormgate.units import UnitConverter
import stormgate.messenger as msgr


@dataclass
class ExternalInflow:
    """Direct inflow into a node.
    live_value is expressed in user units, conversion_factor brings it back
    to canonical units.
    """

    node: int
    param: int  # FLOW_INFLOW_PARAM for flow, else pollutant index
    conversion_factor: float
    scale_factor: float = DefaultValues.INFLOW_SCALE
    baseline: float = DefaultValues.INFLOW_BASELINE
    time_series: int = -1
    base_pattern: int = -1
    live_value: float = 0.0

    @property
    def canonical_value(self) -> float:
        return self.live_value * self.conversion_factor


class ForcingTable:
    """External inflow records, at most one per node and parameter"""

    def __init__(self):
        self._inflows: dict[tuple[int, int], ExternalInflow] = {}

    def __len__(self):
        return len(self._inflows)

    def get(self, node: int, param: int) -> Optional[ExternalInflow]:
        return self._inflows.get((node, param))

    def get_or_create(self, node: int, param: int, conversion_factor: float) -> ExternalInflow:
        key = (node, param)
        if key not in self._inflows:
            self._inflows[key] = ExternalInflow(
                node=node, param=param, conversion_factor=conversion_factor
            )
            msgr.debug(f"created external inflow for node {node}, param {param}")
        return self._inflows[key]

    def node_inflows(self, node: int) -> list[ExternalInflow]:
        return [inflow for (n, _), inflow in self._inflows.items() if n == node]


class BoundaryForcing:
    """Write the live forcing values onto the model records.
    The indices are expected to be checked by the caller.
    """

    def __init__(
        self,
        registry: ObjectRegistry,
        converter: UnitConverter,
        get_datetime: Callable[[], datetime],
    ):
        self.registry = registry
        self.converter = converter
        self.get_datetime = get_datetime
        self.table = ForcingTable()

    def set_node_inflow(self, node_index: int, flow_rate: float) -> ExternalInflow:
        """Hold a direct flow into the node until set again"""
        inflow = self.table.get_or_create(
            node_index,
            DefaultValues.FLOW_INFLOW_PARAM,
            conversion_factor=1.0 / self.converter.factor(Quantity.FLOW),
        )
        inflow.live_value = flow_rate
        return inflow

    def get_node_inflow(self, node_index: int) -> float:
        inflow = self.table.get(node_index, DefaultValues.FLOW_INFLOW_PARAM)
        if inflow is None:
            return 0.0
        return inflow.live_value

    def _get_outfall(self, node_index: int):
        node = self.registry.get(ObjectType.NODE, node_index)
        if node.node_type != NodeType.OUTFALL or node.outfall is None:
            raise WrongObjectTypeError(f"node <{node.id}> is not an outfall")
        return node.outfall

    def set_outfall_stage(self, node_index: int, stage: float) -> None:
        outfall = self._get_outfall(node_index)
        if outfall.boundary_type != OutfallType.STAGED:
            msgr.debug(f"outfall {node_index}: {outfall.boundary_type} boundary set to staged")
            outfall.boundary_type = OutfallType.STAGED
        outfall.stage = self.converter.to_canonical(stage, Quantity.LENGTH)

    def get_outfall_stage(self, node_index: int) -> float:
        outfall = self._get_outfall(node_index)
        return self.converter.to_user(outfall.stage, Quantity.LENGTH)

    def set_gage_precipitation(self, gage_index: int, total_precip: float) -> None:
        """Make the gage use the supplied precipitation intensity"""
        gage = self.registry.get(ObjectType.GAGE, gage_index)
        gage.data_source = GageDataSource.EXTERNAL
        gage.is_used = True
        gage.co_gage = -1
        gage.external_rain = self.converter.to_canonical(total_precip, Quantity.RAINFALL)

    def set_link_setting(self, link_index: int, setting: float) -> float:
        """Apply a new target setting immediately.
        Return the setting after clamping.
        """
        link = self.registry.get(ObjectType.LINK, link_index)
        clamped = max(setting, 0.0)
        if link.link_type != LinkType.PUMP:
            clamped = min(clamped, 1.0)
        if clamped != setting:
            msgr.warning(f"link <{link.id}>: setting {setting} clamped to {clamped}")
        link.target_setting = clamped
        link.setting = clamped
        date_str = self.get_datetime().strftime(DefaultValues.DATETIME_FORMAT)
        msgr.verbose(
            f"{date_str} "
            f"{LinkType(link.link_type).name} {link.id} setting changed to "
            f"{clamped:.2f} by Control {DefaultValues.CONTROL_RULE_NAME}"
        )
        return clamped
