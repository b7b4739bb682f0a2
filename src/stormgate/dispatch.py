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

from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, Optional

from stormgate.const import (
    Quantity,
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
    LidUnitResult,
    LidGroupResult,
    DefaultValues,
)
from stormgate.gateway_error import PropertyOutOfRangeError
from stormgate.units import UnitConverter


@dataclass(frozen=True)
class PropertyAccessor:
    """How to reach a field of a record and how to convert it.
    The user value is canonical * factor(quantity) ** power * scale.
    """

    getter: Callable[[Any], float]
    setter: Optional[Callable[[Any, float], None]] = None
    quantity: Optional[Quantity] = None
    power: int = 1
    scale: float = 1.0
    structural: bool = True  # cannot be written while the simulation is running
    revalidate: bool = False  # a write triggers a re-validation of the owner

    @property
    def is_writable(self) -> bool:
        return self.setter is not None

    def read(self, record, converter: UnitConverter) -> float:
        return converter.to_user(self.getter(record), self.quantity, self.power, self.scale)

    def write(self, record, value: float, converter: UnitConverter) -> None:
        if self.setter is None:
            raise PropertyOutOfRangeError("read-only property")
        self.setter(record, converter.to_canonical(value, self.quantity, self.power, self.scale))


def attrsetter(name: str) -> Callable[[Any, float], None]:
    def setter(record, value):
        setattr(record, name, value)

    return setter


def field_accessor(name: str, **kwargs) -> PropertyAccessor:
    """Accessor of a plain attribute"""
    return PropertyAccessor(getter=attrgetter(name), setter=attrsetter(name), **kwargs)


def result_accessor(name: str, **kwargs) -> PropertyAccessor:
    """Read-only accessor of a solver-owned attribute"""
    return PropertyAccessor(getter=attrgetter(name), **kwargs)


def lookup(table: dict, key, table_name: str) -> PropertyAccessor:
    """Return the accessor registered under key"""
    try:
        return table[key]
    except (KeyError, TypeError):
        raise PropertyOutOfRangeError(f"unknown {table_name} property <{key}>")


def _set_frac_imperv(subcatch, value):
    subcatch.frac_imperv = min(max(value, 0.0), 1.0)


def _set_surface_vegetation(surface, value):
    surface.void_fraction = 1.0 - value


NODE_PARAMS = {
    NodeProperty.INVERT_ELEV: field_accessor("invert_elev", quantity=Quantity.LENGTH),
    NodeProperty.FULL_DEPTH: field_accessor("full_depth", quantity=Quantity.LENGTH),
    NodeProperty.SURCHARGE_DEPTH: field_accessor("surcharge_depth", quantity=Quantity.LENGTH),
    NodeProperty.POND_AREA: field_accessor("ponded_area", quantity=Quantity.LENGTH, power=2),
    NodeProperty.INIT_DEPTH: field_accessor("init_depth", quantity=Quantity.LENGTH),
}

LINK_PARAMS = {
    LinkProperty.OFFSET1: field_accessor("offset1", quantity=Quantity.LENGTH),
    LinkProperty.OFFSET2: field_accessor("offset2", quantity=Quantity.LENGTH),
    LinkProperty.INIT_FLOW: field_accessor("q0", quantity=Quantity.FLOW, structural=False),
    LinkProperty.FLOW_LIMIT: field_accessor("q_limit", quantity=Quantity.FLOW, structural=False),
    LinkProperty.INLET_LOSS: field_accessor("c_loss_inlet", structural=False),
    LinkProperty.OUTLET_LOSS: field_accessor("c_loss_outlet", structural=False),
    LinkProperty.AVG_LOSS: field_accessor("c_loss_avg", structural=False),
}

SUBCATCH_PARAMS = {
    SubcatchProperty.WIDTH: field_accessor("width", quantity=Quantity.LENGTH, revalidate=True),
    SubcatchProperty.AREA: field_accessor("area", quantity=Quantity.LANDAREA, revalidate=True),
    # percent
    SubcatchProperty.FRAC_IMPERV: PropertyAccessor(
        getter=attrgetter("frac_imperv"), setter=_set_frac_imperv, scale=100.0, revalidate=True
    ),
    SubcatchProperty.SLOPE: field_accessor("slope", revalidate=True),
    SubcatchProperty.CURB_LENGTH: field_accessor(
        "curb_length", quantity=Quantity.LENGTH, revalidate=True
    ),
}

LID_UNIT_PARAMS = {
    LidUnitProperty.UNIT_AREA: field_accessor(
        "area", quantity=Quantity.LENGTH, power=2, revalidate=True
    ),
    LidUnitProperty.FULL_WIDTH: field_accessor(
        "full_width", quantity=Quantity.LENGTH, revalidate=True
    ),
    LidUnitProperty.BOTTOM_WIDTH: field_accessor(
        "bot_width", quantity=Quantity.LENGTH, revalidate=True
    ),
    LidUnitProperty.INIT_SAT: field_accessor("init_sat", scale=100.0, revalidate=True),
    LidUnitProperty.FROM_IMPERV: field_accessor("from_imperv", scale=100.0, revalidate=True),
}

# Integer options, never converted
LID_UNIT_OPTIONS = {
    LidUnitOption.INDEX: field_accessor("lid_index", revalidate=True),
    LidUnitOption.NUMBER: field_accessor("number", revalidate=True),
    LidUnitOption.TO_PERV: field_accessor("to_perv", revalidate=True),
    LidUnitOption.DRAIN_SUBCATCH: field_accessor("drain_subcatch", revalidate=True),
    LidUnitOption.DRAIN_NODE: field_accessor("drain_node", revalidate=True),
}


def _clog_layer_params() -> dict:
    """Properties shared by the storage and pavement layers"""
    return {
        LidLayerProperty.THICKNESS: PropertyAccessor(
            getter=attrgetter("thickness"),
            setter=lambda layer, value: layer.set_thickness(value),
            quantity=Quantity.RAINDEPTH,
            revalidate=True,
        ),
        # exposed as a void ratio
        LidLayerProperty.VOID_FRAC: PropertyAccessor(
            getter=attrgetter("void_ratio"),
            setter=lambda layer, value: layer.set_void_ratio(value),
            revalidate=True,
        ),
        LidLayerProperty.KSAT: field_accessor(
            "k_sat", quantity=Quantity.RAINFALL, revalidate=True
        ),
        LidLayerProperty.CLOG_FACTOR: PropertyAccessor(
            getter=attrgetter("clog_factor"),
            setter=lambda layer, value: layer.set_clog_factor(value),
            revalidate=True,
        ),
    }


_SURFACE_PARAMS = {
    LidLayerProperty.THICKNESS: field_accessor(
        "thickness", quantity=Quantity.RAINDEPTH, revalidate=True
    ),
    # exposed as the vegetation volume fraction
    LidLayerProperty.VOID_FRAC: PropertyAccessor(
        getter=lambda surface: 1.0 - surface.void_fraction,
        setter=_set_surface_vegetation,
        revalidate=True,
    ),
    LidLayerProperty.ROUGHNESS: field_accessor("roughness", revalidate=True),
    LidLayerProperty.SURF_SLOPE: field_accessor("surf_slope", scale=100.0, revalidate=True),
    LidLayerProperty.SIDE_SLOPE: field_accessor("side_slope", revalidate=True),
    LidLayerProperty.ALPHA: result_accessor("alpha"),
}

_SOIL_PARAMS = {
    LidLayerProperty.THICKNESS: field_accessor(
        "thickness", quantity=Quantity.RAINDEPTH, revalidate=True
    ),
    LidLayerProperty.POROSITY: field_accessor("porosity", revalidate=True),
    LidLayerProperty.FIELD_CAP: field_accessor("field_cap", revalidate=True),
    LidLayerProperty.WILT_POINT: field_accessor("wilt_point", revalidate=True),
    LidLayerProperty.KSAT: field_accessor("k_sat", quantity=Quantity.RAINFALL, revalidate=True),
    LidLayerProperty.KSLOPE: field_accessor("k_slope", revalidate=True),
    LidLayerProperty.SUCTION: field_accessor(
        "suction", quantity=Quantity.RAINDEPTH, revalidate=True
    ),
}

_STORAGE_PARAMS = _clog_layer_params()

_PAVEMENT_PARAMS = _clog_layer_params() | {
    LidLayerProperty.IMPERV_FRAC: PropertyAccessor(
        getter=attrgetter("imperv_fraction"),
        setter=lambda layer, value: layer.set_imperv_fraction(value),
        revalidate=True,
    ),
    LidLayerProperty.REGEN_DAYS: field_accessor("regen_days", revalidate=True),
    LidLayerProperty.REGEN_DEGREE: field_accessor("regen_degree", revalidate=True),
}

_DRAIN_PARAMS = {
    LidLayerProperty.COEFF: field_accessor("coeff", revalidate=True),
    LidLayerProperty.EXPON: field_accessor("expon", revalidate=True),
    LidLayerProperty.OFFSET: field_accessor("offset", quantity=Quantity.RAINDEPTH, revalidate=True),
    # stored in seconds, exposed in hours
    LidLayerProperty.DELAY: field_accessor(
        "delay", scale=1.0 / DefaultValues.SECONDS_PER_HOUR, revalidate=True
    ),
    LidLayerProperty.H_OPEN: field_accessor("h_open", quantity=Quantity.RAINDEPTH, revalidate=True),
    LidLayerProperty.H_CLOSE: field_accessor(
        "h_close", quantity=Quantity.RAINDEPTH, revalidate=True
    ),
}

_DRAINMAT_PARAMS = {
    LidLayerProperty.THICKNESS: field_accessor(
        "thickness", quantity=Quantity.RAINDEPTH, revalidate=True
    ),
    LidLayerProperty.VOID_FRAC: field_accessor("void_fraction", revalidate=True),
    LidLayerProperty.ROUGHNESS: field_accessor("roughness", revalidate=True),
    LidLayerProperty.ALPHA: result_accessor("alpha"),
}

# Keyed by (layer, property)
LID_LAYER_PARAMS = {
    (layer, prop): accessor
    for layer, params in (
        (LidLayer.SURFACE, _SURFACE_PARAMS),
        (LidLayer.SOIL, _SOIL_PARAMS),
        (LidLayer.STORAGE, _STORAGE_PARAMS),
        (LidLayer.PAVEMENT, _PAVEMENT_PARAMS),
        (LidLayer.DRAIN, _DRAIN_PARAMS),
        (LidLayer.DRAINMAT, _DRAINMAT_PARAMS),
    )
    for prop, accessor in params.items()
}

NODE_RESULTS = {
    NodeResult.TOTAL_INFLOW: result_accessor("inflow", quantity=Quantity.FLOW),
    NodeResult.TOTAL_OUTFLOW: result_accessor("outflow", quantity=Quantity.FLOW),
    NodeResult.LOSSES: result_accessor("losses", quantity=Quantity.FLOW),
    NodeResult.VOLUME: result_accessor("new_volume", quantity=Quantity.VOLUME),
    NodeResult.FLOODING: result_accessor("overflow", quantity=Quantity.FLOW),
    NodeResult.DEPTH: result_accessor("new_depth", quantity=Quantity.LENGTH),
    NodeResult.HEAD: PropertyAccessor(
        getter=lambda node: node.new_depth + node.invert_elev, quantity=Quantity.LENGTH
    ),
    NodeResult.LATERAL_INFLOW: result_accessor("new_lat_flow", quantity=Quantity.FLOW),
}

LINK_RESULTS = {
    LinkResult.FLOW: result_accessor("new_flow", quantity=Quantity.FLOW),
    LinkResult.DEPTH: result_accessor("new_depth", quantity=Quantity.LENGTH),
    LinkResult.VOLUME: result_accessor("new_volume", quantity=Quantity.VOLUME),
    LinkResult.US_SURF_AREA: result_accessor("surf_area1", quantity=Quantity.LENGTH, power=2),
    LinkResult.DS_SURF_AREA: result_accessor("surf_area2", quantity=Quantity.LENGTH, power=2),
    LinkResult.SETTING: result_accessor("setting"),
    LinkResult.TARGET_SETTING: result_accessor("target_setting"),
    LinkResult.FROUDE: result_accessor("froude"),
}

SUBCATCH_RESULTS = {
    SubcatchResult.RAINFALL: result_accessor("rainfall", quantity=Quantity.RAINFALL),
    SubcatchResult.EVAP: result_accessor("evap_loss", quantity=Quantity.EVAPRATE),
    SubcatchResult.INFIL: result_accessor("infil_loss", quantity=Quantity.RAINFALL),
    SubcatchResult.RUNON: result_accessor("runon", quantity=Quantity.FLOW),
    SubcatchResult.RUNOFF: result_accessor("new_runoff", quantity=Quantity.FLOW),
    SubcatchResult.SNOW_DEPTH: result_accessor("new_snow_depth", quantity=Quantity.RAINDEPTH),
}

LID_GROUP_RESULTS = {
    LidGroupResult.PERV_AREA: result_accessor("perv_area", quantity=Quantity.LENGTH, power=2),
    LidGroupResult.FLOW_TO_PERV: result_accessor("flow_to_perv", quantity=Quantity.FLOW),
    LidGroupResult.OLD_DRAIN_FLOW: result_accessor("old_drain_flow", quantity=Quantity.FLOW),
    LidGroupResult.NEW_DRAIN_FLOW: result_accessor("new_drain_flow", quantity=Quantity.FLOW),
}

LID_UNIT_RESULTS = {
    LidUnitResult.INFLOW: result_accessor("water_balance.inflow", quantity=Quantity.RAINDEPTH),
    LidUnitResult.EVAP: result_accessor("water_balance.evap", quantity=Quantity.RAINDEPTH),
    LidUnitResult.INFIL: result_accessor("water_balance.infil", quantity=Quantity.RAINDEPTH),
    LidUnitResult.SURF_FLOW: result_accessor(
        "water_balance.surf_flow", quantity=Quantity.RAINDEPTH
    ),
    LidUnitResult.DRAIN_FLOW: result_accessor(
        "water_balance.drain_flow", quantity=Quantity.RAINDEPTH
    ),
    LidUnitResult.INIT_VOL: result_accessor("water_balance.init_vol", quantity=Quantity.RAINDEPTH),
    LidUnitResult.FINAL_VOL: result_accessor(
        "water_balance.final_vol", quantity=Quantity.RAINDEPTH
    ),
    LidUnitResult.SURF_DEPTH: result_accessor("surface_depth", quantity=Quantity.RAINDEPTH),
    LidUnitResult.PAVE_DEPTH: result_accessor("pave_depth", quantity=Quantity.RAINDEPTH),
    LidUnitResult.SOIL_MOIST: result_accessor("soil_moisture"),
    LidUnitResult.STOR_DEPTH: result_accessor("storage_depth", quantity=Quantity.RAINDEPTH),
    LidUnitResult.DRY_TIME: result_accessor("dry_time"),
    LidUnitResult.OLD_DRAIN_FLOW: result_accessor("old_drain_flow", quantity=Quantity.FLOW),
    LidUnitResult.NEW_DRAIN_FLOW: result_accessor("new_drain_flow", quantity=Quantity.FLOW),
    LidUnitResult.EVAP_RATE: result_accessor("water_rate.evap", quantity=Quantity.RAINFALL),
    LidUnitResult.NATIVE_INFIL: result_accessor(
        "water_rate.max_native_infil", quantity=Quantity.RAINFALL
    ),
    LidUnitResult.SURF_INFLOW: result_accessor(
        "water_rate.surface_inflow", quantity=Quantity.RAINFALL
    ),
    LidUnitResult.SURF_INFIL: result_accessor(
        "water_rate.surface_infil", quantity=Quantity.RAINFALL
    ),
    LidUnitResult.SURF_EVAP: result_accessor("water_rate.surface_evap", quantity=Quantity.RAINFALL),
    LidUnitResult.SURF_OUTFLOW: result_accessor(
        "water_rate.surface_outflow", quantity=Quantity.RAINFALL
    ),
    LidUnitResult.PAVE_EVAP: result_accessor("water_rate.pave_evap", quantity=Quantity.RAINFALL),
    LidUnitResult.PAVE_PERC: result_accessor("water_rate.pave_perc", quantity=Quantity.RAINFALL),
    LidUnitResult.SOIL_EVAP: result_accessor("water_rate.soil_evap", quantity=Quantity.RAINFALL),
    LidUnitResult.SOIL_PERC: result_accessor("water_rate.soil_perc", quantity=Quantity.RAINFALL),
    LidUnitResult.STORAGE_INFLOW: result_accessor(
        "water_rate.storage_inflow", quantity=Quantity.RAINFALL
    ),
    LidUnitResult.STORAGE_EXFIL: result_accessor(
        "water_rate.storage_exfil", quantity=Quantity.RAINFALL
    ),
    LidUnitResult.STORAGE_EVAP: result_accessor(
        "water_rate.storage_evap", quantity=Quantity.RAINFALL
    ),
    LidUnitResult.STORAGE_DRAIN: result_accessor(
        "water_rate.storage_drain", quantity=Quantity.RAINFALL
    ),
}

# Flux rates of the previous step, indexed by layer (ft/s)
LID_FLUX_LAYERS = (LidLayer.SURFACE, LidLayer.SOIL, LidLayer.STORAGE, LidLayer.PAVEMENT)
