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

Low Impact Development controls.
A control is a template made of up to six layers. Units placed in a
subcatchment reference a control by its index and are gathered in the
LID group of that subcatchment.
"""

import math
from dataclasses import dataclass, field

from stormgate.const import DefaultValues, LidType, LidLayer
from stormgate.gateway_error import ValidationError
from stormgate.model import NamedObject


@dataclass
class SurfaceLayer:
    thickness: float = 0.0  # berm height (ft)
    void_fraction: float = 1.0  # 1 - vegetation volume fraction
    roughness: float = 0.0  # Manning's n
    surf_slope: float = 0.0  # fraction
    side_slope: float = 0.0  # run over rise
    alpha: float = 0.0  # derived at commit
    can_overflow: bool = True  # immediate overflow allowed


@dataclass
class SoilLayer:
    thickness: float = 0.0
    porosity: float = 0.0
    field_cap: float = 0.0
    wilt_point: float = 0.0
    suction: float = 0.0  # ft
    k_sat: float = 0.0  # ft/s
    k_slope: float = 0.0


@dataclass
class DrainLayer:
    coeff: float = 0.0
    expon: float = 0.0
    offset: float = 0.0  # ft
    delay: float = 0.0  # s
    h_open: float = 0.0  # ft
    h_close: float = 0.0  # ft


@dataclass
class DrainMatLayer:
    thickness: float = 0.0
    void_fraction: float = 0.0
    roughness: float = 0.0
    alpha: float = 0.0  # derived at commit


class ClogLayer:
    """A layer whose clog factor is stored on a void volume basis.

    The caller works with the displayed clog factor. The stored value is
    displayed * thickness * void_fraction * (1 - imperv_fraction) as long
    as that scale is positive, otherwise the displayed value is stored as is.
    Editing one of the co-factors keeps the displayed value unchanged.
    """

    def __init__(self, thickness=0.0, void_fraction=0.0, k_sat=0.0, clog_factor=0.0):
        self._thickness = thickness
        self._void_fraction = void_fraction
        self.k_sat = k_sat
        self._clog_factor = 0.0
        self.set_clog_factor(clog_factor)

    def __repr__(self):
        return (
            f"{type(self).__name__}(thickness={self._thickness}, "
            f"void_fraction={self._void_fraction}, clog_factor={self.clog_factor})"
        )

    @property
    def thickness(self) -> float:
        return self._thickness

    @property
    def void_fraction(self) -> float:
        return self._void_fraction

    @property
    def imperv_fraction(self) -> float:
        return 0.0

    @property
    def clog_scale(self) -> float:
        return self._thickness * self._void_fraction * (1.0 - self.imperv_fraction)

    @property
    def is_degenerate(self) -> bool:
        return self._thickness <= 0.0 or self.clog_scale <= 0.0

    @property
    def clog_factor_canonical(self) -> float:
        return self._clog_factor

    @property
    def clog_factor(self) -> float:
        if self.is_degenerate:
            return self._clog_factor
        return self._clog_factor / self.clog_scale

    def set_clog_factor(self, value: float) -> None:
        if self.is_degenerate:
            self._clog_factor = value
        else:
            self._clog_factor = value * self.clog_scale

    def set_clog_factor_canonical(self, value: float) -> None:
        self._clog_factor = value

    def _set_cofactor(self, attr_name: str, value: float) -> None:
        """Un-scale with the old co-factor, apply the new one, re-scale"""
        displayed = self.clog_factor
        setattr(self, attr_name, value)
        self.set_clog_factor(displayed)

    def set_thickness(self, value: float) -> None:
        self._set_cofactor("_thickness", value)

    def set_void_fraction(self, value: float) -> None:
        self._set_cofactor("_void_fraction", value)

    @property
    def void_ratio(self) -> float:
        """Volume of voids over volume of solids"""
        if self._void_fraction < 1.0:
            return self._void_fraction / (1.0 - self._void_fraction)
        return self._void_fraction

    def set_void_ratio(self, ratio: float) -> None:
        if ratio < 0.0:
            raise ValidationError(f"void ratio must be positive, got {ratio}")
        self.set_void_fraction(ratio / (ratio + 1.0))


class StorageLayer(ClogLayer):
    pass


class PavementLayer(ClogLayer):
    def __init__(
        self,
        thickness=0.0,
        void_fraction=0.0,
        imperv_fraction=0.0,
        k_sat=0.0,
        clog_factor=0.0,
        regen_days=0.0,
        regen_degree=0.0,
    ):
        self._imperv_fraction = imperv_fraction
        self.regen_days = regen_days
        self.regen_degree = regen_degree
        super().__init__(thickness, void_fraction, k_sat, clog_factor)

    @property
    def imperv_fraction(self) -> float:
        return self._imperv_fraction

    def set_imperv_fraction(self, value: float) -> None:
        self._set_cofactor("_imperv_fraction", value)


# Layers needed by each type of LID
REQUIRED_LAYERS = {
    LidType.BIO_CELL: (LidLayer.SURFACE, LidLayer.SOIL, LidLayer.STORAGE),
    LidType.RAIN_GARDEN: (LidLayer.SURFACE, LidLayer.SOIL),
    LidType.GREEN_ROOF: (LidLayer.SURFACE, LidLayer.SOIL, LidLayer.DRAINMAT),
    LidType.INFIL_TRENCH: (LidLayer.SURFACE, LidLayer.STORAGE),
    LidType.POROUS_PAVEMENT: (LidLayer.SURFACE, LidLayer.PAVEMENT, LidLayer.STORAGE),
    LidType.RAIN_BARREL: (LidLayer.STORAGE, LidLayer.DRAIN),
    LidType.ROOF_DISCON: (LidLayer.SURFACE, LidLayer.DRAIN),
    LidType.VEG_SWALE: (LidLayer.SURFACE,),
}


@dataclass
class LidControl(NamedObject):
    lid_type: LidType = LidType.BIO_CELL
    surface: SurfaceLayer = field(default_factory=SurfaceLayer)
    soil: SoilLayer = field(default_factory=SoilLayer)
    storage: StorageLayer = field(default_factory=StorageLayer)
    pavement: PavementLayer = field(default_factory=PavementLayer)
    drain: DrainLayer = field(default_factory=DrainLayer)
    drain_mat: DrainMatLayer = field(default_factory=DrainMatLayer)
    is_committed: bool = False

    def get_layer(self, layer: LidLayer):
        return {
            LidLayer.SURFACE: self.surface,
            LidLayer.SOIL: self.soil,
            LidLayer.STORAGE: self.storage,
            LidLayer.PAVEMENT: self.pavement,
            LidLayer.DRAIN: self.drain,
            LidLayer.DRAINMAT: self.drain_mat,
        }[LidLayer(layer)]

    @property
    def is_pavement_class(self) -> bool:
        return LidLayer.PAVEMENT in REQUIRED_LAYERS[self.lid_type]

    def get_errors(self) -> list[str]:
        """Return a list of the inconsistencies between the layers"""
        errors = []
        required = REQUIRED_LAYERS[self.lid_type]
        surface = self.surface
        if LidLayer.SURFACE in required:
            if surface.void_fraction <= 0.0 or surface.void_fraction > 1.0:
                errors.append("vegetation volume fraction")
            if surface.roughness < 0.0 or surface.surf_slope < 0.0:
                errors.append("surface roughness or slope")
            if self.lid_type in (LidType.VEG_SWALE, LidType.ROOF_DISCON):
                if surface.roughness <= 0.0 or surface.surf_slope <= 0.0:
                    errors.append("surface roughness or slope")
        if LidLayer.SOIL in required:
            soil = self.soil
            if soil.thickness <= 0.0 or soil.k_sat <= 0.0:
                errors.append("soil thickness or conductivity")
            if not 0.0 < soil.porosity <= 1.0:
                errors.append("soil porosity")
            if soil.porosity <= soil.field_cap or soil.field_cap <= soil.wilt_point:
                errors.append("soil moisture limits")
        elif self.is_pavement_class and self.soil.thickness > 0.0:
            errors.append("soil layer in a pavement LID")
        if LidLayer.PAVEMENT in required:
            pavement = self.pavement
            if pavement.thickness <= 0.0 or pavement.k_sat <= 0.0:
                errors.append("pavement thickness or permeability")
            if not 0.0 < pavement.void_fraction <= 1.0:
                errors.append("pavement void fraction")
            if not 0.0 <= pavement.imperv_fraction <= 1.0:
                errors.append("pavement impervious fraction")
        elif self.pavement.thickness > 0.0:
            errors.append("pavement layer in a soil LID")
        if LidLayer.STORAGE in required:
            storage = self.storage
            if storage.thickness <= 0.0:
                errors.append("storage thickness")
            if not 0.0 < storage.void_fraction <= 1.0:
                errors.append("storage void fraction")
        if LidLayer.DRAINMAT in required:
            drain_mat = self.drain_mat
            if drain_mat.thickness <= 0.0 or drain_mat.roughness <= 0.0:
                errors.append("drainage mat thickness or roughness")
            if not 0.0 < drain_mat.void_fraction <= 1.0:
                errors.append("drainage mat void fraction")
        drain = self.drain
        if drain.coeff < 0.0 or drain.expon < 0.0 or drain.offset < 0.0 or drain.delay < 0.0:
            errors.append("drain parameters")
        return errors

    def update_derived(self) -> None:
        """Re-derive the flow coefficients of the surface and the drainage mat"""
        surface = self.surface
        slope_term = math.sqrt(surface.surf_slope) if surface.surf_slope > 0.0 else 0.0
        if surface.roughness > 0.0:
            surface.alpha = DefaultValues.PHI * slope_term / surface.roughness
        else:
            surface.alpha = 0.0
        if self.drain_mat.roughness > 0.0:
            self.drain_mat.alpha = DefaultValues.PHI * slope_term / self.drain_mat.roughness
        else:
            self.drain_mat.alpha = 0.0

    def commit(self) -> None:
        """Validate the control as a whole.
        On failure the control stays uncommitted and ValidationError is raised.
        The clog factors are never rescaled here.
        """
        self.update_derived()
        errors = self.get_errors()
        if errors:
            self.is_committed = False
            raise ValidationError(
                f"invalid parameter value for LID {self.id}: {', '.join(errors)}"
            )
        self.is_committed = True


@dataclass
class WaterBalance:
    """Cumulative water balance of a LID unit (ft)"""

    inflow: float = 0.0
    evap: float = 0.0
    infil: float = 0.0
    surf_flow: float = 0.0
    drain_flow: float = 0.0
    init_vol: float = 0.0
    final_vol: float = 0.0


@dataclass
class WaterRates:
    """Current flux rates of a LID unit (ft/s)"""

    evap: float = 0.0
    max_native_infil: float = 0.0
    surface_inflow: float = 0.0
    surface_infil: float = 0.0
    surface_evap: float = 0.0
    surface_outflow: float = 0.0
    pave_evap: float = 0.0
    pave_perc: float = 0.0
    soil_evap: float = 0.0
    soil_perc: float = 0.0
    storage_inflow: float = 0.0
    storage_exfil: float = 0.0
    storage_evap: float = 0.0
    storage_drain: float = 0.0


@dataclass
class LidUnit:
    lid_index: int  # index of the LID control
    number: int = 1  # number of replicate units
    area: float = 0.0  # area of a single unit (ft2)
    full_width: float = 0.0
    bot_width: float = 0.0
    init_sat: float = 0.0  # fraction
    from_imperv: float = 0.0  # fraction of impervious area treated
    to_perv: int = 0  # 1 if outflow goes to the pervious area
    drain_subcatch: int = -1
    drain_node: int = -1
    # solver-owned
    surface_depth: float = 0.0
    pave_depth: float = 0.0
    soil_moisture: float = 0.0
    storage_depth: float = 0.0
    dry_time: float = 0.0
    old_drain_flow: float = 0.0
    new_drain_flow: float = 0.0
    # surface, soil, storage, pavement
    old_flux_rates: list[float] = field(default_factory=lambda: [0.0] * 4)
    water_balance: WaterBalance = field(default_factory=WaterBalance)
    water_rate: WaterRates = field(default_factory=WaterRates)


@dataclass
class LidGroup:
    """All the LID units of a subcatchment"""

    units: list[LidUnit] = field(default_factory=list)
    # solver-owned
    perv_area: float = 0.0
    flow_to_perv: float = 0.0
    old_drain_flow: float = 0.0
    new_drain_flow: float = 0.0

    @property
    def lid_area(self) -> float:
        return sum(unit.area * unit.number for unit in self.units)
