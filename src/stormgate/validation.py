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

import math

from stormgate.const import DefaultValues, ObjectType, LidType
from stormgate.gateway_error import ValidationError
from stormgate.lid import LidGroup
from stormgate.registry import ObjectRegistry
import stormgate.messenger as msgr


class Validator:
    """Re-derive the dependent quantities of an edited object and check
    its consistency.
    A failed validation leaves the written values in place and raises
    ValidationError.
    """

    def __init__(self, registry: ObjectRegistry, lid_groups: dict[int, LidGroup]):
        self.registry = registry
        self.lid_groups = lid_groups

    def _lid_area(self, subcatch_index: int) -> float:
        group = self.lid_groups.get(subcatch_index)
        if group is None:
            return 0.0
        return group.lid_area

    def validate_subcatchment(self, subcatch_index: int) -> None:
        """Update the sub-area fractions and their routing coefficients"""
        subcatch = self.registry.get(ObjectType.SUBCATCH, subcatch_index)
        lid_area = self._lid_area(subcatch_index)
        non_lid_area = subcatch.area - lid_area

        imperv0, imperv1, perv = subcatch.sub_areas
        imperv0.f_area = subcatch.frac_imperv * subcatch.pct_zero
        imperv1.f_area = subcatch.frac_imperv * (1.0 - subcatch.pct_zero)
        perv.f_area = 1.0 - subcatch.frac_imperv

        for sub_area in subcatch.sub_areas:
            if sub_area.n > 0.0 and non_lid_area > 0.0 and subcatch.slope > 0.0:
                sub_area.alpha = (
                    DefaultValues.PHI
                    * subcatch.width
                    / non_lid_area
                    * math.sqrt(subcatch.slope)
                    / sub_area.n
                )
            else:
                sub_area.alpha = 0.0

        errors = []
        if subcatch.area < 0.0 or subcatch.width < 0.0 or subcatch.slope < 0.0:
            errors.append("negative geometry")
        if not 0.0 <= subcatch.frac_imperv <= 1.0:
            errors.append("impervious fraction")
        if lid_area > subcatch.area:
            errors.append("LID area exceeds total area")
        if errors:
            self._fail(f"subcatchment {subcatch.id}", errors)

    def validate_lid_control(self, lid_index: int) -> None:
        """Commit the control"""
        control = self.registry.get(ObjectType.LID, lid_index)
        try:
            control.commit()
        except ValidationError as err:
            msgr.warning(err.msg)
            raise

    def validate_lid_group(self, subcatch_index: int) -> None:
        """Check every unit of a subcatchment against the controls and the
        subcatchment it drains to.
        """
        group = self.lid_groups.get(subcatch_index)
        if group is None:
            return
        subcatch = self.registry.get(ObjectType.SUBCATCH, subcatch_index)
        lid_count = self.registry.count(ObjectType.LID)
        subcatch_count = self.registry.count(ObjectType.SUBCATCH)
        node_count = self.registry.count(ObjectType.NODE)
        errors = []
        for unit_index, unit in enumerate(group.units):
            name = f"unit {unit_index}"
            if not 0 <= unit.lid_index < lid_count:
                errors.append(f"{name}: undefined LID control {unit.lid_index}")
                continue
            control = self.registry.get(ObjectType.LID, unit.lid_index)
            if unit.number < 1 or unit.area < 0.0:
                errors.append(f"{name}: number or area")
            if not 0.0 <= unit.init_sat <= 1.0 or not 0.0 <= unit.from_imperv <= 1.0:
                errors.append(f"{name}: initial saturation or impervious fraction")
            if unit.drain_subcatch >= subcatch_count or unit.drain_node >= node_count:
                errors.append(f"{name}: drain outlet")
            if control.lid_type == LidType.VEG_SWALE:
                if unit.full_width <= 0.0:
                    errors.append(f"{name}: swale width")
            elif unit.full_width <= 0.0 and unit.area > 0.0:
                # square unit
                unit.full_width = math.sqrt(unit.area)
        if group.lid_area > subcatch.area:
            errors.append("LID area exceeds subcatchment area")
        if errors:
            self._fail(f"LID group of subcatchment {subcatch.id}", errors)
        self.validate_subcatchment(subcatch_index)

    def _fail(self, name: str, errors: list[str]) -> None:
        msg = f"invalid parameter value for {name}: {', '.join(errors)}"
        msgr.warning(msg)
        raise ValidationError(msg)
