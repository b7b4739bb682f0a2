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

Conversion between the engine canonical units (ft, s, ft3) and the units
chosen by the user for a run.
A user value is obtained by multiplying the canonical value by the factor,
a canonical value by dividing the user value by the same factor.
"""

from stormgate.const import Quantity, UnitSystem, FlowUnits


# Factors from canonical to user units, indexed by quantity then unit system
UNIT_FACTORS = {
    #                      US          SI
    Quantity.RAINFALL: (43200.0, 1097280.0),  # in/hr, mm/hr --> ft/sec
    Quantity.RAINDEPTH: (12.0, 304.8),  # in, mm --> ft
    Quantity.EVAPRATE: (1036800.0, 26334720.0),  # in/day, mm/day --> ft/sec
    Quantity.LENGTH: (1.0, 0.3048),  # ft, m --> ft
    Quantity.LANDAREA: (2.2956e-5, 0.92903e-5),  # ac, ha --> ft2
    Quantity.VOLUME: (1.0, 0.02832),  # ft3, m3 --> ft3
    Quantity.WINDSPEED: (1.0, 1.608),  # mph, km/hr --> mph
    Quantity.TEMPERATURE: (1.0, 1.8),  # deg F, deg C --> deg F
    Quantity.MASS: (2.203e-6, 1.0e-6),  # lb, kg --> mg
    Quantity.GWFLOW: (43560.0, 3048.0),  # cfs/ac, cms/ha --> ft/sec
}

# Factors from cfs to the user flow units
FLOW_FACTORS = {
    FlowUnits.CFS: 1.0,
    FlowUnits.GPM: 448.831,
    FlowUnits.MGD: 0.64632,
    FlowUnits.CMS: 0.02832,
    FlowUnits.LPS: 28.317,
    FlowUnits.MLD: 2.4466,
}

SI_FLOW_UNITS = (FlowUnits.CMS, FlowUnits.LPS, FlowUnits.MLD)


def factor(quantity: Quantity, unit_system: UnitSystem, flow_units: FlowUnits) -> float:
    """Return the factor converting a canonical value of the given quantity
    to user units.
    """
    quantity = Quantity(quantity)
    if quantity == Quantity.FLOW:
        return FLOW_FACTORS[FlowUnits(flow_units)]
    return UNIT_FACTORS[quantity][UnitSystem(unit_system)]


def unit_system_for(flow_units: FlowUnits) -> UnitSystem:
    """The unit system is implied by the choice of flow units"""
    if FlowUnits(flow_units) in SI_FLOW_UNITS:
        return UnitSystem.SI
    return UnitSystem.US


class UnitConverter:
    """Apply the conversion factors of a run.
    The unit system is fixed once the project is open.
    """

    def __init__(self, unit_system: UnitSystem, flow_units: FlowUnits):
        self.unit_system = UnitSystem(unit_system)
        self.flow_units = FlowUnits(flow_units)

    def factor(self, quantity: Quantity, power: int = 1, scale: float = 1.0) -> float:
        """Composite factor. Areas use LENGTH with power 2.
        scale is a fixed multiplier (100 for percents, 1/3600 for hours).
        """
        if quantity is None:
            return scale
        return factor(quantity, self.unit_system, self.flow_units) ** power * scale

    def to_user(
        self, value: float, quantity: Quantity, power: int = 1, scale: float = 1.0
    ) -> float:
        return value * self.factor(quantity, power, scale)

    def to_canonical(
        self, value: float, quantity: Quantity, power: int = 1, scale: float = 1.0
    ) -> float:
        return value / self.factor(quantity, power, scale)
