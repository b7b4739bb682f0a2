from datetime import datetime

import pytest

from stormgate.const import FlowUnits, NodeProperty, UnitSystem
from stormgate.data_containers import ProjectOptions
from stormgate.gateway import ParameterGateway
from stormgate.project_builder import ProjectBuilder


@pytest.mark.parametrize(
    "flow_units, unit_system",
    [
        (FlowUnits.CFS, UnitSystem.US),
        (FlowUnits.GPM, UnitSystem.US),
        (FlowUnits.MGD, UnitSystem.US),
        (FlowUnits.CMS, UnitSystem.SI),
        (FlowUnits.LPS, UnitSystem.SI),
        (FlowUnits.MLD, UnitSystem.SI),
    ],
)
def test_unit_system_from_flow_units(flow_units, unit_system):
    options = ProjectOptions(flow_units=flow_units)
    assert options.unit_system == unit_system


def test_default_units():
    options = ProjectOptions()
    assert options.unit_system == UnitSystem.US
    assert options.flow_units == FlowUnits.CFS


def test_mixed_units():
    with pytest.raises(ValueError):
        ProjectOptions(unit_system=UnitSystem.US, flow_units=FlowUnits.CMS)
    with pytest.raises(ValueError):
        ProjectOptions(unit_system=UnitSystem.SI)


def test_project_lengths_follow_flow_units():
    options = ProjectOptions(flow_units=FlowUnits.LPS)
    project = ProjectBuilder(options).add_node("J1", invert_elev=10.0).build()
    assert project.converter.unit_system == UnitSystem.SI
    gateway = ParameterGateway(project)
    assert gateway.get_node_param(0, NodeProperty.INVERT_ELEV) == pytest.approx(3.048)


def test_dates():
    with pytest.raises(ValueError):
        ProjectOptions(start_datetime=datetime(2024, 6, 2), end_datetime=datetime(2024, 6, 1))
    options = ProjectOptions(
        start_datetime=datetime(2024, 6, 1), end_datetime=datetime(2024, 6, 1, 0, 30, 0, 500000)
    )
    assert options.report_start == datetime(2024, 6, 1)
    assert options.total_duration == 1800 * 1000
