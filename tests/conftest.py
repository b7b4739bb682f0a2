from datetime import datetime

import pytest

from stormgate.const import (
    NodeType,
    LinkType,
    LidType,
    PollutantUnits,
    UnitSystem,
    FlowUnits,
)
from stormgate.data_containers import ProjectOptions
from stormgate.gateway import ParameterGateway
from stormgate.lid import SurfaceLayer, SoilLayer, StorageLayer, PavementLayer, DrainLayer
from stormgate.project_builder import ProjectBuilder
from stormgate.toolkit_api import ToolkitAPI

ACRE = 43560.0  # ft2


class Helpers:
    @staticmethod
    def start(project, seconds=0.0):
        """Start the project and advance the routing clock"""
        project.start()
        if seconds:
            project.advance(seconds)
        return project


@pytest.fixture(scope="session")
def helpers():
    return Helpers


@pytest.fixture(scope="session")
def us_options():
    return ProjectOptions(
        unit_system=UnitSystem.US,
        flow_units=FlowUnits.CFS,
        start_datetime=datetime(2024, 6, 1),
        end_datetime=datetime(2024, 6, 2),
    )


@pytest.fixture(scope="session")
def si_options():
    return ProjectOptions(
        unit_system=UnitSystem.SI,
        flow_units=FlowUnits.CMS,
        start_datetime=datetime(2024, 6, 1),
        end_datetime=datetime(2024, 6, 2),
    )


def bio_cell_layers():
    return dict(
        surface=SurfaceLayer(thickness=0.5, roughness=0.1, surf_slope=0.01),
        soil=SoilLayer(
            thickness=1.5,
            porosity=0.5,
            field_cap=0.2,
            wilt_point=0.1,
            suction=0.3,
            k_sat=1e-4,
            k_slope=10.0,
        ),
        storage=StorageLayer(thickness=0.5, void_fraction=0.4, k_sat=1e-5, clog_factor=2.0),
        drain=DrainLayer(coeff=0.5, expon=0.5, offset=0.25, delay=7200.0),
    )


def porous_pavement_layers():
    return dict(
        surface=SurfaceLayer(thickness=0.1, roughness=0.02, surf_slope=0.02),
        pavement=PavementLayer(
            thickness=0.5,
            void_fraction=0.2,
            imperv_fraction=0.5,
            k_sat=1e-3,
            clog_factor=4.0,
            regen_days=90.0,
            regen_degree=0.5,
        ),
        storage=StorageLayer(thickness=1.0, void_fraction=0.5, k_sat=1e-5),
    )


def network_builder(options):
    """A small network with every kind of object reachable by the gateway"""
    builder = ProjectBuilder(options)
    for i in range(1, 6):
        builder.add_gage(f"G{i}")
    builder.add_pollutant("TSS", units=PollutantUnits.MG_PER_L, mcf=1.0)
    builder.add_pollutant("ECOLI", units=PollutantUnits.COUNT_PER_L, mcf=1.0)
    (
        builder.add_node("J1", invert_elev=10.0, full_depth=5.0, ponded_area=100.0)
        .add_node("J2", invert_elev=8.0, full_depth=4.0)
        .add_node("ST1", node_type=NodeType.STORAGE, invert_elev=5.0, full_depth=10.0)
        .add_node("OUT1", node_type=NodeType.OUTFALL, invert_elev=2.0)
    )
    (
        builder.add_link("C1", "J1", "J2", offset1=0.5, q0=1.0, c_loss_inlet=0.5)
        .add_link("P1", "J2", "ST1", link_type=LinkType.PUMP)
        .add_link("OR1", "ST1", "OUT1", link_type=LinkType.ORIFICE, direction=-1)
    )
    (
        builder.add_subcatchment(
            "S1", gage="G1", out_node="J1", width=200.0, area=ACRE, frac_imperv=0.5, slope=0.01
        )
        .add_subcatchment("S2", gage="G2", out_subcatch="S1", width=100.0, area=ACRE / 2)
        .add_subcatchment("S3", gage="G3", width=50.0, area=0.0)
    )
    builder.add_lid_control("BC", LidType.BIO_CELL, **bio_cell_layers())
    builder.add_lid_control("PP", LidType.POROUS_PAVEMENT, **porous_pavement_layers())
    builder.add_lid_unit("S1", "BC", number=2, area=100.0, init_sat=0.1)
    builder.add_lid_unit("S1", "PP", area=200.0, full_width=10.0, drain_node="J2")
    return builder


@pytest.fixture
def project(us_options):
    return network_builder(us_options).build()


@pytest.fixture
def si_project(si_options):
    return network_builder(si_options).build()


@pytest.fixture
def gateway(project):
    return ParameterGateway(project)


@pytest.fixture
def si_gateway(si_project):
    return ParameterGateway(si_project)


@pytest.fixture
def toolkit(project):
    return ToolkitAPI(project)
