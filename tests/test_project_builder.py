import pytest

from stormgate.const import LidType, NodeType, ObjectType
from stormgate.gateway_error import ObjectIndexError, ValidationError
from stormgate.lid import SoilLayer, SurfaceLayer
from stormgate.project import Project
from stormgate.project_builder import ProjectBuilder
from stormgate.lifecycle import LifecycleState


def test_build(project):
    assert isinstance(project, Project)
    assert project.state == LifecycleState.OPEN
    registry = project.registry
    assert registry.count(ObjectType.GAGE) == 5
    assert registry.count(ObjectType.LID) == 2
    s2 = registry.get(ObjectType.SUBCATCH, 1)
    assert s2.out_subcatch == 0
    assert s2.out_node == -1
    assert s2.gage == 1
    out1 = registry.get(ObjectType.NODE, 3)
    assert out1.outfall is not None
    # Committed at build time
    assert project.uncommitted_controls() == []
    assert sorted(project.lid_groups) == [0]


def test_pollutant_arrays(project):
    for subcatch in project.registry.records(ObjectType.SUBCATCH):
        assert subcatch.surface_buildup.shape == (2,)
        assert subcatch.conc_ponded.shape == (2,)


def test_default_options():
    project = ProjectBuilder().add_node("J1").build()
    assert project.registry.count(ObjectType.NODE) == 1
    assert project.lid_groups == {}
    assert project.options.total_duration == 24 * 3600 * 1000


def test_unknown_reference():
    builder = ProjectBuilder().add_node("J1").add_link("C1", "J1", "J9")
    with pytest.raises(ObjectIndexError):
        builder.build()


def test_duplicate_id():
    builder = ProjectBuilder().add_node("J1").add_node("J1", node_type=NodeType.STORAGE)
    with pytest.raises(ValueError):
        builder.build()


def test_invalid_lid_control():
    builder = (
        ProjectBuilder()
        .add_node("J1")
        .add_lid_control(
            "RG",
            LidType.RAIN_GARDEN,
            surface=SurfaceLayer(thickness=0.5),
            soil=SoilLayer(thickness=1.0, porosity=0.3, field_cap=0.4, k_sat=1e-4),
        )
    )
    with pytest.raises(ValidationError):
        builder.build()


def test_lid_area_too_large():
    builder = (
        ProjectBuilder()
        .add_gage("G1")
        .add_node("J1")
        .add_subcatchment("S1", gage="G1", out_node="J1", width=10.0, area=100.0)
        .add_lid_control(
            "RG",
            LidType.RAIN_GARDEN,
            surface=SurfaceLayer(thickness=0.5),
            soil=SoilLayer(thickness=1.0, porosity=0.5, field_cap=0.3, wilt_point=0.1, k_sat=1e-4),
        )
        .add_lid_unit("S1", "RG", number=2, area=60.0)
    )
    with pytest.raises(ValidationError):
        builder.build()
