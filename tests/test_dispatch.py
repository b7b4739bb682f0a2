from collections import Counter

import pytest

import stormgate.dispatch as dispatch
from stormgate.const import (
    UnitSystem,
    FlowUnits,
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
)
from stormgate.gateway_error import PropertyOutOfRangeError
from stormgate.lid import LidControl, LidUnit, PavementLayer, StorageLayer, SurfaceLayer
from stormgate.model import Link, Node, Subcatchment
from stormgate.units import UnitConverter


@pytest.mark.parametrize(
    "table, prop_enum",
    [
        (dispatch.NODE_PARAMS, NodeProperty),
        (dispatch.LINK_PARAMS, LinkProperty),
        (dispatch.SUBCATCH_PARAMS, SubcatchProperty),
        (dispatch.LID_UNIT_PARAMS, LidUnitProperty),
        (dispatch.LID_UNIT_OPTIONS, LidUnitOption),
        (dispatch.NODE_RESULTS, NodeResult),
        (dispatch.LINK_RESULTS, LinkResult),
        (dispatch.SUBCATCH_RESULTS, SubcatchResult),
        (dispatch.LID_UNIT_RESULTS, LidUnitResult),
        (dispatch.LID_GROUP_RESULTS, LidGroupResult),
    ],
)
def test_tables_are_exhaustive(table, prop_enum):
    missing = [member.name for member in prop_enum if member not in table]
    assert not missing, f"Unregistered properties: {missing}"
    assert len(table) == len(prop_enum)


def test_lid_layer_table():
    registered = Counter(prop for (_, prop) in dispatch.LID_LAYER_PARAMS)
    missing = [prop.name for prop in LidLayerProperty if prop not in registered]
    assert not missing, f"Unregistered layer properties: {missing}"
    layers = {layer for (layer, _) in dispatch.LID_LAYER_PARAMS}
    assert layers == set(LidLayer)
    # Properties shared by the clog layers
    for prop in (LidLayerProperty.THICKNESS, LidLayerProperty.CLOG_FACTOR):
        assert (LidLayer.STORAGE, prop) in dispatch.LID_LAYER_PARAMS
        assert (LidLayer.PAVEMENT, prop) in dispatch.LID_LAYER_PARAMS
    assert (LidLayer.STORAGE, LidLayerProperty.REGEN_DAYS) not in dispatch.LID_LAYER_PARAMS


def test_results_are_read_only():
    for table in (
        dispatch.NODE_RESULTS,
        dispatch.LINK_RESULTS,
        dispatch.SUBCATCH_RESULTS,
        dispatch.LID_UNIT_RESULTS,
        dispatch.LID_GROUP_RESULTS,
    ):
        assert not any(accessor.is_writable for accessor in table.values())


def test_structural_flags():
    assert all(accessor.structural for accessor in dispatch.NODE_PARAMS.values())
    non_structural = {
        prop for prop, accessor in dispatch.LINK_PARAMS.items() if not accessor.structural
    }
    assert non_structural == {
        LinkProperty.INIT_FLOW,
        LinkProperty.FLOW_LIMIT,
        LinkProperty.INLET_LOSS,
        LinkProperty.OUTLET_LOSS,
        LinkProperty.AVG_LOSS,
    }


def test_lookup_unknown_key():
    with pytest.raises(PropertyOutOfRangeError):
        dispatch.lookup(dispatch.NODE_PARAMS, 99, "node")
    with pytest.raises(PropertyOutOfRangeError):
        dispatch.lookup(dispatch.LID_LAYER_PARAMS, (LidLayer.SOIL, LidLayerProperty.ALPHA), "LID")


def test_write_read_only():
    converter = UnitConverter(UnitSystem.US, FlowUnits.CFS)
    accessor = dispatch.LID_LAYER_PARAMS[(LidLayer.SURFACE, LidLayerProperty.ALPHA)]
    with pytest.raises(PropertyOutOfRangeError):
        accessor.write(SurfaceLayer(), 1.0, converter)


def test_read_write_conversion():
    converter = UnitConverter(UnitSystem.SI, FlowUnits.CMS)
    node = Node(id="J1", ponded_area=100.0)
    accessor = dispatch.NODE_PARAMS[NodeProperty.POND_AREA]
    assert accessor.read(node, converter) == pytest.approx(100.0 * 0.3048**2)
    accessor.write(node, 10.0, converter)
    assert node.ponded_area == pytest.approx(10.0 / 0.3048**2)


def test_node_head():
    converter = UnitConverter(UnitSystem.SI, FlowUnits.CMS)
    node = Node(id="J1", invert_elev=10.0, new_depth=2.0)
    head = dispatch.NODE_RESULTS[NodeResult.HEAD].read(node, converter)
    assert head == pytest.approx(12.0 * 0.3048)


def new_lid_control():
    return LidControl(
        id="LC",
        storage=StorageLayer(thickness=1.0, void_fraction=0.4, clog_factor=2.0),
        pavement=PavementLayer(thickness=0.5, void_fraction=0.2, imperv_fraction=0.1),
    )


def writable_entries():
    """(id, record factory, accessor) for every writable table entry"""
    entries = []
    for table, factory in [
        (dispatch.NODE_PARAMS, lambda: Node(id="J1")),
        (dispatch.LINK_PARAMS, lambda: Link(id="C1")),
        (dispatch.SUBCATCH_PARAMS, lambda: Subcatchment(id="S1")),
        (dispatch.LID_UNIT_PARAMS, lambda: LidUnit(lid_index=0)),
    ]:
        for key, accessor in table.items():
            if accessor.is_writable:
                entries.append(pytest.param(factory, accessor, id=key.name))
    for (layer, prop), accessor in dispatch.LID_LAYER_PARAMS.items():
        if accessor.is_writable:
            entries.append(
                pytest.param(
                    lambda layer=layer: new_lid_control().get_layer(layer),
                    accessor,
                    id=f"{layer.name}-{prop.name}",
                )
            )
    return entries


@pytest.mark.parametrize(
    "flow_units", [FlowUnits.GPM, FlowUnits.CMS], ids=["US", "SI"]
)
@pytest.mark.parametrize("factory, accessor", writable_entries())
def test_write_then_read(factory, accessor, flow_units):
    """A written value is read back unchanged in user units"""
    unit_system = UnitSystem.SI if flow_units == FlowUnits.CMS else UnitSystem.US
    converter = UnitConverter(unit_system, flow_units)
    record = factory()
    accessor.write(record, 0.37, converter)
    assert accessor.read(record, converter) == pytest.approx(0.37)
