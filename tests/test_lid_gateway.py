import pytest

import stormgate.dispatch as dispatch
from stormgate.const import (
    LidLayer,
    LidLayerProperty,
    LidUnitProperty,
    LidUnitOption,
    LidUnitResult,
    LidGroupResult,
)
from stormgate.gateway_error import (
    ObjectIndexError,
    PropertyOutOfRangeError,
    SimulationRunningError,
    UndefinedLidGroupError,
    ValidationError,
)

BIO_CELL = 0
PAVEMENT = 1
S1 = 0
S2 = 1


@pytest.mark.parametrize(
    "layer, prop, expected",
    [
        (LidLayer.SURFACE, LidLayerProperty.THICKNESS, 6.0),  # in
        (LidLayer.SURFACE, LidLayerProperty.VOID_FRAC, 0.0),  # vegetation fraction
        (LidLayer.SURFACE, LidLayerProperty.SURF_SLOPE, 1.0),  # percent
        (LidLayer.SURFACE, LidLayerProperty.ALPHA, 1.486 * 0.1 / 0.1),
        (LidLayer.SOIL, LidLayerProperty.SUCTION, 3.6),
        (LidLayer.STORAGE, LidLayerProperty.VOID_FRAC, 0.4 / 0.6),  # void ratio
        (LidLayer.STORAGE, LidLayerProperty.KSAT, 0.432),  # in/hr
        (LidLayer.STORAGE, LidLayerProperty.CLOG_FACTOR, 2.0),
        (LidLayer.DRAIN, LidLayerProperty.DELAY, 2.0),  # hours
        (LidLayer.DRAIN, LidLayerProperty.OFFSET, 3.0),
    ],
)
def test_bio_cell_params(gateway, layer, prop, expected):
    value = gateway.get_lid_control_param(BIO_CELL, layer, prop)
    assert value == pytest.approx(expected)


def test_pavement_params(gateway):
    get = gateway.get_lid_control_param
    assert get(PAVEMENT, LidLayer.PAVEMENT, LidLayerProperty.CLOG_FACTOR) == pytest.approx(4.0)
    assert get(PAVEMENT, LidLayer.PAVEMENT, LidLayerProperty.IMPERV_FRAC) == 0.5
    assert get(PAVEMENT, LidLayer.PAVEMENT, LidLayerProperty.REGEN_DAYS) == 90.0
    assert get(PAVEMENT, LidLayer.PAVEMENT, LidLayerProperty.REGEN_DEGREE) == 0.5
    # Storage has no regeneration
    with pytest.raises(PropertyOutOfRangeError):
        get(PAVEMENT, LidLayer.STORAGE, LidLayerProperty.REGEN_DAYS)


def test_clog_factor_follows_thickness(gateway, project):
    """The displayed clog factor survives a thickness change"""
    gateway.set_lid_control_param(BIO_CELL, LidLayer.STORAGE, LidLayerProperty.THICKNESS, 12.0)
    control = gateway._get_lid_control(BIO_CELL)
    storage = control.storage
    assert storage.thickness == pytest.approx(1.0)
    assert storage.clog_factor_canonical == pytest.approx(2.0 * 1.0 * 0.4)
    value = gateway.get_lid_control_param(
        BIO_CELL, LidLayer.STORAGE, LidLayerProperty.CLOG_FACTOR
    )
    assert value == pytest.approx(2.0)
    assert control.is_committed


def test_set_params(gateway):
    gateway.set_lid_control_param(BIO_CELL, LidLayer.SURFACE, LidLayerProperty.VOID_FRAC, 0.2)
    gateway.set_lid_control_param(BIO_CELL, LidLayer.DRAIN, LidLayerProperty.DELAY, 6.0)
    gateway.set_lid_control_param(BIO_CELL, LidLayer.STORAGE, LidLayerProperty.VOID_FRAC, 1.0)
    control = gateway._get_lid_control(BIO_CELL)
    assert control.surface.void_fraction == pytest.approx(0.8)
    assert control.drain.delay == pytest.approx(6.0 * 3600)
    assert control.storage.void_fraction == pytest.approx(0.5)
    assert control.is_committed


def test_read_only_alpha(gateway):
    with pytest.raises(PropertyOutOfRangeError):
        gateway.set_lid_control_param(
            BIO_CELL, LidLayer.SURFACE, LidLayerProperty.ALPHA, 2.0
        )


def test_invalid_control(gateway, project):
    """An invalid value is kept and the control can't be used to start"""
    with pytest.raises(ValidationError):
        gateway.set_lid_control_param(BIO_CELL, LidLayer.SOIL, LidLayerProperty.FIELD_CAP, 0.9)
    value = gateway.get_lid_control_param(BIO_CELL, LidLayer.SOIL, LidLayerProperty.FIELD_CAP)
    assert value == 0.9
    assert project.uncommitted_controls() == ["BC"]
    with pytest.raises(ValidationError):
        project.start()
    # Fix the value
    gateway.set_lid_control_param(BIO_CELL, LidLayer.SOIL, LidLayerProperty.FIELD_CAP, 0.3)
    assert project.uncommitted_controls() == []
    project.start()


def test_negative_void_ratio(gateway):
    with pytest.raises(ValidationError):
        gateway.set_lid_control_param(
            PAVEMENT, LidLayer.STORAGE, LidLayerProperty.VOID_FRAC, -1.0
        )


def test_control_structural_while_started(gateway, project, helpers):
    helpers.start(project)
    with pytest.raises(SimulationRunningError):
        gateway.set_lid_control_param(BIO_CELL, LidLayer.SOIL, LidLayerProperty.POROSITY, 0.4)
    with pytest.raises(SimulationRunningError):
        gateway.set_lid_control_overflow(BIO_CELL, False)
    # Reading stays possible
    value = gateway.get_lid_control_param(BIO_CELL, LidLayer.SOIL, LidLayerProperty.POROSITY)
    assert value == 0.5


def test_overflow(gateway):
    assert gateway.get_lid_control_overflow(BIO_CELL) is True
    gateway.set_lid_control_overflow(BIO_CELL, False)
    assert gateway.get_lid_control_overflow(BIO_CELL) is False
    assert gateway._get_lid_control(BIO_CELL).is_committed


def test_control_index(gateway):
    with pytest.raises(ObjectIndexError):
        gateway.get_lid_control_param(2, LidLayer.SOIL, LidLayerProperty.POROSITY)


def test_unit_count(gateway):
    assert gateway.get_lid_unit_count(S1) == 2
    assert gateway.get_lid_unit_count(S2) == 0
    with pytest.raises(ObjectIndexError):
        gateway.get_lid_unit_count(10)


def test_unit_params(gateway):
    assert gateway.get_lid_unit_param(S1, 0, LidUnitProperty.UNIT_AREA) == 100.0
    assert gateway.get_lid_unit_param(S1, 0, LidUnitProperty.INIT_SAT) == pytest.approx(10.0)
    # A square unit if no width is given
    assert gateway.get_lid_unit_param(S1, 0, LidUnitProperty.FULL_WIDTH) == pytest.approx(10.0)
    assert gateway.get_lid_unit_param(S1, 1, LidUnitProperty.FULL_WIDTH) == 10.0
    gateway.set_lid_unit_param(S1, 1, LidUnitProperty.FROM_IMPERV, 25.0)
    assert gateway._get_lid_unit(S1, 1).from_imperv == pytest.approx(0.25)


def test_unit_params_si(si_gateway):
    area = si_gateway.get_lid_unit_param(S1, 0, LidUnitProperty.UNIT_AREA)
    assert area == pytest.approx(100.0 * 0.3048**2)


def test_invalid_unit_params(gateway):
    with pytest.raises(ValidationError):
        gateway.set_lid_unit_param(S1, 0, LidUnitProperty.INIT_SAT, 150.0)
    assert gateway.get_lid_unit_param(S1, 0, LidUnitProperty.INIT_SAT) == pytest.approx(150.0)
    with pytest.raises(ValidationError):
        gateway.set_lid_unit_param(S1, 1, LidUnitProperty.UNIT_AREA, 50000.0)


def test_unit_options(gateway, project):
    assert gateway.get_lid_unit_option(S1, 0, LidUnitOption.INDEX) == BIO_CELL
    assert gateway.get_lid_unit_option(S1, 0, LidUnitOption.NUMBER) == 2
    assert gateway.get_lid_unit_option(S1, 1, LidUnitOption.DRAIN_NODE) == 1
    assert gateway.get_lid_unit_option(S1, 1, LidUnitOption.DRAIN_SUBCATCH) == -1
    gateway.set_lid_unit_option(S1, 0, LidUnitOption.NUMBER, 3)
    assert project.lid_groups[S1].lid_area == 500.0
    with pytest.raises(ValidationError):
        gateway.set_lid_unit_option(S1, 0, LidUnitOption.INDEX, 5)


def test_unit_errors(gateway):
    with pytest.raises(UndefinedLidGroupError):
        gateway.get_lid_unit_param(S2, 0, LidUnitProperty.UNIT_AREA)
    with pytest.raises(ObjectIndexError):
        gateway.get_lid_unit_param(S1, 2, LidUnitProperty.UNIT_AREA)
    with pytest.raises(ObjectIndexError):
        gateway.get_lid_unit_param(S1, -1, LidUnitProperty.UNIT_AREA)
    with pytest.raises(UndefinedLidGroupError):
        gateway.get_lid_group_result(S2, LidGroupResult.PERV_AREA)


def test_flux_rate(si_gateway, si_project):
    unit = si_project.lid_groups[S1].units[0]
    unit.old_flux_rates[LidLayer.SOIL] = 1.0
    rate = si_gateway.get_lid_unit_flux_rate(S1, 0, LidLayer.SOIL)
    assert rate == pytest.approx(0.3048)
    assert si_gateway.get_lid_unit_flux_rate(S1, 0, LidLayer.PAVEMENT) == 0.0
    with pytest.raises(PropertyOutOfRangeError):
        si_gateway.get_lid_unit_flux_rate(S1, 0, LidLayer.DRAIN)


def test_unit_results(gateway, project):
    unit = project.lid_groups[S1].units[1]
    unit.water_balance.inflow = 0.5
    unit.water_rate.evap = 1e-5
    unit.soil_moisture = 0.3
    unit.new_drain_flow = 2.0
    assert gateway.get_lid_unit_result(S1, 1, LidUnitResult.INFLOW) == pytest.approx(6.0)
    assert gateway.get_lid_unit_result(S1, 1, LidUnitResult.EVAP_RATE) == pytest.approx(0.432)
    assert gateway.get_lid_unit_result(S1, 1, LidUnitResult.SOIL_MOIST) == 0.3
    assert gateway.get_lid_unit_result(S1, 1, LidUnitResult.NEW_DRAIN_FLOW) == 2.0
    with pytest.raises(PropertyOutOfRangeError):
        gateway.get_lid_unit_result(S1, 1, 99)


def test_group_results(si_gateway, si_project):
    group = si_project.lid_groups[S1]
    group.perv_area = 100.0
    group.new_drain_flow = 1.0
    perv_area = si_gateway.get_lid_group_result(S1, LidGroupResult.PERV_AREA)
    assert perv_area == pytest.approx(100.0 * 0.3048**2)
    flow = si_gateway.get_lid_group_result(S1, LidGroupResult.NEW_DRAIN_FLOW)
    assert flow == pytest.approx(0.02832)


@pytest.mark.parametrize("control", [BIO_CELL, PAVEMENT])
def test_layer_params_round_trip(si_gateway, control):
    """Writing back every value read leaves the control unchanged"""
    writable = [key for key, accessor in dispatch.LID_LAYER_PARAMS.items() if accessor.is_writable]
    before = {key: si_gateway.get_lid_control_param(control, *key) for key in writable}
    for key, value in before.items():
        si_gateway.set_lid_control_param(control, *key, value)
        assert si_gateway.get_lid_control_param(control, *key) == pytest.approx(value)
    after = {key: si_gateway.get_lid_control_param(control, *key) for key in writable}
    assert after == pytest.approx(before)
    assert si_gateway._get_lid_control(control).is_committed
