import pytest

from stormgate.const import LidType, LidLayer
from stormgate.gateway_error import ValidationError
from stormgate.lid import (
    LidControl,
    LidGroup,
    LidUnit,
    PavementLayer,
    SoilLayer,
    StorageLayer,
    SurfaceLayer,
)


def test_clog_factor_scaling():
    storage = StorageLayer(thickness=0.5, void_fraction=0.4)
    storage.set_clog_factor_canonical(0.1)
    assert storage.clog_factor == pytest.approx(0.1 / 0.2)
    storage.set_clog_factor(3.0)
    assert storage.clog_factor_canonical == pytest.approx(0.6)
    assert storage.clog_factor == pytest.approx(3.0)


def test_thickness_keeps_displayed_clog_factor():
    storage = StorageLayer(thickness=0.5, void_fraction=0.4, clog_factor=2.0)
    storage.set_thickness(1.0)
    assert storage.thickness == 1.0
    assert storage.clog_factor == pytest.approx(2.0)
    assert storage.clog_factor_canonical == pytest.approx(2.0 * 0.4)


def test_void_fraction_keeps_displayed_clog_factor():
    storage = StorageLayer(thickness=0.5, void_fraction=0.4, clog_factor=2.0)
    storage.set_void_fraction(0.25)
    assert storage.clog_factor == pytest.approx(2.0)
    assert storage.clog_factor_canonical == pytest.approx(2.0 * 0.5 * 0.25)


def test_degenerate_scale():
    """With zero thickness the displayed value is stored as is"""
    storage = StorageLayer(thickness=0.0, void_fraction=0.4, clog_factor=5.0)
    assert storage.is_degenerate
    assert storage.clog_factor == 5.0
    assert storage.clog_factor_canonical == 5.0
    storage.set_thickness(2.0)
    assert not storage.is_degenerate
    assert storage.clog_factor == pytest.approx(5.0)
    assert storage.clog_factor_canonical == pytest.approx(5.0 * 0.8)


def test_pavement_imperv_fraction():
    pavement = PavementLayer(thickness=0.5, void_fraction=0.2, imperv_fraction=0.5, clog_factor=4.0)
    assert pavement.clog_factor_canonical == pytest.approx(4.0 * 0.05)
    pavement.set_imperv_fraction(0.0)
    assert pavement.clog_factor == pytest.approx(4.0)
    assert pavement.clog_factor_canonical == pytest.approx(4.0 * 0.1)
    # Fully impervious pavement has no void volume
    pavement.set_imperv_fraction(1.0)
    assert pavement.is_degenerate
    assert pavement.clog_factor == pytest.approx(4.0)


@pytest.mark.parametrize("ratio", [0.0, 0.5, 1.0, 3.0])
def test_void_ratio(ratio):
    storage = StorageLayer(thickness=1.0, void_fraction=0.3)
    storage.set_void_ratio(ratio)
    assert storage.void_fraction == pytest.approx(ratio / (ratio + 1.0))
    assert storage.void_ratio == pytest.approx(ratio)


def test_void_ratio_of_full_voids():
    storage = StorageLayer(thickness=1.0, void_fraction=1.0)
    assert storage.void_ratio == 1.0


def test_negative_void_ratio():
    storage = StorageLayer(thickness=1.0, void_fraction=0.3)
    with pytest.raises(ValidationError):
        storage.set_void_ratio(-0.5)
    assert storage.void_fraction == 0.3


def rain_garden():
    return LidControl(
        id="RG",
        lid_type=LidType.RAIN_GARDEN,
        surface=SurfaceLayer(thickness=0.5, roughness=0.1, surf_slope=0.04),
        soil=SoilLayer(thickness=1.0, porosity=0.45, field_cap=0.2, wilt_point=0.1, k_sat=1e-4),
    )


def test_commit():
    control = rain_garden()
    assert not control.is_committed
    control.commit()
    assert control.is_committed
    assert control.surface.alpha == pytest.approx(1.486 * 0.2 / 0.1)


def test_commit_is_idempotent():
    control = LidControl(
        id="IT",
        lid_type=LidType.INFIL_TRENCH,
        storage=StorageLayer(thickness=0.5, void_fraction=0.4, k_sat=1e-5, clog_factor=2.0),
    )
    control.commit()
    canonical = control.storage.clog_factor_canonical
    control.commit()
    control.commit()
    assert control.storage.clog_factor_canonical == canonical
    assert control.storage.clog_factor == pytest.approx(2.0)


def test_commit_failure():
    control = rain_garden()
    control.soil.field_cap = 0.6
    with pytest.raises(ValidationError) as excinfo:
        control.commit()
    assert not control.is_committed
    assert "soil moisture limits" in excinfo.value.msg
    # The invalid value stays
    assert control.soil.field_cap == 0.6


def test_pavement_and_soil_are_exclusive():
    control = LidControl(
        id="PP",
        lid_type=LidType.POROUS_PAVEMENT,
        soil=SoilLayer(thickness=1.0, porosity=0.45, field_cap=0.2, wilt_point=0.1, k_sat=1e-4),
        pavement=PavementLayer(thickness=0.5, void_fraction=0.2, k_sat=1e-3),
        storage=StorageLayer(thickness=1.0, void_fraction=0.5),
    )
    assert control.is_pavement_class
    assert "soil layer in a pavement LID" in control.get_errors()
    soil_control = rain_garden()
    soil_control.pavement.set_thickness(0.2)
    assert "pavement layer in a soil LID" in soil_control.get_errors()


def test_get_layer():
    control = rain_garden()
    assert control.get_layer(LidLayer.SOIL) is control.soil
    assert control.get_layer(LidLayer.DRAINMAT) is control.drain_mat
    with pytest.raises(ValueError):
        control.get_layer(6)


def test_group_lid_area():
    units = [LidUnit(lid_index=0, number=3, area=10.0), LidUnit(lid_index=1, area=5.0)]
    group = LidGroup(units=units)
    assert group.lid_area == 35.0
