"""Tests for scene unit scale resolution."""

import pytest

from bimexport.imf import MetadataValue
from bimexport.obj.units import UNIT_SCALES, resolve_unit_scale, unit_to_meters


class TestResolveUnitScale:
    """Tests for resolve_unit_scale."""

    @pytest.mark.parametrize(
        "unit,expected",
        [
            ("centimeter", 0.01),
            ("cm", 0.01),
            ("millimeter", 0.001),
            ("mm", 0.001),
            ("foot", 0.3048),
            ("ft", 0.3048),
            ("inch", 0.0254),
            ("in", 0.0254),
        ],
    )
    def test_known_units(self, unit, expected):
        assert resolve_unit_scale({"distance unit": MetadataValue(unit)}) == expected

    def test_plain_dict_entry(self):
        assert resolve_unit_scale({"distance unit": {"value": "cm"}}) == 0.01

    def test_unknown_unit_defaults_to_one(self):
        assert resolve_unit_scale({"distance unit": {"value": "parsec"}}) == 1.0

    def test_meters(self):
        assert resolve_unit_scale({"distance unit": MetadataValue("m")}) == 1.0

    def test_match_is_case_sensitive(self):
        assert resolve_unit_scale({"distance unit": MetadataValue("CM")}) == 1.0

    def test_missing_key(self):
        assert resolve_unit_scale({"other": MetadataValue("mm")}) == 1.0

    def test_no_metadata(self):
        assert resolve_unit_scale(None) == 1.0

    def test_non_string_value(self):
        assert resolve_unit_scale({"distance unit": MetadataValue(12)}) == 1.0

    def test_target_unit(self):
        scale = resolve_unit_scale({"distance unit": MetadataValue("m")}, target_unit="mm")
        assert scale == pytest.approx(1000.0)
        scale = resolve_unit_scale({"distance unit": MetadataValue("ft")}, target_unit="in")
        assert scale == pytest.approx(12.0)

    def test_unknown_target_unit(self):
        with pytest.raises(ValueError, match="Unknown target unit"):
            resolve_unit_scale({}, target_unit="parsec")


def test_unit_table_is_meters_per_unit():
    assert unit_to_meters("ft") == UNIT_SCALES["foot"]
    assert unit_to_meters(None) == 1.0
