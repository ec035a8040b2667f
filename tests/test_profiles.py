"""
test_profiles.py - Code profile registry, validation and application.
"""

from dataclasses import replace

import pytest

from rebarcalc.errors import ConfigurationError, UnknownProfileError, ProfileValidationError
from rebarcalc.loader import resolve_config
from rebarcalc.models.schedule_schema import ScheduleRequest
from rebarcalc.models.types import MemberType, CodeStandard
from rebarcalc.profiles.models import BendDeductions, MemberDefaults, ProjectConfig
from rebarcalc.profiles.registry import (
    ProfileRegistry,
    apply_profile,
    new_project_config,
    update_parameters,
    create_custom_profile,
)
from rebarcalc.profiles.validator import validate_profile


class TestRegistry:

    def test_builtin_profiles(self, registry):
        assert set(registry.ids()) == {"IS456", "BS8110", "CUSTOM"}
        assert len(registry) == 3
        assert "IS456" in registry

    def test_get_unknown_returns_none(self, registry):
        assert registry.get("ACI318") is None

    def test_require_unknown_raises(self, registry):
        with pytest.raises(UnknownProfileError) as exc:
            registry.require("ACI318")
        assert exc.value.profile_id == "ACI318"

    def test_is456_parameters(self, is_profile):
        assert is_profile.default_cover == 25
        assert is_profile.hook_multiplier == 9
        assert is_profile.bend_deductions == BendDeductions(1, 2, 3)
        assert is_profile.minimum_cover[MemberType.COLUMN] == 40
        assert is_profile.unit_weights is None
        assert is_profile.code_standard == CodeStandard.IS

    def test_bs8110_parameters(self, bs_profile):
        assert bs_profile.hook_multiplier == 8
        assert bs_profile.bend_deductions == BendDeductions(0.5, 1.5, 2.5)
        assert bs_profile.defaults_for(MemberType.COLUMN).default_cover == 35
        assert bs_profile.maximum_spacing[MemberType.SLAB] == 250
        assert bs_profile.unit_weights[16] == pytest.approx(1.579)
        assert bs_profile.code_standard == CodeStandard.BS

    def test_custom_is_editable(self, registry):
        custom = registry.require("CUSTOM")
        assert custom.editable
        assert custom.maximum_spacing[MemberType.BEAM] == 400

    def test_default_profile(self, registry):
        assert registry.default.id == "IS456"

    def test_alternative_file(self, tmp_path):
        path = tmp_path / "profiles.yaml"
        path.write_text(
            "profiles:\n"
            "  LOCAL:\n"
            "    name: Local\n"
            "    default_cover: 30\n"
            "    hook_multiplier: 10\n"
            "    bend_deductions: {deg45: 1, deg90: 2.5, deg135: 3}\n"
        )
        registry = ProfileRegistry(path)
        assert registry.ids() == ["LOCAL"]
        assert registry.require("LOCAL").bend_deductions.deg90 == 2.5

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ProfileRegistry(tmp_path / "nope.yaml")

    def test_out_of_range_profile_blocked(self, tmp_path):
        """Listed as-is, but refused when requested for use."""
        path = tmp_path / "profiles.yaml"
        path.write_text(
            "profiles:\n"
            "  BAD:\n"
            "    default_cover: 500\n"
            "    hook_multiplier: 50\n"
            "    bend_deductions: {deg45: 1, deg90: 2, deg135: 3}\n"
        )
        registry = ProfileRegistry(path)
        assert registry.get("BAD").default_cover == 500
        with pytest.raises(ProfileValidationError) as exc:
            registry.require("BAD")
        assert exc.value.profile_id == "BAD"
        assert len(exc.value.errors) == 2

    def test_out_of_range_profile_not_applied(self, tmp_path):
        path = tmp_path / "profiles.yaml"
        path.write_text(
            "profiles:\n"
            "  BAD:\n"
            "    default_cover: 500\n"
            "    hook_multiplier: 50\n"
            "    bend_deductions: {deg45: 1, deg90: 2, deg135: 3}\n"
        )
        with pytest.raises(ConfigurationError):
            resolve_config(ScheduleRequest(profile="BAD"), ProfileRegistry(path))

    @pytest.mark.parametrize("body", [
        "    hook_multiplier: 9\n    bend_deductions: {deg45: 1, deg90: 2, deg135: 3}\n",
        "    default_cover: 25\n    bend_deductions: {deg45: 1, deg90: 2, deg135: 3}\n",
        "    default_cover: 25\n    hook_multiplier: 9\n",
        "    default_cover: 25\n    hook_multiplier: 9\n    bend_deductions: {deg45: 1, deg135: 3}\n",
        "    default_cover: wide\n    hook_multiplier: 9\n    bend_deductions: {deg45: 1, deg90: 2, deg135: 3}\n",
    ])
    def test_missing_required_parameter_raises(self, tmp_path, body):
        path = tmp_path / "profiles.yaml"
        path.write_text("profiles:\n  PARTIAL:\n" + body)
        with pytest.raises(ConfigurationError) as exc:
            ProfileRegistry(path)
        assert "PARTIAL" in str(exc.value)


class TestValidation:

    @pytest.mark.parametrize("profile_id", ["IS456", "BS8110", "CUSTOM"])
    def test_builtin_profiles_valid(self, registry, profile_id):
        result = validate_profile(registry.require(profile_id))
        assert result.is_valid, result.errors
        assert result.warnings == []

    @pytest.mark.parametrize("field,value", [
        ("default_cover", 5),
        ("default_cover", 120),
        ("hook_multiplier", 3),
        ("hook_multiplier", 16),
        ("bend_deductions", BendDeductions(1, 6, 3)),
        ("bend_deductions", BendDeductions(-0.5, 2, 3)),
    ])
    def test_out_of_range_scalars(self, is_profile, field, value):
        result = validate_profile(replace(is_profile, **{field: value}))
        assert not result.is_valid

    def test_default_cover_below_minimum(self, is_profile):
        defaults = dict(is_profile.member_defaults)
        defaults[MemberType.BEAM] = MemberDefaults(20, 150, (12, 16))
        result = validate_profile(replace(is_profile, member_defaults=defaults))
        assert any("beam" in e for e in result.errors)

    def test_spacing_above_maximum_is_warning(self, is_profile):
        defaults = dict(is_profile.member_defaults)
        defaults[MemberType.SLAB] = MemberDefaults(20, 350, (8, 10))
        result = validate_profile(replace(is_profile, member_defaults=defaults))
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_invalid_common_diameter(self, is_profile):
        defaults = dict(is_profile.member_defaults)
        defaults[MemberType.SLAB] = MemberDefaults(20, 150, (8, 14))
        result = validate_profile(replace(is_profile, member_defaults=defaults))
        assert any("14" in e for e in result.errors)

    def test_empty_common_diameters(self, is_profile):
        defaults = dict(is_profile.member_defaults)
        defaults[MemberType.SLAB] = MemberDefaults(20, 150, ())
        assert not validate_profile(replace(is_profile, member_defaults=defaults)).is_valid

    def test_minimum_cover_range(self, is_profile):
        minimum = dict(is_profile.minimum_cover)
        minimum[MemberType.SLAB] = 60
        result = validate_profile(replace(is_profile, minimum_cover=minimum))
        assert any("Minimum cover for slab" in e for e in result.errors)

    def test_maximum_spacing_range_is_warning(self, is_profile):
        maximum = dict(is_profile.maximum_spacing)
        maximum[MemberType.FOOTING] = 600
        result = validate_profile(replace(is_profile, maximum_spacing=maximum))
        assert result.is_valid
        assert result.warnings

    def test_non_positive_unit_weight(self, bs_profile):
        weights = dict(bs_profile.unit_weights)
        weights[12] = 0
        assert not validate_profile(replace(bs_profile, unit_weights=weights)).is_valid


class TestApplyProfile:

    def test_apply_copies_parameters(self, bs_profile):
        config = apply_profile(ProjectConfig(name="P"), bs_profile)
        assert config.code_profile_id == "BS8110"
        assert config.code_standard == CodeStandard.BS
        assert config.hook_multiplier == 8
        assert config.bend_deductions == bs_profile.bend_deductions
        assert config.unit_weights == bs_profile.unit_weights

    def test_apply_is_idempotent(self, is_profile):
        base = ProjectConfig(name="P")
        once = apply_profile(base, is_profile)
        twice = apply_profile(apply_profile(base, is_profile), is_profile)
        assert once == twice
        assert once.to_dict() == twice.to_dict()

    def test_different_profiles_give_different_configs(self, is_profile, bs_profile):
        base = ProjectConfig(name="P")
        a = apply_profile(base, is_profile)
        b = apply_profile(base, bs_profile)
        assert a.hook_multiplier != b.hook_multiplier
        assert a.bend_deductions != b.bend_deductions

    @pytest.mark.parametrize("field,value", [
        ("default_cover", 40.0),
        ("hook_multiplier", 12.0),
        ("bend_deductions", BendDeductions(1, 2.5, 3)),
    ])
    def test_each_scalar_difference_propagates(self, is_profile, field, value):
        other = replace(is_profile, id="OTHER", **{field: value})
        config = apply_profile(ProjectConfig(name="P"), other)
        assert getattr(config, field) == value
        assert getattr(config, field) != getattr(apply_profile(ProjectConfig(name="P"), is_profile), field)

    def test_timestamps_untouched(self, is_profile):
        from datetime import datetime
        stamp = datetime(2024, 1, 1)
        config = apply_profile(ProjectConfig(name="P", updated_at=stamp), is_profile)
        assert config.updated_at == stamp

    def test_edit_detaches(self, is_config):
        edited = update_parameters(is_config, hook_multiplier=10)
        assert edited.is_detached
        assert edited.hook_multiplier == 10
        assert is_config.code_profile_id == "IS456"

    def test_edit_bend_dict_detaches(self, is_config):
        edited = update_parameters(is_config, bend_deductions={"deg90": 2.5})
        assert edited.is_detached
        assert edited.bend_deductions == BendDeductions(1, 2.5, 3)

    def test_same_value_keeps_link(self, is_config):
        edited = update_parameters(is_config, default_cover=25)
        assert edited.code_profile_id == "IS456"

    def test_non_profile_field_keeps_link(self, is_config):
        edited = update_parameters(is_config, name="Renamed")
        assert edited.code_profile_id == "IS456"

    def test_reapply_reattaches(self, is_config, is_profile):
        detached = update_parameters(is_config, hook_multiplier=10)
        assert apply_profile(detached, is_profile) == is_config

    def test_new_project_config(self, is_profile):
        config = new_project_config("Tower A", is_profile)
        assert config.name == "Tower A"
        assert config.code_profile_id == "IS456"


class TestCustomProfile:

    def test_create_custom(self, is_profile):
        custom = create_custom_profile(is_profile, "SITE", hook_multiplier=10,
                                       bend_deductions={"deg90": 2.5})
        assert custom.editable
        assert custom.id == "SITE"
        assert custom.hook_multiplier == 10
        assert custom.bend_deductions == BendDeductions(1, 2.5, 3)
        assert is_profile.hook_multiplier == 9

    def test_invalid_custom_raises(self, is_profile):
        with pytest.raises(ProfileValidationError) as exc:
            create_custom_profile(is_profile, "BAD", hook_multiplier=20)
        assert exc.value.errors
