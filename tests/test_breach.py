"""Tests for the breach data model and its validation."""

import numpy as np
import pytest

from models.breach import Breach, validate_breach_params, validate_position, active_breaches
from models.errors import ValidationError


class TestValidatePosition:
    """Tests for sensor index validation."""

    @pytest.mark.parametrize("position", [0, 1, 60, 119])
    def test_in_range_accepted(self, position):
        """Every index on a 120-sensor fiber is a valid breach site."""
        validate_position(position, 120)

    @pytest.mark.parametrize("position", [-1, 120, 500])
    def test_out_of_range_rejected(self, position):
        """Positions off the fiber raise ValidationError."""
        with pytest.raises(ValidationError, match="position"):
            validate_position(position, 120)

    @pytest.mark.parametrize("position", [1.5, "32", None, True])
    def test_non_integer_rejected(self, position):
        """Floats, strings, None and booleans are not sensor indices."""
        with pytest.raises(ValidationError):
            validate_position(position, 120)

    def test_numpy_integer_accepted(self):
        """numpy integer scalars count as integers."""
        validate_position(np.int64(32), 120)

    def test_validation_error_is_value_error(self):
        """Callers catching ValueError also catch validation failures."""
        with pytest.raises(ValueError):
            validate_position(-5, 120)


class TestValidateBreachParams:
    """Tests for width / intensity / duration validation."""

    def test_none_parameters_skipped(self):
        """Unspecified parameters are not validated."""
        validate_breach_params(32, 120)

    @pytest.mark.parametrize("width", [0.0, -1.0, float("nan")])
    def test_bad_width(self, width):
        with pytest.raises(ValidationError, match="width"):
            validate_breach_params(32, 120, width=width)

    @pytest.mark.parametrize("duration", [0.0, -500.0])
    def test_bad_duration(self, duration):
        with pytest.raises(ValidationError, match="duration"):
            validate_breach_params(32, 120, duration_ms=duration)

    def test_negative_intensity_rejected(self):
        with pytest.raises(ValidationError, match="intensity"):
            validate_breach_params(32, 120, intensity=-0.1)

    def test_zero_intensity_accepted(self):
        """A zero-intensity breach is harmless but legal."""
        validate_breach_params(32, 120, intensity=0.0)


class TestBreach:
    """Tests for the Breach record."""

    def test_construction_validates(self, make_breach):
        """An invalid position cannot be smuggled in through the constructor."""
        with pytest.raises(ValidationError):
            make_breach(position=120)

    def test_frozen(self, make_breach):
        """Breach parameters are immutable after creation."""
        b = make_breach()
        with pytest.raises(AttributeError):
            b.intensity = 99.0

    def test_expiry_boundary(self, make_breach):
        """Active strictly before created_at + duration, expired at it."""
        b = make_breach(created_at=1000.0, duration_ms=60000.0)
        assert b.expires_at == 61000.0
        assert b.is_active(1000.0)
        assert b.is_active(60999.0)
        assert not b.is_active(61000.0)
        assert not b.is_active(90000.0)

    def test_active_breaches_filters_and_keeps_order(self, make_breach):
        """Expired breaches drop out, survivors keep their order."""
        a = make_breach(id=1, created_at=0.0, duration_ms=5000.0)
        b = make_breach(id=2, created_at=0.0, duration_ms=60000.0)
        c = make_breach(id=3, created_at=4000.0, duration_ms=5000.0)
        live = active_breaches([a, b, c], now=6000.0)
        assert [x.id for x in live] == [2, 3]
