"""
Unit tests for the generic value validators.
"""

import pytest

from proclabel.validation import (
    ValidationError,
    validate_boolean,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
    validate_simple_command,
)


@pytest.mark.unit
class TestNumericValidators:
    """Test cases for integer and float validation."""

    def test_positive_integer_bounds(self):
        assert validate_positive_integer(5, min_value=1, max_value=10) == 5
        assert validate_positive_integer("7") == 7

        with pytest.raises(ValidationError, match="must be >= 1"):
            validate_positive_integer(0)
        with pytest.raises(ValidationError, match="must be <= 10"):
            validate_positive_integer(11, max_value=10)

    def test_integer_rejects_bool_and_garbage(self):
        with pytest.raises(ValidationError):
            validate_positive_integer(True)
        with pytest.raises(ValidationError):
            validate_positive_integer(None, field_name="jobs")

    def test_positive_float_bounds(self):
        assert validate_positive_float(2, min_value=0.5) == 2.0

        with pytest.raises(ValidationError) as exc_info:
            validate_positive_float(0.1, min_value=0.5, field_name="interval")

        assert exc_info.value.field_name == "interval"
        assert exc_info.value.value == 0.1

    def test_float_rejects_bool(self):
        with pytest.raises(ValidationError):
            validate_positive_float(False)


@pytest.mark.unit
class TestOtherValidators:
    """Test cases for boolean, command and enum validation."""

    def test_boolean(self):
        assert validate_boolean(True) is True
        with pytest.raises(ValidationError):
            validate_boolean(1)

    def test_simple_command(self):
        assert validate_simple_command("/usr/sbin/lsof") == "/usr/sbin/lsof"
        with pytest.raises(ValidationError, match="single executable"):
            validate_simple_command("docker -H tcp://remote")
        with pytest.raises(ValidationError):
            validate_simple_command(None)

    def test_enum_choice_case_insensitive_returns_canonical(self):
        assert validate_enum_choice("info", ["DEBUG", "INFO"], case_sensitive=False) == "INFO"

    def test_enum_choice_case_sensitive(self):
        with pytest.raises(ValidationError):
            validate_enum_choice("info", ["DEBUG", "INFO"])
