"""Tests for the mask wire format and subject models"""

import json

import pytest

from bitperm.core.exceptions import InvalidMaskError
from bitperm.core.permissions import MaskBearer, Role, RoleBearer, Subject, parse, to_string


class TestWireFormat:
    """Test decimal string conversion"""

    def test_zero(self):
        """Test the empty mask"""
        assert parse("0") == 0
        assert to_string(0) == "0"

    @pytest.mark.parametrize("value", ["abc", "", "  ", "-1", "+5", "1.5", "0x10", "1e3", "²"])
    def test_malformed_strings(self, value):
        """Test anything but plain decimal digits is rejected"""
        with pytest.raises(InvalidMaskError) as exc_info:
            parse(value)
        assert exc_info.value.value == value

    @pytest.mark.parametrize("value", [-1, True, 1.0, None, b"1"])
    def test_malformed_values(self, value):
        """Test non-string inputs that are not non-negative ints"""
        with pytest.raises(InvalidMaskError):
            parse(value)

    def test_ints_pass_through(self):
        """Test already-decoded masks are accepted"""
        assert parse(6) == 6

    def test_whitespace_stripped(self):
        """Test surrounding whitespace from form input"""
        assert parse(" 42\n") == 42

    def test_beyond_float_precision(self):
        """Test masks wider than a double's mantissa survive exactly"""
        mask = (1 << 200) | (1 << 53) | 1
        assert parse(to_string(mask)) == mask
        assert json.loads(json.dumps({"permissions": to_string(mask)}))["permissions"] == str(mask)

    def test_to_string_rejects_invalid(self):
        """Test negative and non-int masks cannot be rendered"""
        with pytest.raises(InvalidMaskError):
            to_string(-4)
        with pytest.raises(InvalidMaskError):
            to_string("4")
        with pytest.raises(InvalidMaskError):
            to_string(False)


class TestSubjectModels:
    """Test subject and role models"""

    def test_defaults(self):
        """Test subjects start with no permissions and no roles"""
        subject = Subject()
        assert subject.permissions == "0"
        assert subject.roles == []

    def test_normalizes_masks(self):
        """Test ints and padded strings are stored canonically"""
        assert Subject(permissions=6).permissions == "6"
        assert Subject(permissions=" 007 ").permissions == "7"
        assert Role(permissions=3).permissions == "3"

    def test_rejects_corrupt_masks(self):
        """Test corrupt masks fail at the boundary"""
        with pytest.raises(InvalidMaskError):
            Subject(permissions="abc")
        with pytest.raises(InvalidMaskError):
            Role(permissions="-2")

    def test_from_session_payload(self):
        """Test validating a session payload with nested roles"""
        subject = Subject.model_validate({
            "id": "12",
            "tag": "someone",
            "permissions": "2",
            "roles": [{"id": "premium", "name": "Premium", "permissions": "48"}],
        })
        assert subject.roles[0].name == "Premium"
        assert subject.roles[0].permissions == "48"

    def test_with_permissions(self):
        """Test replacing the own mask keeps roles"""
        subject = Subject(permissions="2", roles=[Role(permissions="4")])
        updated = subject.with_permissions(10)

        assert updated.permissions == "10"
        assert updated.roles == subject.roles
        assert subject.permissions == "2"

    def test_protocols(self):
        """Test models satisfy the duck-typed subject protocols"""
        assert isinstance(Role(), MaskBearer)
        assert isinstance(Subject(), RoleBearer)
