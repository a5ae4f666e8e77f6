import pytest

from idshield.core import validators
from idshield.core.validators import CreateResourceRequest, FieldViolation, InvalidBody


class TestDecodeCreateRequest:
    def test_name_only(self):
        req = validators.decode_create_request(b'{"name": "Admins"}')
        assert req == CreateResourceRequest(name="Admins", attributes=None)

    def test_name_and_attributes(self):
        req = validators.decode_create_request(
            '{"name": "Admins", "attributes": {"tier": ["gold", "silver"], "empty": []}}'
        )
        assert req.name == "Admins"
        assert req.attributes == {"tier": ["gold", "silver"], "empty": []}

    def test_unknown_keys_are_ignored(self):
        req = validators.decode_create_request(b'{"name": "Admins", "color": "blue"}')
        assert req.name == "Admins"

    def test_null_fields_count_as_absent(self):
        req = validators.decode_create_request(b'{"name": null, "attributes": null}')
        assert req == CreateResourceRequest(name=None, attributes=None)

    def test_null_attribute_values_become_empty_lists(self):
        req = validators.decode_create_request(b'{"name": "Admins", "attributes": {"tier": null}}')
        assert req.attributes == {"tier": []}

    def test_missing_name_decodes(self):
        req = validators.decode_create_request(b"{}")
        assert req.name is None

    @pytest.mark.parametrize(
        "body",
        [
            None,
            b"",
            b"not json",
            b'{"name": "Admins"',
            b"[1, 2]",
            b'"Admins"',
            b'{"name": 42}',
            b'{"name": ["Admins"]}',
            b'{"name": "Admins", "attributes": ["a"]}',
            b'{"name": "Admins", "attributes": {"tier": "gold"}}',
            b'{"name": "Admins", "attributes": {"tier": [1, 2]}}',
            b"\xff\xfe",
        ],
    )
    def test_invalid_bodies(self, body):
        with pytest.raises(InvalidBody):
            validators.decode_create_request(body)


class TestValidateCreateRequest:
    def test_valid_request_has_no_violations(self):
        assert validators.validate_create_request(CreateResourceRequest(name="Admins")) == []

    def test_empty_name(self):
        violations = validators.validate_create_request(CreateResourceRequest(name=""))
        assert violations == [FieldViolation("name", "required", ["group name is required", ""])]

    def test_absent_name(self):
        violations = validators.validate_create_request(CreateResourceRequest(name=None))
        assert len(violations) == 1
        assert violations[0].field == "name"
        assert violations[0].code == "required"
        assert violations[0].context == ["group name is required", ""]

    def test_label_is_used_in_message(self):
        violations = validators.validate_create_request(CreateResourceRequest(name=""), label="Capability")
        assert violations[0].context[0] == "Capability name is required"
