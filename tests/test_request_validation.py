"""
Schema validation - discriminated results for each request schema
"""

import pytest

from models.user import (
    MAX_PAGE,
    MAX_PER_PAGE,
    UserCreateRequest,
    UserFilterQuery,
    UserIdParams,
    UserUpdateRequest,
)
from utils.request_validation import ValidationFailure, ValidationSuccess, validate_data


def failed_fields(result):
    assert isinstance(result, ValidationFailure), f"Expected failure, got {result}"
    return {error["field"] for error in result.errors}


def messages_by_field(result):
    assert isinstance(result, ValidationFailure), f"Expected failure, got {result}"
    return {error["field"]: error["message"] for error in result.errors}


class TestFilterQuery:

    def test_coerces_page_and_per_page(self):
        result = validate_data(UserFilterQuery, {"page": "2", "perPage": "10"})

        assert isinstance(result, ValidationSuccess)
        assert result.ok is True
        assert result.value.page == 2
        assert result.value.perPage == 10
        assert result.value.name is None
        assert result.value.skip == 10

    def test_keeps_name(self):
        result = validate_data(UserFilterQuery, {"name": "jo", "page": "1", "perPage": "5"})
        assert result.value.name == "jo"

    def test_page_and_per_page_required(self):
        assert failed_fields(validate_data(UserFilterQuery, {})) == {"page", "perPage"}

    @pytest.mark.parametrize("page,per_page,field", [
        ("abc", "10", "page"),
        ("0", "10", "page"),
        ("1", "0", "perPage"),
        ("1", "-3", "perPage"),
    ])
    def test_rejects_invalid_numbers(self, page, per_page, field):
        result = validate_data(UserFilterQuery, {"page": page, "perPage": per_page})
        assert failed_fields(result) == {field}

    @pytest.mark.parametrize("page,per_page,field", [
        (str(10 ** 19), "10", "page"),
        (str(MAX_PAGE + 1), "10", "page"),
        ("1", str(MAX_PER_PAGE + 1), "perPage"),
    ])
    def test_rejects_pages_beyond_bounds(self, page, per_page, field):
        result = validate_data(UserFilterQuery, {"page": page, "perPage": per_page})
        assert failed_fields(result) == {field}

    def test_largest_window_fits_int64(self):
        result = validate_data(UserFilterQuery, {"page": str(MAX_PAGE), "perPage": str(MAX_PER_PAGE)})

        assert isinstance(result, ValidationSuccess)
        assert result.value.skip + result.value.perPage < 2 ** 63


class TestIdParams:

    def test_accepts_object_id(self):
        result = validate_data(UserIdParams, {"id": "63c9f3dffb7b8b43168c9123"})
        assert isinstance(result, ValidationSuccess)
        assert result.value.id == "63c9f3dffb7b8b43168c9123"

    @pytest.mark.parametrize("bad_id", ["123", "63c9f3dffb7b8b43168c912z", "63c9f3dffb7b8b43168c91234", ""])
    def test_rejects_malformed_id(self, bad_id):
        assert failed_fields(validate_data(UserIdParams, {"id": bad_id})) == {"id"}

    def test_malformed_id_message(self):
        result = validate_data(UserIdParams, {"id": "123"})
        assert messages_by_field(result) == {"id": "Invalid ObjectId format"}

    def test_missing_id_message(self):
        assert messages_by_field(validate_data(UserIdParams, {})) == {"id": "Id is required"}


class TestCreateBody:

    def test_accepts_full_body(self):
        body = {"name": "Jane", "email": "jane@example.com", "age": 28, "phone": "555", "address": "Elm St"}
        result = validate_data(UserCreateRequest, body)

        assert isinstance(result, ValidationSuccess)
        assert result.value.to_fields() == body

    def test_optional_fields_omitted_from_fields(self):
        result = validate_data(UserCreateRequest, {"name": "Jane", "email": "jane@example.com", "age": 28})
        assert result.value.to_fields() == {"name": "Jane", "email": "jane@example.com", "age": 28}

    def test_required_fields(self):
        assert failed_fields(validate_data(UserCreateRequest, {})) == {"name", "email", "age"}

    def test_invalid_email(self):
        body = {"name": "Jane", "email": "not-an-email", "age": 28}
        assert failed_fields(validate_data(UserCreateRequest, body)) == {"email"}

    def test_invalid_email_message(self):
        body = {"name": "Jane", "email": "nope", "age": 28}
        assert messages_by_field(validate_data(UserCreateRequest, body)) == {"email": "Email is invalid"}

    def test_required_field_messages(self):
        assert messages_by_field(validate_data(UserCreateRequest, {})) == {
            "name": "Name is required",
            "email": "Email is required",
            "age": "Age is required"
        }

    def test_other_errors_keep_default_message(self):
        body = {"name": "Jane", "email": "jane@example.com", "age": "28"}
        message = messages_by_field(validate_data(UserCreateRequest, body))["age"]
        assert message == "Input should be a valid integer"

    def test_age_must_be_a_number(self):
        body = {"name": "Jane", "email": "jane@example.com", "age": "28"}
        assert failed_fields(validate_data(UserCreateRequest, body)) == {"age"}

    def test_name_must_be_a_string(self):
        body = {"name": 42, "email": "jane@example.com", "age": 28}
        assert failed_fields(validate_data(UserCreateRequest, body)) == {"name"}

    def test_non_object_body(self):
        result = validate_data(UserCreateRequest, ["not", "an", "object"])
        assert failed_fields(result) == {"body"}


class TestUpdateBody:

    def test_empty_patch(self):
        result = validate_data(UserUpdateRequest, {})
        assert isinstance(result, ValidationSuccess)
        assert result.value.to_patch() == {}

    def test_partial_patch(self):
        result = validate_data(UserUpdateRequest, {"age": 31})
        assert result.value.to_patch() == {"age": 31}

    def test_null_fields_are_not_part_of_patch(self):
        result = validate_data(UserUpdateRequest, {"phone": None, "name": "Jo"})
        assert result.value.to_patch() == {"name": "Jo"}

    def test_email_checked_when_present(self):
        assert failed_fields(validate_data(UserUpdateRequest, {"email": "nope"})) == {"email"}

    def test_invalid_email_message(self):
        result = validate_data(UserUpdateRequest, {"email": "nope"})
        assert messages_by_field(result) == {"email": "Email is invalid"}

    def test_error_entries_are_machine_readable(self):
        result = validate_data(UserUpdateRequest, {"age": "old"})

        assert isinstance(result, ValidationFailure)
        assert result.ok is False
        error = result.errors[0]
        assert set(error) == {"field", "message", "type"}
        assert error["field"] == "age"
