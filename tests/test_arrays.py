"""Array schemas: element errors, length constraints and nested paths."""
import pytest

from wenfit import array, number, object_, string


class TestArrayValidation:
    def test_valid(self):
        assert array(number()).safe_parse([1, 2, 3]).data == [1, 2, 3]

    def test_tuple_input_gives_list(self):
        assert array(number()).safe_parse((1, 2)).data == [1, 2]

    @pytest.mark.parametrize("value", ["abc", {"0": 1}, None, 5])
    def test_rejects_non_sequences(self, value):
        error = array(number()).safe_parse(value).errors[0]
        assert error.code == "invalid_type"
        assert error.message == "Expected array"

    def test_collects_every_element_error(self):
        result = array(number()).safe_parse([1, "a", 2, "b"])
        assert [e.path for e in result.errors] == [(1,), (3,)]

    def test_nested_paths_accumulate(self):
        schema = array(array(object_({"name": string()})))
        result = schema.safe_parse([[{"name": "ok"}], [{"name": "ok"}, {"name": 7}]])
        assert result.errors[0].path == (1, 1, "name")

    def test_transformed_elements(self):
        assert array(string().to_upper()).parse(["a", "b"]) == ["A", "B"]


class TestLengthConstraints:
    """Length checks report alongside element errors."""

    def test_min(self):
        error = array(number()).min(2).safe_parse([1]).errors[0]
        assert error.code == "array.min"
        assert error.message == "Array must have at least 2 elements"
        assert error.meta == {"min": 2, "actual": 1}

    def test_max(self):
        assert array(number()).max(1).safe_parse([1, 2]).errors[0].code == "array.max"

    def test_length(self):
        error = array(number()).length(2).safe_parse([1]).errors[0]
        assert error.code == "array.length"
        assert error.message == "Array must have exactly 2 elements"

    def test_nonempty(self):
        error = array(number()).nonempty().safe_parse([]).errors[0]
        assert error.code == "array.min"
        assert error.message == "Array must not be empty"

    def test_length_does_not_suppress_element_errors(self):
        result = array(number()).max(1).safe_parse(["a", "b"])
        assert [(e.path, e.code) for e in result.errors] == [
            ((0,), "invalid_type"),
            ((1,), "invalid_type"),
            ((), "array.max"),
        ]

    def test_json_schema(self):
        assert array(number()).min(1).max(3).to_json_schema() == {
            "type": "array", "items": {"type": "number"}, "minItems": 1, "maxItems": 3,
        }
