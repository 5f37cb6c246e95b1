"""Object schemas: properties, unknown keys, cycles and shape algebra."""
import pytest

from wenfit import ObjectSchema, array, boolean, lazy, number, object_, string


class TestObjectValidation:
    """Property recursion and error aggregation."""

    def test_valid(self):
        schema = object_({"id": string(), "age": number().int()})
        assert schema.safe_parse({"id": "x", "age": 3}).data == {"id": "x", "age": 3}

    def test_int_violation_example(self):
        result = object_({"id": string(), "age": number().int()}).safe_parse({"id": "x", "age": 3.5})
        assert not result.success
        assert len(result.errors) == 1
        assert result.errors[0].path == ("age",)
        assert result.errors[0].code == "number.int"

    @pytest.mark.parametrize("value,received", [([], "list"), (None, "null"), ("x", "str")])
    def test_rejects_non_mappings(self, value, received):
        error = object_({}).safe_parse(value).errors[0]
        assert error.code == "invalid_type"
        assert error.message == "Expected object"
        assert error.meta == {"expected": "object", "received": received}

    def test_required_missing_key(self):
        error = object_({"name": string()}).safe_parse({}).errors[0]
        assert error.code == "required"
        assert error.path == ("name",)
        assert error.message == "Required property 'name' is missing"
        assert error.meta == {"key": "name"}

    @pytest.mark.parametrize("present", [{}, {"b": 1}, {"b": "wrong", "c": True}])
    def test_required_independent_of_other_keys(self, present):
        schema = object_({"a": string(), "b": number(), "c": boolean()})
        required = [e for e in schema.safe_parse(present).errors if e.code == "required"]
        assert ("a",) in [e.path for e in required]

    def test_collects_all_property_errors(self):
        schema = object_({"a": string(), "b": number(), "c": boolean()})
        result = schema.safe_parse({"a": 1, "b": "x"})
        assert [(e.path, e.code) for e in result.errors] == [
            (("a",), "invalid_type"),
            (("b",), "invalid_type"),
            (("c",), "required"),
        ]

    def test_nested_paths(self):
        schema = object_({"user": object_({"address": object_({"street": string()})})})
        error = schema.safe_parse({"user": {"address": {}}}).errors[0]
        assert error.path == ("user", "address", "street")

    def test_output_is_new_dict(self):
        data = {"a": "x"}
        out = object_({"a": string().to_upper()}).parse(data)
        assert out == {"a": "X"}
        assert data == {"a": "x"}


class TestUnknownKeys:
    """passthrough (default) and strict modes."""

    def test_passthrough_copies_extras(self):
        assert object_({"a": string()}).safe_parse({"a": "x", "z": 1}).data == {"a": "x", "z": 1}

    def test_strict_rejects_with_one_error(self):
        result = object_({"a": string()}).strict().safe_parse({"a": "x", "y": 1, "z": 2})
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.code == "unknown_keys"
        assert error.path == ()
        assert error.message == "Unknown properties: y, z"
        assert error.meta == {"unknown_keys": ["y", "z"]}

    def test_strict_then_passthrough(self):
        schema = object_({"a": string()}).strict().passthrough()
        assert schema.safe_parse({"a": "x", "b": 1}).success

    def test_default_mode_from_settings(self, monkeypatch):
        monkeypatch.setenv("WENFIT_DEFAULT_UNKNOWN_KEYS", "strict")
        from wenfit.config import get_settings
        get_settings.cache_clear()
        assert object_({"a": string()}).unknown_keys == "strict"

    def test_invalid_mode_raises(self):
        with pytest.raises(ValueError):
            ObjectSchema({}, "ignore")


class TestCircularReferences:
    """Cycles in the data fail instead of recursing forever."""

    def test_self_referencing_object(self):
        node = object_({"name": string(), "self": lazy(lambda: node).optional()})
        data = {"name": "root"}
        data["self"] = data
        result = node.safe_parse(data)
        assert not result.success
        assert result.errors[0].code == "circular_reference"
        assert result.errors[0].path == ("self",)

    def test_shared_but_acyclic_values_are_fine(self):
        leaf = {"v": 1}
        schema = object_({"a": object_({"v": number()}), "b": object_({"v": number()})})
        assert schema.safe_parse({"a": leaf, "b": leaf}).success

    def test_list_containing_itself(self):
        schema = array(lazy(lambda: schema) | number())
        data = [1]
        data.append(data)
        result = schema.safe_parse(data)
        assert not result.success
        members = result.errors[0].meta["union_errors"]
        assert members[0][0].code == "circular_reference"


class TestShapeAlgebra:
    """pick/omit/extend/merge build new schemas."""

    base = object_({"a": string(), "b": number(), "c": boolean()})

    def test_pick(self):
        assert self.base.pick(["a"]).keys() == ["a"]

    def test_omit(self):
        assert self.base.omit(["a", "b"]).keys() == ["c"]

    def test_extend_overrides(self):
        extended = self.base.extend({"b": string(), "d": number()})
        assert extended.keys() == ["a", "b", "c", "d"]
        assert extended.safe_parse({"a": "x", "b": "now a string", "c": True, "d": 1}).success

    def test_merge_keeps_mode(self):
        merged = object_({"a": string()}).strict().merge(object_({"b": number()}))
        assert merged.unknown_keys == "strict"
        assert merged.keys() == ["a", "b"]

    def test_extend_then_omit_round_trip(self):
        plain = object_({"a": string()})
        roundtrip = plain.extend({"b": number()}).omit(["b"])
        for value in [{"a": "x"}, {"a": 1}, {}, {"a": "x", "b": "anything"}, "nope"]:
            assert plain.safe_parse(value) == roundtrip.safe_parse(value)

    def test_operations_do_not_mutate(self):
        self.base.omit(["a"])
        assert self.base.keys() == ["a", "b", "c"]
