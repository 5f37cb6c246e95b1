"""Result variants and the sync entry points."""
import pytest

import wenfit
from wenfit import (
    Failure,
    Success,
    ValidationError,
    ValidationIssue,
    array,
    lazy,
    number,
    object_,
    string,
    union,
)


def issue(message="bad", code="custom"):
    return ValidationIssue(path=(), message=message, code=code)


class TestSuccess:
    def test_accessors(self):
        result = Success(3)
        assert result.success
        assert result.errors == ()
        assert result.unwrap() == 3
        assert result.unwrap_or(0) == 3
        assert result.map(lambda n: n + 1) == Success(4)
        assert result.match(ok=lambda d: f"ok {d}", err=lambda e: "err") == "ok 3"
        assert result.to_dict() == {"success": True, "data": 3}

    def test_pattern_matching(self):
        match Success("x"):
            case Success(data):
                assert data == "x"
            case _:
                pytest.fail("expected success")


class TestFailure:
    def test_requires_errors(self):
        with pytest.raises(ValueError):
            Failure(())

    def test_accessors(self):
        result = Failure((issue(),))
        assert not result.success
        assert result.unwrap_or(0) == 0
        assert result.map(lambda d: d) is result
        assert result.match(ok=lambda d: "ok", err=lambda e: len(e)) == 1
        assert result.to_dict() == {"success": False, "errors": [{"path": [], "message": "bad", "code": "custom"}]}

    def test_unwrap_raises_with_all_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            Failure((issue("a"), issue("b"))).unwrap()
        assert [e.message for e in exc_info.value.errors] == ["a", "b"]


class TestEntryPoints:
    """parse and safe_parse agree."""

    schema = object_({"name": string().trim(), "age": number().int().optional()})

    @pytest.mark.parametrize("value", [{"name": " a "}, {"name": "b", "age": 3}, {"name": "c", "x": 1}])
    def test_parse_matches_safe_parse(self, value):
        assert self.schema.parse(value) == self.schema.safe_parse(value).data

    @pytest.mark.parametrize("value", [None, [], {"age": "x"}, {"name": 1, "age": 1.5}])
    def test_safe_parse_never_raises(self, value):
        result = self.schema.safe_parse(value)
        assert isinstance(result, Failure)
        assert all(e.message and e.code for e in result.errors)

    def test_parse_raises_complete_error_list(self):
        with pytest.raises(ValidationError) as exc_info:
            self.schema.parse({"age": "x"})
        assert [e.code for e in exc_info.value.errors] == ["required", "invalid_type"]

    def test_module_level_functions(self, plugins):
        assert wenfit.parse(string(), "x") == "x"
        assert wenfit.safe_parse(string(), 1, plugins=plugins).errors[0].code == "invalid_type"
        assert wenfit.to_json_schema(string()) == {"type": "string"}

    def test_user_exceptions_never_escape(self):
        def bad(value):
            raise KeyError("x")

        schema = object_({"a": string().transform(bad), "b": string().refine(bad)})
        result = schema.safe_parse({"a": "1", "b": "2"})
        assert [e.code for e in result.errors] == ["transform.error", "custom"]


def linked(depth):
    data = {}
    for _ in range(depth):
        data = {"next": data}
    return data


def nested_lists(depth):
    data = 1
    for _ in range(depth):
        data = [data]
    return data


class TestDeepInput:
    """Input nested past the interpreter stack fails instead of raising."""

    node = object_({"next": lazy(lambda: TestDeepInput.node).optional()})
    tree = union([array(lazy(lambda: TestDeepInput.tree)), number()])

    def test_moderate_depth_validates(self):
        assert self.node.safe_parse(linked(50)).success
        assert self.tree.safe_parse(nested_lists(50)) == Success(nested_lists(50))

    def test_deep_object_fails_with_max_depth(self):
        result = self.node.safe_parse(linked(500))
        assert isinstance(result, Failure)
        assert [(e.path, e.code) for e in result.errors] == [((), "max_depth")]

    def test_deep_union_of_arrays_fails_with_max_depth(self):
        result = self.tree.safe_parse(nested_lists(500))
        assert result.errors[-1].code == "max_depth"

    def test_parse_raises_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            self.node.parse(linked(500))
        assert exc_info.value.errors[0].code == "max_depth"

    @pytest.mark.asyncio
    async def test_async_entry_point(self):
        result = await self.node.safe_parse_async(linked(500))
        assert result.errors[0].code == "max_depth"
