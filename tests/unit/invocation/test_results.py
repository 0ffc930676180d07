"""Tests for result classification."""

from collections import OrderedDict

from pydantic import BaseModel

from fnruntime.exceptions.invocation_errors import HandlerError
from fnruntime.invocation.models import Response
from fnruntime.invocation.results import (
    DescriptorResult,
    EmptyResult,
    ErrorResult,
    MalformedResult,
    PairResult,
    StringResult,
    StructuredResult,
    classify_result,
    is_status_pair,
)


class _Payload(BaseModel):
    name: str


class TestIsStatusPair:
    def test_tuple(self):
        assert is_status_pair((201, "x"))

    def test_list(self):
        assert is_status_pair([201, {"a": 1}])

    def test_bool_status_is_not_a_pair(self):
        assert not is_status_pair([True, "x"])

    def test_string_status_is_not_a_pair(self):
        assert not is_status_pair(["201", "x"])

    def test_wrong_length(self):
        assert not is_status_pair((201, "x", "y"))


class TestClassifyResult:
    def test_string(self):
        assert classify_result("a string") == StringResult("a string")

    def test_bytes(self):
        assert classify_result(b"hello") == StringResult(b"hello")

    def test_bytearray(self):
        assert classify_result(bytearray(b"hello")) == StringResult(b"hello")

    def test_pair(self):
        assert classify_result((201, "a string after status")) == PairResult(201, "a string after status")

    def test_pair_from_list(self):
        assert classify_result([201, {"b": "foo"}]) == PairResult(201, {"b": "foo"})

    def test_mapping(self):
        value = OrderedDict(a="dict")
        assert classify_result(value) == StructuredResult(value)

    def test_list_not_led_by_status(self):
        assert classify_result(["a", "b"]) == StructuredResult(["a", "b"])

    def test_three_element_list(self):
        assert isinstance(classify_result([1, 2, 3]), StructuredResult)

    def test_pydantic_model(self):
        assert isinstance(classify_result(_Payload(name="x")), StructuredResult)

    def test_descriptor(self):
        descriptor = Response(body="response body")
        assert classify_result(descriptor) == DescriptorResult(descriptor)

    def test_none(self):
        assert classify_result(None) == EmptyResult()

    def test_error(self):
        cause = RuntimeError("some error")
        result = classify_result(cause)
        assert isinstance(result, ErrorResult)
        assert isinstance(result.error, HandlerError)
        assert result.error.cause is cause

    def test_unsupported_type(self):
        result = classify_result(42)
        assert isinstance(result, MalformedResult)
        assert result.result_type == "int"
        assert "'int'" in result.reason

    def test_set_is_unsupported(self):
        assert isinstance(classify_result({"a"}), MalformedResult)
