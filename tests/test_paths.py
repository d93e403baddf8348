from dataclasses import dataclass

from ratify import deep_get


@dataclass
class Address:
    city: str


@dataclass
class User:
    name: str
    address: Address


def test_returns_value_for_valid_path():
    assert deep_get({"a": {"b": {"c": 42}}}, "a.b.c") == 42


def test_returns_none_for_invalid_path():
    assert deep_get({}, "foo") is None
    assert deep_get({"a": 1}, "a.b.c") is None


def test_returns_default_for_missing_path():
    assert deep_get({"a": {}}, "a.b", default="missing") == "missing"


def test_keeps_falsy_values():
    assert deep_get({"a": {"b": 0}}, "a.b", default="missing") == 0
    assert deep_get({"a": ""}, "a", default="missing") == ""


def test_walks_sequence_indexes():
    attrs = {"items": [{"sku": "x1"}, {"sku": "x2"}]}
    assert deep_get(attrs, "items.1.sku") == "x2"
    assert deep_get(attrs, "items.5.sku") is None
    assert deep_get(attrs, "items.first") is None


def test_walks_object_attributes():
    user = User(name="brian", address=Address(city="Minneapolis"))
    assert deep_get(user, "address.city") == "Minneapolis"
    assert deep_get({"user": user}, "user.name") == "brian"
    assert deep_get(user, "address.zip") is None


def test_does_not_index_into_strings():
    assert deep_get({"a": "hello"}, "a.0") is None
