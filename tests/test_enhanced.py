"""Tests for the enhanced client's schema mapping and table handle."""

from decimal import Decimal

import pytest
from boto3.dynamodb.types import Binary
from sqlalchemy import Boolean, Column, Date, Float, Integer, String
from sqlalchemy.orm import declarative_base

from mapper_bench.enhanced import EnhancedClient, Key, TableSchema, item_attributes
from mapper_bench.items import HUGE_BEAN_TABLE_SCHEMA, SMALL_BEAN_TABLE_SCHEMA, SmallBean, TinyBean
from mapper_bench.items import shapes

ModelBase = declarative_base()


class ScalarBean(ModelBase):
    __tablename__ = "scalar_bean"

    id = Column("id", String, primary_key=True)
    count = Column("count", Integer)
    ratio = Column("ratio", Float)
    enabled = Column("enabled", Boolean)


class DatedBean(ModelBase):
    __tablename__ = "dated_bean"

    id = Column("id", String, primary_key=True)
    created = Column("created", Date)


class CompositeKeyBean(ModelBase):
    __tablename__ = "composite_key_bean"

    part = Column("part", String, primary_key=True)
    sort = Column("sort", String, primary_key=True)


class RecordingClient:
    """Minimal stand-in for a low-level client that records calls."""

    def __init__(self, get_item_response=None):
        self.get_item_response = get_item_response or {}
        self.calls = []

    def get_item(self, **kwargs):
        self.calls.append(("get_item", kwargs))
        return self.get_item_response

    def put_item(self, **kwargs):
        self.calls.append(("put_item", kwargs))
        return {}


def test_schema_reads_partition_key_from_primary_key_column():
    assert SMALL_BEAN_TABLE_SCHEMA.partition_key.name == "hashKey"
    assert SMALL_BEAN_TABLE_SCHEMA.partition_key.key == "hash_key"


def test_item_to_map_serializes_each_column_type():
    schema = TableSchema.from_declarative(ScalarBean)
    item = ScalarBean(id="a", count=3, ratio=0.25, enabled=True)

    assert schema.item_to_map(item) == {
        "id": {"S": "a"},
        "count": {"N": "3"},
        "ratio": {"N": "0.25"},
        "enabled": {"BOOL": True},
    }


def test_item_to_map_skips_none_attributes():
    schema = TableSchema.from_declarative(ScalarBean)

    assert schema.item_to_map(ScalarBean(id="a")) == {"id": {"S": "a"}}


def test_map_to_item_converts_wire_types_back():
    schema = TableSchema.from_declarative(ScalarBean)

    item = schema.map_to_item({
        "id": {"S": "a"},
        "count": {"N": "3"},
        "ratio": {"N": "0.25"},
        "enabled": {"BOOL": False},
    })

    assert isinstance(item, ScalarBean)
    assert item_attributes(item, schema) == {"id": "a", "count": 3, "ratio": 0.25, "enabled": False}


def test_map_to_item_leaves_missing_attributes_unset():
    schema = TableSchema.from_declarative(ScalarBean)

    item = schema.map_to_item({"id": {"S": "a"}})

    assert item.count is None
    assert item.enabled is None


def test_huge_item_survives_a_trip_through_the_wire_format():
    bean = HUGE_BEAN_TABLE_SCHEMA.item_class(
        **{a.key: shapes.huge_attributes()[a.name] for a in HUGE_BEAN_TABLE_SCHEMA.attributes}
    )

    restored = HUGE_BEAN_TABLE_SCHEMA.map_to_item(HUGE_BEAN_TABLE_SCHEMA.item_to_map(bean))
    attributes = item_attributes(restored, HUGE_BEAN_TABLE_SCHEMA)

    assert attributes == shapes.huge_attributes()
    assert isinstance(attributes["binaryAttr"], bytes)
    assert isinstance(attributes["mapAttr1"]["nested1"]["intAttr"], int)


def test_document_attributes_convert_floats_and_binaries():
    schema = HUGE_BEAN_TABLE_SCHEMA
    document = next(a for a in schema.attributes if a.name == "mapAttr1")

    wire = document.serialize({"x": 1.5, "y": [1, 2]})
    assert wire == {"M": {"x": {"N": "1.5"}, "y": {"L": [{"N": "1"}, {"N": "2"}]}}}

    assert document.deserialize({"M": {"b": {"B": b"\x00\x01"}}}) == {"b": b"\x00\x01"}
    assert not isinstance(document.deserialize({"M": {"b": {"B": b"\x00"}}})["b"], Binary)
    assert document.deserialize({"N": "2.5"}) == 2.5
    assert not isinstance(document.deserialize({"N": "7"}), Decimal)


def test_document_attributes_keep_whole_floats_as_floats():
    document = next(a for a in HUGE_BEAN_TABLE_SCHEMA.attributes if a.name == "mapAttr1")

    restored = document.deserialize(document.serialize({"x": 2.0, "y": 2, "z": 1e20}))

    assert restored == {"x": 2.0, "y": 2, "z": 1e20}
    assert type(restored["x"]) is float
    assert type(restored["y"]) is int
    assert type(restored["z"]) is float


def test_float_columns_map_to_numbers():
    schema = TableSchema.from_declarative(ScalarBean)
    ratio = next(a for a in schema.attributes if a.name == "ratio")

    assert ratio.serialize(1.5) == {"N": "1.5"}
    assert ratio.deserialize({"N": "1.5"}) == 1.5


def test_key_to_map_uses_partition_key_column_name():
    assert SMALL_BEAN_TABLE_SCHEMA.key_to_map(Key(partition_value="key")) == {"hashKey": {"S": "key"}}


def test_unsupported_column_type_is_rejected():
    with pytest.raises(ValueError, match="Unsupported column type"):
        TableSchema.from_declarative(DatedBean)


def test_composite_primary_key_is_rejected():
    with pytest.raises(ValueError, match="exactly one partition key"):
        TableSchema.from_declarative(CompositeKeyBean)


def test_get_item_sends_table_name_and_key():
    client = RecordingClient({"Item": {"hashKey": {"S": "hashKey"}, "stringAttr": {"S": "s"}}})
    table = EnhancedClient(client).table("SMALL", SMALL_BEAN_TABLE_SCHEMA)

    item = table.get_item(Key(partition_value="key"))

    assert client.calls == [("get_item", {"TableName": "SMALL", "Key": {"hashKey": {"S": "key"}}})]
    assert isinstance(item, SmallBean)
    assert item.string_attr == "s"


def test_get_item_returns_none_when_response_has_no_item():
    table = EnhancedClient(RecordingClient({})).table("SMALL", SMALL_BEAN_TABLE_SCHEMA)

    assert table.get_item(Key(partition_value="missing")) is None


def test_put_item_serializes_item():
    client = RecordingClient()
    table = EnhancedClient(client).table("SMALL", SMALL_BEAN_TABLE_SCHEMA)

    table.put_item(SmallBean(hash_key="k", string_attr="s"))

    assert client.calls == [
        ("put_item", {"TableName": "SMALL", "Item": {"hashKey": {"S": "k"}, "stringAttr": {"S": "s"}}})
    ]


def test_put_item_rejects_items_of_another_class():
    client = RecordingClient()
    table = EnhancedClient(client).table("SMALL", SMALL_BEAN_TABLE_SCHEMA)

    with pytest.raises(TypeError, match="stores SmallBean items, got TinyBean"):
        table.put_item(TinyBean(hash_key="k"))
    assert client.calls == []
