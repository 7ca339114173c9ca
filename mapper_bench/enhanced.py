"""Schema-driven DynamoDB table mapping (the new-generation mapper).

A ``TableSchema`` is read from a SQLAlchemy declarative class: every mapped
column becomes one item attribute named after the column, and the single
primary-key column is the partition key. ``EnhancedClient`` binds a schema
and a table name to a low-level DynamoDB client and exposes point reads and
writes of mapped instances.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer
from sqlalchemy import JSON, Boolean, Float, Integer, LargeBinary, Numeric, String, inspect

AttributeMap = dict[str, dict[str, Any]]

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


@dataclass(frozen=True)
class Key:
    """Primary key of an item; only partition keys are supported."""

    partition_value: Any


def _to_wire_value(value: Any) -> Any:
    """Convert a plain Python value into something TypeSerializer accepts."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_wire_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_wire_value(v) for v in value]
    return value


def _from_wire_value(value: Any) -> Any:
    """Undo TypeDeserializer's Decimal and Binary wrappers."""
    if isinstance(value, Decimal):
        text = str(value)
        if "." in text or "E" in text:
            return float(value)
        return int(value)
    if isinstance(value, Binary):
        return bytes(value.value)
    if isinstance(value, dict):
        return {k: _from_wire_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_wire_value(v) for v in value]
    return value


class _Attribute:
    """One mapped column: python attribute key, wire name and converters."""

    __slots__ = ("key", "name", "kind")

    def __init__(self, key: str, name: str, column_type: Any):
        self.key = key
        self.name = name
        self.kind = self._kind_of(column_type)

    @staticmethod
    def _kind_of(column_type: Any) -> str:
        if isinstance(column_type, Boolean):
            return "bool"
        if isinstance(column_type, Integer):
            return "int"
        if isinstance(column_type, (Numeric, Float)):
            return "number"
        if isinstance(column_type, String):
            return "string"
        if isinstance(column_type, LargeBinary):
            return "binary"
        if isinstance(column_type, JSON):
            return "document"
        raise ValueError(f"Unsupported column type {column_type!r}")

    def serialize(self, value: Any) -> dict[str, Any]:
        if self.kind == "string":
            return {"S": str(value)}
        if self.kind == "int":
            return {"N": str(int(value))}
        if self.kind == "number":
            return {"N": str(Decimal(str(value)))}
        if self.kind == "bool":
            return {"BOOL": bool(value)}
        if self.kind == "binary":
            return {"B": bytes(value)}
        return _serializer.serialize(_to_wire_value(value))

    def deserialize(self, attribute_value: dict[str, Any]) -> Any:
        value = _deserializer.deserialize(attribute_value)
        if self.kind == "string":
            return value
        if self.kind == "int":
            return int(value)
        if self.kind == "number":
            return float(value)
        if self.kind == "bool":
            return bool(value)
        if self.kind == "binary":
            return bytes(value.value)
        return _from_wire_value(value)


class TableSchema:
    """Mapping between a declarative class and DynamoDB attribute maps."""

    def __init__(self, item_class: type, attributes: list[_Attribute], partition_key: _Attribute):
        self.item_class = item_class
        self.attributes = attributes
        self.partition_key = partition_key

    @classmethod
    def from_declarative(cls, item_class: type) -> "TableSchema":
        mapper = inspect(item_class)
        attributes = []
        by_column: dict[str, _Attribute] = {}
        for prop in mapper.column_attrs:
            column = prop.columns[0]
            attribute = _Attribute(prop.key, column.name, column.type)
            attributes.append(attribute)
            by_column[column.name] = attribute

        if len(mapper.primary_key) != 1:
            raise ValueError(f"{item_class.__name__} must have exactly one partition key column")
        partition_key = by_column[mapper.primary_key[0].name]
        return cls(item_class, attributes, partition_key)

    @property
    def attribute_names(self) -> tuple[str, ...]:
        return tuple(a.name for a in self.attributes)

    def item_to_map(self, item: Any) -> AttributeMap:
        """Serialize an instance, leaving out attributes that are None."""
        attribute_map = {}
        for attribute in self.attributes:
            value = getattr(item, attribute.key)
            if value is not None:
                attribute_map[attribute.name] = attribute.serialize(value)
        return attribute_map

    def map_to_item(self, attribute_map: AttributeMap) -> Any:
        values = {}
        for attribute in self.attributes:
            if attribute.name in attribute_map:
                values[attribute.key] = attribute.deserialize(attribute_map[attribute.name])
        return self.item_class(**values)

    def key_to_map(self, key: Key) -> AttributeMap:
        return {self.partition_key.name: self.partition_key.serialize(key.partition_value)}


class DynamoDbTable:
    """Handle bound to one table name and one schema."""

    def __init__(self, client: Any, table_name: str, schema: TableSchema):
        self._client = client
        self.table_name = table_name
        self.schema = schema

    def get_item(self, key: Key) -> Optional[Any]:
        response = self._client.get_item(TableName=self.table_name, Key=self.schema.key_to_map(key))
        attribute_map = response.get("Item")
        if attribute_map is None:
            return None
        return self.schema.map_to_item(attribute_map)

    def put_item(self, item: Any) -> None:
        if not isinstance(item, self.schema.item_class):
            raise TypeError(
                f"{self.table_name} stores {self.schema.item_class.__name__} items, got {type(item).__name__}"
            )
        self._client.put_item(TableName=self.table_name, Item=self.schema.item_to_map(item))


class EnhancedClient:
    """Factory of mapped table handles sharing one DynamoDB client."""

    def __init__(self, dynamodb_client: Any):
        self.dynamodb_client = dynamodb_client

    def table(self, table_name: str, schema: TableSchema) -> DynamoDbTable:
        return DynamoDbTable(self.dynamodb_client, table_name, schema)


def item_attributes(item: Any, schema: TableSchema) -> dict[str, Any]:
    """Plain dict of an item's mapped values keyed by wire attribute name."""
    return {a.name: getattr(item, a.key) for a in schema.attributes}
