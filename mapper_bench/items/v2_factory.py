"""Sample items and canned wire items for the new-generation mapper."""

from typing import Any, Callable

from ..enhanced import AttributeMap, TableSchema
from . import shapes
from .schema import HugeBean, HugeBeanFlat, SmallBean, TinyBean

TINY_BEAN_TABLE_SCHEMA = TableSchema.from_declarative(TinyBean)
SMALL_BEAN_TABLE_SCHEMA = TableSchema.from_declarative(SmallBean)
HUGE_BEAN_TABLE_SCHEMA = TableSchema.from_declarative(HugeBean)
HUGE_BEAN_FLAT_TABLE_SCHEMA = TableSchema.from_declarative(HugeBeanFlat)


def _bean(schema: TableSchema, attributes: dict[str, Any]) -> Any:
    by_name = {a.name: a.key for a in schema.attributes}
    return schema.item_class(**{by_name[name]: value for name, value in attributes.items()})


class V2ItemFactory:
    """Builds declarative beans and their serialized attribute maps."""

    def _build(self, schema: TableSchema, attributes: Callable[[], dict[str, Any]]) -> Any:
        return _bean(schema, attributes())

    def tiny_bean(self) -> TinyBean:
        return self._build(TINY_BEAN_TABLE_SCHEMA, shapes.tiny_attributes)

    def small_bean(self) -> SmallBean:
        return self._build(SMALL_BEAN_TABLE_SCHEMA, shapes.small_attributes)

    def huge_bean(self) -> HugeBean:
        return self._build(HUGE_BEAN_TABLE_SCHEMA, shapes.huge_attributes)

    def huge_bean_flat(self) -> Any:
        return self._build(HUGE_BEAN_FLAT_TABLE_SCHEMA, shapes.huge_flat_attributes)

    def tiny(self) -> AttributeMap:
        return TINY_BEAN_TABLE_SCHEMA.item_to_map(self.tiny_bean())

    def small(self) -> AttributeMap:
        return SMALL_BEAN_TABLE_SCHEMA.item_to_map(self.small_bean())

    def huge(self) -> AttributeMap:
        return HUGE_BEAN_TABLE_SCHEMA.item_to_map(self.huge_bean())

    def huge_flat(self) -> AttributeMap:
        return HUGE_BEAN_FLAT_TABLE_SCHEMA.item_to_map(self.huge_bean_flat())
