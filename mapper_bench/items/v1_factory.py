"""Sample items and canned wire items for the old-generation mapper.

Old-generation items are plain dicts; their wire form is produced by boto3's
own ``TypeSerializer``, the same codec the resource layer applies on writes.
"""

from typing import Any, Callable

from boto3.dynamodb.types import TypeSerializer

from . import shapes

V1Item = dict[str, Any]

HASH_KEY_ATTRIBUTE = "hashKey"

_serializer = TypeSerializer()


class V1ItemFactory:
    """Builds item dicts, key dicts and serialized attribute maps."""

    def _wire(self, attributes: Callable[[], V1Item]) -> dict[str, dict[str, Any]]:
        return {name: _serializer.serialize(value) for name, value in attributes().items()}

    def v1_key(self) -> V1Item:
        return {HASH_KEY_ATTRIBUTE: shapes.HASH_KEY_VALUE}

    def v1_tiny_bean(self) -> V1Item:
        return shapes.tiny_attributes()

    def v1_small_bean(self) -> V1Item:
        return shapes.small_attributes()

    def v1_huge_bean(self) -> V1Item:
        return shapes.huge_attributes()

    def v1_huge_bean_flat(self) -> V1Item:
        return shapes.huge_flat_attributes()

    def tiny(self) -> dict[str, dict[str, Any]]:
        return self._wire(shapes.tiny_attributes)

    def small(self) -> dict[str, dict[str, Any]]:
        return self._wire(shapes.small_attributes)

    def huge(self) -> dict[str, dict[str, Any]]:
        return self._wire(shapes.huge_attributes)

    def huge_flat(self) -> dict[str, dict[str, Any]]:
        return self._wire(shapes.huge_flat_attributes)
