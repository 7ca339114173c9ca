"""Deterministic attribute data for each benchmarked item shape.

Every shape is generated from its own fixed seed, so repeated calls return
equal data and both mapper generations are fed the same logical item.
Attributes are keyed by their wire (DynamoDB attribute) names.
"""

import random
import string
from typing import Any

HASH_KEY_VALUE = "hashKey"

SMALL_SEED = 2
HUGE_SEED = 3
HUGE_FLAT_SEED = 4

HUGE_FLAT_ATTRIBUTE_COUNT = 63
NESTED_MAP_ATTRIBUTES = ("mapAttr1", "mapAttr2", "mapAttr3")


class ShapeGenerator:
    """Seeded source of random strings, blobs and collections."""

    def __init__(self, seed: int):
        self._random = random.Random(seed)

    def string(self, length: int = 20) -> str:
        return "".join(self._random.choice(string.ascii_letters + string.digits) for _ in range(length))

    def binary(self, length: int = 32) -> bytes:
        return bytes(self._random.getrandbits(8) for _ in range(length))

    def integer(self, upper: int = 1_000_000) -> int:
        return self._random.randint(0, upper)

    def string_list(self, size: int) -> list[str]:
        return [self.string() for _ in range(size)]

    def string_map(self, size: int) -> dict[str, str]:
        return {f"key{i}": self.string() for i in range(1, size + 1)}

    def nested(self) -> dict[str, Any]:
        return {
            "stringAttr": self.string(),
            "intAttr": self.integer(),
            "listAttr": self.string_list(3),
            "mapAttr": self.string_map(3),
        }


def tiny_attributes() -> dict[str, Any]:
    return {"hashKey": HASH_KEY_VALUE}


def small_attributes() -> dict[str, Any]:
    gen = ShapeGenerator(SMALL_SEED)
    return {
        "hashKey": HASH_KEY_VALUE,
        "stringAttr": gen.string(),
        "binaryAttr": gen.binary(),
        "listAttr": gen.string_list(3),
    }


def huge_attributes() -> dict[str, Any]:
    gen = ShapeGenerator(HUGE_SEED)
    attributes = {
        "hashKey": HASH_KEY_VALUE,
        "stringAttr": gen.string(),
        "binaryAttr": gen.binary(256),
        "intAttr": gen.integer(),
        "listAttr": gen.string_list(10),
        "hashMapAttr1": gen.string_map(10),
    }
    for name in NESTED_MAP_ATTRIBUTES:
        attributes[name] = {f"nested{i}": gen.nested() for i in range(1, 6)}
    return attributes


def huge_flat_attributes() -> dict[str, Any]:
    gen = ShapeGenerator(HUGE_FLAT_SEED)
    attributes = {"hashKey": HASH_KEY_VALUE}
    for i in range(1, HUGE_FLAT_ATTRIBUTE_COUNT + 1):
        attributes[f"stringAttr{i}"] = gen.string()
    return attributes
