"""Item shapes and factories for both mapper generations."""

from .schema import Base, HugeBean, HugeBeanFlat, SmallBean, TinyBean
from .v1_factory import V1ItemFactory
from .v2_factory import (
    HUGE_BEAN_FLAT_TABLE_SCHEMA,
    HUGE_BEAN_TABLE_SCHEMA,
    SMALL_BEAN_TABLE_SCHEMA,
    TINY_BEAN_TABLE_SCHEMA,
    V2ItemFactory,
)

__all__ = [
    "Base",
    "TinyBean",
    "SmallBean",
    "HugeBean",
    "HugeBeanFlat",
    "V1ItemFactory",
    "V2ItemFactory",
    "TINY_BEAN_TABLE_SCHEMA",
    "SMALL_BEAN_TABLE_SCHEMA",
    "HUGE_BEAN_TABLE_SCHEMA",
    "HUGE_BEAN_FLAT_TABLE_SCHEMA",
]
