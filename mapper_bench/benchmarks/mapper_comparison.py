"""
Benchmarks comparing the old-generation and new-generation DynamoDB mappers.

The old generation is the boto3 resource layer (``Table.get_item`` /
``Table.put_item`` on plain dicts); the new generation is the enhanced
client mapping declarative beans. Both run over stub clients, so only the
mapping and SDK overhead is measured.

You can add new benchmarks at the bottom, the runner will pick them up automatically!
"""

import enum
from dataclasses import dataclass
from typing import Any, Optional

from mapper_bench.clients import SideEffectRecorder, V1StubDynamoDbClient, V2StubDynamoDbClient
from mapper_bench.enhanced import DynamoDbTable, EnhancedClient, Key, TableSchema
from mapper_bench.items import (
    HUGE_BEAN_FLAT_TABLE_SCHEMA,
    HUGE_BEAN_TABLE_SCHEMA,
    SMALL_BEAN_TABLE_SCHEMA,
    TINY_BEAN_TABLE_SCHEMA,
    V1ItemFactory,
    V2ItemFactory,
)
from mapper_bench.registry import BenchmarkRegistry
from mapper_bench.settings import FIXED_PARTITION_KEY

V2_ITEM_FACTORY = V2ItemFactory()
V1_ITEM_FACTORY = V1ItemFactory()

# Registry configuration
bench_registry = BenchmarkRegistry(group="mapper_comparison")


@dataclass(frozen=True, eq=False)
class ItemFixtures:
    """Everything both generations need to read and write one item shape."""

    # V2
    schema: TableSchema
    v2_response: dict[str, Any]
    v2_bean: Any

    # V1
    v1_key: dict[str, Any]
    v1_response: dict[str, Any]
    v1_bean: dict[str, Any]


class ItemCase(enum.Enum):
    """Item shapes every benchmark is run against."""

    TINY = ItemFixtures(
        TINY_BEAN_TABLE_SCHEMA,
        {"Item": V2_ITEM_FACTORY.tiny()},
        V2_ITEM_FACTORY.tiny_bean(),
        V1_ITEM_FACTORY.v1_key(),
        {"Item": V1_ITEM_FACTORY.tiny()},
        V1_ITEM_FACTORY.v1_tiny_bean(),
    )

    SMALL = ItemFixtures(
        SMALL_BEAN_TABLE_SCHEMA,
        {"Item": V2_ITEM_FACTORY.small()},
        V2_ITEM_FACTORY.small_bean(),
        V1_ITEM_FACTORY.v1_key(),
        {"Item": V1_ITEM_FACTORY.small()},
        V1_ITEM_FACTORY.v1_small_bean(),
    )

    HUGE = ItemFixtures(
        HUGE_BEAN_TABLE_SCHEMA,
        {"Item": V2_ITEM_FACTORY.huge()},
        V2_ITEM_FACTORY.huge_bean(),
        V1_ITEM_FACTORY.v1_key(),
        {"Item": V1_ITEM_FACTORY.huge()},
        V1_ITEM_FACTORY.v1_huge_bean(),
    )

    HUGE_FLAT = ItemFixtures(
        HUGE_BEAN_FLAT_TABLE_SCHEMA,
        {"Item": V2_ITEM_FACTORY.huge_flat()},
        V2_ITEM_FACTORY.huge_bean_flat(),
        V1_ITEM_FACTORY.v1_key(),
        {"Item": V1_ITEM_FACTORY.huge_flat()},
        V1_ITEM_FACTORY.v1_huge_bean_flat(),
    )

    @property
    def fixtures(self) -> ItemFixtures:
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_name(cls, name: str) -> "ItemCase":
        """Accepts ``HUGE_FLAT``, ``huge_flat`` or ``huge-flat``."""
        try:
            return cls[name.strip().upper().replace("-", "_")]
        except KeyError:
            valid = ", ".join(case.label for case in cls)
            raise ValueError(f"Unknown item case {name!r} (expected one of: {valid})") from None


class BenchmarkState:
    """Handles for one benchmark run against one item case."""

    key = Key(partition_value=FIXED_PARTITION_KEY)

    def __init__(self, item_case: ItemCase, recorder: Optional[SideEffectRecorder] = None):
        self.item_case = item_case
        self.recorder = recorder or SideEffectRecorder()
        self.v2_stub: Optional[V2StubDynamoDbClient] = None
        self.v2_table: Optional[DynamoDbTable] = None
        self.v1_stub: Optional[V1StubDynamoDbClient] = None
        self.v1_mapper: Any = None

    def setup(self) -> "BenchmarkState":
        fixtures = self.item_case.fixtures

        self.v2_stub = V2StubDynamoDbClient(self.recorder, fixtures.v2_response)
        v2_ddb_enh = EnhancedClient(self.v2_stub.client)
        self.v2_table = v2_ddb_enh.table(self.item_case.name, fixtures.schema)

        self.v1_stub = V1StubDynamoDbClient(self.recorder, fixtures.v1_response)
        self.v1_mapper = self.v1_stub.resource.Table(self.item_case.name)
        return self

    @classmethod
    def create(cls, item_case: ItemCase) -> "BenchmarkState":
        return cls(item_case).setup()


@bench_registry.benchmark(generation="v2", operation="get")
def v2_get(s: BenchmarkState) -> Any:
    """Point read through the enhanced client."""
    return s.v2_table.get_item(s.key)


@bench_registry.benchmark(generation="v1", operation="get")
def v1_get(s: BenchmarkState) -> Any:
    """Point read through the boto3 resource table."""
    return s.v1_mapper.get_item(Key=s.item_case.fixtures.v1_key).get("Item")


@bench_registry.benchmark(generation="v2", operation="put")
def v2_put(s: BenchmarkState) -> None:
    """Write of the sample bean through the enhanced client."""
    s.v2_table.put_item(s.item_case.fixtures.v2_bean)


@bench_registry.benchmark(generation="v1", operation="put")
def v1_put(s: BenchmarkState) -> None:
    """Write of the sample item dict through the boto3 resource table."""
    s.v1_mapper.put_item(Item=s.item_case.fixtures.v1_bean)
