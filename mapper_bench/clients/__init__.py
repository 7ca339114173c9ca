"""Stub DynamoDB clients used by the benchmarks."""

from .stub import (
    SideEffectRecorder,
    StubDynamoDbClient,
    StubOperationError,
    V1StubDynamoDbClient,
    V2StubDynamoDbClient,
    stub_session,
)

__all__ = [
    "SideEffectRecorder",
    "StubDynamoDbClient",
    "StubOperationError",
    "V1StubDynamoDbClient",
    "V2StubDynamoDbClient",
    "stub_session",
]
