"""Stub DynamoDB clients for the benchmark.

Both stubs hook botocore's ``before-call`` event on a real DynamoDB client.
Request parameters are still validated and serialized by botocore, but the
call is answered locally: reads get a copy of a canned response and writes
are accepted without effect. Nothing is ever sent over the network.
"""

import copy
from typing import Any, Optional

import boto3
from botocore.awsrequest import AWSResponse

from ..settings import DEFAULT_REGION, STUB_ACCESS_KEY_ID, STUB_SECRET_ACCESS_KEY

READ_OPERATIONS = frozenset({"GetItem"})
WRITE_OPERATIONS = frozenset({"PutItem", "UpdateItem", "DeleteItem"})


class StubOperationError(RuntimeError):
    """Raised when a stub client receives an operation it cannot answer."""


class SideEffectRecorder:
    """Consumes every request a stub receives so no call is free of effects."""

    def __init__(self):
        self.calls: dict[str, int] = {}
        self.last_request: Optional[dict[str, Any]] = None

    def consume(self, operation_name: str, request: dict[str, Any]) -> None:
        self.calls[operation_name] = self.calls.get(operation_name, 0) + 1
        self.last_request = request

    def count(self, operation_name: str) -> int:
        return self.calls.get(operation_name, 0)


def stub_session() -> boto3.Session:
    """Session with static credentials, so no credential provider is consulted."""
    return boto3.Session(
        aws_access_key_id=STUB_ACCESS_KEY_ID,
        aws_secret_access_key=STUB_SECRET_ACCESS_KEY,
        region_name=DEFAULT_REGION,
    )


class StubDynamoDbClient:
    """Answers DynamoDB calls made through ``client`` from a canned response."""

    def __init__(self, recorder: SideEffectRecorder, get_item_response: dict[str, Any], client: Any):
        self.recorder = recorder
        self.get_item_response = get_item_response
        self.read_count = 0
        self.write_count = 0
        self.client = client
        client.meta.events.register("before-call.dynamodb.*", self._answer)

    def _answer(self, model, params, **kwargs):
        operation_name = model.name
        self.recorder.consume(operation_name, params)
        if operation_name in READ_OPERATIONS:
            self.read_count += 1
            # The resource layer deserializes responses in place.
            parsed = copy.deepcopy(self.get_item_response)
        elif operation_name in WRITE_OPERATIONS:
            self.write_count += 1
            parsed = {}
        else:
            raise StubOperationError(f"Stub DynamoDB client does not support {operation_name}")
        return AWSResponse(None, 200, {}, None), parsed


class V2StubDynamoDbClient(StubDynamoDbClient):
    """Stubbed low-level client, as consumed by the enhanced client."""

    def __init__(self, recorder: SideEffectRecorder, get_item_response: dict[str, Any]):
        super().__init__(recorder, get_item_response, stub_session().client("dynamodb"))


class V1StubDynamoDbClient(StubDynamoDbClient):
    """Stubbed boto3 DynamoDB resource, as consumed by the old-generation mapper."""

    def __init__(self, recorder: SideEffectRecorder, get_item_result: dict[str, Any]):
        self.resource = stub_session().resource("dynamodb")
        super().__init__(recorder, get_item_result, self.resource.meta.client)
