"""Default configuration for benchmark runs."""

from dataclasses import dataclass

# Stub clients never talk to AWS, but botocore still needs a region and
# credentials to build a client without walking the credential chain.
DEFAULT_REGION = "us-east-1"
STUB_ACCESS_KEY_ID = "stub-access-key"
STUB_SECRET_ACCESS_KEY = "stub-secret-key"

# Partition key value used by every new-generation read.
FIXED_PARTITION_KEY = "key"

# Default location of the benchmark module the runner hands to pytest.
BENCHMARK_MODULE = "tests/benchmarks/test_mapper_comparison.py"
BENCHMARK_TEST_NAME = "test_mapper_benchmark"


@dataclass(frozen=True)
class RunSettings:
    """How many times and for how long each benchmark is measured."""

    forks: int = 2
    warmup_iterations: int = 10000
    min_rounds: int = 5
    max_time: float = 1.0
    timeout: int = 300
