"""Micro-benchmarks comparing two generations of DynamoDB object mappers."""

__version__ = "0.1.0"
