"""
Tests for the Fee Adapters package.

This package contains tests for:
- Distribution splitting and validation
- Fixed-point normalization
- Balance-diff and subgraph-bucket strategies
- Adapter registry
- Default transports and configuration
- Registered protocols
"""
