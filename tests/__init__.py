"""
Test suite for the fee_adapters package.
"""
