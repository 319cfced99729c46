"""Ethereum JSON-RPC data types (blocks, transactions, logs, traces and more) with JSON encoding and decoding."""

__version__ = "0.1.0"