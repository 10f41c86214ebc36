# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

# Record stores
from .base import RecordStore
from .dynamodb import DynamoDBStore
from .memory import InMemoryStore

__all__ = [
    'RecordStore',
    'DynamoDBStore',
    'InMemoryStore',
]
