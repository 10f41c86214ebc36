# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Pytest configuration and fixtures for all tests.

This file ensures the project root is in the Python path
so that imports work correctly for all test modules.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import pytest for fixtures
import pytest
from fastapi.testclient import TestClient

from dashboard_service.config import Settings
from dashboard_service.main import create_app
from dashboard_service.store.memory import InMemoryStore


def activity_item(user_id, day, chat_lines=0, chat_messages=0, inline_lines=0, suggestions=0, acceptances=0):
    """Activity log item as stored."""
    return {
        "UserId": user_id,
        "Date": day,
        "Chat_AICodeLines": chat_lines,
        "Chat_MessagesInteracted": chat_messages,
        "Inline_AICodeLines": inline_lines,
        "Inline_SuggestionsCount": suggestions,
        "Inline_AcceptanceCount": acceptances,
    }


@pytest.fixture
def activity_items():
    """Three users over a week of January 2024."""
    return [
        activity_item("alice", "2024-01-01", chat_lines=6, chat_messages=5, inline_lines=4, suggestions=20, acceptances=15),
        activity_item("alice", "2024-01-02", chat_lines=10, chat_messages=8, inline_lines=5, suggestions=25, acceptances=20),
        activity_item("bob", "2024-01-02", chat_lines=3, chat_messages=2, inline_lines=2, suggestions=10, acceptances=5),
        activity_item("bob", "2024-01-05", chat_lines=7, chat_messages=6, inline_lines=5, suggestions=22, acceptances=16),
        activity_item("carol", "2024-01-08", chat_lines=1, chat_messages=1, inline_lines=0, suggestions=4, acceptances=1),
    ]


@pytest.fixture
def prompt_items():
    return [
        {
            "UserId": "alice",
            "TimeStamp": "2024-01-01T09:00:00Z",
            "Prompt": "Please debug this error in my function",
            "Response": "The error comes from an undefined variable.",
            "ChatTriggerType": "MANUAL",
        },
        {
            "UserId": "alice",
            "TimeStamp": {"S": "2024-01-01T09:03:00Z"},
            "Prompt": "Now write a unit test for it",
            "Response": "Here is a test using pytest.",
            "ChatTriggerType": "MANUAL",
        },
        {
            "UserId": "bob",
            "timeStamp": "2024-01-03T15:30:00Z",
            "Prompt": "Explain how does this API endpoint handle pagination?",
            "Response": "It uses a cursor.",
            "ChatTriggerType": "INLINE_CHAT",
        },
        {
            "UserId": "bob",
            "TimeStamp": "2024-01-10T08:00:00Z",
            "Prompt": "",
            "Response": "",
        },
    ]


@pytest.fixture
def subscription_items():
    return [
        {"SubscriptionId": "1", "SubscriptionStatus": "Active", "SubscriptionType": "Individual",
         "LastActivityDate": "2024-01-01"},
        {"SubscriptionId": "2", "SubscriptionStatus": "Pending", "SubscriptionType": "Group",
         "LastActivityDate": "2024-01-01"},
        {"SubscriptionId": "3", "SubscriptionStatus": "Active", "SubscriptionType": "Group",
         "LastActivityDate": "2024-01-02"},
        {"SubscriptionId": "4", "SubscriptionStatus": "Active", "SubscriptionType": "Group"},
    ]


@pytest.fixture
def memory_store(activity_items, prompt_items, subscription_items):
    return InMemoryStore(activity_items, prompt_items, subscription_items)


@pytest.fixture
def settings():
    return Settings(bypass_auth=True, log_level="WARNING")


@pytest.fixture
def client(settings, memory_store):
    """API client over the in-memory store with auth bypassed."""
    app = create_app(settings=settings, store=memory_store)
    with TestClient(app) as test_client:
        yield test_client
