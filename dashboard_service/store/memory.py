# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
In-memory record store.

Mirrors the DynamoDB scan filters (string BETWEEN on Date, exact UserId,
substring search on Prompt/Response) over plain lists. Used for local
development and tests.
"""

from typing import Any, Dict, List, Optional

from dashboard_service.store.base import RecordStore


class InMemoryStore(RecordStore):
    """Record store over lists of items."""

    def __init__(
        self,
        activity: Optional[List[Dict[str, Any]]] = None,
        prompts: Optional[List[Dict[str, Any]]] = None,
        subscriptions: Optional[List[Dict[str, Any]]] = None,
    ):
        self.activity = list(activity or [])
        self.prompts = list(prompts or [])
        self.subscriptions = list(subscriptions or [])

    def scan_activity(
        self,
        user_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        items = self.activity
        if start_date and end_date:
            items = [
                item for item in items
                if isinstance(item.get("Date"), str) and start_date <= item["Date"] <= end_date
            ]
        if user_id:
            items = [item for item in items if item.get("UserId") == user_id]
        return list(items)

    def scan_activity_dates(self, user_id: str) -> List[Dict[str, Any]]:
        return [
            {"Date": item["Date"]}
            for item in self.activity
            if item.get("UserId") == user_id and "Date" in item
        ]

    def list_user_ids(self) -> List[str]:
        return list(dict.fromkeys(item["UserId"] for item in self.activity if item.get("UserId")))

    def scan_prompts(
        self,
        user_id: Optional[str] = None,
        search_term: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        items = self.prompts
        if user_id:
            items = [item for item in items if item.get("UserId") == user_id]
        if search_term:
            items = [
                item for item in items
                if search_term in (item.get("Prompt") or "") or search_term in (item.get("Response") or "")
            ]
        return list(items)

    def scan_subscriptions(self) -> List[Dict[str, Any]]:
        return list(self.subscriptions)
