# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
Base record store interface

Defines how handlers fetch candidate records. Store-side filters are a
coarse first pass; handlers re-apply the exact date-range filter on the
results.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class RecordStore(ABC):
    """Abstract source of activity, prompt and subscription items."""

    # ==================== Activity Log ====================

    @abstractmethod
    def scan_activity(
        self,
        user_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Activity items, optionally restricted to a user and a Date string range."""
        pass

    @abstractmethod
    def scan_activity_dates(self, user_id: str) -> List[Dict[str, Any]]:
        """Only the Date attribute of every activity item for a user."""
        pass

    @abstractmethod
    def list_user_ids(self) -> List[str]:
        """Distinct user IDs present in the activity log."""
        pass

    # ==================== Prompt Log ====================

    @abstractmethod
    def scan_prompts(
        self,
        user_id: Optional[str] = None,
        search_term: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Prompt items, optionally restricted to a user or a search term."""
        pass

    # ==================== Subscriptions ====================

    @abstractmethod
    def scan_subscriptions(self) -> List[Dict[str, Any]]:
        """All subscription items."""
        pass
