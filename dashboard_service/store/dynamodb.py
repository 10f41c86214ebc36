# Copyright (c) 2025 Bytedance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""
DynamoDB record store.

Scans the activity, prompt and subscription tables with boto3, following
LastEvaluatedKey until each scan is exhausted.
"""

import logging
from decimal import Decimal
from functools import reduce
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr

from dashboard_service.config import Settings
from dashboard_service.store.base import RecordStore

logger = logging.getLogger(__name__)


def from_dynamo(value: Any) -> Any:
    """Convert boto3 Decimals (recursively) into int or float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {key: from_dynamo(item) for key, item in value.items()}
    if isinstance(value, list):
        return [from_dynamo(item) for item in value]
    return value


def _combine(conditions: List[Any]) -> Optional[Any]:
    if not conditions:
        return None
    return reduce(lambda left, right: left & right, conditions)


class DynamoDBStore(RecordStore):
    """Record store backed by DynamoDB tables."""

    def __init__(self, settings: Settings, resource: Any = None):
        """
        Initialize the store.

        Args:
            settings: Service settings naming the tables and AWS region
            resource: Optional pre-built boto3 DynamoDB resource
        """
        self.settings = settings
        if resource is None:
            kwargs: Dict[str, Any] = {"region_name": settings.aws_region}
            if settings.aws_access_key_id and settings.aws_secret_access_key:
                kwargs["aws_access_key_id"] = settings.aws_access_key_id
                kwargs["aws_secret_access_key"] = settings.aws_secret_access_key
            if settings.dynamodb_endpoint_url:
                kwargs["endpoint_url"] = settings.dynamodb_endpoint_url
            resource = boto3.resource("dynamodb", **kwargs)
            logger.info(f"[DynamoDBStore] Initialized for region {settings.aws_region}")
        self._resource = resource

    def _scan(self, table_name: str, **params: Any) -> List[Dict[str, Any]]:
        """Run a full paginated scan and return every item."""
        table = self._resource.Table(table_name)
        params = {key: value for key, value in params.items() if value is not None}

        items: List[Dict[str, Any]] = []
        pages = 0
        while True:
            response = table.scan(**params)
            items.extend(from_dynamo(item) for item in response.get("Items", []))
            pages += 1
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            params["ExclusiveStartKey"] = last_key

        logger.debug(f"[DynamoDBStore] Scanned {table_name}: {len(items)} items in {pages} page(s)")
        return items

    # ==================== Activity Log ====================

    def scan_activity(
        self,
        user_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        conditions = []
        if start_date and end_date:
            conditions.append(Attr("Date").between(start_date, end_date))
        if user_id:
            conditions.append(Attr("UserId").eq(user_id))

        return self._scan(
            self.settings.dynamodb_user_activity_log_table,
            FilterExpression=_combine(conditions),
        )

    def scan_activity_dates(self, user_id: str) -> List[Dict[str, Any]]:
        return self._scan(
            self.settings.dynamodb_user_activity_log_table,
            FilterExpression=Attr("UserId").eq(user_id),
            ProjectionExpression="#date",
            ExpressionAttributeNames={"#date": "Date"},
        )

    def list_user_ids(self) -> List[str]:
        items = self._scan(
            self.settings.dynamodb_user_activity_log_table,
            ProjectionExpression="UserId",
        )
        # Preserve first-seen order
        return list(dict.fromkeys(item["UserId"] for item in items if item.get("UserId")))

    # ==================== Prompt Log ====================

    def scan_prompts(
        self,
        user_id: Optional[str] = None,
        search_term: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        conditions = []
        if user_id:
            conditions.append(Attr("UserId").eq(user_id))
        if search_term:
            conditions.append(Attr("Prompt").contains(search_term) | Attr("Response").contains(search_term))

        return self._scan(
            self.settings.dynamodb_prompt_log_table,
            FilterExpression=_combine(conditions),
        )

    # ==================== Subscriptions ====================

    def scan_subscriptions(self) -> List[Dict[str, Any]]:
        return self._scan(self.settings.dynamodb_subscription_table)
