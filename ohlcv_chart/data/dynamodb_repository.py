#!/usr/bin/env python3
"""
DynamoDB Series Repository

Reads close-price series from a DynamoDB table keyed by token (partition key)
and timestamp in seconds (sort key).
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
import pandas as pd
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError, BotoCoreError

from ..models import Point
from .repository import SeriesRepository, empty_frame

logger = logging.getLogger(__name__)


def convert_decimal_to_number(obj: Any) -> Any:
    """
    Convert DynamoDB Decimal types to Python int/float

    Args:
        obj: Object to convert

    Returns:
        Converted object
    """
    if isinstance(obj, list):
        return [convert_decimal_to_number(item) for item in obj]
    elif isinstance(obj, dict):
        return {k: convert_decimal_to_number(v) for k, v in obj.items()}
    elif isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj


class DynamoDBSeriesRepository(SeriesRepository):
    """Series repository backed by a DynamoDB OHLCV table"""

    PARTITION_KEY = 'token'
    SORT_KEY = 'timestamp'

    def __init__(self, table_name: str, region_name: str = 'us-east-1',
                 table: Any = None, max_query_limit: Optional[int] = None):
        """
        Initialize DynamoDB repository

        Args:
            table_name: DynamoDB table name
            region_name: AWS region
            table: Pre-built Table resource (a new one is created if None)
            max_query_limit: Maximum rows returned by a single fetch
        """
        super().__init__(max_query_limit)
        self.table_name = table_name
        self.region_name = region_name

        if table is not None:
            self.table = table
        else:
            try:
                self.table = boto3.resource('dynamodb', region_name=region_name).Table(table_name)
                logger.info(f"Connected to DynamoDB table: {table_name} in region {region_name}")
            except (ClientError, BotoCoreError) as e:
                logger.error(f"Failed to connect to DynamoDB: {e}")
                raise

    def _token_condition(self, token_id: str):
        return Key(self.PARTITION_KEY).eq(token_id)

    def count_points(self, token_id: str) -> int:
        query_kwargs: Dict[str, Any] = {
            'KeyConditionExpression': self._token_condition(token_id),
            'Select': 'COUNT',
        }

        response = self.table.query(**query_kwargs)
        total = response.get('Count', 0)

        # COUNT queries are paginated like item queries
        while 'LastEvaluatedKey' in response:
            query_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']
            response = self.table.query(**query_kwargs)
            total += response.get('Count', 0)

        return int(total)

    def latest_point(self, token_id: str) -> Optional[Point]:
        response = self.table.query(
            KeyConditionExpression=self._token_condition(token_id),
            ScanIndexForward=False,
            Limit=1,
        )
        items = response.get('Items', [])
        if not items:
            return None
        return self._item_to_point(items[0])

    def list_tokens(self) -> List[str]:
        tokens = set()
        scan_kwargs: Dict[str, Any] = {
            'ProjectionExpression': '#tk',
            'ExpressionAttributeNames': {'#tk': self.PARTITION_KEY},
        }

        try:
            response = self.table.scan(**scan_kwargs)
            tokens.update(item[self.PARTITION_KEY] for item in response.get('Items', []))

            while 'LastEvaluatedKey' in response:
                scan_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']
                response = self.table.scan(**scan_kwargs)
                tokens.update(item[self.PARTITION_KEY] for item in response.get('Items', []))
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list tokens: {e}")
            return []

        logger.debug(f"Found {len(tokens)} tokens with OHLCV data")
        return sorted(tokens)

    def _query_range(self, token_id: str, start_ms: int, end_ms: int) -> pd.DataFrame:
        # Sort key is stored in seconds
        start_s = start_ms // 1000
        end_s = end_ms // 1000

        query_kwargs: Dict[str, Any] = {
            'KeyConditionExpression': self._token_condition(token_id)
            & Key(self.SORT_KEY).between(start_s, end_s),
            'ScanIndexForward': True,
        }

        items: List[Dict[str, Any]] = []
        response = self.table.query(**query_kwargs)
        items.extend(response.get('Items', []))

        while 'LastEvaluatedKey' in response and len(items) < self.max_query_limit:
            query_kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']
            response = self.table.query(**query_kwargs)
            items.extend(response.get('Items', []))

        if not items:
            return empty_frame()

        points = [self._item_to_point(item) for item in items[:self.max_query_limit]]
        return pd.DataFrame({
            't': pd.Series([p.t for p in points], dtype='int64'),
            'close': pd.Series([p.y for p in points], dtype='float64'),
        })

    def _item_to_point(self, item: Dict[str, Any]) -> Point:
        item = convert_decimal_to_number(item)
        return Point(t=int(item[self.SORT_KEY]) * 1000, y=float(item['close']))
