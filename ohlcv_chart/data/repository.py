"""
Series repositories for reading close-price series per token.
Provides a unified interface over CSV files, DynamoDB and in-memory data.
"""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from ..chart_config import ChartStyleConfig
from ..exceptions import DataIntegrityError
from ..models import Point, SeriesStats

logger = logging.getLogger(__name__)

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_MINUTE = 60 * 1000

# Columns of a normalized series frame: t in milliseconds, close price
FRAME_COLUMNS = ['t', 'close']


def empty_frame() -> pd.DataFrame:
    return pd.DataFrame({'t': pd.Series(dtype='int64'), 'close': pd.Series(dtype='float64')})


class SeriesRepository(ABC):
    """Abstract base class for close-price series storage."""

    def __init__(self, max_query_limit: Optional[int] = None):
        self.max_query_limit = max_query_limit or ChartStyleConfig.CHART_DEFAULTS['max_query_limit']

    @abstractmethod
    def count_points(self, token_id: str) -> int:
        """Number of stored points for a token."""
        pass

    @abstractmethod
    def latest_point(self, token_id: str) -> Optional[Point]:
        """Most recent stored point for a token, None if there is none."""
        pass

    @abstractmethod
    def list_tokens(self) -> List[str]:
        """All token identifiers with stored data."""
        pass

    @abstractmethod
    def _query_range(self, token_id: str, start_ms: int, end_ms: int) -> pd.DataFrame:
        """
        Rows with start_ms <= t <= end_ms.

        Returns:
            DataFrame with FRAME_COLUMNS, ascending by t, at most max_query_limit rows
        """
        pass

    def fetch_series(self, token_id: str, window_hours: float,
                     interval_minutes: int = 1) -> List[Point]:
        """
        Fetch the close-price series for a token.

        The window ends at the token's latest stored timestamp, not at the
        current time, so stale datasets still produce a full chart.

        Args:
            token_id: Token identifier
            window_hours: Length of the window in hours
            interval_minutes: Resample to the last close per interval when > 1

        Returns:
            Points ordered by ascending timestamp (empty if the token has no data)
        """
        latest = self.latest_point(token_id)
        if latest is None:
            logger.warning(f"No data found for token {token_id}")
            return []

        end_ms = latest.t
        start_ms = end_ms - int(window_hours * MS_PER_HOUR)
        logger.info(f"Fetching series for {token_id}, period: {window_hours}h, "
                    f"ending at {datetime.fromtimestamp(end_ms / 1000, tz=timezone.utc).isoformat()}")

        frame = self._query_range(token_id, start_ms, end_ms)
        frame = frame.head(self.max_query_limit)

        if interval_minutes and interval_minutes > 1:
            frame = self._apply_interval(frame, interval_minutes)

        points = [Point(t=int(t), y=float(close)) for t, close in zip(frame['t'], frame['close'])]
        logger.info(f"Fetched {len(points)} points for {token_id}")
        return points

    def count_and_latest(self, token_id: str) -> SeriesStats:
        """
        Run the count and latest point lookups concurrently.

        Returns:
            SeriesStats with the point count and latest timestamp (UTC)
        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            count_future = executor.submit(self.count_points, token_id)
            latest_future = executor.submit(self.latest_point, token_id)
            count = count_future.result()
            latest = latest_future.result()

        latest_timestamp = None
        if latest is not None:
            latest_timestamp = datetime.fromtimestamp(latest.t / 1000, tz=timezone.utc)

        logger.debug(f"Token {token_id}: {count} points, latest: {latest_timestamp}")
        return SeriesStats(count=count, latest_timestamp=latest_timestamp)

    @staticmethod
    def _apply_interval(frame: pd.DataFrame, interval_minutes: int) -> pd.DataFrame:
        """Resample to the last close of each interval, labelled by interval start"""
        if frame.empty:
            return frame

        step = interval_minutes * MS_PER_MINUTE
        buckets = (frame['t'] // step) * step
        # Plain last row per bucket; GroupBy.last() would skip NaN closes
        resampled = frame.groupby(buckets, sort=True)['close'].agg(lambda closes: closes.iloc[-1])

        return pd.DataFrame({'t': resampled.index.astype('int64'), 'close': resampled.values})


class InMemorySeriesRepository(SeriesRepository):
    """Repository backed by point sequences held in memory."""

    def __init__(self, series: Optional[Dict[str, Sequence[Point]]] = None,
                 max_query_limit: Optional[int] = None):
        super().__init__(max_query_limit)
        self._frames: Dict[str, pd.DataFrame] = {}
        for token_id, points in (series or {}).items():
            self.add_series(token_id, points)

    def add_series(self, token_id: str, points: Sequence[Point]):
        """Store (or replace) the series for a token."""
        frame = pd.DataFrame({
            't': pd.Series([p.t for p in points], dtype='int64'),
            'close': pd.Series([p.y for p in points], dtype='float64'),
        })
        self._frames[token_id] = frame.sort_values('t', kind='stable').reset_index(drop=True)

    def count_points(self, token_id: str) -> int:
        frame = self._frames.get(token_id)
        return 0 if frame is None else len(frame)

    def latest_point(self, token_id: str) -> Optional[Point]:
        frame = self._frames.get(token_id)
        if frame is None or frame.empty:
            return None
        row = frame.iloc[-1]
        return Point(t=int(row['t']), y=float(row['close']))

    def list_tokens(self) -> List[str]:
        return sorted(self._frames)

    def _query_range(self, token_id: str, start_ms: int, end_ms: int) -> pd.DataFrame:
        frame = self._frames.get(token_id)
        if frame is None:
            return empty_frame()
        mask = (frame['t'] >= start_ms) & (frame['t'] <= end_ms)
        return frame.loc[mask, FRAME_COLUMNS].head(self.max_query_limit).reset_index(drop=True)


class CsvSeriesRepository(SeriesRepository):
    """
    Repository reading one <token>.csv file per token.

    Files carry the columns timestamp (seconds), open, high, low, close and
    volume. Only timestamp and close are used.
    """

    def __init__(self, csv_dir: Union[str, Path], max_query_limit: Optional[int] = None):
        super().__init__(max_query_limit)
        self.csv_dir = Path(csv_dir)
        logger.info(f"CsvSeriesRepository initialized: {self.csv_dir}")

    def _get_path(self, token_id: str) -> Path:
        return self.csv_dir / f"{token_id}.csv"

    def _load_frame(self, token_id: str) -> pd.DataFrame:
        """Load a token file as a normalized frame sorted by t"""
        path = self._get_path(token_id)
        if not path.exists():
            logger.debug(f"No CSV file for token {token_id}: {path}")
            return empty_frame()

        try:
            raw = pd.read_csv(path, usecols=['timestamp', 'close'])
            frame = pd.DataFrame({
                't': raw['timestamp'].astype('int64') * 1000,
                'close': pd.to_numeric(raw['close'], errors='coerce').astype('float64'),
            })
        except (ValueError, TypeError) as e:
            raise DataIntegrityError(f"Malformed OHLCV file {path.name}", errors=[str(e)]) from e

        return frame.sort_values('t', kind='stable').reset_index(drop=True)

    def count_points(self, token_id: str) -> int:
        return len(self._load_frame(token_id))

    def latest_point(self, token_id: str) -> Optional[Point]:
        frame = self._load_frame(token_id)
        if frame.empty:
            return None
        row = frame.iloc[-1]
        return Point(t=int(row['t']), y=float(row['close']))

    def list_tokens(self) -> List[str]:
        if not self.csv_dir.is_dir():
            logger.warning(f"CSV directory not found: {self.csv_dir}")
            return []
        return sorted(path.stem for path in self.csv_dir.glob('*.csv'))

    def _query_range(self, token_id: str, start_ms: int, end_ms: int) -> pd.DataFrame:
        frame = self._load_frame(token_id)
        mask = (frame['t'] >= start_ms) & (frame['t'] <= end_ms)
        return frame.loc[mask, FRAME_COLUMNS].head(self.max_query_limit).reset_index(drop=True)


def resolve_token_address(token_input: str, repository: SeriesRepository) -> Optional[str]:
    """
    Resolve a symbol or address to a token address.

    Known symbols (JUP, BONK) match case-insensitively. Anything else must be
    an address the repository has data for.

    Returns:
        Token address, or None if the input is unknown
    """
    known = ChartStyleConfig.get_known_tokens()
    symbol = token_input.strip().upper()
    if symbol in known:
        return known[symbol]

    if token_input in repository.list_tokens():
        return token_input

    logger.debug(f"Could not resolve token: {token_input}")
    return None


def token_symbol(address: str) -> str:
    """Display symbol for an address: the known symbol or a shortened address"""
    for symbol, known_address in ChartStyleConfig.get_known_tokens().items():
        if known_address == address:
            return symbol
    return address if len(address) <= 10 else f"{address[:4]}...{address[-4:]}"
