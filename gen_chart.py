#!/usr/bin/env python3
"""
Chart generation script

Renders a neon price chart for a token from stored OHLCV data. Without a
token argument it lists the tokens that have data.
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

from ohlcv_chart.chart_config import ChartStyleConfig
from ohlcv_chart.data import create_series_repository, resolve_token_address, token_symbol
from ohlcv_chart.data.repository import SeriesRepository
from ohlcv_chart.exceptions import ChartError, PipelineError, ValidationError
from ohlcv_chart.models import ChartRequest, PipelineOptions, Point
from ohlcv_chart.pipeline import ChartPipeline
from ohlcv_chart.settings import Settings
from ohlcv_chart.storage import create_uploader

logger = logging.getLogger(__name__)


def setup_logging(level: str = 'INFO'):
    """Configure logging for the script"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )

    # Suppress verbose logs from external libraries
    for name in ('botocore', 'boto3', 'urllib3', 'matplotlib', 'PIL'):
        logging.getLogger(name).setLevel(logging.WARNING)


def calculate_mock_entry_price(points: Sequence[Point],
                               rng: Optional[random.Random] = None) -> Tuple[float, bool]:
    """
    Pick a plausible entry price for a demo chart.

    The entry lies between 30% and 70% of the observed price range, and the
    position counts as bullish when the last price is above it.

    Returns:
        (entry_price, is_bullish)
    """
    if not points:
        return 1.0, True

    rng = rng or random.Random()
    prices = [p.y for p in points]
    min_price, max_price = min(prices), max(prices)

    entry_ratio = 0.3 + rng.random() * 0.4
    entry_price = round(min_price + (max_price - min_price) * entry_ratio, 6)
    is_bullish = points[-1].y > entry_price

    logger.debug(f"Calculated mock entry price: {entry_price:.6f} "
                 f"(range: {min_price:.6f} - {max_price:.6f})")
    return entry_price, is_bullish


def list_available_tokens(repository: SeriesRepository, min_data_points: int) -> List[str]:
    """Print every token with data, its point count and whether it can be charted"""
    tokens = repository.list_tokens()
    print("\n🪙 Available tokens:")

    if not tokens:
        print("  No tokens found with OHLCV data")
        return tokens

    for address in tokens:
        try:
            stats = repository.count_and_latest(address)
        except Exception as e:
            logger.debug(f"Validation lookup failed for {address}: {e}")
            print(f"  {token_symbol(address)} - {address} (❌ error)")
            continue
        status = "✅" if stats.count >= min_data_points else "❌"
        print(f"  {token_symbol(address)} - {address} ({status} {stats.count} points)")

    print(f"\nTotal: {len(tokens)} tokens available")
    return tokens


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Neon OHLCV Chart Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List available tokens
  python gen_chart.py

  # JUP chart over the last 24 hours with a mock entry price
  python gen_chart.py JUP

  # BONK over 12 hours, explicit short position, custom output
  python gen_chart.py BONK 12 --entry-price 0.000021 --bearish --output ./data/bonk.png

  # Upload to S3 and skip axis labels
  python gen_chart.py JUP 48 --upload --no-axes
        """
    )

    parser.add_argument('token', nargs='?',
                        help='Token symbol (JUP, BONK) or address')
    parser.add_argument('hours', nargs='?', type=float, default=None,
                        help='Period in hours (default: 24)')

    parser.add_argument('--entry-price', type=float, default=None,
                        help='Entry price (default: mock price from the data range)')
    direction = parser.add_mutually_exclusive_group()
    direction.add_argument('--bullish', dest='is_bullish', action='store_const', const=True,
                           help='Force the bullish theme')
    direction.add_argument('--bearish', dest='is_bullish', action='store_const', const=False,
                           help='Force the bearish theme')

    parser.add_argument('--width', type=int, default=None, help='Canvas width (default: 800)')
    parser.add_argument('--height', type=int, default=None, help='Canvas height (default: 360)')
    parser.add_argument('--dpr', type=float, default=None, help='Device pixel ratio (default: 1.5)')
    parser.add_argument('--output', default=None,
                        help='Output path (default: <output dir>/chart-<token>.png)')
    parser.add_argument('--upload', action='store_true', default=False,
                        help='Upload the chart to object storage')
    parser.add_argument('--no-axes', action='store_true', default=False,
                        help='Render without price and time labels')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for the mock entry price')
    parser.add_argument('--source', default=None, choices=['csv', 'dynamodb', 'memory'],
                        help='OHLCV data source (default: OHLCV_SOURCE or csv)')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: INFO)')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()

    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    settings = Settings(ohlcv_source=args.source)
    repository = create_series_repository(settings)

    print("📊 Chart Generation Script Started")

    if not args.token:
        list_available_tokens(repository, settings.min_data_points)
        print("\n💡 Please specify a token symbol to generate a chart")
        return 0

    token_address = resolve_token_address(args.token, repository)
    if token_address is None:
        print(f"❌ Unknown token: {args.token}")
        print("\n💡 To see available tokens, run the script without arguments")
        return 1

    symbol = token_symbol(token_address)
    period_hours = args.hours
    if period_hours is None:
        period_hours = ChartStyleConfig.CHART_DEFAULTS['period_hours']
    elif period_hours <= 0:
        print(f"❌ Period must be a positive number of hours, got {period_hours:g}")
        return 1
    print(f"🎯 Selected token: {symbol} ({token_address})")

    entry_price = args.entry_price
    is_bullish = args.is_bullish
    if entry_price is None or is_bullish is None:
        try:
            points = repository.fetch_series(token_address, period_hours, settings.interval_minutes)
        except (ChartError, BotoCoreError, ClientError) as e:
            print(f"❌ Failed to fetch OHLCV data: {e}")
            return 1
        if not points:
            print(f"❌ No OHLCV data retrieved for token {symbol}")
            return 1

        if entry_price is None:
            mock_entry, mock_bullish = calculate_mock_entry_price(points, random.Random(args.seed))
            entry_price = mock_entry
            if is_bullish is None:
                is_bullish = mock_bullish
            print(f"💰 Using mock entry price: ${entry_price}, "
                  f"position: {'Long' if is_bullish else 'Short'}")
        else:
            is_bullish = points[-1].y > entry_price

    payload = {
        'tokenAddress': token_address,
        'entryPrice': entry_price,
        'isBullish': is_bullish,
        'periodHours': period_hours,
        'width': args.width,
        'height': args.height,
        'dpr': args.dpr,
    }
    try:
        request = ChartRequest.from_payload(payload)
    except ValidationError as e:
        print(f"❌ Invalid arguments: {e}")
        return 1

    output_path = args.output or str(Path(settings.output_dir) / f"chart-{symbol.lower()}.png")
    options = PipelineOptions(include_axes=not args.no_axes,
                              persist_locally=True,
                              persist_remotely=args.upload)
    uploader = create_uploader(settings) if args.upload else None
    pipeline = ChartPipeline(repository, uploader=uploader, options=options, settings=settings)

    try:
        result = pipeline.generate(request, output_path=output_path, symbol=symbol)
    except PipelineError as e:
        print(f"❌ Script failed: {e.message}")
        return 1

    print(f"✅ Chart generated: {result.local_path}")
    if result.upload is not None:
        if result.upload.success:
            print(f"☁️  Uploaded: {result.upload.url}")
        else:
            print(f"⚠️  Upload failed: {result.upload.error}")

    metrics = result.metrics
    print(f"   Points: {metrics.points_raw} raw, {metrics.points_downsampled} rendered")
    print(f"   Size: {metrics.size}, {metrics.output_bytes} bytes")
    return 0


if __name__ == '__main__':
    sys.exit(main())
