"""
Content Guardian - Main Entry Point
Analyze social media URLs from the command line
"""

import os
import sys
import json
import asyncio
import argparse
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from guardian.config import config
from guardian.moderation import (
    ContentModerationPipeline,
    ImmediateScheduler,
    ModerationError,
    Notification,
    build_classifier,
)

STATUS_EMOJI = {"safe": "✅", "abusive": "🚨", "sexual": "🔞", "mixed": "⚠️"}


def print_notification(notification: Notification):
    marker = "❌" if notification.severity == "error" else "🔔"
    print(f"\n{marker} {notification.title}: {notification.description}")


def print_progress(progress: float, completed: int, total: int):
    bar = "█" * completed + "░" * (total - completed)
    print(f"\r   [{bar}] {progress:.0%}", end="", flush=True)
    if completed == total:
        print()


def print_result(result):
    emoji = STATUS_EMOJI.get(result.status, "❓")
    print(f"\n{'=' * 70}")
    print(f"URL: {result.url}")
    print(f"{'=' * 70}")
    print(f"{emoji} Status: {result.status.upper()}")
    print(f"   Platform: {result.platform}")
    print(f"   Confidence: {result.confidence}%")
    if result.threats:
        print(f"   Threats: {', '.join(result.threats)}")
    print(f"   Result ID: {result.id}")


def print_summary(pipeline: ContentModerationPipeline):
    stats = pipeline.stats
    print(f"\n{'=' * 70}")
    print("  SESSION SUMMARY")
    print(f"{'=' * 70}")
    print(f"  Total scanned:   {stats.total_scanned}")
    print(f"  Threats blocked: {stats.threats_blocked}")
    print(f"  Safe content:    {stats.safe_content}")
    print(f"  AI accuracy:     {stats.accuracy}%")

    blocklist = pipeline.blocklist
    if blocklist:
        print(f"\n🔒 Blocklist ({len(blocklist)}):")
        for item in blocklist:
            print(f"   [{item.severity.upper():8}] {item.platform:9} {item.url}  ({item.reason})")


async def run(args) -> int:
    seed = args.seed
    if seed is None and config.MOCK_SEED.strip():
        seed = int(config.MOCK_SEED)
    classifier = build_classifier(args.backend, seed=seed)
    pipeline = ContentModerationPipeline(
        classifier=classifier,
        scheduler=ImmediateScheduler() if args.no_delay else None,
    )

    if not args.json:
        pipeline.notifications.subscribe(print_notification)
        pipeline.add_progress_listener(print_progress)

    failures = 0
    for url in args.urls:
        try:
            result = await pipeline.submit(url)
        except ModerationError:
            # Already reported through the notification center
            failures += 1
            continue
        if not args.json:
            print_result(result)

    if args.json:
        print(json.dumps(pipeline.snapshot(), indent=2))
    else:
        print_summary(pipeline)

    return 1 if failures else 0


def main():
    """Main entry point for the CLI"""

    # Parse arguments
    parser = argparse.ArgumentParser(
        description="Content Guardian - Social media content moderation"
    )
    parser.add_argument(
        "urls",
        nargs="+",
        help="Social media URLs to analyze"
    )
    parser.add_argument(
        "--backend",
        choices=["mock", "llm"],
        default=config.CLASSIFIER_BACKEND,
        help="Classifier backend (default: CLASSIFIER_BACKEND or mock)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the mock classifier (default: MOCK_SEED)"
    )
    parser.add_argument(
        "--no-delay",
        action="store_true",
        help="Skip simulated stage delays"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final state snapshot as JSON"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.debug else getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    if args.json and not args.debug:
        log_level = logging.WARNING
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=log_level
    )
    logger = logging.getLogger(__name__)

    # Validate configuration
    missing = config.validate(backend=args.backend)
    if missing:
        logger.error(f"Configuration validation failed! Missing: {', '.join(missing)}")
        sys.exit(1)

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        logger.info("Stopped by user")


if __name__ == "__main__":
    main()
