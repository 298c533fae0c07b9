"""
Run Content Guardian Dashboard
"""

import sys
import argparse
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from guardian.config import config
from guardian.dashboard import run_dashboard
from guardian.moderation import ContentModerationPipeline, ImmediateScheduler


def main():
    parser = argparse.ArgumentParser(description="Content Guardian Dashboard")
    parser.add_argument(
        "--host",
        type=str,
        default=config.DASHBOARD_HOST,
        help=f"Host to bind (default: {config.DASHBOARD_HOST})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.DASHBOARD_PORT,
        help=f"Port to bind (default: {config.DASHBOARD_PORT})"
    )
    parser.add_argument(
        "--no-delay",
        action="store_true",
        help="Skip simulated stage delays"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode"
    )

    args = parser.parse_args()

    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=logging.DEBUG if args.debug else logging.INFO
    )

    missing = config.validate()
    if missing:
        logging.getLogger(__name__).error(f"Configuration validation failed! Missing: {', '.join(missing)}")
        sys.exit(1)

    print("""
╔══════════════════════════════════════════════════════════════╗
║                                                              ║
║              Content Guardian Dashboard                      ║
║              Social Media Content Moderation                 ║
║                                                              ║
╚══════════════════════════════════════════════════════════════╝
    """)

    pipeline = ContentModerationPipeline(
        scheduler=ImmediateScheduler() if args.no_delay else None
    )
    run_dashboard(host=args.host, port=args.port, debug=args.debug, pipeline=pipeline)


if __name__ == "__main__":
    main()
