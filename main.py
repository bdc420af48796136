"""
Entry point for the Mafia room server.
"""

import argparse
import logging

from dotenv import load_dotenv

from mafia_server.config import load_config
from mafia_server.web import GameServer

logger = logging.getLogger(__name__)


def main():
    """Entry point for running the server."""
    parser = argparse.ArgumentParser(
        description="Run the Mafia room server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                # Default config on port 3001
  python main.py --config configs/default.yaml  # Load settings from YAML
  python main.py --port 8080 --host 0.0.0.0     # Override bind address
  python main.py --seed 42                      # Reproducible role assignment
        """
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file (default: use default config)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind to (overrides config)"
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Port for the server (overrides config and PORT)"
    )
    parser.add_argument(
        "--seed",
        "-s",
        type=int,
        default=None,
        help="Random seed for role assignment and fallback kills"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level, e.g. DEBUG or INFO (overrides config)"
    )

    args = parser.parse_args()

    load_dotenv()
    config = load_config(args.config)

    # Command line wins over YAML and environment
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.seed is not None:
        config.random_seed = args.seed
    if args.log_level is not None:
        config.log_level = args.log_level

    logging.basicConfig(
        level=config.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if args.config:
        logger.info("Using config: %s", args.config)

    server = GameServer(config=config)
    server.start()


if __name__ == "__main__":
    main()
