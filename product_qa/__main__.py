"""Main entry point for the Product Q&A index."""

import asyncio
import sys

from product_qa import __version__
from product_qa.orchestration.service import ProductQAService
from product_qa.utils.config import Config, ConfigurationError
from product_qa.utils.logger import configure_logging, get_logger


async def _run(config: Config) -> None:
    """Start ingestion and wait for the index to be published."""
    logger = get_logger(__name__)
    service = ProductQAService(config)

    service.start()
    logger.info("service_started", health=service.health().to_dict())

    report = await service.wait_until_ready()
    if report is None:
        logger.warning("service_not_ready", reason="data file not found")
        return

    logger.info("service_ready", health=service.health().to_dict(), report=report.to_dict())


def main() -> int:
    """Main application entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        config = Config()

        configure_logging(config.log_level, config.log_format)
        logger = get_logger(__name__)

        logger.info(
            "application_starting",
            version=__version__,
            data_file=str(config.data_file),
            dialect=config.record_dialect.value,
        )

        asyncio.run(_run(config))
        return 0

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        print(
            "Please check your .env file and environment variables.",
            file=sys.stderr,
        )
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
