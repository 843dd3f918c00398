import asyncio
import logging
from logging.handlers import RotatingFileHandler

from config import settings
from services import Monitor, PageSizeMetrics, SiteListError, load_sites
from services.runtime import run_fixed_rate
from services.server import start_metrics_server

logger = logging.getLogger("pagesize")


# ensure logs are recorded both to stdout and to a rotating file
def configure_logging() -> None:
    log_dir = settings.LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "exporter.log"

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        handlers=[
            logging.StreamHandler(),
            RotatingFileHandler(
                log_file,
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            ),
        ],
        force=True,
    )


async def main() -> None:
    try:
        urls = load_sites(settings.SITES_FILE)
    except SiteListError as exc:
        logger.critical("Failed to load sites: %s", exc)
        raise SystemExit(1) from exc

    metrics = PageSizeMetrics()

    try:
        runner = await start_metrics_server(
            metrics,
            settings.METRICS_HOST,
            settings.METRICS_PORT,
            settings.METRICS_PATH,
        )
    except OSError as exc:
        logger.critical(
            "Failed to bind metrics server on %s:%s: %s",
            settings.METRICS_HOST or "*", settings.METRICS_PORT, exc,
        )
        raise SystemExit(1) from exc

    logger.info("Monitoring %d URLs: %s", len(urls), urls)

    try:
        async with Monitor(urls, metrics) as monitor:
            if settings.SCHEDULE_MODE == "fixed_rate":
                await run_fixed_rate(monitor, settings.CHECK_INTERVAL_SECONDS)
            else:
                await monitor.run_forever()
    finally:
        await runner.cleanup()


def run() -> None:
    configure_logging()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Exporter stopped by user")


if __name__ == "__main__":
    run()
