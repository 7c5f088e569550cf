import logging

from arq import cron
from arq.connections import RedisSettings

from app.config import settings
from app.providers.feed import OddsFeedProvider
from app.services.cache import CacheService
from app.services.ingestion import merge_snapshots, remove_all_matches
from app.services.match_store import MatchStore
from app.services.metrics import MetricsService

logger = logging.getLogger(__name__)


async def startup(ctx: dict) -> None:
    ctx["store"] = MatchStore(settings.database_url)
    await ctx["store"].open()
    ctx["cache"] = CacheService(settings.redis_url)
    ctx["metrics"] = MetricsService(ctx["cache"])
    ctx["provider"] = OddsFeedProvider()


async def shutdown(ctx: dict) -> None:
    await ctx["cache"].close()
    await ctx["store"].close()


async def scrape_matches(ctx: dict) -> dict:
    """Scheduled task: pull the odds feed and append it to the match history."""
    logger.info("Running scheduled scraping task...")

    try:
        snapshots = await ctx["provider"].fetch_snapshots()
    except Exception as e:
        logger.error(f"Error occurred during the scraping task: {e}")
        await ctx["metrics"].track_ingestion(success=False)
        return {"error": str(e)}

    if not snapshots:
        logger.info("No relevant match data found.")
        await ctx["metrics"].track_ingestion(success=True)
        return {"matches": 0, "snapshots": 0}

    logger.info(f"Updating database with {len(snapshots)} entries started.")
    appended = await merge_snapshots(ctx["store"], snapshots)
    await ctx["metrics"].track_ingestion(success=appended is not None)

    if appended is None:
        return {"error": "merge failed", "matches": len(snapshots)}
    return {"matches": len(snapshots), "snapshots": appended}


async def purge_and_rescrape(ctx: dict) -> dict:
    """End-of-day reset: drop every match, then scrape the new schedule."""
    logger.info("Clearing the state of database at the end of the day")
    deleted = await remove_all_matches(ctx["store"])
    result = await scrape_matches(ctx)
    return {"deleted": deleted, **result}


class WorkerSettings:
    """ARQ worker settings."""

    on_startup = startup
    on_shutdown = shutdown
    functions = [scrape_matches]
    cron_jobs = [
        cron(scrape_matches, minute=settings.scrape_minutes),
        cron(purge_and_rescrape, hour={23}, minute={59}, second={59}),
        # First pass of the new day
        cron(scrape_matches, name="scrape_matches_new_day", hour={0}, minute={1}),
    ]
    redis_settings = RedisSettings.from_dsn(settings.redis_url)
    max_jobs = 1
    job_timeout = 900  # 15 minutes
