"""APScheduler interval jobs: countdown polling and draw ingestion."""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from cycle_predictor.services.runtime import Runtime

_scheduler: AsyncIOScheduler | None = None
_runtime: Runtime | None = None


async def _poll_countdown(runtime: Runtime):
    """One countdown tick."""
    try:
        await runtime.runner.run_scheduler_cycle()
    except Exception as e:
        # Only an explicit shutdown stops the poller
        logger.exception("Countdown tick crashed: {}", e)


async def _ingest_draws(runtime: Runtime):
    """Append the latest draws to the record store."""
    async with runtime.session_factory() as session:
        try:
            await runtime.draw_source.run_with_logging(session)
            await session.commit()
        except Exception as e:
            logger.error("Scheduled ingest failed: {}", e)
            await session.rollback()


def start_scheduler(runtime: Runtime):
    """Start polling and ingestion on their fixed periods."""
    global _scheduler, _runtime
    if _scheduler is not None:
        return

    settings = runtime.settings
    _runtime = runtime
    _scheduler = AsyncIOScheduler()

    _scheduler.add_job(
        _poll_countdown, "interval",
        args=[runtime],
        seconds=settings.POLL_PERIOD_SECONDS,
        max_instances=1,
        coalesce=True,
        id="countdown_poll",
    )

    _scheduler.add_job(
        _ingest_draws, "interval",
        args=[runtime],
        seconds=settings.INGEST_PERIOD_SECONDS,
        max_instances=1,
        coalesce=True,
        id="draw_ingest",
    )

    _scheduler.start()
    logger.info("Scheduler started with {} jobs", len(_scheduler.get_jobs()))


async def stop_scheduler():
    """Stop the jobs, then give an in-flight prediction time to finish."""
    global _scheduler, _runtime
    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("Scheduler stopped")
    if _runtime:
        await _runtime.runner.shutdown()
        for source in (_runtime.countdown_source, _runtime.draw_source):
            close = getattr(source, "aclose", None)
            if close is not None:
                await close()
        _runtime = None


def get_scheduler_status() -> dict:
    """Jobs and the current cycle state."""
    jobs = []
    if _scheduler:
        for job in _scheduler.get_jobs():
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": str(job.next_run_time) if job.next_run_time else None,
                "trigger": str(job.trigger),
            })

    cycle = None
    if _runtime:
        state = _runtime.runner.state
        cycle = {
            "phase": state.phase.value,
            "last_seconds": state.last_seconds,
            "error_count": state.error_count,
            "in_flight": _runtime.runner.in_flight,
            "fire_count": _runtime.runner.fire_count,
        }
    return {"jobs": jobs, "cycle": cycle}
