"""Temporal worker for Minesweeper rounds."""
import asyncio
import logging

from temporalio.worker import Worker

from sweeper import config
from sweeper.client_provider import get_temporal_client
from sweeper.workflows import MinesweeperWorkflow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_worker(client, task_queue: str = config.TASK_QUEUE) -> Worker:
    """Create a worker serving the round workflow on `task_queue`."""
    return Worker(
        client,
        task_queue=task_queue,
        workflows=[MinesweeperWorkflow],
    )


async def main():
    """Start the Temporal worker."""
    client = await get_temporal_client()
    worker = build_worker(client)

    logger.info("Worker started, connected to Temporal")
    logger.info(f"Listening on task queue: {config.TASK_QUEUE}")

    await worker.run()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
