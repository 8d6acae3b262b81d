import uuid
from typing import Optional

from temporalio.client import Client, WorkflowHandle
from temporalio.envconfig import ClientConfig

from sweeper import config
from sweeper.types import BoardConfig
from sweeper.workflows import MinesweeperWorkflow


# Configures and returns a Temporal Client. Connection settings come from
# the TOML profile selected by TEMPORAL_PROFILE (default profile otherwise)
# and TEMPORAL_ADDRESS / TEMPORAL_NAMESPACE, falling back to a local server.
async def get_temporal_client() -> Client:
    connect_config = ClientConfig.load_client_connect_config()
    connect_config.setdefault("target_host", "localhost:7233")
    return await Client.connect(**connect_config)


# Starts a workflow for a new round and returns its handle. The board is
# validated here so a bad configuration never reaches the worker.
async def start_game(
    client: Client,
    board: Optional[BoardConfig] = None,
    game_id: Optional[str] = None,
    task_queue: str = config.TASK_QUEUE,
) -> WorkflowHandle:
    board = (board or config.default_board()).validate()
    game_id = game_id or str(uuid.uuid4())
    return await client.start_workflow(
        MinesweeperWorkflow.run,
        args=[game_id, board, config.inactivity_timeout().total_seconds()],
        id=game_id,
        task_queue=task_queue,
    )
