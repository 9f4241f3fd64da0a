"""Connect to a node and print the bound contract API."""

import logging
import os

from dotenv import load_dotenv

from eth_connect import ConnectionOrchestrator, ConnectOptions, Web3RPC
from eth_connect.exceptions import CoinbaseNotFound

# Configure logging to see the connection sequence
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


def main() -> None:
    options = ConnectOptions(
        http=os.getenv("ETH_HTTP_URL", "http://127.0.0.1:8545"),
        ws=os.getenv("ETH_WS_URL"),
        ipc=os.getenv("ETH_IPC_PATH"),
        contracts={
            "1": {"Cash": "0xD8B1A2F6C3E5D4B7A8C9E0F1A2B3C4D5E6F7A8B9"},
            "3": {"Cash": "0x0E8C2A1F9B7D6C5E4A3B2C1D0E9F8A7B6C5D4E3F"},
        },
        api={
            "functions": {"Cash": {"balance": {"inputs": ["address"]}}},
            "events": {"Transfer": {"contract": "Cash"}},
        },
        no_fallback=os.getenv("ETH_NO_FALLBACK") == "1",
        request_timeout=float(os.getenv("ETH_REQUEST_TIMEOUT", "10")),
    )

    with ConnectionOrchestrator(Web3RPC()) as orchestrator:
        try:
            connection = orchestrator.connect(options)
        except CoinbaseNotFound as exc:
            logger.error("Node has no coinbase account: %s", exc)
            return

        if connection is None:
            logger.error("Could not reach any node")
            return

        session = orchestrator.state.session
        print("=" * 60)
        print(f"Connection: {connection.as_dict()}")
        print(f"Network:    {session.network_id}")
        print(f"Sender:     {session.from_address}")
        print(f"Gas price:  {orchestrator.rpc.gas_price}")
        print(f"Functions:  {session.api.functions}")
        print(f"Events:     {session.api.events}")
        print("=" * 60)


if __name__ == "__main__":
    main()
