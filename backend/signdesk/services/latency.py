import asyncio
import random


class SimulatedOperationError(Exception):
    """Artificial failure of a simulated network operation."""


async def simulate_network(operation: str, delay_seconds: float, failure_rate: float = 0.0):
    """
    Stand-in for a round trip to a signing backend.

    Cancelling the awaiting task interrupts the delay; callers mutate state
    only after this returns.
    """
    if delay_seconds > 0:
        await asyncio.sleep(delay_seconds)
    if failure_rate > 0 and random.random() < failure_rate:
        raise SimulatedOperationError(f"{operation} failed, please try again")
