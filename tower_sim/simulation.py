"""Run a control tower forward in time and record what its queues look like."""
import logging

import pandas as pd
from tqdm import tqdm

from tower_sim.tower import ControlTower

logger = logging.getLogger(__name__)

DEFAULT_NUM_TICKS = 24


def simulate_tower(
    tower: ControlTower,
    num_ticks: int = DEFAULT_NUM_TICKS,
    progress: bool = False,
) -> pd.DataFrame:
    """
    Simulate the behavior of a control tower for a number of ticks.

    Args:
        tower: the tower to simulate. It is modified in place.
        num_ticks: the number of ticks to run
        progress: whether to show a progress bar

    Returns:
        A dataframe with one row per tick and the following columns:
            tick: the ticks elapsed after the tick ran
            landing: the number of aircraft waiting to land
            takeoff: the number of aircraft waiting to take off
            loading: the number of aircraft loading at a gate
            landing_order: the callsigns waiting to land, in landing order
            takeoff_order: the callsigns waiting to take off, in takeoff order
    """
    if num_ticks < 0:
        raise ValueError("Number of ticks must not be negative")

    logger.info(f"Simulating {num_ticks} ticks from {tower}")

    records = []
    ticks = range(num_ticks)
    for _ in tqdm(ticks) if progress else ticks:
        tower.tick()

        landing = tower.landing_queue.aircraft_in_order()
        takeoff = tower.takeoff_queue.aircraft_in_order()
        records.append(
            {
                "tick": tower.ticks_elapsed,
                "landing": len(landing),
                "takeoff": len(takeoff),
                "loading": len(tower.loading_aircraft),
                "landing_order": ",".join(a.callsign for a in landing),
                "takeoff_order": ",".join(a.callsign for a in takeoff),
            }
        )

    logger.info(f"Finished simulation at {tower}")

    return pd.DataFrame(
        records,
        columns=[
            "tick",
            "landing",
            "takeoff",
            "loading",
            "landing_order",
            "takeoff_order",
        ],
    )
