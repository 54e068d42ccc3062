"""Restore a control tower from a save and run it for a number of ticks."""
import logging

import click

from tower_sim.save import load_control_tower, save_control_tower
from tower_sim.simulation import simulate_tower


@click.command()
@click.option("--save-dir", required=True, help="Directory holding the save files")
@click.option("--ticks", default=24, help="Number of ticks to simulate")
@click.option("--output", default=None, help="Write the per-tick results to this CSV")
@click.option("--log-level", default="INFO", help="Logging level")
@click.option("--write-back", is_flag=True, help="Save the final state to --save-dir")
def run_cmd(save_dir, ticks, output, log_level, write_back):
    logging.basicConfig(level=log_level.upper())

    tower = load_control_tower(save_dir)
    results = simulate_tower(tower, num_ticks=ticks, progress=True)

    if output is not None:
        results.to_csv(output, index=False)
    else:
        click.echo(results.to_string(index=False))

    click.echo(str(tower))

    if write_back:
        save_control_tower(tower, save_dir)


if __name__ == "__main__":
    run_cmd()
