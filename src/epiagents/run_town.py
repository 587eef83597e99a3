"""
===============================================================================
run_town.py
Last Updated: 2026-10-19
===============================================================================
Command line driver for a single synthetic town run.

Example Usage:
    python -m epiagents.run_town --households 200 --infect 3 --seed 7
    python -m epiagents.run_town --days 30 --mask 40 --vaccinate 20 --plot curve.png
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
import argparse
import logging

from dataio.town_builder import populate, synthetic_businesses, synthetic_population

from .analysis import print_summary
from .interventions import aloof, mask, vaccinate
from .model import simulate

logger = logging.getLogger(__name__)


def run(households: int = 100, businesses: int = 10, days: int = 0, infect: int = 1,
        mask_portion: int = 0, vax_portion: int = 0, no_gatherings: bool = False,
        seed: int = 42):
    population = synthetic_population(households, seed=seed)
    business = synthetic_businesses(businesses, seed=seed)
    model = populate(population, business, seed=seed)

    if mask_portion:
        mask(model, mask_portion, "Random")
    if vax_portion:
        vaccinate(model, vax_portion, "Random")
    if no_gatherings:
        aloof(model)

    if model.infect(infect) is False:
        logger.warning("nobody to infect, running without an epidemic")
    return simulate(model, duration=days)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Simulate an epidemic in a synthetic town")
    parser.add_argument("--households", type=int, default=100, help="Number of households (default: 100)")
    parser.add_argument("--businesses", type=int, default=10, help="Number of businesses (default: 10)")
    parser.add_argument("--days", type=int, default=0,
                        help="Days to simulate; 0 runs until no agent is infected (default: 0)")
    parser.add_argument("--infect", type=int, default=1, help="Initially infected agents (default: 1)")
    parser.add_argument("--mask", type=int, default=0, help="Percent of agents willing to mask (default: 0)")
    parser.add_argument("--vaccinate", type=int, default=0, help="Percent of agents vaccinated (default: 0)")
    parser.add_argument("--aloof", action="store_true", help="Switch off community gatherings")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--plot", type=str, default=None, help="Save the epidemic curve to this file")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level (default: INFO)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    model = run(households=args.households, businesses=args.businesses, days=args.days,
                infect=args.infect, mask_portion=args.mask, vax_portion=args.vaccinate,
                no_gatherings=args.aloof, seed=args.seed)
    print_summary(model)

    if args.plot:
        import matplotlib
        matplotlib.use("Agg")
        from .utils.plotting import plot_epidemic_curve
        ax = plot_epidemic_curve(model.epidemic_data)
        ax.figure.savefig(args.plot, dpi=150, bbox_inches="tight")
        print(f"Figure saved to {args.plot}")
    return model


if __name__ == "__main__":
    main()
