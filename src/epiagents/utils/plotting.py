import matplotlib.pyplot as plt
import pandas as pd

from ..parameters import HOURS_PER_DAY


def plot_epidemic_curve(data: pd.DataFrame, title: str = "Town epidemic", ax=None):
    """Infected, recovered and dead agents over time (days) from simulate() data"""
    if ax is None:
        fig, ax = plt.subplots(figsize=(8,4.5))
    days = data["step"] / HOURS_PER_DAY
    ax.plot(days, data["infected"], lw=2, label="Infected")
    ax.plot(days, data["recovered"], lw=2, linestyle="--", label="Recovered")
    if data["dead"].any():
        ax.plot(days, data["dead"], lw=1.5, color="k", label="Dead")
    ax.set_title(title)
    ax.set_xlabel("Day")
    ax.set_ylabel("Agents")
    ax.legend()
    ax.grid(alpha=0.25)
    return ax


def plot_daily_infections(network: pd.DataFrame, title: str = "New infections per day", ax=None):
    """Bar chart of daily new infections, split into seeded and local cases"""
    if ax is None:
        fig, ax = plt.subplots(figsize=(8,4.5))
    df = network.assign(day=network["time_infected"] // HOURS_PER_DAY,
                        seeded=network["infected_by"] == 0)
    counts = df.groupby(["day", "seeded"]).size().unstack(fill_value=0)
    local = counts.get(False, pd.Series(0, index=counts.index))
    seeded = counts.get(True, pd.Series(0, index=counts.index))
    ax.bar(counts.index, local, label="Local transmission")
    ax.bar(counts.index, seeded, bottom=local, label="Seeded")
    ax.set_title(title)
    ax.set_xlabel("Day")
    ax.set_ylabel("New infections")
    ax.legend()
    ax.grid(alpha=0.25)
    return ax
