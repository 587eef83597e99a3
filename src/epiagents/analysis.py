"""
===============================================================================
analysis.py
Last Updated: 2026-10-19
===============================================================================
Summary statistics for a finished town simulation.

    InfectedTotal: agents ever infected (transmission network rows)
    InfectedMax: maximum number of simultaneously infected agents
    PeakDay: day on which the maximum occurred
    RecoveredTotal: agents recovered at the end of the run
    RecoveredMasked: recovered agents who were willing to mask
    RecoveredVaccinated: recovered agents who were vaccinated
    RecoveredMandV: recovered agents who masked and were vaccinated
    Dead: agents who died
--------------------------------------------------------------------------------
License: MIT
================================================================================
"""
import pandas as pd

from .agents import DiseaseStatus


def analyze(model) -> pd.DataFrame:
    """Return a one-row DataFrame of epidemic statistics for the model"""
    data = model.epidemic_data
    if data is None or data.empty:
        raise ValueError("Must run simulate() before analyzing the epidemic")

    peak_idx = data["infected"].idxmax()
    recovered = [a for a in model.agents.values() if a.status == DiseaseStatus.RECOVERED]
    masked = [a for a in recovered if any(a.will_mask)]

    stats = {
        "InfectedTotal": len(model.transmission_records),
        "InfectedMax": int(data.at[peak_idx, "infected"]),
        "PeakDay": int(data.at[peak_idx, "day"]),
        "RecoveredTotal": len(recovered),
        "RecoveredMasked": len(masked),
        "RecoveredVaccinated": sum(1 for a in recovered if a.vaccinated),
        "RecoveredMandV": sum(1 for a in masked if a.vaccinated),
        "Dead": len(model.dead_records),
    }
    return pd.DataFrame([stats])


def agent_data_frame(model) -> pd.DataFrame:
    """End-of-day agent snapshots in long format (one row per agent per day)"""
    columns = ["day", "id", "will_mask", "masked", "status", "work", "community_gathering"]
    return pd.DataFrame(model.daily_records, columns=columns)


def daily_status_counts(model) -> pd.DataFrame:
    """Number of agents in each infection state at the end of every day"""
    df = agent_data_frame(model)
    if df.empty:
        return pd.DataFrame()
    return df.groupby(["day", "status"]).size().unstack(fill_value=0)


def print_summary(model):
    """Print summary of the simulation results"""
    if model.epidemic_statistics is None:
        raise ValueError("Must run simulate() before printing summary")
    stats = model.epidemic_statistics.iloc[0]

    print("=" * 60)
    print("TOWN EPIDEMIC SIMULATION RESULTS:")
    print(f"Simulated days: {model.day} ({model.model_steps} hours)")
    print(f"Initial population: {model.init_pop_size:,}")
    print(f"\n--- EPIDEMIC OUTCOMES ---")
    print(f"Total infections: {stats['InfectedTotal']:,}")
    print(f"Peak infected: {stats['InfectedMax']:,} (day {stats['PeakDay']})")
    print(f"Deaths: {stats['Dead']:,}")
    print(f"\n--- RECOVERED ---")
    print(f"Total: {stats['RecoveredTotal']:,}")
    print(f"Masked: {stats['RecoveredMasked']:,}")
    print(f"Vaccinated: {stats['RecoveredVaccinated']:,}")
    print(f"Masked and vaccinated: {stats['RecoveredMandV']:,}")
    print("=" * 60)
