"""Tests for epiagents.analysis, plotting and the command line driver."""

import matplotlib
matplotlib.use("Agg")

import pandas as pd
import pytest

from dataio.town_builder import populate, synthetic_businesses, synthetic_population
from epiagents.analysis import agent_data_frame, analyze, daily_status_counts, print_summary
from epiagents.model import simulate
from epiagents.run_town import main
from epiagents.utils.plotting import plot_daily_infections, plot_epidemic_curve


@pytest.fixture(scope="module")
def finished_model():
    model = populate(synthetic_population(40, seed=9), synthetic_businesses(5, seed=9), seed=9)
    model.infect(3)
    return simulate(model, duration=3)


def test_analyze_before_simulate(trio_model):
    with pytest.raises(ValueError):
        analyze(trio_model)
    with pytest.raises(ValueError):
        print_summary(trio_model)


def test_statistics_columns(finished_model):
    stats = finished_model.epidemic_statistics
    assert list(stats.columns) == ["InfectedTotal", "InfectedMax", "PeakDay", "RecoveredTotal",
                                   "RecoveredMasked", "RecoveredVaccinated", "RecoveredMandV", "Dead"]
    assert len(stats) == 1
    row = stats.iloc[0]
    assert row["InfectedTotal"] >= 3
    assert row["InfectedMax"] >= 3
    assert 0 <= row["PeakDay"] <= 3
    assert row["RecoveredMandV"] <= row["RecoveredMasked"] <= row["RecoveredTotal"]
    assert row["Dead"] == len(finished_model.dead_records)


def test_daily_status_counts(finished_model):
    counts = daily_status_counts(finished_model)
    assert list(counts.index) == [0, 1, 2]
    assert (counts.sum(axis=1) == finished_model.init_pop_size).all()


def test_agent_data_frame_long_format(finished_model):
    df = agent_data_frame(finished_model)
    assert len(df) == 3 * finished_model.init_pop_size
    assert set(df["status"]) <= {"S", "I", "R", "V", "D"}


def test_print_summary(finished_model, capsys):
    print_summary(finished_model)
    out = capsys.readouterr().out
    assert "TOWN EPIDEMIC SIMULATION RESULTS" in out
    assert "Peak infected" in out


def test_plots_return_axes(finished_model):
    ax = plot_epidemic_curve(finished_model.epidemic_data)
    assert ax.get_xlabel() == "Day"
    ax = plot_daily_infections(finished_model.transmission_network)
    assert len(ax.patches) > 0


def test_command_line_run(tmp_path, capsys):
    figure = tmp_path / "curve.png"
    model = main(["--households", "20", "--businesses", "3", "--days", "1",
                  "--mask", "30", "--aloof", "--plot", str(figure), "--log-level", "WARNING"])
    assert model.model_steps == 12
    assert model.mask_portion == 30
    assert figure.exists()
    assert isinstance(model.epidemic_data, pd.DataFrame)
    assert "Figure saved" in capsys.readouterr().out
