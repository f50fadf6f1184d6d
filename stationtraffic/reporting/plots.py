"""Plotting helpers for time-of-day traffic summaries."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns


def hourly_traffic(trips: pd.DataFrame) -> pd.DataFrame:
    """Count departures (by start hour) and arrivals (by end hour) for each hour of day."""

    hours = pd.RangeIndex(24, name="hour")
    if trips.empty:
        return pd.DataFrame({"hour": hours, "departures": 0, "arrivals": 0})
    departures = trips["started_at"].dt.hour.value_counts().reindex(hours, fill_value=0)
    arrivals = trips["ended_at"].dt.hour.value_counts().reindex(hours, fill_value=0)
    return pd.DataFrame(
        {"hour": hours, "departures": departures.to_numpy(), "arrivals": arrivals.to_numpy()}
    )


def plot_hourly_traffic(table: pd.DataFrame, output_path: Optional[Path] = None) -> plt.Figure:
    """Line chart of departures and arrivals across the day."""

    sns.set_theme(style="whitegrid")
    fig, ax = plt.subplots(figsize=(8, 4))
    tidy = table.melt(id_vars="hour", value_vars=["departures", "arrivals"], var_name="kind", value_name="trips")
    sns.lineplot(data=tidy, x="hour", y="trips", hue="kind", palette=["#4682b4", "#ff8c00"], marker="o", ax=ax)
    ax.set_xlabel("Hour of day")
    ax.set_ylabel("Trips")
    ax.set_xticks(range(0, 24, 2))
    ax.set_title("Trips by time of day")
    ax.legend(title="")
    plt.tight_layout()
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150)
    return fig
