# -*- coding: utf-8 -*-

"""
Графики (matplotlib + pandas):
- столбчатая диаграмма текущих курсов
- линейный график истории конвертаций по одной валюте

Функции рисуют в переданный Figure и не знают про tkinter,
поэтому их можно проверять с бэкендом Agg.
"""

import pandas as pd

BAR_COLOR = "#4682b4"
LINE_COLOR = "#dc2626"
POINT_COLOR = "#1e90ff"


def rates_series(rate_table) -> pd.Series:
    """code -> rate в порядке таблицы."""
    rates = rate_table.as_mapping()
    return pd.Series({code: r.rate for code, r in rates.items()}, dtype=float)


def history_series(history, code: str) -> pd.Series:
    """Результаты конвертаций с участием code, индекс — время (по порядку записей)."""
    records = history.filter(code)
    if not records:
        return pd.Series(dtype=float)
    s = pd.Series(
        [r.result for r in records],
        index=pd.to_datetime([r.timestamp for r in records]),
        dtype=float,
    )
    s.index.name = "timestamp"
    return s


def _no_data(ax, text):
    ax.text(0.5, 0.5, text, ha="center", va="center", transform=ax.transAxes)
    ax.set_axis_off()


def draw_rates_chart(figure, rate_table):
    figure.clear()
    ax = figure.add_subplot(111)

    series = rates_series(rate_table)
    if series.empty:
        _no_data(ax, "No currencies loaded")
        return ax

    bars = ax.bar(series.index, series.values, color=BAR_COLOR, edgecolor="black")
    for bar, val in zip(bars, series.values):
        ax.annotate(f"{val:.2f}", (bar.get_x() + bar.get_width() / 2, bar.get_height()),
                    ha="center", va="bottom", fontsize=9, fontweight="bold")

    ax.set_title("Currency Exchange Rate Chart")
    ax.set_xlabel("Currency")
    ax.set_ylabel("Rate")
    ax.grid(True, axis="y", alpha=0.3)
    return ax


def draw_history_chart(figure, history, code: str):
    figure.clear()
    ax = figure.add_subplot(111)

    series = history_series(history, code)
    if series.empty:
        _no_data(ax, "No data for this currency")
        return ax

    ax.plot(series.index, series.values, color=LINE_COLOR, linewidth=2,
            marker="o", markersize=6, markerfacecolor=POINT_COLOR, markeredgecolor=POINT_COLOR)
    for ts, val in series.items():
        ax.annotate(f"{val:.2f}", (ts, val), textcoords="offset points", xytext=(0, 8),
                    ha="center", fontsize=8)

    ax.set_title(f"Currency History Chart - {code}")
    ax.set_xlabel("Time")
    ax.set_ylabel("Rate")
    ax.grid(True, alpha=0.3)
    figure.autofmt_xdate()
    return ax
