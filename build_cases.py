# build_cases.py
from __future__ import annotations
import argparse, logging, os
from datetime import datetime, timedelta
from typing import Callable, Dict, Any

import numpy as np
import pandas as pd

from pydantic_chart_config import ChartType, DataType, TooltipTrigger
from chart_document import (
    AngleAxis, Chart, ChartError, DataZoom, DocumentAssembler, PolarCoordinate, RadiusAxis,
    RectangularCoordinate, Title, Tooltip, XAxis, YAxis, from_frame, from_series, write_document,
)


def _mk_sales_timeseries() -> pd.DataFrame:
    """Daily revenue for two regions, one column each."""
    np.random.seed(7)
    start = datetime(2024, 1, 1)
    days = 30
    return pd.DataFrame({
        "date": [start + timedelta(days=d) for d in range(days)],
        "na": 1000 + np.random.randint(-100, 120, days),
        "eu": 800 + np.random.randint(-100, 120, days),
    })


def _mk_category_revenue() -> pd.DataFrame:
    return pd.DataFrame({
        "category": ["A", "B", "C", "D", "E", "F"],
        "revenue":  [120, 90, 130, 80, 150, 70],
    })


def case_lines() -> DocumentAssembler:
    df = _mk_sales_timeseries()
    data = from_frame(df)
    grid = RectangularCoordinate(XAxis(DataType.time), YAxis(DataType.number))
    for region in ("na", "eu"):
        Chart(ChartType.line, data["date"], data[region], name=region.upper()).plot_on(grid)
    zoom = DataZoom(grid, grid.x_axes[0]).configure(start=0, end=50)
    return DocumentAssembler().add(Title("Revenue by Region (Daily)"), grid, zoom)


def case_bar() -> DocumentAssembler:
    df = _mk_category_revenue()
    x, y = from_series(df["category"]), from_series(df["revenue"])
    grid = RectangularCoordinate(XAxis(DataType.category), YAxis())
    bar = Chart(ChartType.bar, x, y, name="Revenue").configure(bar_width="40%")
    bar.plot_on(grid)
    return DocumentAssembler().add(Title("Revenue by Category"), bar)


def case_polar() -> DocumentAssembler:
    radius = from_series(np.linspace(0, 10, 12))
    angle = from_series(np.arange(0, 360, 30))
    polar = PolarCoordinate(AngleAxis(), RadiusAxis())
    Chart(ChartType.line, radius, angle, name="Spiral").plot_on(polar)
    Chart(ChartType.scatter, radius, angle, name="Points").plot_on(polar)
    return DocumentAssembler().add(polar, Tooltip(TooltipTrigger.axis))


def case_pie() -> DocumentAssembler:
    df = _mk_category_revenue()
    pie = Chart(ChartType.pie, from_series(df["category"]), from_series(df["revenue"]), name="Share")
    pie.configure(radius="60%", rose_type="radius")
    return DocumentAssembler().add(Title("Revenue Share", "by category"), pie)


CASES: Dict[str, Callable[[], DocumentAssembler]] = {
    "lines": case_lines,
    "bar": case_bar,
    "polar": case_polar,
    "pie": case_pie,
}


def _summarize(sections: Dict[str, Any]) -> str:
    return " ".join(f"{k}={v}" for k, v in sections.items())


def run_case(name: str, outdir: str) -> None:
    if name not in CASES:
        raise SystemExit(f"unknown --case {name}; choose one of: {', '.join(CASES.keys())} or 'all'")
    try:
        doc = CASES[name]().build()
        fpath = write_document(doc, os.path.join(outdir, f"{name}.chart.json"))
        print(f"[ok] {name:<6} → {fpath} :: {_summarize(doc.section_sizes)}")
    except ChartError as e:
        print(f"[ERR] {name}: {e}")


def main():
    ap = argparse.ArgumentParser(description="Build sample chart documents")
    ap.add_argument("--case", default="all", help=f"one of: {', '.join(CASES.keys())} or 'all'")
    ap.add_argument("--outdir", default="./out", help="output directory for .chart.json")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.case == "all":
        for n in CASES.keys():
            run_case(n, args.outdir)
    else:
        run_case(args.case, args.outdir)


if __name__ == "__main__":
    main()
