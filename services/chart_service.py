"""
services/chart_service.py
--------------------------
Generates chart images for payroll analysis.
Uses matplotlib to create pie/bar charts and returns them as BytesIO buffers.
"""

import io

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for server use
import matplotlib.pyplot as plt

from config import CURRENCY
from repositories.org_repo import DepartmentRepository, JobRepository
from utils.logger import get_logger

logger = get_logger(__name__)

plt.rcParams["font.family"] = "DejaVu Sans"
plt.rcParams["figure.facecolor"] = "#1a1a2e"
plt.rcParams["text.color"] = "#e0e0e0"
plt.rcParams["axes.facecolor"] = "#1a1a2e"

_COLORS = [
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4",
    "#FFEAA7", "#DDA0DD", "#98D8C8", "#F7DC6F",
    "#BB8FCE", "#85C1E9", "#F1948A", "#82E0AA",
]


def _to_png(fig) -> io.BytesIO:
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=150, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    buf.seek(0)
    plt.close(fig)
    return buf


class ChartService:
    """Generates visual charts for payroll data."""

    def __init__(self):
        self.department_repo = DepartmentRepository()
        self.job_repo = JobRepository()

    def payroll_by_department(self) -> io.BytesIO | None:
        """
        Generate a donut chart of total salary per department.

        Returns:
            BytesIO buffer with PNG image, or None if there are no employees.
        """
        summary = self.department_repo.get_payroll_summary()
        if not summary:
            return None

        labels = [s["department_name"] or "Unassigned" for s in summary]
        values = [float(s["payroll"]) for s in summary]
        headcounts = [s["headcount"] for s in summary]
        total = sum(values)

        fig, ax = plt.subplots(figsize=(8, 6))

        wedges, texts, autotexts = ax.pie(
            values,
            labels=None,
            autopct=lambda pct: f"{pct:.1f}%",
            colors=[_COLORS[i % len(_COLORS)] for i in range(len(values))],
            startangle=90,
            pctdistance=0.82,
            wedgeprops=dict(width=0.5, edgecolor="#1a1a2e", linewidth=2),
        )

        for autotext in autotexts:
            autotext.set_color("white")
            autotext.set_fontsize(10)
            autotext.set_fontweight("bold")

        legend_labels = [
            f"{label}: {value:,.0f} {CURRENCY} ({count} staff)"
            for label, value, count in zip(labels, values, headcounts)
        ]
        ax.legend(
            wedges, legend_labels,
            loc="center left",
            bbox_to_anchor=(1, 0, 0.5, 1),
            fontsize=10,
            frameon=False,
        )

        ax.set_title(
            f"Payroll by department\nTotal: {total:,.2f} {CURRENCY}",
            fontsize=14,
            fontweight="bold",
            pad=20,
        )

        plt.tight_layout()
        logger.info(f"Generated payroll chart for {len(summary)} department(s)")
        return _to_png(fig)

    def salary_bands(self) -> io.BytesIO | None:
        """
        Generate a bar chart of each staffed job's salary band, with the
        lowest and highest actual salary drawn over it.

        Returns:
            BytesIO buffer with PNG image, or None if no job has staff.
        """
        spread = [s for s in self.job_repo.get_salary_spread() if s["headcount"]]
        if not spread:
            return None

        jobs = [s["job_id"] for s in spread]
        positions = range(len(jobs))
        band_low = [float(s["min_salary"] or 0) for s in spread]
        band_high = [float(s["max_salary"] or s["highest"]) for s in spread]
        lowest = [float(s["lowest"]) for s in spread]
        highest = [float(s["highest"]) for s in spread]

        fig, ax = plt.subplots(figsize=(max(6, len(jobs) * 1.2), 5))

        ax.bar(
            positions,
            [h - l for l, h in zip(band_low, band_high)],
            bottom=band_low,
            color="#45B7D1",
            alpha=0.35,
            edgecolor="#45B7D1",
            width=0.6,
            label="Allowed band",
            zorder=2,
        )
        ax.vlines(positions, lowest, highest, color="#FF6B6B", linewidth=4, label="Actual salaries", zorder=3)
        ax.scatter(positions, lowest, color="#FF6B6B", zorder=4)
        ax.scatter(positions, highest, color="#FF6B6B", zorder=4)

        for x, s in zip(positions, spread):
            ax.text(x, float(s["highest"]), f" {s['headcount']}", color="#e0e0e0",
                    fontsize=9, va="bottom", ha="center")

        ax.set_xticks(list(positions))
        ax.set_xticklabels(jobs, fontsize=9, color="#e0e0e0", rotation=30)
        ax.set_ylabel(f"Salary ({CURRENCY})", fontsize=11, color="#e0e0e0")
        ax.set_title("Salary bands vs actual salaries", fontsize=13, fontweight="bold", pad=15)

        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        ax.spines["left"].set_color("#444")
        ax.spines["bottom"].set_color("#444")
        ax.tick_params(colors="#e0e0e0")
        ax.grid(axis="y", alpha=0.2, color="#888")
        ax.set_axisbelow(True)
        ax.legend(frameon=False, fontsize=9)

        plt.tight_layout()
        logger.info(f"Generated salary band chart for {len(jobs)} job(s)")
        return _to_png(fig)
