import matplotlib.pyplot as plt
import os
from datetime import datetime
from typing import Optional
from .constants import REPORTS_DIR
from .models import Output
import logging

logger = logging.getLogger(__name__)

# ============================================================================
# VISUALIZER CLASS
# ============================================================================


class Visualizer:
    def __init__(self, output_root: Optional[str] = None):
        """
        Charts are written to <output_root>/charts/<timestamp>/.
        output_root defaults to the configured reports directory.
        """
        self.output_root = output_root or REPORTS_DIR
        self._setup_style()
        self.session_dir = self._create_session_dir()

    def _setup_style(self):
        """Configure matplotlib for clean report plots."""
        plt.rcParams.update(plt.rcParamsDefault)

        plt.rcParams.update({
            'font.family': 'sans-serif',
            'font.sans-serif': ['Arial', 'Helvetica', 'Calibri', 'DejaVu Sans'],
            'font.size': 12,
            'axes.titlesize': 16,
            'axes.titleweight': 'bold',
            'axes.labelsize': 13,
            'xtick.labelsize': 11,
            'ytick.labelsize': 11,
            'legend.fontsize': 11,
            'text.color': '#2C3E50',
            'axes.labelcolor': '#2C3E50',
            'xtick.color': '#2C3E50',
            'ytick.color': '#2C3E50'
        })

        plt.rcParams.update({
            'axes.spines.top': False,
            'axes.spines.right': False,
            'axes.spines.left': False,
            'axes.spines.bottom': True,
            'axes.linewidth': 1.2,
            'grid.color': '#E0E0E0',
            'grid.linestyle': ':',
            'grid.linewidth': 1.0,
            'axes.grid': True,
            'axes.grid.axis': 'y',
            'axes.axisbelow': True
        })

        self.colors = {
            'a1a3': '#5D6D7E',        # Slate
            'a4': '#FF8A65',          # Light Coral
            'reference': '#D32F2F',   # Dark Red
            'score_0': '#EF9A9A',
            'score_1': '#FFE082',
            'score_2': '#A5D6A7',
            'text': '#2C3E50',
        }

    def _create_session_dir(self) -> str:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = os.path.join(self.output_root, "charts", timestamp)
        os.makedirs(path, exist_ok=True)
        return path

    def get_save_path(self, filename: str) -> str:
        return os.path.join(self.session_dir, filename)

    def plot_row_breakdown(self, output: Output) -> Optional[str]:
        """Stacked A1-A3 / A4 bar per row."""
        if not output.rows:
            logger.warning("No rows to plot.")
            return None

        labels = [f"{i}. {r.component_id or '-'}" for i, r in enumerate(output.rows, 1)]
        a1a3 = [r.a1a3 for r in output.rows]
        a4 = [r.a4 for r in output.rows]

        fig, ax = plt.subplots(figsize=(max(8, 1.2 * len(labels)), 6), dpi=150)
        ax.bar(labels, a1a3, color=self.colors['a1a3'], width=0.6, label='A1-A3')
        ax.bar(labels, a4, bottom=a1a3, color=self.colors['a4'], width=0.6, label='A4')

        ax.set_ylabel("Emissions (kgCO2e)", fontweight='bold')
        ax.set_title("Embodied Carbon by Line Item", pad=20, loc='left')
        ax.legend(frameon=False)
        plt.xticks(rotation=45, ha='right')

        peak = max(x + y for x, y in zip(a1a3, a4))
        for i, (x, y) in enumerate(zip(a1a3, a4)):
            if x + y > 0:
                ax.text(i, x + y + peak * 0.01, f'{x + y:.1f}',
                        ha='center', va='bottom', fontsize=10, fontweight='bold', color=self.colors['text'])

        plt.tight_layout()
        filepath = self.get_save_path("row_breakdown.png")
        plt.savefig(filepath, dpi=300, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"   [Plot] Saved row breakdown to: {filepath}")
        return filepath

    def plot_reference_comparison(self, output: Output, reference_value: float, reference_label: str = "") -> str:
        """Project kgCO2e/m2 GFA against the reference benchmark, coloured by score."""
        fig, ax = plt.subplots(figsize=(7, 6), dpi=150)

        names = ["Project", "Reference"]
        values = [output.embodied_carbon_per_gfa, reference_value]
        score_color = self.colors.get(f"score_{output.green_mark_score}", self.colors['a1a3'])
        bars = ax.bar(names, values, color=[score_color, '#ECEFF1'], edgecolor=self.colors['text'], width=0.5)

        for bar in bars:
            height = bar.get_height()
            ax.text(bar.get_x() + bar.get_width() / 2., height,
                    f'{height:.2f}', ha='center', va='bottom', fontweight='bold', fontsize=11)

        ax.set_ylabel("kgCO2e/m² GFA", fontweight='bold')
        title = (
            f"{output.green_mark_score} Green Mark {'Point' if output.green_mark_score == 1 else 'Points'}"
            f" ({output.embodied_carbon_per_gfa_compared_to_reference:.0f}% reduction)"
        )
        if reference_label:
            title += f"\n{reference_label}"
        ax.set_title(title, pad=20, loc='left')

        plt.tight_layout()
        filepath = self.get_save_path("reference_comparison.png")
        plt.savefig(filepath, dpi=300, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"   [Plot] Saved reference comparison to: {filepath}")
        return filepath
