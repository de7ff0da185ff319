import logging
from typing import Any, List, Optional, Tuple

import colorama
from colorama import Fore, Style, Back

from ..chooser import LazyChooser, Option, value_key
from ..constants import DECIMALS
from ..models import FieldError, Output, Row

colorama.init(autoreset=True)

logger = logging.getLogger(__name__)

# Style Constants
C_HEADER = Fore.CYAN + Style.BRIGHT
C_PROMPT = Fore.YELLOW
C_CHOICE = Fore.MAGENTA
C_ERROR = Fore.RED
C_SUCCESS = Fore.GREEN
C_RESET = Style.RESET_ALL

SCORE_COLORS = {0: Fore.RED, 1: Fore.YELLOW, 2: Fore.GREEN}

# Column headers, in row field order
ROW_COLUMNS: List[Tuple[str, str]] = [
    ("component_id", "Component"),
    ("green_mark_category", "Green Mark Category"),
    ("country_id", "Country of Origin"),
    ("quantity", "Quantity"),
    ("units", "Units"),
    ("marine_vehicle_id", "Marine Vehicle"),
    ("manual_marine_distance", "Manual Marine Distance (km)"),
    ("international_road_vehicle_id", "International Road Vehicle"),
    ("international_road_distance", "International Road Distance (km)"),
    ("local_road_vehicle_id", "Local Road Vehicle"),
    ("local_road_distance", "Local Road Distance (km)"),
]


def style_prompt(prompt_text: str) -> str:
    """Helper to wrap input prompt in color."""
    return f"{C_PROMPT}{prompt_text}{C_RESET}"


def print_header(text: str):
    """Print a styled header."""
    print(f"\n{C_HEADER}{'='*60}")
    print(f"{text.center(60)}")
    print(f"{'='*60}{C_RESET}")


def prompt_choice(label: str, options: List[str], default: str) -> str:
    """
    Prompt user to pick one value from a short list of options; returns the chosen option.
    Supports selecting by index (1-based) or typing the name.
    """
    display_parts = []
    for idx, opt in enumerate(options, 1):
        display_parts.append(f"[{C_SUCCESS}{idx}{C_PROMPT}] {C_CHOICE}{opt}{C_PROMPT}")

    opts_str = " / ".join(display_parts)

    while True:
        print(f"\n{C_PROMPT}{label} options:{C_RESET} {opts_str}")
        s = input(style_prompt(f"Select option (name or number) [default={default}]: ")).strip().lower()

        if not s:
            return default

        if s.isdigit():
            idx = int(s)
            if 1 <= idx <= len(options):
                return options[idx-1]

        for opt in options:
            if s == opt.lower():
                return opt

        logger.warning(f"Invalid choice '{s}'. Please enter a number 1-{len(options)} or the option name.")


def prompt_lazy_choice(label: str, chooser: LazyChooser, selected: Any) -> Optional[str]:
    """
    Closed view first: only the current selection is shown. Typing '?' opens
    the chooser and lists every option. Returns the chosen value, or None to
    keep the current one. The chooser is always closed on return.
    """
    try:
        while True:
            if not chooser.is_open:
                current = chooser.display(selected)
                s = input(style_prompt(
                    f"{label} [{C_CHOICE}{current}{C_PROMPT}] ('?' to list, Enter to keep): "
                )).strip()
                if not s:
                    return None
                if s != "?":
                    return s
                options = chooser.open()
                _print_options(options, selected)
                continue

            s = input(style_prompt(f"Select {label} (number, name, or Enter to cancel): ")).strip()
            if not s:
                return None
            option = chooser.find(s)
            if option is not None:
                return option.value
            logger.warning(f"'{s}' is not one of the listed options.")
    finally:
        chooser.close()


def _print_options(options: List[Option], selected: Any):
    selected_key = None if selected is None else value_key(selected)
    for idx, opt in enumerate(options, 1):
        marker = f"{C_SUCCESS}*{C_RESET}" if opt.value == selected_key else " "
        print(f" {marker}[{C_SUCCESS}{idx:>3}{C_RESET}] {opt.label}")


def prompt_index(label: str, count: int) -> Optional[int]:
    """1-based row number from the user -> 0-based index, None if blank/invalid."""
    s = input(style_prompt(f"{label} (1-{count}): ")).strip()
    if not s:
        return None
    try:
        idx = int(s)
    except ValueError:
        logger.warning(f"'{s}' is not a row number.")
        return None
    return idx - 1


def fmt(x: Optional[float], decimals: int = DECIMALS) -> str:
    if x is None:
        return "-"
    return f"{x:.{decimals}f}"


def print_output_summary(output: Output, reference_label: Optional[str] = None):
    """Headline figures: total, score, per-GFA and reduction."""
    print(f"\n{C_HEADER}using calculator {output.version}{C_RESET}")
    print(f"{C_HEADER}Total Embodied Carbon:{C_RESET} {fmt(output.total_emissions)} kgCO2eq")

    color = SCORE_COLORS.get(output.green_mark_score, "")
    points = "Point" if output.green_mark_score == 1 else "Points"
    print(f"{Back.BLACK}{color}{Style.BRIGHT} this project qualifies for {output.green_mark_score} Green Mark {points} {C_RESET}")
    print(f"  {fmt(output.embodied_carbon_per_gfa)} kgCO2eq/m² GFA")
    print(f"  {output.embodied_carbon_per_gfa_compared_to_reference:.0f}% reduction compared to reference value")
    if reference_label:
        print(f"  Reference: {reference_label}")


def print_rows_table(rows: Tuple[Row, ...], output: Output, pending: Optional[dict] = None):
    """One block per row: inputs, pending errors, then its A1-A3 / A4 figures."""
    pending = pending or {}
    for i, row in enumerate(rows):
        print(f"\n{C_HEADER}Row {i + 1}{C_RESET}")
        for name, header in ROW_COLUMNS:
            value = getattr(row, name)
            shown = "-" if value is None else value
            print(f"  {header:<34}: {shown}")
            err: Optional[FieldError] = pending.get((i, name))
            if err is not None:
                print(f"  {C_ERROR}{'':<34}  ! {err.value!r} rejected: {err.message}{C_RESET}")
        if i < len(output.rows):
            out_row = output.rows[i]
            print(f"  {'A1-A3 (kg CO2eq)':<34}: {C_SUCCESS}{fmt(out_row.a1a3)}{C_RESET}")
            print(f"  {'A4 (kg CO2eq)':<34}: {C_SUCCESS}{fmt(out_row.a4)}{C_RESET}")
