import argparse
import logging
from typing import List, Optional

from .catalogue import load_catalogue
from .config import write_config_template
from .constants import CATALOGUE_DIR, REPORTS_DIR
from .logging_conf import setup_logging
from .session import EstimatorSession
from .utils.input_helpers import (
    prompt_choice, prompt_lazy_choice, prompt_index, print_header, print_output_summary,
    print_rows_table, style_prompt, ROW_COLUMNS, C_SUCCESS, C_RESET
)
from .visualization import Visualizer

logger = logging.getLogger(__name__)

MENU = [
    "edit field",
    "add row",
    "duplicate row",
    "remove row",
    "set GFA",
    "set reference value",
    "export JSON",
    "export CSV",
    "plot",
    "quit",
]


def edit_field(session: EstimatorSession):
    state = session.state
    index = prompt_index("Row to edit", len(state))
    row = state.row(index) if index is not None else None
    if row is None:
        logger.warning("No such row.")
        return

    headers = [header for _, header in ROW_COLUMNS]
    header = prompt_choice("Field", headers, default=headers[0])
    field_name = {h: n for n, h in ROW_COLUMNS}[header]
    current = getattr(row, field_name)

    if session.is_chooser_field(field_name):
        value = prompt_lazy_choice(header, session.chooser(field_name, index), current)
        if value is None:
            return
    else:
        value = input(style_prompt(f"{header} [current={current}]: ")).strip()

    if state.set_field(index, field_name, value):
        print(f"{C_SUCCESS}  -> {header} updated.{C_RESET}")


def set_reference_value(session: EstimatorSession):
    value = prompt_lazy_choice(
        "Reference Value", session.chooser("reference_value"), session.state.reference_value
    )
    if value is not None:
        session.set_reference_value(value)


def run_session(session: EstimatorSession, out_dir: str):
    while True:
        state = session.state
        print_header("Embodied Carbon Estimator")
        print_output_summary(session.output, session.catalogue.reference_value_label(state.reference_value))
        print(f"\n  GFA: {state.gfa:g} m²   Rows: {len(state)}")
        gfa_err = state.pending_errors.get((None, "gfa"))
        if gfa_err is not None:
            logger.warning(f"GFA {gfa_err.value!r} rejected: {gfa_err.message}")
        print_rows_table(state.rows, session.output, state.pending_errors)

        action = prompt_choice("Action", MENU, default="quit")

        if action == "quit":
            break
        elif action == "edit field":
            edit_field(session)
        elif action == "add row":
            session.add_row()
        elif action in ("duplicate row", "remove row"):
            index = prompt_index("Row", len(state))
            if index is None:
                continue
            if action == "duplicate row":
                session.duplicate_row(index)
            else:
                session.remove_row(index)
        elif action == "set GFA":
            session.set_gfa(input(style_prompt(f"GFA (m²) [current={state.gfa:g}]: ")).strip())
        elif action == "set reference value":
            set_reference_value(session)
        elif action == "export JSON":
            session.export_json(out_dir)
        elif action == "export CSV":
            session.export_csv(out_dir)
        elif action == "plot":
            vis = Visualizer(out_dir)
            vis.plot_row_breakdown(session.output)
            vis.plot_reference_comparison(
                session.output,
                state.reference_value,
                session.catalogue.reference_value_label(state.reference_value) or "",
            )
            print(f"\nCharts saved to: {vis.session_dir}")


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Interactive embodied carbon / Green Mark estimator")
    parser.add_argument("--catalogue", default=CATALOGUE_DIR, help="Directory holding the reference tables")
    parser.add_argument("--out", default=REPORTS_DIR, help="Directory for exports and charts")
    parser.add_argument("--log-file", default=None, help="Also write a detailed log to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug messages on the console")
    parser.add_argument("--no-color", action="store_true")
    parser.add_argument("--write-config", metavar="PATH", default=None,
                        help="Write the current parameters to a Key/Value table and exit")
    args = parser.parse_args(argv)

    setup_logging(
        console_level=logging.DEBUG if args.verbose else logging.INFO,
        file_path=args.log_file,
        no_color=args.no_color,
    )

    if args.write_config:
        write_config_template(args.write_config)
        return

    session = EstimatorSession(load_catalogue(args.catalogue))
    try:
        run_session(session, args.out)
    except (KeyboardInterrupt, EOFError):
        print()
    logger.info("Session closed.")


if __name__ == "__main__":
    main()
