import os
import logging
from datetime import datetime
from typing import Dict, Any, Optional

from .constants import AUDIT_ENABLED, REPORTS_DIR

logger = logging.getLogger(__name__)


class CalculationAudit:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(CalculationAudit, cls).__new__(cls)
            cls._instance.initialized = False
        return cls._instance

    def __init__(self):
        if self.initialized:
            return

        self.enabled = AUDIT_ENABLED
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_dir = REPORTS_DIR
        self.log_file: Optional[str] = None
        self.initialized = True

    def configure(self, enabled: bool = True, log_dir: Optional[str] = None):
        """Switch auditing on/off and optionally redirect it. Starts a new file."""
        self.enabled = enabled
        if log_dir is not None:
            self.log_dir = log_dir
        self.log_file = None

    def _open_log(self) -> str:
        # File is only created once something is actually audited.
        os.makedirs(self.log_dir, exist_ok=True)
        self.log_file = os.path.join(self.log_dir, f"audit_{self.session_id}.txt")
        with open(self.log_file, "w", encoding="utf-8") as f:
            f.write("=== EMBODIED CARBON CALCULATION AUDIT LOG ===\n")
            f.write(f"Session: {self.session_id}\n")
            f.write("=============================================\n\n")
        return self.log_file

    def log_calculation(self, context: str, formula: str, variables: Dict[str, Any], result: float, unit: str = ""):
        """
        Log a calculation step to the audit file.

        Args:
            context: Description of what is being calculated (e.g., "Row 0: A4 transport")
            formula: Text representation of equation (e.g., "Mass(t) * Dist(km) * EF")
            variables: Dict of actual values used (e.g., {"Mass_t": 20, "Local_km": 50})
            result: The final result
            unit: Unit of the result (e.g., "kgCO2e")
        """
        if not self.enabled:
            return

        try:
            path = self.log_file or self._open_log()
            with open(path, "a", encoding="utf-8") as f:
                f.write(f"[{datetime.now().strftime('%H:%M:%S')}] {context}\n")
                f.write(f"  Formula: {formula}\n")

                vars_str = ", ".join([f"{k}={v}" for k, v in variables.items()])
                f.write(f"  Inputs:  {vars_str}\n")

                f.write(f"  Result:  {result:.4f} {unit}\n")
                f.write("-" * 40 + "\n")
        except OSError as e:
            logger.error(f"Failed to write to audit log: {e}")


# Global Accessor
audit_logger = CalculationAudit()
