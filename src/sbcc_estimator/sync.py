"""
Keeps the Output in step with the calculator state.

DerivedOutputSync subscribes to the state and recomputes synchronously on
every committed mutation, so readers never see an Output older than the
last accepted edit. Output listeners (UI, export) are notified afterwards.
"""
import logging
from typing import Callable, List, Optional, Protocol

from .models import CalculatorParameters, Output
from .state import CalculatorState

logger = logging.getLogger(__name__)

OutputListener = Callable[[Output], None]


class CalculationFunction(Protocol):
    def calculate_green_mark(self, params: CalculatorParameters) -> Output:
        ...


def compute(params: CalculatorParameters, calculator: CalculationFunction) -> Output:
    """
    Run the calculation function and check its row contract: one output row
    per input row, same order.
    """
    output = calculator.calculate_green_mark(params)
    if len(output.rows) != len(params.rows):
        raise RuntimeError(
            f"Calculation returned {len(output.rows)} rows for {len(params.rows)} input rows"
        )
    return output


class DerivedOutputSync:
    def __init__(self, state: CalculatorState, calculator: CalculationFunction, memoize: bool = True):
        self.state = state
        self.calculator = calculator
        self.memoize = memoize
        self.compute_count = 0
        self._listeners: List[OutputListener] = []
        self._key: Optional[CalculatorParameters] = None
        self._output: Optional[Output] = None
        self.stale = False
        state.subscribe(self._on_commit)
        self.refresh()

    @property
    def output(self) -> Output:
        return self._output  # type: ignore[return-value]

    def subscribe(self, listener: OutputListener) -> OutputListener:
        self._listeners.append(listener)
        return listener

    def refresh(self) -> Output:
        """
        Recompute from the current state. If the calculation fails after a
        first good run, the last Output is kept and `stale` is set until a
        later refresh succeeds; listeners are not notified in that case.
        """
        params = self.state.parameters()
        if self.memoize and self._output is not None and params == self._key:
            logger.debug("State unchanged since last calculation; reusing output.")
            self.stale = False
        else:
            try:
                output = compute(params, self.calculator)
            except Exception as e:
                if self._output is None:
                    raise
                logger.error(f"Calculation failed, keeping previous output: {e}")
                self.stale = True
                return self._output
            self._output = output
            self._key = params
            self.stale = False
            self.compute_count += 1
            logger.debug(
                f"Recomputed output: {len(params.rows)} rows, total={self._output.total_emissions:.2f} kgCO2e, "
                f"score={self._output.green_mark_score}"
            )
        for listener in list(self._listeners):
            listener(self._output)
        return self._output

    def _on_commit(self, state: CalculatorState):
        self.refresh()

    def close(self):
        self.state.unsubscribe(self._on_commit)
