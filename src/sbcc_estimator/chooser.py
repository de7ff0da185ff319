"""
Choosers over large option lists.

A closed chooser only keeps what it needs to show the current selection (one
label lookup). The full option list is built when the chooser opens and
dropped again when it closes. None of this touches the calculator state: the
selected value always lives there, the chooser only renders it.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

RawOption = Union[str, Tuple[str, Any]]


@dataclass(frozen=True)
class Option:
    value: str
    label: str


def to_option(raw: RawOption) -> Option:
    """'x' -> Option('x', 'x'); (label, value) -> Option(str(value), label)."""
    if isinstance(raw, tuple):
        label, value = raw
        return Option(value=value_key(value), label=str(label))
    return Option(value=str(raw), label=str(raw))


def value_key(value: Any) -> str:
    # 1000.0 and "1000" must match the same option.
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class LazyChooser:
    def __init__(
        self,
        key: Hashable,
        options: Callable[[], Sequence[RawOption]],
        label_for: Optional[Callable[[Any], Optional[str]]] = None,
        placeholder: str = "Select an option",
    ):
        """
        options:   builds the full list; only called while open.
        label_for: single lookup used while closed. Defaults to the value itself.
        """
        self.key = key
        self._options_source = options
        self._label_for = label_for
        self.placeholder = placeholder
        self.is_open = False
        self._materialized: Optional[List[Option]] = None
        self.materialize_count = 0

    @property
    def materialized(self) -> bool:
        return self._materialized is not None

    def open(self) -> List[Option]:
        if not self.is_open:
            self.is_open = True
            self._materialized = [to_option(o) for o in self._options_source()]
            self.materialize_count += 1
            logger.debug(f"Chooser {self.key!r} opened ({len(self._materialized)} options)")
        return list(self._materialized or [])

    def close(self):
        if self.is_open:
            logger.debug(f"Chooser {self.key!r} closed")
        self.is_open = False
        self._materialized = None

    def set_open(self, is_open: bool):
        if is_open:
            self.open()
        else:
            self.close()

    def label(self, selected: Any) -> Optional[str]:
        """Display label for the current selection; None if it does not resolve."""
        if selected is None or selected == "":
            return None
        if self._label_for is not None:
            return self._label_for(selected)
        return str(selected)

    def visible_options(self, selected: Any) -> List[Option]:
        """
        What a renderer shows: every option while open, otherwise only the
        current selection (so it stays visible while closed).
        """
        if self.is_open:
            return list(self._materialized or [])
        if selected is None or selected == "":
            return []
        label = self.label(selected)
        return [Option(value=value_key(selected), label=label if label is not None else str(selected))]

    def display(self, selected: Any) -> str:
        label = self.label(selected)
        return label if label is not None else self.placeholder

    def find(self, text: str) -> Optional[Option]:
        """Resolve a typed choice (1-based number, value or label) against the open list."""
        options = self._materialized or []
        s = text.strip()
        if s.isdigit():
            idx = int(s)
            if 1 <= idx <= len(options):
                return options[idx - 1]
        lowered = s.lower()
        for option in options:
            if lowered in (option.value.lower(), option.label.lower()):
                return option
        return None


class ChooserRegistry:
    """UI-local cache of choosers keyed by identity, e.g. (row, field)."""

    def __init__(self):
        self._choosers: Dict[Hashable, LazyChooser] = {}

    def get(self, key: Hashable, factory: Callable[[Hashable], LazyChooser]) -> LazyChooser:
        chooser = self._choosers.get(key)
        if chooser is None:
            chooser = factory(key)
            self._choosers[key] = chooser
        return chooser

    def close_all(self):
        for chooser in self._choosers.values():
            chooser.close()

    def forget_row(self, index: int):
        """Drop choosers for a removed row and renumber those after it."""
        renumbered: Dict[Hashable, LazyChooser] = {}
        for key, chooser in self._choosers.items():
            if isinstance(key, tuple) and len(key) == 2 and isinstance(key[0], int):
                row, name = key
                if row == index:
                    continue
                if row > index:
                    key = (row - 1, name)
                    chooser.key = key
            renumbered[key] = chooser
        self._choosers = renumbered

    def __len__(self) -> int:
        return len(self._choosers)
