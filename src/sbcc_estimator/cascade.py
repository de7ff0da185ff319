"""
Dependent-field updates triggered by a field change.

The only cascade: choosing a component resets the row's green mark category
to the catalogue value for that component (overwriting any manual choice).
"""
import logging
from typing import Any, Callable, Dict, Optional

from .catalogue import ReferenceCatalogue

logger = logging.getLogger(__name__)


def on_component_change(component_id: str, catalogue: ReferenceCatalogue) -> Optional[str]:
    """Category for `component_id`, or None if it has none / is unknown."""
    category = catalogue.green_mark_category(component_id)
    logger.info(f"Setting green mark category for {component_id} to {category}")
    return category


CASCADES: Dict[str, Callable[[Any, ReferenceCatalogue], Dict[str, Any]]] = {
    "component_id": lambda value, catalogue: {
        "green_mark_category": on_component_change(value, catalogue)
    },
}


def cascade_updates(field_name: str, value: Any, catalogue: ReferenceCatalogue) -> Dict[str, Any]:
    """
    Delta of dependent fields to apply together with `field_name = value`.
    Empty for fields without a cascade.
    """
    rule = CASCADES.get(field_name)
    if rule is None:
        return {}
    return rule(value, catalogue)
