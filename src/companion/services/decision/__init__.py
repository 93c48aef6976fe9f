"""Decision services package - focus and intervention selection."""

from companion.services.decision.intervention_selector import InterventionSelector
from companion.services.decision.builtin_catalog import (
    BUILT_IN_INTERVENTIONS,
    build_default_catalog,
    load_catalog,
)

__all__ = [
    "InterventionSelector",
    "BUILT_IN_INTERVENTIONS",
    "build_default_catalog",
    "load_catalog",
]
