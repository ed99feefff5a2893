# src/mfsmt_core/strategies/__init__.py
from .base import (
    TranslationState,
    TranslationStrategy,
    TranslationStrategySet,
    read_quantity,
    require_positive_quantity,
    require_quantity,
    signed_inflow,
    sum_of,
)
from .placement import (
    PlacementTranslationStrategySet,
    PlacementDeclarationStrategy,
    FiniteChipAreaRuleStrategy,
    MinimumChannelLengthStrategy,
    MinimumNodeDistanceStrategy,
    ChannelGeometryStrategy,
    ChannelCrossingAngleStrategy,
    ControlPointPlacementStrategy,
)
from .multiphase import MultiPhaseStrategySet, TJunctionDropletStrategy, DropletVolumeStrategy
from .pressure_flow import (
    PressureFlowStrategySet,
    PressureFlowDeclarationStrategy,
    PortPressureStrategy,
    ChannelResistanceStrategy,
    ChannelPressureDropStrategy,
    FlowConservationStrategy,
    PressureControlPointStrategy,
)
from .exceptions import TranslationStateError

__all__ = [
    # Abstractions
    "TranslationState", "TranslationStrategy", "TranslationStrategySet",
    "read_quantity", "require_quantity", "require_positive_quantity", "signed_inflow", "sum_of",
    # Placement
    "PlacementTranslationStrategySet", "PlacementDeclarationStrategy", "FiniteChipAreaRuleStrategy",
    "MinimumChannelLengthStrategy", "MinimumNodeDistanceStrategy", "ChannelGeometryStrategy",
    "ChannelCrossingAngleStrategy", "ControlPointPlacementStrategy",
    # Multi-phase
    "MultiPhaseStrategySet", "TJunctionDropletStrategy", "DropletVolumeStrategy",
    # Pressure-flow
    "PressureFlowStrategySet", "PressureFlowDeclarationStrategy", "PortPressureStrategy",
    "ChannelResistanceStrategy", "ChannelPressureDropStrategy", "FlowConservationStrategy",
    "PressureControlPointStrategy",
    # Exceptions
    "TranslationStateError",
]
