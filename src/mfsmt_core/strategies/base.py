# src/mfsmt_core/strategies/base.py
"""
The abstract translation strategy and the strategy set that composes them.

A strategy is one self-contained constraint generator: given a schematic, the
process parameters and the type table, it returns the list of solver
expressions it contributes. Its result is cached on the instance, and the cache
is an explicit three-state machine:

    UNCACHED --translate()--> COMPUTING --success--> CACHED
                                   |
                                   +----failure----> UNCACHED (error propagates)

Concrete strategies implement only `translation_step`. Everything else (the
cache, the state transitions, topology helpers) lives here.
"""
import enum
import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

import pint

from ..parameters import ProcessParameters
from ..schematic.data_structures import Connection, Node, Port, Schematic
from ..schematic.exceptions import TopologyError
from ..smt2 import names, qfnra
from ..smt2.expressions import RealLiteral, SExpression
from ..type_table import PrimitiveTypeTable
from ..units import to_magnitude
from .exceptions import TranslationStateError

logger = logging.getLogger(__name__)


class TranslationState(enum.Enum):
    UNCACHED = "uncached"
    COMPUTING = "computing"
    CACHED = "cached"


class TranslationStrategy(ABC):
    """
    Abstract constraint generator with a single-use result cache.
    """

    def __init__(self):
        self._state: TranslationState = TranslationState.UNCACHED
        self._cached_exprs: Tuple[SExpression, ...] = ()

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def state(self) -> TranslationState:
        return self._state

    def invalidate_cache(self):
        self._state = TranslationState.UNCACHED
        self._cached_exprs = ()

    def translate(
        self,
        schematic: Schematic,
        process_params: ProcessParameters,
        type_table: PrimitiveTypeTable,
    ) -> List[SExpression]:
        """
        Recomputes this strategy's expressions, caches and returns them.

        Any previous result is discarded first. If `translation_step` raises, the
        strategy is left UNCACHED and the error propagates unchanged.
        """
        self.invalidate_cache()
        self._state = TranslationState.COMPUTING
        try:
            exprs = tuple(self.translation_step(schematic, process_params, type_table))
        except Exception:
            self.invalidate_cache()
            raise
        self._cached_exprs = exprs
        self._state = TranslationState.CACHED
        logger.debug(f"{self.name} produced {len(exprs)} expression(s).")
        return list(exprs)

    @abstractmethod
    def translation_step(
        self,
        schematic: Schematic,
        process_params: ProcessParameters,
        type_table: PrimitiveTypeTable,
    ) -> List[SExpression]:
        """Computes this strategy's expressions. Must not consult the cache."""
        raise NotImplementedError

    def get_translated_exprs(self) -> List[SExpression]:
        if self._state is not TranslationState.CACHED:
            raise TranslationStateError(strategy_name=self.name, state=self._state.value)
        return list(self._cached_exprs)

    # --- Topology helpers ---

    @staticmethod
    def get_connecting_channel(
        schematic: Schematic,
        n1: Node,
        n2: Node,
        directed: bool = False,
    ) -> Optional[Connection]:
        """
        Returns a connection joining `n1` to `n2`, or None.

        The search runs over connections in schematic order, then over the ports of
        `n1`, then over the ports of `n2`, and returns the first hit. A connection
        from a port of `n1` to a port of `n2` always matches; when `directed` is
        False, one from `n2` to `n1` matches as well. If several connections join
        the two nodes, only the first is ever returned.
        """
        for connection in schematic.connections.values():
            for p1 in n1.ports.values():
                for p2 in n2.ports.values():
                    if connection.from_port is p1 and connection.to_port is p2:
                        return connection
                    if not directed and connection.from_port is p2 and connection.to_port is p1:
                        return connection
        return None

    @staticmethod
    def connections_at_port(schematic: Schematic, port: Port) -> List[Tuple[str, Connection]]:
        """Every (name, connection) with an endpoint on exactly this port, in schematic order."""
        return [
            (name, connection) for name, connection in schematic.connections.items()
            if connection.from_port is port or connection.to_port is port
        ]


class TranslationStrategySet(TranslationStrategy):
    """
    A strategy whose step runs each member strategy in list order and concatenates
    their results. Subclasses supply the default membership via
    `default_strategies`; callers may pass an explicit list instead.
    """

    def __init__(self, strategies: Optional[Sequence[TranslationStrategy]] = None):
        super().__init__()
        members = list(strategies) if strategies is not None else list(self.default_strategies())
        for member in members:
            if not isinstance(member, TranslationStrategy):
                raise TypeError(f"{self.name} members must be TranslationStrategy instances, got {type(member).__name__}.")
        self._strategies: Tuple[TranslationStrategy, ...] = tuple(members)

    @classmethod
    def default_strategies(cls) -> Iterable[TranslationStrategy]:
        return ()

    @property
    def strategies(self) -> Tuple[TranslationStrategy, ...]:
        return self._strategies

    def translation_step(self, schematic, process_params, type_table):
        exprs: List[SExpression] = []
        for strategy in self._strategies:
            exprs.extend(strategy.translate(schematic, process_params, type_table))
        return exprs


# --- Shared expression helpers ---

def signed_inflow(schematic: Schematic, port: Port, channel: Connection) -> SExpression:
    """Flow into `port` through `channel`. Flow rates are positive from -> to."""
    flow = names.channel_flow_rate(schematic, channel)
    if channel.to_port is port:
        return flow
    return qfnra.multiply(-1.0, flow)


def sum_of(terms: Sequence[SExpression]) -> SExpression:
    """0.0 for no terms, the term itself for one, an n-ary '+' otherwise."""
    if not terms:
        return RealLiteral(0.0)
    if len(terms) == 1:
        return terms[0]
    return qfnra.add(*terms)


def read_quantity(attributes: Mapping[str, Any], key: str, unit: str, owner: str) -> Optional[float]:
    """
    Reads a numeric attribute as a magnitude in `unit`. Returns None if absent.

    Raises:
        TopologyError: if the attribute is present but is not a finite quantity
            convertible to `unit`.
    """
    raw = attributes.get(key)
    if raw is None:
        return None
    try:
        value = to_magnitude(raw, unit)
    except (pint.PintError, ValueError, TypeError, AttributeError, SyntaxError) as e:
        raise TopologyError(
            details=f"Attribute '{key}' of {owner} has value {raw!r}, which is not a {unit} quantity: {e}",
            entity=owner,
        ) from e
    if not math.isfinite(value):
        raise TopologyError(details=f"Attribute '{key}' of {owner} must be finite, got {raw!r}.", entity=owner)
    return value


def require_quantity(attributes: Mapping[str, Any], key: str, unit: str, owner: str) -> float:
    value = read_quantity(attributes, key, unit, owner)
    if value is None:
        raise TopologyError(details=f"{owner} is missing the required attribute '{key}'.", entity=owner)
    return value


def require_positive_quantity(attributes: Mapping[str, Any], key: str, unit: str, owner: str) -> float:
    """Like `require_quantity`, for physical dimensions and material constants that must be strictly positive."""
    value = require_quantity(attributes, key, unit, owner)
    if value <= 0.0:
        raise TopologyError(
            details=f"Attribute '{key}' of {owner} must be positive, got {attributes[key]!r}.",
            entity=owner,
        )
    return value
