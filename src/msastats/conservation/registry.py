"""Registry of alignment statistics by name."""

from typing import Callable, Dict, List, Optional

from ..config import StatisticConfig
from ..exceptions import UnknownStatisticError
from .columns import GapFractionStatistic, PercentIdentityStatistic, ShannonEntropyStatistic
from .statistic import Statistic
from .trident import TridentStatistic
from .wentropy import WeightedEntropyStatistic

StatisticFactory = Callable[[], Statistic]


class StatisticRegistry:
    """Maps statistic names to factories that build fresh instances.

    A registry is populated once at startup and then only read. Names are
    case-insensitive and cannot be registered twice.
    """

    def __init__(self):
        self._factories: Dict[str, StatisticFactory] = {}

    def register(self, name: str, factory: StatisticFactory) -> None:
        """Register a zero-argument factory under a statistic name."""
        key = name.lower()
        if key in self._factories:
            raise ValueError(f"Statistic already registered: {name}")
        self._factories[key] = factory

    def create(self, name: str) -> Statistic:
        """Create a new statistic instance by name."""
        key = name.lower()
        if key not in self._factories:
            raise UnknownStatisticError(name, self.names())
        return self._factories[key]()

    def names(self) -> List[str]:
        """Registered names, in registration order."""
        return list(self._factories)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def build_default_registry(config: Optional[StatisticConfig] = None) -> StatisticRegistry:
    """Create a registry holding every statistic shipped with msastats.

    Args:
        config: Supplies the verbose flag and the trident parameters.
            Defaults are used when omitted.
    """
    if config is None:
        config = StatisticConfig()
    verbose = config.verbose

    registry = StatisticRegistry()
    registry.register("wentropy", lambda: WeightedEntropyStatistic(verbose=verbose))
    registry.register(
        "trident",
        lambda: TridentStatistic(
            exponents=config.trident_exponents,
            matrix_name=config.substitution_matrix,
            verbose=verbose,
        ),
    )
    registry.register("entropy", lambda: ShannonEntropyStatistic(verbose=verbose))
    registry.register("identity", lambda: PercentIdentityStatistic(verbose=verbose))
    registry.register("gaps", lambda: GapFractionStatistic(verbose=verbose))
    return registry
