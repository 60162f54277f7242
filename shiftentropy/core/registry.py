"""
Estimator Registry - resolves estimator names to instances.

The registry provides:
1. Name lookup for the built-in dispersion estimators
2. Registration of user estimators (any callable (x, dim, nc, tau) -> float)
3. A lazily created global instance
"""

from typing import Callable, Dict, List, Optional

from shiftentropy.core.dispersion import (
    DispersionEntropy,
    EnsembleFuzzyDispersionEntropy,
    FuzzyDispersionEntropy,
)


DEFAULT_ESTIMATOR = 'ensemble_fuzzy_dispersion'


class EstimatorRegistry:
    """
    Registry of subsequence entropy estimators.

    Factories take keyword options (mapping, mappings, normalize) and
    return a callable estimator.
    """

    def __init__(self):
        self._factories: Dict[str, Callable] = {}
        self.register('dispersion', DispersionEntropy)
        self.register('fuzzy_dispersion', FuzzyDispersionEntropy)
        self.register('ensemble_fuzzy_dispersion', EnsembleFuzzyDispersionEntropy)

    def register(self, name: str, factory: Callable) -> None:
        """Register an estimator factory under `name` (replaces an existing one)."""
        self._factories[name] = factory

    def list_estimators(self) -> List[str]:
        """List all available estimator names."""
        return sorted(self._factories.keys())

    def has_estimator(self, name: str) -> bool:
        return name in self._factories

    def create(self, name: str, **options) -> Callable:
        """
        Build an estimator by name.

        Options a factory does not accept are dropped, so one config block
        can serve every estimator (e.g. `mappings` is ensemble-only).
        """
        if name not in self._factories:
            available = ", ".join(self.list_estimators())
            raise KeyError(f"Unknown estimator: '{name}'. Available: {available}")

        factory = self._factories[name]
        accepted = _accepted_options(factory, options)
        return factory(**accepted)


def _accepted_options(factory: Callable, options: dict) -> dict:
    import inspect

    try:
        params = inspect.signature(factory).parameters
    except (TypeError, ValueError):
        return {}
    if any(p.kind == p.VAR_KEYWORD for p in params.values()):
        return dict(options)
    return {k: v for k, v in options.items() if k in params}


# Global registry instance (lazy initialized)
_registry: Optional[EstimatorRegistry] = None


def get_registry() -> EstimatorRegistry:
    """Get or create global estimator registry."""
    global _registry
    if _registry is None:
        _registry = EstimatorRegistry()
    return _registry


def reset_registry():
    """Reset the global registry (for testing)."""
    global _registry
    _registry = None


def get_estimator(name: str = DEFAULT_ESTIMATOR, **options) -> Callable:
    """Shortcut for get_registry().create(name, **options)."""
    return get_registry().create(name, **options)
