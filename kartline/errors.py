class KartlineError(Exception):
    """Base class for racing line errors."""


class InsufficientPointsError(KartlineError, ValueError):
    """Input has too few points for the requested operation."""


class OptimizationCancelled(KartlineError):
    """A running optimization was superseded or cancelled."""


class ConfigError(KartlineError, ValueError):
    """Invalid configuration file or value."""
