"""Custom exceptions for the bunny_sim package."""


class BunnySimError(Exception):
    """Base exception for bunny_sim package."""
    pass


class ConfigurationError(BunnySimError):
    """Configuration validation or loading error."""
    pass


class SimulationError(BunnySimError):
    """Simulation execution error."""
    pass


class InvariantError(SimulationError):
    """Internal bookkeeping is out of sync (a programming defect)."""
    pass
