# src/hydromix/errors.py

class HydromixError(Exception):
    """Base exception for hydromix."""
    pass


class DataError(HydromixError):
    """Raised when salts, overrides, targets or reference data are invalid."""
    pass


class OptimizationError(HydromixError):
    """Raised when optimization fails in an unexpected way."""
    pass
