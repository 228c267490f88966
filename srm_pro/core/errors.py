"""Error taxonomy for the SRM Pro calculation engine."""


class SRMError(Exception):
    """Base class for all SRM Pro engine errors."""


class InvalidInputError(SRMError, ValueError):
    """Raised when a configuration cannot be evaluated.

    Covers non-finite, negative or out-of-domain inputs and numerical edge
    cases (near-zero throat area, vanishing mass flow) that would otherwise
    produce NaN or infinite results. No partial result accompanies it.
    """


class InvalidGeometryError(InvalidInputError):
    """Raised when a grain geometry is non-physical (core >= outer diameter)."""
