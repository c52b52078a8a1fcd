"""
Core middleware package.

- Error handling that renders every failure as a ``{"message"}`` envelope
- Structured logging with PII masking
- Simulated transport: injected latency and write failures
"""

from core.middleware.error_handling import (
    setup_error_handlers,
    format_validation_errors,
)

from core.middleware.logging import (
    StructuredLoggingMiddleware,
    setup_logging,
    mask_pii,
)

from core.middleware.simulation import (
    SimulatedTransportMiddleware,
    SimulationPolicy,
    WRITE_METHODS,
)

__all__ = [
    # Error handling
    "setup_error_handlers",
    "format_validation_errors",
    # Logging
    "StructuredLoggingMiddleware",
    "setup_logging",
    "mask_pii",
    # Simulated transport
    "SimulatedTransportMiddleware",
    "SimulationPolicy",
    "WRITE_METHODS",
]
