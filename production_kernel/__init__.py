"""
Production Kernel

Shared foundation for the project lifecycle engine:
- Immutable project records and the lifecycle phase enum
- Injectable clock (no implicit "now")
- Typed exceptions with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
