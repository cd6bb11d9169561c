"""
Travel Kernel

Value objects and infrastructure for the travel reimbursement engines:
- Unit-tagged decimal quantities (no floats, no implicit unit coercion)
- Typed exceptions with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
