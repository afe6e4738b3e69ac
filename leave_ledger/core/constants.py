"""
Service-wide constants
"""

SERVICE_NAME = "leave-ledger"
DEFAULT_VERSION = "1.0.0"
