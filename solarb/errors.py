"""
Exception hierarchy for the arbitrage client.

Configuration and graph consistency errors are fatal and end the process.
Quote, refresh and submission errors are contained to a single branch, pool
or opportunity and reported without interrupting the search.
"""

from typing import Any, Dict, Optional


class SolarbError(Exception):
    """Base exception for all arbitrage client errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(SolarbError):
    """Raised for invalid settings, cluster selection or pool configuration."""

    pass


class GraphConsistencyError(SolarbError):
    """Raised when a graph lookup fails for an index that should exist."""

    def __init__(
        self,
        message: str,
        src: Optional[int] = None,
        dst: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.src = src
        self.dst = dst


class QuoteError(SolarbError):
    """Raised when a pricing curve cannot produce an output amount."""

    def __init__(
        self,
        message: str,
        pool: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.pool = pool


class RefreshError(SolarbError):
    """Raised when account data for a pool is missing or malformed."""

    def __init__(
        self,
        message: str,
        pool: Optional[str] = None,
        account: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.pool = pool
        self.account = account


class SubmissionError(SolarbError):
    """Raised when signing, serializing or sending a transaction fails."""

    def __init__(
        self,
        message: str,
        cluster: Optional[str] = None,
        stage: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.cluster = cluster
        self.stage = stage
