"""Prometheus metrics for the arbitrage client."""
