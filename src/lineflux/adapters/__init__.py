"""Adapters delivering encoded telemetry to external systems."""
