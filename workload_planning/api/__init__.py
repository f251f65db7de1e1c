"""HTTP API for workload planning."""
