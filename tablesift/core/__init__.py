"""Core data model, configuration, results, observers and the profiling engine."""
