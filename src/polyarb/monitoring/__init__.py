"""Console rendering and alerting."""
