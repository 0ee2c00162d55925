"""SafeAlert — emergency alert dispatch engine."""
