"""HTTP surface over the analytics engine."""
