"""HTTP surface for the aggregated status snapshot."""
