"""HTTP surface - health check and the catch-all proxy route."""
