"""Show recommendation scoring."""
