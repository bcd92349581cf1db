"""Framework-free scoring core: catalog model, policy, calculators, aggregation."""
