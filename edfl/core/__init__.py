"""Physics model, integrator and cavity solver."""
