"""HTTP clients used by the paginator."""
