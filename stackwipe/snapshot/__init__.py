"""Resource discovery: per-kind collectors and the catalog built from them."""
