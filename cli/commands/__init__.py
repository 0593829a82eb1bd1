"""One module per CLI mode; each exposes ``run_<mode>(args, analyzer) -> int``."""
