"""Recovery-support tracking backend (FastAPI app + pluggable storage)."""
