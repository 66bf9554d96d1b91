"""Environment defaults for comment triage."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Explicit config file (otherwise triage.yaml is searched in the cwd)
TRIAGE_CONFIG = os.environ.get("TRIAGE_CONFIG")

# Logging
LOG_LEVEL = os.environ.get("TRIAGE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def get_cache_dir() -> Path:
    """Get the global cache directory for triage artifacts."""
    # Use XDG_CACHE_HOME if set, otherwise ~/.cache
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / "comment-triage"
    return Path.home() / ".cache" / "comment-triage"


def default_model_path(vector_size: int) -> Path:
    """Cached embedding artifact, keyed by vector size."""
    return get_cache_dir() / f"embeddings-{vector_size}.kv"


def log_file() -> Path:
    return get_cache_dir() / "triage.log"
