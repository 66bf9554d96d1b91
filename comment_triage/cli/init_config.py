"""Write a starter triage.yaml with every option spelled out."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from ..config import default_model_path
from ..triage_config import TriageConfig

HEADER = """\
# Comment triage configuration
#
# spam.threshold: minimum cosine similarity to the closest spam example
# embedding.model_path: cached word vectors (retrained if missing or unreadable)
# triage.per_unit_timeout_seconds: comments slower than this are dropped
# sentiment.*_words: matched as lower-case substrings

"""


def generate_config(cache_model: bool = True) -> TriageConfig:
    """Default config, optionally pointing at the shared model cache."""
    config = TriageConfig.default()
    if not cache_model:
        return config
    return replace(config, embedding_model_path=default_model_path(config.embedding_vector_size))


def init_config(output: Path, cache_model: bool = True, force: bool = False) -> bool:
    """Write the config file. Returns False if it exists and force is off."""
    if output.exists() and not force:
        print(f"{output} already exists (use --force to overwrite)")
        return False

    config = generate_config(cache_model=cache_model)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(HEADER + config.to_yaml())

    print(f"Wrote {output}")
    return True
