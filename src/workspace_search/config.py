"""Configuration constants for workspace-search."""

import os
from pathlib import Path

# Delay between the last keystroke and the search run.
DEBOUNCE_SECONDS: float = 0.3

# Hard cap on the published result list.
RESULT_LIMIT: int = 20

# Recent searches kept, and the shortest query worth remembering.
HISTORY_CAPACITY: int = 10
HISTORY_MIN_LENGTH: int = 3

SUGGESTION_LIMIT: int = 5
SUGGESTION_MIN_LENGTH: int = 2

# Environment variable pointing at a corpus JSON file. Overrides CORPUS_FILES.
CORPUS_ENV_VAR: str = "WORKSPACE_SEARCH_CORPUS"

# Corpus locations. First file found is used.
CORPUS_FILES: list[Path] = [
    Path("~/.local/share/workspace-search/corpus.json").expanduser(),
    Path("~/.config/workspace-search/corpus.json").expanduser(),
]

# Demo records shipped with the package, used when nothing else is configured.
SAMPLE_CORPUS: Path = Path(__file__).parent / "data" / "sample_corpus.json"


def resolve_corpus_path() -> Path:
    """Return the corpus file to load.

    The environment variable wins, then the first existing CORPUS_FILES entry,
    then the bundled sample corpus.
    """
    env_path = os.environ.get(CORPUS_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    for candidate in CORPUS_FILES:
        if candidate.is_file():
            return candidate
    return SAMPLE_CORPUS
