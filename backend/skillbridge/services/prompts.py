import json
from functools import lru_cache
from pathlib import Path
from typing import Tuple

# Prompt templates live next to the package as JSON: {"system": ..., "user_template": ...}
PROMPTS_DIR = Path(__file__).resolve().parents[1] / "prompts"


@lru_cache(maxsize=None)
def load_prompt(name: str) -> Tuple[str, str]:
    with (PROMPTS_DIR / f"{name}.json").open("r", encoding="utf-8") as f:
        data = json.load(f)
    return data["system"], data["user_template"]
