# resumatch/ai/parsing.py
from __future__ import annotations

import json
import re

# ```json ... ``` (language tag optional), possibly surrounded by whitespace
_FENCE = re.compile(r"^\s*```[a-zA-Z]*[ \t]*\n?(?P<body>.*?)\n?[ \t]*```\s*$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    m = _FENCE.match(text or "")
    body = m.group("body") if m else (text or "")
    return body.strip()


def parse_json_object(text: str | None) -> dict:
    """Parse a model response into a dict; raises ValueError on empty or malformed output."""
    if text is None or not text.strip():
        raise ValueError("empty response")
    data = json.loads(strip_code_fence(text))
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data
