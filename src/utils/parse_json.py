import re

import simplejson as jsonplus
from commentjson import loads as cjson_loads

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```\s*$")
_FIRST_OBJECT = re.compile(r"\{[\s\S]*\}")


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned)
        cleaned = _FENCE_CLOSE.sub("", cleaned)
    return cleaned.strip()


def extract_json_text(jsonstr):
    match = _FIRST_OBJECT.search(jsonstr)
    if match is None:
        return jsonstr
    return match.group(0)


def _loads(json_string):
    try:
        return jsonplus.loads(json_string)
    except Exception:
        try:
            return cjson_loads(json_string)
        except Exception:
            return None


def parse_json(json_string):
    """
    Parse a model response that is expected to hold a JSON object.

    Markdown code fences are stripped first. If the remaining text does not
    parse, the first {...} block is extracted and parsed instead. simplejson
    is tried before commentjson so that trailing comments are tolerated.

    Args:
        json_string (str): Raw response text.

    Returns:
        dict | list: The parsed JSON data if successful.
        None: If every strategy fails.
    """
    if not json_string:
        return None

    cleaned = strip_code_fences(json_string)
    parsed = _loads(cleaned)
    if parsed is not None:
        return parsed

    return _loads(extract_json_text(json_string))
