"""Best-effort extraction of explanation items from a model reply.

The model is asked for a JSON array but nothing guarantees it. A reply is either
turned into a structured list, or wrapped whole into a single fallback item.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from typing import List

from pydantic import TypeAdapter, ValidationError

import config
from schemas import Explanation

logger = logging.getLogger(__name__)

STRUCTURED = "structured"
FALLBACK = "fallback"

_JSON_FENCE = re.compile(r"```json\n?([\s\S]*?)\n?```")
_ANY_FENCE = re.compile(r"```\n?([\s\S]*?)\n?```")

_explanation_list = TypeAdapter(List[Explanation])


@dataclass
class ParseResult:
    kind: str
    explanations: List[Explanation] = field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        return self.kind == FALLBACK


def extract_json_block(text: str) -> str:
    """Return the interior of the first fenced block, or the text itself if there is none.

    A ``json``-tagged fence wins over an untagged one.
    """
    match = _JSON_FENCE.search(text) or _ANY_FENCE.search(text)
    return match.group(1) if match else text


def _decode(candidate: str):
    try:
        return json.loads(candidate)
    except (ValueError, RecursionError):
        return None


def parse_explanations(text: str) -> ParseResult:
    candidate = extract_json_block(text)
    data = _decode(candidate)

    if isinstance(data, list):
        try:
            items = _explanation_list.validate_python(data)
        except ValidationError as e:
            logger.warning("[PARSE] JSON array has malformed items: %s", e.error_count())
        else:
            return ParseResult(kind=STRUCTURED, explanations=items)
    else:
        logger.warning("[PARSE] Reply is not a JSON array, wrapping raw text")

    return ParseResult(
        kind=FALLBACK,
        explanations=[Explanation(term=config.FALLBACK_TERM, explanation=text)],
    )
