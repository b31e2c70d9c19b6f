"""Vision module (flowchart analysis).

Sends the uploaded data URL to an OpenAI-compatible vision model and turns the
reply into explanation items.
"""
import logging
from typing import Any, Dict, List, Optional

from openai import APIConnectionError, APIStatusError, OpenAI

import config
from errors import ConfigError, EmptyResponse, InvalidInput, UpstreamError
from parsing import parse_explanations
from schemas import Explanation

logger = logging.getLogger(__name__)


def build_messages(image_base64: str) -> List[Dict[str, Any]]:
    # The data URL goes straight into the image part, there is no separate upload step.
    return [
        {"role": "system", "content": config.SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": config.USER_INSTRUCTION},
                {"type": "image_url", "image_url": {"url": image_base64}},
            ],
        },
    ]


def make_client(api_key: str) -> OpenAI:
    return OpenAI(
        api_key=api_key,
        base_url=config.API_BASE_URL,
        timeout=config.UPSTREAM_TIMEOUT,
        max_retries=0,
    )


def _message_content(response: Any) -> Optional[str]:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None)


def analyze_flowchart(image_base64: Optional[str], client: Optional[OpenAI] = None) -> List[Explanation]:
    if not image_base64 or not image_base64.strip():
        raise InvalidInput()

    api_key = config.get_api_key()
    if not api_key:
        raise ConfigError()

    if client is None:
        client = make_client(api_key)

    logger.info("[VISION] Analyzing flowchart with %s", config.MODEL_VISION)

    try:
        response = client.chat.completions.create(
            model=config.MODEL_VISION,
            messages=build_messages(image_base64),
            temperature=config.TEMPERATURE,
        )
    except APIStatusError as e:
        logger.error("[VISION] AI API error %s: %s", e.status_code, e.message)
        raise UpstreamError(e.status_code) from e
    except APIConnectionError as e:
        # APITimeoutError is a subclass
        logger.error("[VISION] AI API unreachable: %s", e)
        raise UpstreamError(None, str(e)) from e

    logger.info("[VISION] AI response received")

    content = _message_content(response)
    if not content:
        raise EmptyResponse()

    result = parse_explanations(content)
    logger.info("[VISION] %d explanation(s), %s", len(result.explanations), result.kind)
    return result.explanations
