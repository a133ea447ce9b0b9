"""Anthropic API integration for preference analysis.

Wraps the Messages API behind a single `complete()` call with an explicit
timeout. Every SDK failure surfaces as UpstreamError so callers handle
exactly one exception type.
"""

import json
import logging
import re
from pathlib import Path

from anthropic import Anthropic, APIError

from .errors import UpstreamError

logger = logging.getLogger(__name__)

# Path to system prompt
SYSTEM_PROMPT_PATH = Path(__file__).parent / "prompts" / "preference_system_prompt.txt"

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


def load_system_prompt() -> str:
    """Load the system prompt from file."""
    with open(SYSTEM_PROMPT_PATH, "r") as f:
        return f.read()


def _extract_text_from_response(response) -> str:
    """Extract text content from Claude response."""
    for block in response.content:
        if hasattr(block, "text"):
            return block.text
    block_types = [type(b).__name__ for b in response.content]
    logger.warning(f"No text in response, block types: {block_types}")
    return ""


def parse_json_object(text: str) -> dict:
    """Parse the first JSON object in free model output.

    Accepts bare JSON, a ```json fenced block, or prose around one object.

    Raises:
        UpstreamError: If no JSON object can be decoded.
    """
    candidates = [text.strip()]
    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise UpstreamError(f"Model output is not a JSON object: {text[:200]!r}")


class AnthropicInference:
    """Inference capability backed by the Anthropic Messages API."""

    def __init__(self, api_key: str, model: str, timeout: float, max_tokens: int = 1024):
        self.client = Anthropic(api_key=api_key, max_retries=0)
        self.model = model
        self.timeout = timeout
        self.max_tokens = max_tokens

    def complete(self, system: str, prompt: str) -> str:
        """Send one user prompt and return the text of the reply.

        Raises:
            UpstreamError: On connection failure, timeout, API error or an
                empty reply.
        """
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as e:
            raise UpstreamError(f"{type(e).__name__}: {e}") from e

        logger.debug(
            f"Inference done: {response.usage.input_tokens} in, "
            f"{response.usage.output_tokens} out"
        )

        text = _extract_text_from_response(response)
        if not text:
            raise UpstreamError("Empty response from inference service")
        return text
