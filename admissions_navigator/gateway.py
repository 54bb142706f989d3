"""Model gateway: client construction and the one structured-output call.

Every agent goes through :func:`generate_json`, so tests only need a fake
object with a ``responses.create`` method.

``OPENAI_API_KEY`` and the ``ADMISSIONS_NAVIGATOR_*`` settings are read
from the environment, after loading a ``.env`` file when one exists.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
import httpx
from openai import OpenAI, OpenAIError

from .intake.schemas import ImagePayload


# Pick up OPENAI_API_KEY and friends from .env.
load_dotenv()

logger = logging.getLogger(__name__)


# Needs to be a vision-capable model: record extraction sends an image.
DEFAULT_MODEL = os.getenv("ADMISSIONS_NAVIGATOR_MODEL", "gpt-4o")

# Image analysis can take a minute or two; still don't hang forever.
DEFAULT_TIMEOUT_S = float(os.getenv("ADMISSIONS_NAVIGATOR_TIMEOUT_S", "120"))


class ModelCallError(RuntimeError):
    """The external model failed or returned something that is not JSON."""


def get_openai_client(api_key: Optional[str] = None) -> OpenAI:
    """Return an OpenAI client configured from environment or explicit key.

    Missing credentials surface as :class:`ModelCallError`, like any other
    failure to reach the model.
    """

    http_client = httpx.Client(timeout=httpx.Timeout(DEFAULT_TIMEOUT_S))

    try:
        if api_key is not None:
            return OpenAI(api_key=api_key, http_client=http_client)
        return OpenAI(http_client=http_client)
    except OpenAIError as e:
        http_client.close()
        raise ModelCallError(f"Could not create the OpenAI client: {e}") from e


def image_part(image: ImagePayload) -> Dict[str, Any]:
    return {"type": "input_image", "image_url": image.data_url()}


def text_part(text: str) -> Dict[str, Any]:
    return {"type": "input_text", "text": text}


def build_input(text: str, image: Optional[ImagePayload] = None, image_first: bool = False) -> List[Dict[str, Any]]:
    """Build the ordered part list for a single user turn.

    The instruction text comes first unless ``image_first`` is set (the OCR
    prompt reads better with the image ahead of the question).
    """
    parts = [text_part(text)]
    if image is not None:
        if image_first:
            parts.insert(0, image_part(image))
        else:
            parts.append(image_part(image))
    return parts


def _field(obj: Any, name: str) -> Any:
    # Response items come back as SDK objects or plain dicts.
    return obj.get(name) if isinstance(obj, dict) else getattr(obj, name, None)


def extract_output_text(resp: Any) -> str:
    """Return the text of the first assistant message, or ``""``."""
    convenience = _field(resp, "output_text")
    if isinstance(convenience, str) and convenience.strip():
        return convenience.strip()

    messages = (item for item in _field(resp, "output") or [] if _field(item, "type") == "message")
    for message in messages:
        for part in _field(message, "content") or []:
            if _field(part, "type") in ("output_text", "text"):
                text = _field(part, "text")
                if isinstance(text, str) and text.strip():
                    return text.strip()
    return ""


def _strip_code_fence(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```"):
        first_newline = raw.find("\n")
        raw = raw[first_newline + 1:] if first_newline != -1 else ""
        if raw.rstrip().endswith("```"):
            raw = raw.rstrip()[:-3]
    return raw.strip()


def parse_json_object(raw: str) -> Dict[str, Any]:
    raw = _strip_code_fence(raw or "")
    if not raw:
        raise ValueError("Empty model output (expected JSON).")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        # Salvage the first {...} block if extra text leaked in.
        start = raw.find("{")
        end = raw.rfind("}")
        if 0 <= start < end:
            data = json.loads(raw[start : end + 1])
        else:
            raise

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}.")
    return data


def generate_json(
    client: Any,
    model: str,
    parts: List[Dict[str, Any]],
    schema_name: str,
    schema: Dict[str, Any],
    instructions: Optional[str] = None,
    max_output_tokens: Optional[int] = None,
) -> Dict[str, Any]:
    """Send one request with a strict JSON schema and return the parsed object.

    There is no retry: callers surface the failure to the user.
    """
    request: Dict[str, Any] = {
        "model": model,
        "input": [{"role": "user", "content": parts}],
        "text": {
            "format": {
                "type": "json_schema",
                "name": schema_name,
                "strict": True,
                "schema": schema,
            }
        },
        "store": False,
    }
    if instructions:
        request["instructions"] = instructions
    if max_output_tokens:
        request["max_output_tokens"] = max_output_tokens

    try:
        resp = client.responses.create(**request)
    except Exception as e:
        logger.warning("Model call %s failed: %s", schema_name, e)
        raise ModelCallError(f"Model call failed: {e}") from e

    raw = extract_output_text(resp)
    try:
        return parse_json_object(raw)
    except (ValueError, json.JSONDecodeError) as e:
        snippet = raw[:1200].replace("\n", "\\n")
        logger.warning("Unparseable %s output: %s", schema_name, snippet)
        raise ModelCallError(f"Failed to parse model JSON. Raw snippet: {snippet}") from e
