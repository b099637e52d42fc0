"""Turn raw response bodies into what the configured output format shows."""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Union

from rich.markdown import Markdown

from ..core.config import OutputFormat


def _loads(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        return None


def response_text(raw: str) -> str:
    """Return the assistant's text from a response body.

    Understands the OpenAI chat completion shape and Anthropic's native
    messages shape; anything else is returned unchanged.
    """
    data = _loads(raw)
    if not isinstance(data, dict):
        return raw

    choices = data.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        message = choices[0].get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]

    blocks = data.get("content")
    if isinstance(blocks, list):
        texts = [
            b["text"]
            for b in blocks
            if isinstance(b, dict) and b.get("type") == "text" and isinstance(b.get("text"), str)
        ]
        if texts:
            return "\n".join(texts)

    return raw


def render_response(raw: str, output_format: OutputFormat) -> Union[str, Markdown]:
    if output_format is OutputFormat.JSON:
        data = _loads(raw)
        if data is None:
            data = {"response": raw}
        return json.dumps(data, indent=2, ensure_ascii=False)

    text = response_text(raw)
    if output_format is OutputFormat.CSV:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(["role", "content"])
        writer.writerow(["assistant", text])
        return buf.getvalue().rstrip("\n")
    if output_format is OutputFormat.MARKDOWN:
        return Markdown(text)
    return text
