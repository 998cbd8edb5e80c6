"""Instruction prompt and response schema for policy extraction."""

from __future__ import annotations

from typing import Any

EXTRACTION_PROMPT = """\
Analyze the provided image of a company policy or code of conduct.
Extract the visible text and structure it as JSON.
The content is likely in Arabic; keep the original language and wording.
Identify the company name and the document title, then split the remaining
content into logical sections, each with a title and an ordered list of
specific rules or points. Keep the order in which they appear in the image.
Include the document date if one is present.
"""

POLICY_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "companyName": {
            "type": "string",
            "description": "Name of the company mentioned",
        },
        "documentTitle": {
            "type": "string",
            "description": "Title of the document (e.g. Code of Conduct)",
        },
        "date": {
            "type": "string",
            "description": "Date if present, or current date",
        },
        "sections": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "rules": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["title", "rules"],
            },
        },
    },
    "required": ["companyName", "documentTitle", "sections"],
}


def build_messages(image_data_url: str) -> list[dict[str, Any]]:
    """Single multimodal user message: the image first, then the instructions."""
    return [
        {
            "role": "user",
            "content": [
                {"type": "image_url", "image_url": {"url": image_data_url}},
                {"type": "text", "text": EXTRACTION_PROMPT},
            ],
        }
    ]
