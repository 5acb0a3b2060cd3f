"""Gemini-backed rewriting of legacy HTML snippets into React components.

This is a standalone helper; no ledger data is ever sent to the model.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

FAILURE_MARKER = "// Failed to generate component"

_SYSTEM_INSTRUCTION = (
    "You are a senior React architect expert in migrating legacy "
    "architectures into modern, performant React/Tailwind codebases."
)

_PROMPT = """\
Analyze and transform this legacy HTML snippet into a modern, componentized \
React (JSX) component with Tailwind CSS. Follow "Architectural Synthesis" \
guidelines: declarative event handlers, className instead of class, \
self-closing void elements. Return ONLY the code for a functional React \
component.

Legacy Snippet:
{snippet}
"""


class GeminiTextTransformer:
    """Rewrite markup snippets using Google Gemini."""

    def __init__(self, api_key: str = "", model: str = "gemini-3-pro-preview") -> None:
        self._api_key = api_key
        self._model = model

    def transform(self, snippet: str) -> str:
        """Return the rewritten snippet, or ``FAILURE_MARKER`` if the model
        produced nothing usable.

        Raises:
            ValueError: If no API key is configured.
            ImportError: If google-generativeai is not installed.
        """
        if not self._api_key:
            raise ValueError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: "
                "pip install 'society-ledger[gemini]'"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(
            self._model,
            system_instruction=_SYSTEM_INSTRUCTION,
        )
        response = model.generate_content(
            _PROMPT.format(snippet=snippet),
            generation_config={"temperature": 0.1},
        )

        try:
            text = response.text
        except ValueError:
            # Raised by the SDK when the response has no text parts.
            logger.warning("Gemini returned no text for snippet")
            return FAILURE_MARKER
        return _strip_fences(text) or FAILURE_MARKER


def _strip_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence, if any."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned.strip()
