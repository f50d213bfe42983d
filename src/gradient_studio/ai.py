"""Chat-completion backed gradient generation.

The service is asked for a JSON gradient description. Whatever goes wrong on
the way (unconfigured credentials, transport errors, a non-2xx status, an
empty or malformed completion) is raised as UpstreamError inside this module
and absorbed by ``generate_gradient``, which answers with the fallback
gradient instead.

Configuration
-------------
AZURE_OPENAI_ENDPOINT          base URL of the resource
AZURE_OPENAI_DEPLOYMENT_NAME   deployment (model) identifier
AZURE_OPENAI_API_VERSION       defaults to 2024-02-15-preview
AZURE_OPENAI_API_KEY           sent as a bearer token
GRADIENT_AI_MAX_TOKENS         token cap (500)
GRADIENT_AI_TEMPERATURE        sampling temperature (0.8)
GRADIENT_AI_TIMEOUT            request timeout in seconds (30)
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Mapping

import numpy as np
import requests

from .errors import ParseError, UpstreamError
from .generators import fallback_gradient
from .model import GradientDescription

log = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2024-02-15-preview"

SYSTEM_PROMPT = """You are an AI gradient generator for web designers. Generate CSS gradient configurations based on user descriptions.

Return your response as a valid JSON object with this exact structure:
{
  "kind": "linear" | "radial" | "conic",
  "direction": number (0-360 for linear/conic, ignored for radial),
  "stops": [
    { "color": "#hexcode", "position": number (0-100) }
  ]
}

Guidelines:
- Choose 2-5 color stops that create a beautiful gradient
- Use hex color codes
- For linear gradients, direction is in degrees (0-360)
- Position values should be between 0-100
- Consider the mood and context of the user's prompt
- Create visually appealing color combinations that work well for web design

Examples:
- "sunset" might use warm oranges, reds, and purples
- "ocean" might use blues and teals
- "forest" might use greens and browns
- "cyberpunk" might use neon colors like purples, blues, and pinks"""

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("ignoring %s=%r (not a number)", key, raw)
        return default


@dataclass(frozen=True)
class AIConfig:
    endpoint: str = ""
    deployment: str = ""
    api_key: str = ""
    api_version: str = DEFAULT_API_VERSION
    max_tokens: int = 500
    temperature: float = 0.8
    timeout: float = 30.0

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> AIConfig:
        env = os.environ if env is None else env
        return cls(
            endpoint=(env.get("AZURE_OPENAI_ENDPOINT") or "").strip().rstrip("/"),
            deployment=(env.get("AZURE_OPENAI_DEPLOYMENT_NAME") or "").strip(),
            api_key=(env.get("AZURE_OPENAI_API_KEY") or "").strip(),
            api_version=(env.get("AZURE_OPENAI_API_VERSION") or "").strip() or DEFAULT_API_VERSION,
            max_tokens=int(_env_float(env, "GRADIENT_AI_MAX_TOKENS", 500)),
            temperature=_env_float(env, "GRADIENT_AI_TEMPERATURE", 0.8),
            timeout=_env_float(env, "GRADIENT_AI_TIMEOUT", 30.0),
        )

    @property
    def configured(self) -> bool:
        return bool(self.endpoint and self.deployment and self.api_key)

    @property
    def completions_url(self) -> str:
        base = self.endpoint.rstrip("/")
        return f"{base}/openai/deployments/{self.deployment}/chat/completions?api-version={self.api_version}"


class ChatCompletionClient:
    def __init__(self, config: AIConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session or requests.Session()

    def request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f"Generate a gradient for: {prompt}"},
            ],
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }

    def complete(self, prompt: str) -> str:
        """Return the completion text for ``prompt`` or raise UpstreamError."""
        cfg = self.config
        if not cfg.configured:
            raise UpstreamError("chat completion endpoint is not configured")

        headers = {
            "Authorization": f"Bearer {cfg.api_key}",
            "Content-Type": "application/json",
        }
        try:
            resp = self.session.post(
                cfg.completions_url,
                json=self.request_body(prompt),
                headers=headers,
                timeout=cfg.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamError(f"chat completion request failed: {exc!r}") from exc

        if not 200 <= resp.status_code < 300:
            raise UpstreamError(f"chat completion HTTP {resp.status_code}")

        try:
            data = resp.json()
        except (ValueError, RecursionError) as exc:
            raise UpstreamError("chat completion returned a non-JSON body") from exc

        content = _first_content(data)
        if not content:
            raise UpstreamError("No response from AI")
        return content


def _first_content(data: Any) -> str | None:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None


def adapt(raw: str) -> GradientDescription:
    """Parse a completion into a gradient description or raise ParseError."""
    text = (raw or "").strip()
    m = _FENCE_RE.match(text)
    if m:
        text = m.group(1)
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise ParseError(f"completion is not valid JSON: {exc}") from exc
    return GradientDescription.from_dict(data)


def generate_gradient(
    prompt: str,
    client: ChatCompletionClient,
    rng: np.random.Generator | None = None,
) -> GradientDescription:
    """Ask the model for a gradient; any upstream failure yields the fallback."""
    try:
        return adapt(client.complete(prompt))
    except UpstreamError:
        log.exception("Error generating AI gradient")
        return fallback_gradient(rng)


__all__ = [
    "AIConfig",
    "ChatCompletionClient",
    "DEFAULT_API_VERSION",
    "SYSTEM_PROMPT",
    "adapt",
    "generate_gradient",
]
