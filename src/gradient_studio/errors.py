from __future__ import annotations


class ValidationError(ValueError):
    """Malformed or missing request input; the only error reported as a 4xx."""


class UpstreamError(Exception):
    """The chat-completion call failed or returned something unusable."""


class ParseError(UpstreamError, ValueError):
    """Completion text is not JSON or not shaped like a gradient description."""


class RenderExportError(Exception):
    """Rasterising or encoding an export image failed; safe to retry."""


__all__ = ["ValidationError", "UpstreamError", "ParseError", "RenderExportError"]
