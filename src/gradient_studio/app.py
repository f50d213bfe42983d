from __future__ import annotations

import logging
from typing import Any

import numpy as np
from flask import Flask, jsonify, request

from .ai import AIConfig, ChatCompletionClient, generate_gradient
from .css import compile_gradient, css_declaration
from .errors import ParseError, RenderExportError, ValidationError
from .generators import PRESETS, random_gradient
from .model import GradientDescription
from .raster import FORMATS, RESOLUTIONS, export_image

log = logging.getLogger(__name__)


def parse_prompt(body: Any) -> str:
    prompt = body.get("prompt") if isinstance(body, dict) else None
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValidationError("Prompt is required")
    return prompt


def parse_gradient(body: Any) -> GradientDescription:
    try:
        return GradientDescription.from_dict(body)
    except ParseError as exc:
        raise ValidationError(f"invalid gradient: {exc}") from exc


# ----------------------------- Flask app ----------------------------------


def create_app(
    config: AIConfig | None = None,
    *,
    ai_client: ChatCompletionClient | None = None,
    rng: np.random.Generator | None = None,
) -> Flask:
    app = Flask(__name__)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    if ai_client is None:
        ai_client = ChatCompletionClient(config or AIConfig.from_env())
    if not ai_client.config.configured:
        log.warning("chat completion endpoint not configured; AI requests will use the fallback gradient")

    @app.errorhandler(ValidationError)
    def bad_request(exc: ValidationError):
        return jsonify({"error": str(exc)}), 400

    @app.route("/api/generate-gradient", methods=["POST"])
    def generate():
        prompt = parse_prompt(request.get_json(silent=True))
        gradient = generate_gradient(prompt, ai_client, rng)
        return jsonify(gradient.to_dict())

    @app.route("/api/presets")
    def presets():
        return jsonify(
            [
                {"name": name, "gradient": desc.to_dict(), "css": compile_gradient(desc)}
                for name, desc in PRESETS.items()
            ]
        )

    @app.route("/api/random")
    def random():
        return jsonify(random_gradient(rng).to_dict())

    @app.route("/api/css", methods=["POST"])
    def css():
        desc = parse_gradient(request.get_json(silent=True))
        return jsonify({"css": compile_gradient(desc), "declaration": css_declaration(desc)})

    @app.route("/api/export", methods=["POST"])
    def export():
        fmt = (request.args.get("format") or "png").lower()
        resolution = request.args.get("resolution") or "4K"
        if fmt not in FORMATS:
            raise ValidationError(f"unknown format '{fmt}'")
        if resolution not in RESOLUTIONS:
            raise ValidationError(f"unknown resolution '{resolution}'")
        desc = parse_gradient(request.get_json(silent=True))

        try:
            result = export_image(desc, fmt=fmt, resolution=resolution)
        except RenderExportError as exc:
            return jsonify({"error": f"export failed, try again: {exc}"}), 503

        resp = app.response_class(result.data, mimetype=result.mimetype)
        resp.headers["Content-Disposition"] = f'attachment; filename="{result.filename}"'
        return resp

    return app


if __name__ == "__main__":
    create_app().run(debug=False, threaded=True)
