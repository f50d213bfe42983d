"""Gradient Studio web service (Flask).

Compose CSS gradients, ask a hosted chat-completion model for one, and export
the result as CSS text or a PNG/JPEG image.

Endpoints
---------
POST /api/generate-gradient   {"prompt": "..."} -> gradient (fallback on AI failure)
GET  /api/presets             catalog of hand-authored gradients
GET  /api/random              a random gradient
POST /api/css                 gradient -> {"css", "declaration"}
POST /api/export              gradient -> PNG/JPEG (?format=png|jpeg&resolution=4K|8K)

Usage
-----
$ pip install -e .
$ export AZURE_OPENAI_ENDPOINT=... AZURE_OPENAI_DEPLOYMENT_NAME=... AZURE_OPENAI_API_KEY=...
$ python main.py                    # starts on http://127.0.0.1:5000

Without credentials every AI request answers with the fallback gradient.
"""

from __future__ import annotations

import os

from gradient_studio.app import create_app

app = create_app()

if __name__ == "__main__":
    app.run(
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "5000")),
        debug=False,
        threaded=True,
    )
