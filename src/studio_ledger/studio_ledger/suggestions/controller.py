from __future__ import annotations

from flask import Flask

from ..api import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/suggestion", methods=["GET"], endpoint="suggestion_get")
    def suggestion_get():
        suggestion = container.suggestion_provider.suggest(container.load_state())
        return ok({"type": suggestion.kind.value, "message": suggestion.message})
