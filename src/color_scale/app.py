from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import Flask, jsonify, request

from .adjust import AdjustmentEngine
from .errors import (
    ColorConversionError,
    InvalidColorError,
    InvalidEditError,
    PaletteNotFoundError,
)
from .history import DEBOUNCE_MS
from .scale import DARKEN_DAMPING, LIGHTNESS_CEILING, SCALE_LABELS, ScaleGenerator
from .scheduler import MonotonicClock
from .session import DEFAULT_SEED, ScaleSession
from .store import PaletteStore, SavedPalette

log = logging.getLogger(__name__)

DEFAULTS: Mapping[str, Any] = {
    "DEFAULT_SEED": DEFAULT_SEED,
    "PALETTE_STORE_PATH": None,  # None keeps palettes in memory only
    "HISTORY_DEBOUNCE_MS": DEBOUNCE_MS,
    "LIGHTNESS_CEILING": LIGHTNESS_CEILING,
    "DARKEN_DAMPING": DARKEN_DAMPING,
    "CLAMP_RECOMPUTED": True,
}

EXTENSION = "color_scale"


def palette_json(p: SavedPalette) -> dict[str, Any]:
    return p.to_dict()


def build_session(config: Mapping[str, Any], clock=None) -> ScaleSession:
    return ScaleSession(
        config["DEFAULT_SEED"],
        generator=ScaleGenerator(
            ceiling=float(config["LIGHTNESS_CEILING"]),
            damping=float(config["DARKEN_DAMPING"]),
        ),
        engine=AdjustmentEngine(clamp=bool(config["CLAMP_RECOMPUTED"])),
        store=PaletteStore(config["PALETTE_STORE_PATH"]),
        clock=clock or MonotonicClock(),
        debounce_ms=float(config["HISTORY_DEBOUNCE_MS"]),
    )


def _body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ----------------------------- Flask app ----------------------------------


def create_app(config: Mapping[str, Any] | None = None, *, clock=None) -> Flask:
    app = Flask(__name__)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    app.config.from_mapping(DEFAULTS)
    app.config.from_prefixed_env("COLOR_SCALE")
    if config:
        app.config.from_mapping(config)

    session = build_session(app.config, clock=clock)
    app.extensions[EXTENSION] = session

    def state():
        return jsonify(session.snapshot())

    @app.before_request
    def land_due_commit():
        session.tick()

    @app.errorhandler(InvalidColorError)
    @app.errorhandler(InvalidEditError)
    def bad_input(exc):
        log.info("Rejected input: %s", exc)
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(PaletteNotFoundError)
    def not_found(exc):
        return jsonify({"error": f"unknown palette {exc.args[0]!r}"}), 404

    @app.errorhandler(ColorConversionError)
    def conversion_failed(exc):
        log.exception("Color conversion failed")
        return jsonify({"error": str(exc)}), 500

    @app.route("/")
    def index():
        return state()

    @app.route("/scale")
    def scale():
        seed = request.args.get("seed", app.config["DEFAULT_SEED"])
        result = session.generator.scale(seed)
        return jsonify(
            {
                "seed": result.seed,
                "labels": list(SCALE_LABELS),
                "colors": result.colors,
            }
        )

    @app.route("/seed", methods=["POST"])
    def seed():
        body = _body()
        if "color" in body:
            session.set_seed(body["color"])
        elif {"l", "c", "h"} <= body.keys():
            try:
                l, c, h = (float(body[k]) for k in ("l", "c", "h"))
            except (TypeError, ValueError):
                return jsonify({"error": "l, c and h must be numbers"}), 400
            session.set_seed_oklch(l, c, h)
        else:
            return jsonify({"error": "expected 'color' or 'l', 'c', 'h'"}), 400
        return state()

    @app.route("/slider", methods=["POST"])
    def slider():
        body = _body()
        try:
            index, kind, value = body["index"], str(body["kind"]), body["value"]
        except KeyError:
            return jsonify({"error": "expected 'index', 'kind' and 'value'"}), 400
        session.set_slider(index, kind, value)
        return state()

    @app.route("/undo", methods=["POST"])
    def undo():
        session.undo()
        return state()

    @app.route("/redo", methods=["POST"])
    def redo():
        session.redo()
        return state()

    @app.route("/reset", methods=["POST"])
    def reset():
        kind = _body().get("kind")
        if kind:
            session.reset_kind(kind)
        else:
            session.reset_all()
        return state()

    @app.route("/palettes", methods=["GET"])
    def list_palettes():
        return jsonify(
            {
                "palettes": [palette_json(p) for p in session.palettes()],
                "store_error": session.store.last_error,
            }
        )

    @app.route("/palettes", methods=["POST"])
    def save_palette():
        palette = session.save_palette(_body().get("name"))
        return jsonify(palette_json(palette)), 201

    @app.route("/palettes/<palette_id>/load", methods=["POST"])
    def load_palette(palette_id: str):
        session.load_palette(palette_id)
        return state()

    @app.route("/palettes/<palette_id>", methods=["DELETE"])
    def delete_palette(palette_id: str):
        session.delete_palette(palette_id)
        return "", 204

    return app


if __name__ == "__main__":
    # Single-user local tool: one process, one session.
    create_app().run(debug=False, threaded=False)
