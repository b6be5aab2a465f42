#!/usr/bin/env python3
import sys
import traceback

from flask import Flask, Response, current_app, jsonify, render_template, request, send_file
from pygments.formatters import HtmlFormatter
from werkzeug.exceptions import HTTPException

from classify import PDF
from errors import InternalFailure, NotFound, ViewerError
from resolver import load_file, raw_mimetype, resolve_content
from settings import ViewerConfig, log
from walker import build_tree, search

# Token colours for both the text view and code blocks inside markdown
HIGHLIGHT_CSS = HtmlFormatter().get_style_defs([".highlight", ".codehilite"])


def viewer_config() -> ViewerConfig:
    return current_app.config["VIEWER"]


def create_app(config: ViewerConfig = None) -> Flask:
    """Build the Flask app serving the workspace at ``config.root``"""
    if config is None:
        config = ViewerConfig.from_env()

    app = Flask(__name__, static_folder="static", static_url_path="")
    app.config["VIEWER"] = config
    app.json.sort_keys = False

    @app.errorhandler(ViewerError)
    def handle_viewer_error(e):
        return jsonify(e.to_dict()), e.status

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            if e.code is None or e.code < 400:
                return e
            return jsonify({"error": e.description}), e.code
        traceback.print_exc()
        log(f"Unhandled error on {request.path}: {e}", "ERROR")
        return jsonify({"error": str(e)}), 500

    @app.route("/")
    def index():
        cfg = viewer_config()
        return render_template(
            "index.html",
            APP_NAME=cfg.app_name,
            PAGE_TITLE=f"{cfg.app_name}: {cfg.root}",
            CRITICAL_ONLY=cfg.critical_only,
        )

    @app.route("/highlight.css")
    def highlight_css():
        return Response(HIGHLIGHT_CSS, mimetype="text/css")

    @app.route("/api/tree")
    def get_tree():
        cfg = viewer_config()
        try:
            tree = build_tree(cfg.root, cfg.root, cfg.policy)
        except OSError as e:
            log(f"Could not read tree under {cfg.root}: {e}", "ERROR")
            raise InternalFailure(str(e))
        return jsonify(tree)

    @app.route("/api/file")
    def get_file():
        cfg = viewer_config()
        abs_path, rel_path, _, category = load_file(cfg, request.args.get("path", ""))
        try:
            payload = resolve_content(abs_path, rel_path, category)
        except FileNotFoundError:
            raise NotFound()
        except Exception as e:
            traceback.print_exc()
            raise InternalFailure(str(e))
        return jsonify(payload)

    @app.route("/api/raw")
    def get_raw():
        cfg = viewer_config()
        abs_path, _, filename, category = load_file(cfg, request.args.get("path", ""))
        try:
            # send_file adds filename*=UTF-8'' for names that are not plain ASCII
            return send_file(
                abs_path,
                mimetype=raw_mimetype(filename, category),
                download_name=filename if category == PDF else None,
            )
        except FileNotFoundError:
            raise NotFound()
        except OSError as e:
            log(f"Could not read {abs_path}: {e}", "ERROR")
            raise InternalFailure(str(e))

    @app.route("/api/search")
    def get_search():
        cfg = viewer_config()
        try:
            results = search(cfg.root, request.args.get("q", ""), cfg.policy)
        except OSError as e:
            log(f"Search failed: {e}", "ERROR")
            raise InternalFailure(str(e))
        return jsonify(results)

    return app


def main():
    # Positional overrides: app.py [root] [port]
    root = sys.argv[1] if len(sys.argv) > 1 else None
    port = None
    if len(sys.argv) > 2:
        try:
            port = int(sys.argv[2])
        except ValueError:
            log(f"Invalid port: {sys.argv[2]}", "ERROR")
            sys.exit(1)

    try:
        config = ViewerConfig.from_env().with_overrides(root=root, port=port)
    except ValueError as e:
        log(f"Invalid configuration: {e}", "ERROR")
        sys.exit(1)
    app = create_app(config)

    log(f"Viewer running at http://{config.host}:{config.port}")
    log(f"Serving files from: {config.root}")
    if config.critical_only:
        log(f"Critical-only mode: {', '.join(config.policy.critical_dir_prefixes)}")
    app.run(host=config.host, port=config.port)


if __name__ == "__main__":
    main()
