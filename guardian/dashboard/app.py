"""
Dashboard Flask Application
JSON API over the moderation pipeline for the presentation layer
"""

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from guardian.config import config
from guardian.moderation import (
    ContentModerationPipeline,
    InvalidInputError,
    PipelineBusyError,
)
from .runner import PipelineRunner

logger = logging.getLogger(__name__)


def create_app(pipeline: ContentModerationPipeline | None = None, runner: PipelineRunner | None = None):
    """Create and configure Flask application"""

    app = Flask(__name__)

    # Enable CORS
    CORS(app)

    if runner is None:
        runner = PipelineRunner(pipeline or ContentModerationPipeline())
    app.extensions["pipeline_runner"] = runner
    pipeline = runner.pipeline

    @app.route('/api/state')
    def get_state():
        """Pipeline state, progress and all collections"""
        try:
            return jsonify(runner.call(pipeline.snapshot))
        except Exception as e:
            return jsonify({"error": str(e)}), 500

    @app.route('/api/results')
    def get_results():
        """Analysis results, most recent first"""
        try:
            results = runner.call(lambda: [r.to_dict() for r in pipeline.results])
            return jsonify(results)
        except Exception as e:
            return jsonify({"error": str(e)}), 500

    @app.route('/api/blocklist')
    def get_blocklist():
        """Blocklist entries, most recent first"""
        try:
            items = runner.call(lambda: [i.to_dict() for i in pipeline.blocklist])
            return jsonify(items)
        except Exception as e:
            return jsonify({"error": str(e)}), 500

    @app.route('/api/stats')
    def get_stats():
        """Session counters plus current blocklist size"""
        try:
            def collect():
                stats = pipeline.stats.to_dict()
                stats["blocklist_size"] = len(pipeline.blocklist)
                return stats

            return jsonify(runner.call(collect))
        except Exception as e:
            return jsonify({"error": str(e)}), 500

    @app.route('/api/notifications')
    def get_notifications():
        """Notifications newer than ?since=<seq>"""
        try:
            since = int(request.args.get('since', 0))
        except ValueError:
            return jsonify({"error": "since must be an integer"}), 400

        try:
            def collect():
                center = pipeline.notifications
                return {
                    "last_seq": center.last_seq,
                    "notifications": [n.to_dict() for n in center.since(since)],
                }

            return jsonify(runner.call(collect))
        except Exception as e:
            return jsonify({"error": str(e)}), 500

    @app.route('/api/analyze', methods=['POST'])
    def analyze():
        """Start analyzing a URL; poll /api/state for progress"""
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return jsonify({"error": "body must be a JSON object"}), 400
        url = data.get("url", "")
        if not isinstance(url, str):
            return jsonify({"error": "url must be a string"}), 400

        try:
            runner.start_analysis(url)
        except InvalidInputError as e:
            return jsonify({"error": str(e)}), 400
        except PipelineBusyError as e:
            return jsonify({"error": str(e)}), 409
        except Exception as e:
            logger.error(f"Failed to start analysis: {e}")
            return jsonify({"error": str(e)}), 500

        return jsonify({"accepted": True, "url": url.strip()}), 202

    @app.route('/api/cancel', methods=['POST'])
    def cancel():
        """Cancel the in-flight classification"""
        try:
            return jsonify({"cancelled": runner.call(pipeline.cancel)})
        except Exception as e:
            return jsonify({"error": str(e)}), 500

    @app.route('/api/blocklist/<item_id>', methods=['DELETE'])
    def remove_from_blocklist(item_id):
        """Remove a blocklist entry; unknown ids are a no-op"""
        try:
            removed = runner.call(pipeline.remove_from_blocklist, item_id)
            return jsonify({"id": item_id, "removed": removed})
        except Exception as e:
            return jsonify({"error": str(e)}), 500

    return app


def run_dashboard(host=None, port=None, debug=False, pipeline: ContentModerationPipeline | None = None):
    """Run dashboard server with automatic fallback ports on bind failure."""
    host = host or config.DASHBOARD_HOST
    port = port or config.DASHBOARD_PORT
    app = create_app(pipeline)
    fallback_ports = [5001, 5050, 8000, 8080]
    candidate_ports: list[int] = []

    for candidate in [port, *fallback_ports]:
        if candidate not in candidate_ports:
            candidate_ports.append(candidate)

    last_error: Exception | None = None

    for selected_port in candidate_ports:
        try:
            print(f"\n🌐 Dashboard running at http://{host}:{selected_port}")
            print("   Press Ctrl+C to stop\n")
            # Reloader would start a second pipeline loop in the child process
            app.run(host=host, port=selected_port, debug=debug, use_reloader=False)
            return
        except OSError as exc:
            last_error = exc
            err_text = str(exc).lower()
            if "address already in use" in err_text or "access permissions" in err_text:
                print(f"⚠️  Port {selected_port} unavailable, trying next port...")
                continue
            raise

    if last_error:
        raise last_error
