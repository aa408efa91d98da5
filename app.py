"""Application entry point for the outing approval bridge."""

from __future__ import annotations

from uuid import uuid4

import structlog
from flask import Flask, Response, jsonify, request
from pydantic import ValidationError
from structlog.contextvars import bind_contextvars, unbind_contextvars
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound

from outing_approval.config import AppSettings, get_settings
from outing_approval.line_client import LineClient
from outing_approval.logging_config import configure_logging
from outing_approval.security import LINE_SIGNATURE_HEADER, is_valid_line_request
from outing_approval.workflow import OutingSubmission, RequestLifecycle, RowStore, build_row_store

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}

_LOGGING_CONFIGURED = False


def _json(payload: dict, status: int = 200) -> Response:
    response = jsonify(payload)
    response.status_code = status
    response.headers["Access-Control-Allow-Origin"] = "*"
    return response


def _client_ip(settings: AppSettings) -> str | None:
    return request.headers.get(settings.client_ip_header) or None


def _register_error_handlers(flask_app: Flask) -> None:
    """Unknown paths and methods answer 404; anything else unexpected is a JSON 500."""

    @flask_app.errorhandler(NotFound)
    @flask_app.errorhandler(MethodNotAllowed)
    def handle_not_found(_error):
        return Response("Not Found", status=404, mimetype="text/plain")

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):  # type: ignore[override]
        if isinstance(error, HTTPException):
            return error
        trace_id = str(uuid4())
        structlog.get_logger().error(
            "unhandled_application_error",
            trace_id=trace_id,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=error,
        )
        return _json({"error": "internal_server_error", "trace_id": trace_id}, status=500)


def create_app(
    *,
    store: RowStore | None = None,
    line_client: LineClient | None = None,
) -> Flask:
    """Create and configure the Flask application."""

    global _LOGGING_CONFIGURED

    settings = get_settings()
    if not _LOGGING_CONFIGURED:
        configure_logging(settings.log_level)
        _LOGGING_CONFIGURED = True

    lifecycle = RequestLifecycle(
        store=store or build_row_store(settings),
        line_client=line_client or LineClient(token=settings.line_token, timeout=settings.http_timeout),
        recipient_id=settings.line_admin_user_id,
    )

    flask_app = Flask(__name__)
    flask_app.extensions["request_lifecycle"] = lifecycle
    _register_error_handlers(flask_app)

    @flask_app.before_request
    def preflight():
        if request.method == "OPTIONS":
            return Response("", status=204, headers=CORS_HEADERS)
        return None

    @flask_app.route("/apply", methods=["POST"])
    def apply():
        trace_id = str(uuid4())
        bind_contextvars(trace_id=trace_id)
        log = structlog.get_logger()
        try:
            data = request.get_json(force=True, silent=True)
            if not isinstance(data, dict):
                log.warning("apply_rejected", reason="invalid_payload")
                return _json({"error": "invalid_payload"}, status=400)

            try:
                submission = OutingSubmission.model_validate(data)
            except ValidationError:
                log.warning("apply_rejected", reason="invalid_payload")
                return _json({"error": "invalid_payload"}, status=400)

            request_id = lifecycle.submit(
                submission,
                client_ip=_client_ip(settings),
                user_agent=request.headers.get("User-Agent"),
            )
            return _json({"id": request_id})
        finally:
            unbind_contextvars("trace_id")

    @flask_app.route("/webhook", methods=["POST"])
    def webhook():
        raw_body = request.get_data(as_text=True)
        if settings.line_channel_secret and not is_valid_line_request(
            channel_secret=settings.line_channel_secret,
            body=raw_body,
            signature=request.headers.get(LINE_SIGNATURE_HEADER, ""),
        ):
            return _json({"error": "invalid_signature"}, status=401)

        trace_id = str(uuid4())
        bind_contextvars(trace_id=trace_id)
        try:
            payload = request.get_json(force=True, silent=True)
            if not isinstance(payload, dict) or not lifecycle.decide(payload):
                return _json({"ok": True})
            return Response("OK", status=200, mimetype="text/plain")
        finally:
            unbind_contextvars("trace_id")

    return flask_app


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    application = create_app()
    application.run(host="0.0.0.0", port=8787, debug=True)
