import logging
import secrets

from flask import Blueprint, Response, jsonify, redirect, render_template, request, session, url_for

from scheduler.jobs import sync_all_reports
from services import token_service, xero_service
from services.errors import RemoteTimeoutError, XeroSyncError

logger = logging.getLogger(__name__)

bp = Blueprint("web", __name__, template_folder="templates")


def _text(body: str, status: int) -> Response:
    return Response(body, status, mimetype="text/plain")


@bp.route("/")
def index():
    return render_template("index.html")


@bp.route("/auth")
def auth():
    state = secrets.token_urlsafe(16)
    session["oauth_state"] = state
    return redirect(xero_service.build_consent_url(state))


@bp.route("/callback")
def callback():
    code = request.args.get("code")
    expected_state = session.pop("oauth_state", None)
    if not code or request.args.get("state") != expected_state:
        error = request.args.get("error", "missing code or state mismatch")
        logger.error(f"Error during callback: {error}")
        return _text("Authentication error", 500)

    try:
        token_set = xero_service.exchange_code(code)
        token_service.save(token_set)
    except XeroSyncError as e:
        logger.error(f"Error during callback: {e}")
        return _text("Authentication error", 500)

    return redirect(url_for("web.balance_sheet"))


@bp.route("/BalanceSheet")
def balance_sheet():
    try:
        sync_all_reports()
    except RemoteTimeoutError as e:
        logger.error(f"Request timed out: {e}")
        return _text("Request timed out. Please try again later.", 504)
    except XeroSyncError as e:
        logger.error(f"Error fetching Balance Sheet reports: {e}")
        return _text("Error fetching Balance Sheet reports.", 500)
    return render_template("synced.html")


@bp.route("/stop", methods=["POST"])
def stop():
    try:
        token_service.clear()
    except Exception as e:
        logger.error(f"Error stopping the process: {e}")
        return jsonify({"message": "Error stopping the process."}), 500
    return jsonify({"message": "Token deleted from DataBase and process stopped."})
