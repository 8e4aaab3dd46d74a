# --- catalog/utils/api.py ---
from datetime import timedelta
from flask import current_app, jsonify

from .dates import utcnow

def _server_time():
    offset = current_app.config.get("API_UTC_OFFSET_HOURS", 0) if current_app else 0
    now = utcnow() + timedelta(hours=offset)
    return now.strftime("%Y-%m-%d %H:%M:%S")

def api_ok(message, data=None):
    return {
        "status": True,
        "message": message,
        "data": data,
        "server_time": _server_time(),
    }

def api_error(message, data=None):
    return {
        "status": False,
        "message": message,
        "data": data,
        "server_time": _server_time(),
    }

# unified response helpers
def ok(message: str, data=None, status_code=200):
    resp = jsonify(api_ok(message, data))
    resp.status_code = status_code
    return resp

def err(message: str, status_code=400, data=None):
    resp = jsonify(api_error(message, data))
    resp.status_code = status_code
    return resp
