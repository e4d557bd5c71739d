from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import ApiErrorKind
from ..core.result import Err

CLIENT_ERRORS = frozenset({ApiErrorKind.VALIDATION, ApiErrorKind.REJECTED})


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "msg": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def error(msg: str, status: int):
    return jsonify({"success": False, "msg": msg}), status


def err_response(result: Err):
    return jsonify(result.to_dict()), 400 if result.kind in CLIENT_ERRORS else 502


def int_arg(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
