from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import err_response, error, login_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..core.result import Err
from .state import SessionUser


def register(app: Flask, container: Container) -> None:
    def _start_session(user: SessionUser):
        session.clear()
        session["user_id"] = user.user_id
        session["name"] = user.name
        session["emp_code"] = user.emp_code
        session["role"] = user.role.value
        return jsonify(
            {
                "success": True,
                "user": {"id": user.user_id, "name": user.name, "emp_code": user.emp_code},
                "role": user.role.value,
            }
        )

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        pin = str((request.get_json(silent=True) or {}).get("pin") or "")
        try:
            user = container.auth_service.login(pin)
        except ValidationError as e:
            return error(str(e), 400)
        except AuthenticationError as e:
            return error(str(e), 401)
        return _start_session(user)

    @app.route("/login/quick", methods=["POST"], endpoint="login_quick")
    def login_quick():
        try:
            user = container.auth_service.quick_login()
        except AuthenticationError as e:
            return error(str(e), 401)
        return _start_session(user)

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        if "user_id" in session:
            container.history_views.close(session["user_id"])
        session.clear()
        return jsonify({"success": True})

    @app.route("/settings/theme", methods=["GET"], endpoint="theme")
    def theme():
        return jsonify(container.app_state.load(SessionUser.from_session(session)).to_dict())

    @app.route("/settings/theme/toggle", methods=["POST"], endpoint="theme_toggle")
    def theme_toggle():
        return jsonify(container.app_state.toggle_theme(SessionUser.from_session(session)).to_dict())

    @app.route("/users/registered", methods=["GET"], endpoint="registered_users")
    def registered_users():
        return jsonify([u.public_dict() for u in container.registered_users.list()])

    @app.route("/users/registered", methods=["POST"], endpoint="registered_users_add")
    def registered_users_add():
        pin = str((request.get_json(silent=True) or {}).get("pin") or "")
        try:
            user = container.auth_service.register_device_user(pin)
        except ValidationError as e:
            return error(str(e), 400)
        except AuthenticationError:
            return error("Verification Failed", 401)
        return jsonify({"success": True, "user": user.public_dict()}), 201

    @app.route("/users/registered/<int:user_id>", methods=["DELETE"], endpoint="registered_users_remove")
    @login_required
    def registered_users_remove(user_id: int):
        if not container.registered_users.remove(user_id):
            return error("User is not registered", 404)
        return jsonify({"success": True})

    @app.route("/profile", methods=["GET"], endpoint="profile")
    @login_required
    def profile():
        result = container.api_client.get_profile(session.get("emp_code") or "")
        if isinstance(result, Err):
            return err_response(result)
        if not isinstance(result.data, dict) or not result.data.get("user"):
            return error("Failed to load profile data", 502)
        return jsonify({"success": True, "user": result.data["user"]})

    @app.route("/users/lookup", methods=["POST"], endpoint="users_lookup")
    @login_required
    def users_lookup():
        pin = str((request.get_json(silent=True) or {}).get("pin") or "")
        try:
            result = container.auth_service.whoami(pin, requester=Role(session["role"]))
        except AuthorizationError as e:
            return error(str(e), 403)
        except ValidationError as e:
            return error(str(e), 400)
        if isinstance(result, Err):
            return err_response(result)
        return jsonify(result.data)
