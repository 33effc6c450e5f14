from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..common.http import client_ip, error_response, json_body, validation_response
from ..container import Container
from ..core.enums import AuditAction
from ..core.exceptions import InvalidCredentials, NotFoundError, ValidationError
from ..sessions.decorators import current_user, make_token_required
from .schemas import PasswordChange, ProfileUpdate, parse_request

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.tokens, container.auth_service.get_user)

    def session_payload(user, message: str) -> dict:
        return {
            "message": message,
            "token": container.tokens.issue(user.user_id, user.email),
            "user": user.to_public(),
        }

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        if not container.settings_service.registration_enabled():
            return error_response("Registration is disabled", 403)

        data = json_body()
        try:
            user = container.auth_service.register(
                name=str(data.get("name") or ""),
                email=str(data.get("email") or ""),
                password=str(data.get("password") or ""),
            )
        except ValidationError as e:
            return validation_response(e)

        container.audit_service.record(
            user_email=user.email, action=AuditAction.REGISTER, details="User registered", ip=client_ip()
        )
        return jsonify(session_payload(user, "User registered successfully")), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        try:
            user = container.auth_service.login(
                email=str(data.get("email") or ""),
                password=str(data.get("password") or ""),
            )
        except InvalidCredentials as e:
            return error_response(str(e), 401)

        container.audit_service.record(
            user_email=user.email, action=AuditAction.LOGIN, details="User logged in successfully", ip=client_ip()
        )
        return jsonify(session_payload(user, "Login successful"))

    @app.route("/api/auth/profile", methods=["GET"], endpoint="auth_profile")
    @token_required
    def auth_profile():
        return jsonify({"user": current_user().to_public()})

    @app.route("/api/auth/profile", methods=["PUT"], endpoint="auth_update_profile")
    @token_required
    def auth_update_profile():
        try:
            body = parse_request(ProfileUpdate, json_body())
            user = container.profile_service.update_profile(
                current_user().user_id,
                name=body.name,
                email=body.email,
                current_password=body.currentPassword,
                new_password=body.newPassword,
            )
        except ValidationError as e:
            return validation_response(e)
        except InvalidCredentials as e:
            return error_response(str(e), 400)
        except NotFoundError as e:
            return error_response(str(e), 404)

        return jsonify({"message": "Profile updated successfully", "user": user.to_public()})

    @app.route("/api/auth/change-password", methods=["POST"], endpoint="auth_change_password")
    @token_required
    def auth_change_password():
        try:
            body = parse_request(PasswordChange, json_body())
            container.profile_service.change_password(
                current_user().user_id,
                current_password=body.currentPassword or "",
                new_password=body.newPassword or "",
            )
        except ValidationError as e:
            return validation_response(e)
        except InvalidCredentials as e:
            return error_response(str(e), 400)
        except NotFoundError as e:
            return error_response(str(e), 404)

        return jsonify({"message": "Password changed successfully"})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    @token_required
    def auth_logout():
        # Tokens are stateless; the client discards its copy.
        logger.info("User logged out: %s", current_user().email)
        return jsonify({"message": "Logged out successfully"})

    @app.route("/api/auth/verify", methods=["GET"], endpoint="auth_verify")
    @token_required
    def auth_verify():
        user = current_user()
        return jsonify({"valid": True, "user": {"id": user.user_id, "email": user.email, "name": user.name}})
