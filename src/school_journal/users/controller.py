from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.http import error_response, json_body
from ..core.constants import RESET_ACTION
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def api_login():
        try:
            body = json_body()
            user = container.auth_service.authenticate(
                body.get("role"), body.get("identifier"), body.get("password")
            )
            return jsonify(user.to_dict()), 200
        except ValidationError as e:
            return error_response(400, str(e), key="error")
        except AuthenticationError as e:
            return error_response(401, str(e), key="error")
        except Exception as e:
            logger.exception("Login handler error")
            return error_response(500, "An unexpected error occurred", str(e), key="error")

    @app.route("/api/users", methods=["GET"], endpoint="api_users_list")
    def api_users_list():
        try:
            users = container.user_service.list_users()
            return jsonify([u.to_dict() for u in users]), 200
        except Exception as e:
            logger.exception("Error fetching users")
            return error_response(500, "Error fetching users", str(e))

    @app.route("/api/users", methods=["POST"], endpoint="api_users_create")
    def api_users_create():
        try:
            user = container.user_service.create_user(json_body())
            logger.info("Created user %s (%s)", user.user_id, user.role.value)
            return jsonify(user.to_dict()), 201
        except ValidationError as e:
            return error_response(400, "Bad request", str(e))
        except Exception as e:
            logger.exception("Error creating user")
            return error_response(400, "Bad request", str(e))

    @app.route("/api/users", methods=["PUT"], endpoint="api_users_update")
    def api_users_update():
        try:
            body = json_body()
            if not body.get("id"):
                return error_response(400, "Bad request: Missing user ID.")
            user = container.user_service.update_user(body)
            return jsonify(user.to_dict()), 200
        except NotFoundError as e:
            return error_response(404, str(e))
        except ValidationError as e:
            return error_response(400, "Bad request", str(e))
        except Exception as e:
            logger.exception("Error updating user")
            return error_response(400, "Bad request", str(e))

    @app.route("/api/users", methods=["DELETE"], endpoint="api_users_delete")
    def api_users_delete():
        try:
            if request.args.get("action") == RESET_ACTION:
                container.reset_service.reset_application_data()
                return jsonify({"message": "Application data has been reset."}), 200

            user_id = request.args.get("id")
            if not user_id:
                return error_response(400, "Bad request: Missing or invalid id.")

            container.user_service.delete_user(user_id)
            return jsonify({"message": "User deleted successfully"}), 200
        except Exception as e:
            logger.exception("Error deleting user")
            return error_response(500, "Error deleting user", str(e))
