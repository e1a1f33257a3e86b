from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.http import error_response, json_body
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/journals", methods=["GET"], endpoint="api_journals_list")
    def api_journals_list():
        try:
            journals = container.journal_service.list_journals()
            return jsonify([j.to_dict() for j in journals]), 200
        except Exception as e:
            logger.exception("Error fetching journals")
            return error_response(500, "Error fetching journals", str(e))

    @app.route("/api/journals", methods=["POST"], endpoint="api_journals_create")
    def api_journals_create():
        try:
            entry = container.journal_service.create_journal(json_body())
            return jsonify(entry.to_dict()), 201
        except ValidationError as e:
            return error_response(400, "Bad request", str(e))
        except Exception as e:
            logger.exception("Error creating journal")
            return error_response(400, "Bad request", str(e))

    @app.route("/api/journals", methods=["PUT"], endpoint="api_journals_update")
    def api_journals_update():
        try:
            body = json_body()
            if not body.get("id"):
                return error_response(400, "Bad request: Missing journal ID.")
            entry = container.journal_service.update_journal(body)
            return jsonify(entry.to_dict()), 200
        except NotFoundError as e:
            return error_response(404, str(e))
        except ValidationError as e:
            return error_response(400, "Bad request: Invalid data format.", str(e))
        except Exception as e:
            logger.exception("Error updating journal")
            return error_response(400, "Bad request: Invalid data format.", str(e))

    @app.route("/api/journals", methods=["DELETE"], endpoint="api_journals_delete")
    def api_journals_delete():
        journal_id = request.args.get("id")
        if not journal_id:
            return error_response(400, "Bad request: Missing or invalid id.")
        try:
            container.journal_service.delete_journal(journal_id)
            return jsonify({"message": "Journal deleted successfully"}), 200
        except Exception as e:
            logger.exception("Error deleting journal")
            return error_response(500, "Error deleting journal", str(e))
