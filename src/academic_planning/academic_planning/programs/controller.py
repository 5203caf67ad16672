from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import current_identity, make_login_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.token_issuer)

    @app.route("/programs", methods=["GET", "POST"], endpoint="programs")
    @login_required
    def programs():
        user_id = current_identity().user_id
        if request.method == "GET":
            return jsonify(
                container.program_service.list_programs(
                    user_id=user_id,
                    search=request.args.get("search"),
                    status=request.args.get("status"),
                )
            )

        program = container.program_service.create_program(user_id=user_id, payload=json_body())
        return jsonify(program), 201

    @app.route("/programs/<int:program_id>", methods=["GET", "DELETE"], endpoint="program_detail")
    @login_required
    def program_detail(program_id: int):
        if request.method == "GET":
            return jsonify(container.program_service.get_program(program_id))

        container.program_service.delete_program(program_id)
        return jsonify({"message": "Programme supprimé avec succès"})
