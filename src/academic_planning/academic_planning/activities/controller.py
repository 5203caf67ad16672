from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import make_login_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.token_issuer)

    @app.route("/activities", methods=["GET", "POST"], endpoint="activities")
    @login_required
    def activities():
        if request.method == "GET":
            return jsonify(
                container.activity_service.list_activities(
                    program_id=request.args.get("programId", type=int),
                    period_id=request.args.get("periodId", type=int),
                )
            )

        return jsonify(container.activity_service.create_activity(json_body())), 201

    @app.route("/activities/<int:activity_id>", methods=["GET", "PUT", "DELETE"], endpoint="activity_detail")
    @login_required
    def activity_detail(activity_id: int):
        if request.method == "GET":
            return jsonify(container.activity_service.get_activity(activity_id))

        if request.method == "PUT":
            return jsonify(container.activity_service.update_activity(activity_id, json_body()))

        container.activity_service.delete_activity(activity_id)
        return jsonify({"message": "Activité supprimée avec succès"})
