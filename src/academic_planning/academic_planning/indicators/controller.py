from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import make_login_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.token_issuer)

    @app.route("/indicators", methods=["GET", "POST"], endpoint="indicators")
    @login_required
    def indicators():
        if request.method == "GET":
            return jsonify(
                container.indicator_service.list_indicators(
                    program_id=request.args.get("programId", type=int),
                    period_id=request.args.get("periodId", type=int),
                    type=request.args.get("type"),
                )
            )

        return jsonify(container.indicator_service.create_indicator(json_body())), 201

    @app.route("/indicators/<int:indicator_id>", methods=["GET", "PUT", "DELETE"], endpoint="indicator_detail")
    @login_required
    def indicator_detail(indicator_id: int):
        if request.method == "GET":
            return jsonify(container.indicator_service.get_indicator(indicator_id))

        if request.method == "PUT":
            return jsonify(container.indicator_service.update_indicator(indicator_id, json_body()))

        container.indicator_service.delete_indicator(indicator_id)
        return jsonify({"message": "Indicateur supprimé avec succès"})
