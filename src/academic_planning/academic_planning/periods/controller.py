from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import make_login_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.token_issuer)

    @app.route("/periods", methods=["GET", "POST"], endpoint="periods")
    @login_required
    def periods():
        if request.method == "GET":
            return jsonify(container.period_service.list_periods())

        return jsonify(container.period_service.create_period(json_body())), 201

    @app.route("/periods/active", methods=["GET"], endpoint="period_active")
    @login_required
    def period_active():
        return jsonify(container.period_service.get_active_period())

    @app.route("/periods/<int:period_id>", methods=["GET", "PUT", "DELETE"], endpoint="period_detail")
    @login_required
    def period_detail(period_id: int):
        if request.method == "GET":
            return jsonify(container.period_service.get_period(period_id))

        if request.method == "PUT":
            return jsonify(container.period_service.update_period(period_id, json_body()))

        container.period_service.delete_period(period_id)
        return jsonify({"message": "Période supprimée avec succès"})
