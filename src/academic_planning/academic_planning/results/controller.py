from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import make_login_required
from ..common.http import json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.token_issuer)

    @app.route("/results", methods=["GET", "POST"], endpoint="results")
    @login_required
    def results():
        if request.method == "GET":
            return jsonify(
                container.result_service.list_results(
                    module_id=request.args.get("moduleId", type=int),
                    student_number=request.args.get("numeroEtudiant"),
                    status=request.args.get("statut"),
                )
            )

        return jsonify(container.result_service.create_result(json_body())), 201

    @app.route("/results/<int:result_id>", methods=["GET", "PUT", "DELETE"], endpoint="result_detail")
    @login_required
    def result_detail(result_id: int):
        if request.method == "GET":
            return jsonify(container.result_service.get_result(result_id))

        if request.method == "PUT":
            return jsonify(container.result_service.update_result(result_id, json_body()))

        container.result_service.delete_result(result_id)
        return jsonify({"message": "Résultat supprimé avec succès"})
