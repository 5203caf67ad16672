from __future__ import annotations

import io
import json

from flask import Flask, Response, current_app, jsonify, request, send_file

from ..auth.guards import current_identity, make_login_required
from ..container import Container
from ..core.constants import EXPORT_FILENAME, TEMPLATE_FILENAME, XLSX_MIMETYPE
from .template import build_program_template


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.token_issuer)

    @app.route("/programs/template", methods=["GET"], endpoint="program_template")
    def program_template():
        try:
            content = build_program_template()
        except Exception:
            current_app.logger.exception("Program template generation failed")
            return jsonify({"error": "Erreur lors de la génération du template Excel"}), 500

        return send_file(
            io.BytesIO(content),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=TEMPLATE_FILENAME,
        )

    @app.route("/export-data", methods=["GET"], endpoint="export_data")
    @login_required
    def export_data():
        data = container.export_service.export_user_data(user_id=current_identity().user_id)
        return Response(
            json.dumps(data, ensure_ascii=False),
            mimetype="application/json",
            headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
        )

    @app.route("/programs/import", methods=["POST"], endpoint="program_import")
    @login_required
    def program_import():
        upload = request.files.get("file")
        result = container.import_service.import_workbook(
            identity=current_identity(),
            content=upload.read() if upload else None,
        )
        name = result["programme"]["name"]
        return (
            jsonify({"success": True, "message": f'Programme "{name}" importé avec succès', "data": result}),
            201,
        )
