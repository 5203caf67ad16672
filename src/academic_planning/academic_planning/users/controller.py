from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..auth.guards import SESSION_TOKEN_KEY, current_identity, make_login_required
from ..common.http import json_body
from ..container import Container
from ..core.exceptions import AuthenticationError, ValidationError


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.token_issuer)

    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        payload = json_body()
        email = str(payload.get("email") or "").strip()
        password = str(payload.get("password") or "")
        if not email or not password:
            raise ValidationError("Champs requis: email, password")

        identity = container.auth_service.authenticate(email, password)
        if identity is None:
            app.logger.warning("Failed login for %s", email)
            raise AuthenticationError("Identifiants invalides")

        issued = container.token_issuer.issue(identity)
        session.clear()
        session.permanent = True
        session[SESSION_TOKEN_KEY] = issued.token
        session["user_id"] = identity.user_id
        session["role"] = identity.role.value

        app.logger.info("User %s signed in", identity.user_id)
        return jsonify(
            {
                "user": identity.to_dict(),
                "accessToken": issued.token,
                "expiresAt": issued.expires_at.isoformat(),
            }
        )

    @app.route("/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        session.clear()
        return jsonify({"message": "Déconnecté"})

    @app.route("/auth/session", methods=["GET"], endpoint="auth_session")
    @login_required
    def auth_session():
        return jsonify({"user": current_identity().to_dict()})

    @app.route("/user/preferences", methods=["GET", "PUT"], endpoint="user_preferences")
    @login_required
    def user_preferences():
        user_id = current_identity().user_id
        if request.method == "GET":
            return jsonify({"preferences": container.preference_service.get_preferences(user_id=user_id)})

        preferences = container.preference_service.save_preferences(
            user_id=user_id,
            preferences=json_body().get("preferences"),
        )
        return jsonify({"message": "Préférences sauvegardées avec succès", "preferences": preferences})

    @app.route("/user/profile", methods=["PUT"], endpoint="user_profile")
    @login_required
    def user_profile():
        payload = json_body()
        user = container.profile_service.update_profile(
            user_id=current_identity().user_id,
            name=payload.get("name"),
            current_password=payload.get("currentPassword"),
            new_password=payload.get("newPassword"),
        )
        app.logger.info("User %s updated the profile", user["id"])
        return jsonify({"message": "Profil mis à jour avec succès", "user": user})
