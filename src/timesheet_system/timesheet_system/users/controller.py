from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.web import current_user, id_str, json_body, login_required, ok
from ..core.constants import DEFAULT_SESSION_DAYS
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        s_user = container.auth_service.authenticate(str(data.get("username", "")), str(data.get("password", "")))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value

        return ok(
            {
                "success": True,
                "message": "Connexion réussie",
                "user": {"id": id_str(s_user.user_id), "nom": s_user.full_name, "role": s_user.role},
            }
        )

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok({"success": True, "message": "Déconnexion réussie"})

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        u = current_user()
        return ok({"id": id_str(u.user_id), "nom": u.full_name, "role": u.role})
