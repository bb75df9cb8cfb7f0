from __future__ import annotations

from flask import Flask, request

from ..common.weeks import now_local
from ..common.web import current_user, id_str, login_required, ok, optional_int
from ..container import Container
from .model import Holiday


def holiday_to_dict(h: Holiday) -> dict:
    return {"id": id_str(h.holiday_id), "date_ferie": h.holiday_date, "libelle": h.label}


def register(app: Flask, container: Container) -> None:
    @app.route("/conges/jours-feries", methods=["GET"], endpoint="list_jours_feries")
    @login_required
    def list_jours_feries():
        year = optional_int(request.args, "annee") or now_local().year
        return ok([holiday_to_dict(h) for h in container.holiday_service.list_for_year(year)])

    @app.route("/conges/jours-feries/init/<int:annee>", methods=["POST"], endpoint="init_jours_feries")
    @login_required
    def init_jours_feries(annee: int):
        created = container.holiday_service.init_year(current_user(), annee)
        return ok({"success": True, "annee": annee, "jours": [holiday_to_dict(h) for h in created]})
