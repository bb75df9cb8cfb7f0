from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user, id_str, json_body, login_required, ok, optional_int, required_int
from ..core.enums import Weekday, WeekStatus
from ..core.exceptions import ValidationError
from ..container import Container
from .model import HourEntry


def entry_to_dict(e: HourEntry) -> dict:
    out = {
        "id": id_str(e.entry_id),
        "salarie_id": id_str(e.employee_id),
        "projet_id": id_str(e.project_id),
        "tache_id": id_str(e.task_id),
        "annee": e.year,
        "semaine": e.iso_week,
        "commentaire": e.comment,
        "validation_status": e.status,
        "total": e.total_hours,
        "updated_at": e.updated_at,
    }
    for d in Weekday:
        out[f"heure_{d.column}"] = e.hours_on(d)
    return out


def parse_status(value) -> WeekStatus | None:
    if value in (None, ""):
        return None
    try:
        return WeekStatus(value)
    except ValueError:
        raise ValidationError("Statut non valide")


def register(app: Flask, container: Container) -> None:
    @app.route("/pointages", methods=["GET"], endpoint="list_pointages")
    @login_required
    def list_pointages():
        args = request.args
        rows = container.hour_service.list_entries(
            current_user(),
            employee_id=optional_int(args, "salarie_id"),
            project_id=optional_int(args, "projet_id"),
            year=optional_int(args, "annee"),
            iso_week=optional_int(args, "semaine"),
            status=parse_status(args.get("status")),
        )
        return ok([entry_to_dict(e) for e in rows])

    @app.route("/pointages", methods=["POST"], endpoint="save_pointage")
    @login_required
    def save_pointage():
        data = json_body()
        entry = container.hour_service.upsert_entry(
            current_user(),
            project_id=required_int(data, "projet_id"),
            task_id=required_int(data, "tache_id"),
            year=required_int(data, "annee"),
            iso_week=required_int(data, "semaine"),
            day_hours={d: data.get(f"heure_{d.column}") for d in Weekday},
            comment=data.get("commentaire"),
            employee_id=optional_int(data, "salarie_id"),
        )
        return ok(entry_to_dict(entry))

    @app.route("/pointages/<int:entry_id>", methods=["DELETE"], endpoint="delete_pointage")
    @login_required
    def delete_pointage(entry_id: int):
        container.hour_service.delete_entry(current_user(), entry_id)
        return ok({"success": True, "message": "Pointage supprimé"})
