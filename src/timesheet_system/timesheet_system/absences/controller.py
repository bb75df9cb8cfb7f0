from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user, id_str, json_body, login_required, manager_required, ok, optional_int, required_int
from ..core.enums import WORKDAYS, AbsenceType
from ..container import Container
from ..hours.controller import parse_status
from .model import AbsenceRecord, normalize_flags


def absence_to_dict(r: AbsenceRecord) -> dict:
    out = {
        "id": id_str(r.absence_id),
        "salarie_id": id_str(r.employee_id),
        "annee": r.year,
        "semaine": r.iso_week,
        "type_conge": r.absence_type,
        "libelle": r.absence_type.label,
        "motif": r.reason,
        "validation_status": r.status,
        "statut_approbation": r.approval,
        "nb_jours": r.days_count,
        "valide_par": id_str(r.decided_by),
        "valide_le": r.decided_at,
        "commentaire": r.comment,
    }
    for d in WORKDAYS:
        out[f"cp_{d.column}"] = r.flags[int(d)]
    return out


def register(app: Flask, container: Container) -> None:
    @app.route("/conges", methods=["GET"], endpoint="list_conges")
    @login_required
    def list_conges():
        args = request.args
        rows = container.absence_service.list_absences(
            current_user(),
            employee_id=optional_int(args, "salarie_id"),
            year=optional_int(args, "annee"),
            iso_week=optional_int(args, "semaine"),
            status=parse_status(args.get("status")),
            approval=parse_status(args.get("statut_approbation")),
        )
        return ok([absence_to_dict(r) for r in rows])

    @app.route("/conges", methods=["POST"], endpoint="save_conge")
    @login_required
    def save_conge():
        data = json_body()
        flags = normalize_flags({d: data.get(f"cp_{d.column}", False) for d in WORKDAYS})
        default_type = data.get("type_conge") or AbsenceType.PAID_LEAVE.value
        day_types = {d: data.get(f"type_{d.column}") or default_type for d in WORKDAYS if flags[int(d)]}
        records = container.absence_service.replace_week_absences(
            current_user(),
            year=required_int(data, "annee"),
            iso_week=required_int(data, "semaine"),
            day_types=day_types,
            reason=data.get("motif"),
            employee_id=optional_int(data, "salarie_id"),
        )
        return ok([absence_to_dict(r) for r in records])

    @app.route("/conges/<int:absence_id>/soumettre", methods=["POST"], endpoint="submit_conge")
    @login_required
    def submit_conge(absence_id: int):
        container.absence_service.submit_absence(current_user(), absence_id)
        return ok({"success": True, "message": "Absence soumise"})

    @app.route("/conges/<int:absence_id>/valider", methods=["POST"], endpoint="validate_conge")
    @manager_required
    def validate_conge(absence_id: int):
        data = json_body()
        container.absence_service.validate_absence(current_user(), absence_id, data.get("commentaire"))
        return ok({"success": True, "message": "Absence validée"})

    @app.route("/conges/<int:absence_id>/rejeter", methods=["POST"], endpoint="reject_conge")
    @manager_required
    def reject_conge(absence_id: int):
        data = json_body()
        container.absence_service.reject_absence(current_user(), absence_id, data.get("commentaire"))
        return ok({"success": True, "message": "Absence rejetée"})

    @app.route("/conges/<int:absence_id>", methods=["DELETE"], endpoint="delete_conge")
    @login_required
    def delete_conge(absence_id: int):
        container.absence_service.delete_absence(current_user(), absence_id)
        return ok({"success": True, "message": "Absence supprimée"})
