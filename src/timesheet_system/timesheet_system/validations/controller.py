from __future__ import annotations

from flask import Flask, request

from ..absences.controller import absence_to_dict
from ..accounting.model import PeriodTotals, WeeklyTotals
from ..common.weeks import current_week, now_local, selectable_years, week_label, weeks_of_year
from ..common.web import current_user, id_str, json_body, login_required, manager_required, ok, optional_int, required_int
from ..container import Container
from ..holidays.controller import holiday_to_dict
from ..hours.controller import entry_to_dict
from .model import WeekValidation
from .queue import PendingEmployeeGroup
from .service import WeekView
from .summary import WeekSummary


def totals_to_dict(t: WeeklyTotals) -> dict:
    return {
        "heures_travaillees": t.worked_hours,
        "heures_absence": dict(t.absence_hours),
        "heures_absence_payees": t.payable_absence_hours,
        "heures_maladie": t.sick_hours,
        "heures_feriees": t.holiday_hours,
        "total": t.total_hours,
        "heures_normales": t.normal_hours,
        "heures_sup": t.overtime_hours,
        "heures_dues": t.owed_hours,
        "heures_reportees": t.carried_over_owed,
        "heures_rattrapees": t.recovered_hours,
        "heures_dues_cumulees": t.cumulative_owed,
        "total_par_jour": {d.column: h for d, h in t.hours_by_day.items()},
    }


def period_to_dict(p: PeriodTotals) -> dict:
    return {
        "semaines": p.weeks,
        "total": p.total_hours,
        "heures_sup": p.overtime_hours,
        "heures_dues": p.owed_hours,
        "heures_rattrapees": p.recovered_hours,
    }


def validation_to_dict(v: WeekValidation) -> dict:
    return {
        "id": id_str(v.validation_id),
        "salarie_id": id_str(v.employee_id),
        "annee": v.year,
        "semaine": v.iso_week,
        "status": v.status,
        "total_heures": v.total_hours,
        "heures_dues": v.owed_hours,
        "soumis_le": v.submitted_at,
        "valide_par": id_str(v.validated_by),
        "valide_le": v.validated_at,
        "commentaire": v.comment,
    }


def week_view_to_dict(view: WeekView) -> dict:
    return {
        "salarie_id": id_str(view.employee_id),
        "annee": view.key.year,
        "semaine": view.key.week,
        "libelle": week_label(view.key.year, view.key.week),
        "lundi": view.monday,
        "dimanche": view.sunday,
        "jours": list(view.days),
        "pointages": [entry_to_dict(e) for e in view.entries],
        "conges": [absence_to_dict(r) for r in view.absences],
        "absences_par_jour": {
            a.day.column: (a.absence_type.value if a.absence_type else None) for a in view.day_absences
        },
        "jours_feries": [holiday_to_dict(h) for h in view.holidays],
        "validation": validation_to_dict(view.validation),
        "totaux": totals_to_dict(view.totals),
    }


def group_to_dict(g: PendingEmployeeGroup) -> dict:
    return {
        "salarie_id": id_str(g.employee_id),
        "nom": g.full_name,
        "semaines": [
            {
                "annee": p.key.year,
                "semaine": p.key.week,
                "libelle": week_label(p.key.year, p.key.week),
                "validation": validation_to_dict(p.validation),
                "totaux": totals_to_dict(p.totals),
            }
            for p in g.weeks
        ],
        "totaux": period_to_dict(g.totals),
    }


def summary_to_dict(s: WeekSummary) -> dict:
    return {
        "annee": s.key.year,
        "semaine": s.key.week,
        "libelle": week_label(s.key.year, s.key.week),
        "salaries": [
            {
                "salarie_id": id_str(r.employee_id),
                "nom": r.full_name,
                "status": r.status,
                "totaux": totals_to_dict(r.totals),
                "projets": [{"projet_id": id_str(p), "heures": h} for p, h in sorted(r.hours_by_project.items())],
            }
            for r in s.rows
        ],
        "statuts": {status.value: n for status, n in s.status_counts.items()},
        "total": s.total_hours,
        "heures_sup": s.overtime_hours,
        "heures_dues": s.owed_hours,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/pointages/semaine/<int:annee>/<int:semaine>", methods=["GET"], endpoint="week_pointages")
    @login_required
    def week_pointages(annee: int, semaine: int):
        view = container.validation_service.week_view(
            current_user(), annee, semaine, employee_id=optional_int(request.args, "salarie_id")
        )
        return ok(week_view_to_dict(view))

    @app.route("/pointages/soumettre", methods=["POST"], endpoint="submit_week")
    @login_required
    def submit_week():
        data = json_body()
        v = container.validation_service.submit(current_user(), required_int(data, "annee"), required_int(data, "semaine"))
        return ok({"success": True, "message": "Semaine soumise", "validation": validation_to_dict(v)})

    @app.route("/pointages/valider", methods=["POST"], endpoint="validate_week")
    @manager_required
    def validate_week():
        data = json_body()
        v = container.validation_service.validate(
            current_user(),
            required_int(data, "salarie_id"),
            required_int(data, "annee"),
            required_int(data, "semaine"),
            data.get("commentaire"),
        )
        return ok({"success": True, "message": "Semaine validée", "validation": validation_to_dict(v)})

    @app.route("/pointages/rejeter", methods=["POST"], endpoint="reject_week")
    @manager_required
    def reject_week():
        data = json_body()
        v = container.validation_service.reject(
            current_user(),
            required_int(data, "salarie_id"),
            required_int(data, "annee"),
            required_int(data, "semaine"),
            data.get("commentaire"),
        )
        return ok({"success": True, "message": "Semaine rejetée", "validation": validation_to_dict(v)})

    @app.route("/pointages/reouvrir", methods=["POST"], endpoint="reopen_week")
    @manager_required
    def reopen_week():
        data = json_body()
        v = container.validation_service.reopen(
            current_user(),
            required_int(data, "salarie_id"),
            required_int(data, "annee"),
            required_int(data, "semaine"),
        )
        return ok({"success": True, "message": "Semaine réouverte", "validation": validation_to_dict(v)})

    @app.route("/pointages/validations/en-attente", methods=["GET"], endpoint="pending_weeks")
    @manager_required
    def pending_weeks():
        groups = container.queue_service.pending_for_manager(current_user())
        return ok([group_to_dict(g) for g in groups])

    @app.route("/pointages/resume", methods=["GET"], endpoint="week_summary")
    @manager_required
    def week_summary():
        summary = container.summary_service.week_summary(
            current_user(), required_int(request.args, "annee"), required_int(request.args, "semaine")
        )
        return ok(summary_to_dict(summary))

    @app.route("/semaines", methods=["GET"], endpoint="list_weeks")
    @login_required
    def list_weeks():
        year = optional_int(request.args, "annee") or now_local().year
        return ok({"annee": year, "semaines": weeks_of_year(year), "annees": selectable_years()})

    @app.route("/semaines/courante", methods=["GET"], endpoint="current_week")
    @login_required
    def get_current_week():
        key = current_week()
        return ok({"annee": key.year, "semaine": key.week, "libelle": week_label(key.year, key.week)})
