# Overview: Flask API routes for the activity and sales query pages and their CSV export.

# backend/agraria/routes/reports.py
"""
Query and export routes.

Filters come from the query string (see reporting_service). The export
endpoints apply the same filters and return a CSV attachment; an empty
result is a 400, not an empty file.
"""
from flask import Blueprint, Response, request, jsonify, current_app

from ..context import get_services
from ..decorators import require_auth, require_permission
from ..services.export_service import CSV_CONTENT_TYPE, ExportError, activities_csv, export_filename, sales_csv
from ..services.reporting_service import ActivityFilters, SalesFilters
from ..validation import ValidationError
from agraria.time_utils import today

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content,
        mimetype="text/csv",
        headers={
            "Content-Type": CSV_CONTENT_TYPE,
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )


def _sale_row(source: str, sale) -> dict:
    data = sale.to_dict()
    data["source"] = source
    data["products"] = sale.products_summary
    return data


@reports_bp.get("/activities")
@require_auth
@require_permission("VIEW_ACTIVITIES")
def activity_query_route():
    try:
        service = get_services().reporting_service
        activities = service.query_activities(ActivityFilters.from_args(request.args))
        return jsonify({
            "items": [a.to_dict() for a in activities],
            "count": len(activities),
            "options": service.activity_filter_options(),
        }), 200
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except Exception:
        current_app.logger.exception("Failed to query activities")
        return jsonify({"error": "Internal server error"}), 500


@reports_bp.get("/activities/export")
@require_auth
@require_permission("VIEW_ACTIVITIES")
def activity_export_route():
    try:
        activities = get_services().reporting_service.query_activities(ActivityFilters.from_args(request.args))
        content = activities_csv(activities)
        return _csv_response(content, export_filename("consulta_actividades", today()))
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except ExportError as e:
        return jsonify({"error": e.message}), 400
    except Exception:
        current_app.logger.exception("Failed to export activities")
        return jsonify({"error": "Internal server error"}), 500


@reports_bp.get("/sales")
@require_auth
@require_permission("VIEW_SALES")
def sales_query_route():
    """
    Query params: dateFrom, dateTo, customer, product, minAmount, maxAmount,
    sort (date|customer|products|subtotal|tax|total), direction (asc|desc)
    """
    try:
        service = get_services().reporting_service
        rows = service.query_sales(SalesFilters.from_args(request.args))
        return jsonify({
            "items": [_sale_row(source, sale) for source, sale in rows],
            "count": len(rows),
            "options": service.sales_filter_options(),
        }), 200
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except Exception:
        current_app.logger.exception("Failed to query sales")
        return jsonify({"error": "Internal server error"}), 500


@reports_bp.get("/sales/export")
@require_auth
@require_permission("VIEW_SALES")
def sales_export_route():
    try:
        rows = get_services().reporting_service.query_sales(SalesFilters.from_args(request.args))
        content = sales_csv([sale for _, sale in rows])
        return _csv_response(content, export_filename("ventas", today()))
    except ValidationError as e:
        return jsonify(e.to_dict()), 400
    except ExportError as e:
        return jsonify({"error": e.message}), 400
    except Exception:
        current_app.logger.exception("Failed to export sales")
        return jsonify({"error": "Internal server error"}), 500
