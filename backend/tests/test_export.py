"""
CSV export tests.

Verifies:
- Text fields are quoted with embedded quotes doubled
- Numbers are written bare, money with two decimals
- N records produce N + 1 lines (line breaks in text become spaces)
- An empty result is an error, not an empty file
"""

import csv
import io
from datetime import date

import pytest

from agraria.models import Activity, Sale, SaleItem
from agraria.services.export_service import (
    ACTIVITY_HEADERS,
    ExportError,
    activities_csv,
    export_filename,
    sales_csv,
    write_csv,
)


def make_activity(**overrides):
    data = {
        "id": 1,
        "environment_id": 1,
        "environment_name": "Huerta Principal",
        "environment_type": "vegetal",
        "responsible_teacher": "Prof. María González",
        "year": "3",
        "division": "A",
        "group": "Grupo 1",
        "activity_date": "2024-01-15",
        "activity_time": "08:00",
        "duration": 120,
        "activity_title": "Siembra",
        "activity_description": "Siembra de tomates",
        "observations": "",
    }
    data.update(overrides)
    return Activity(**data)


class TestActivityCsv:

    def test_embedded_quotes_are_doubled(self):
        content = activities_csv([make_activity(activity_description='Visita de O"Brien')])

        assert '"Visita de O""Brien"' in content
        row = list(csv.reader(io.StringIO(content)))[1]
        assert row[5] == 'Visita de O"Brien'

    def test_header_and_row_layout(self):
        content = activities_csv([make_activity()])
        lines = content.split("\n")

        assert lines[0] == ",".join(ACTIVITY_HEADERS)
        assert lines[1] == (
            '"2024-01-15","08:00","Huerta Principal","Vegetal","Siembra","Siembra de tomates",'
            '"Prof. María González","3","A","Grupo 1",120,""'
        )

    def test_line_breaks_do_not_add_lines(self):
        activities = [
            make_activity(id=1, observations="primera línea\nsegunda línea"),
            make_activity(id=2, activity_description="uno\r\ndos"),
            make_activity(id=3),
        ]

        content = activities_csv(activities)

        assert len(content.splitlines()) == 4
        assert '"primera línea segunda línea"' in content

    def test_commas_stay_inside_the_field(self):
        content = activities_csv([make_activity(activity_title="Poda, riego y abono")])
        row = list(csv.reader(io.StringIO(content)))[1]
        assert row[4] == "Poda, riego y abono"


class TestSalesCsv:

    def test_money_has_two_decimals(self):
        sale = Sale(
            id=1,
            sale_date="2024-02-01",
            customer_name="Escuela Vecina",
            items=[SaleItem(product_id=1, product_name="Miel", quantity=2, unit_price=10, subtotal=20)],
            subtotal=20.0,
            tax=4.2,
            total=24.2,
            created_by="admin",
        )

        lines = sales_csv([sale]).splitlines()

        assert lines[1] == '"2024-02-01","Escuela Vecina","admin","Miel (2)",20.00,4.20,24.20'

    def test_quoted_customer_name(self):
        sales = [
            Sale(id=1, sale_date="2024-02-01", customer_name="Escuela Vecina", total=10.0),
            Sale(id=2, sale_date="2024-02-02", customer_name='O"Brien', total=20.0),
            Sale(id=3, sale_date="2024-02-03", customer_name="Cooperativa", total=30.0),
        ]

        content = sales_csv(sales)

        assert len(content.splitlines()) == 4
        assert '"O""Brien"' in content


def test_empty_export_is_an_error():
    with pytest.raises(ExportError) as excinfo:
        write_csv(["A"], [])
    assert excinfo.value.message == "There are no results to export"


def test_export_filename():
    assert export_filename("ventas", date(2024, 1, 31)) == "ventas_2024-01-31.csv"


class TestExportEndpoints:

    def test_activity_export(self, as_admin):
        as_admin.post("/api/activities", json={
            "environmentId": 3,
            "activityDate": "2024-02-10",
            "activityTime": "11:00",
            "duration": 30,
            "activityTitle": "Recolección",
            "activityDescription": 'Charla de O"Brien sobre postura',
        })

        resp = as_admin.get("/api/reports/activities/export")

        assert resp.status_code == 200
        assert resp.headers["Content-Type"].startswith("text/csv")
        assert "consulta_actividades_" in resp.headers["Content-Disposition"]
        text = resp.get_data(as_text=True)
        assert len(text.splitlines()) == 4
        assert '"Charla de O""Brien sobre postura"' in text

    def test_filtered_export_with_no_results(self, as_admin):
        resp = as_admin.get("/api/reports/activities/export?title=inexistente")

        assert resp.status_code == 400
        assert resp.json["error"] == "There are no results to export"

    def test_sales_export_with_no_sales(self, as_admin):
        resp = as_admin.get("/api/reports/sales/export")
        assert resp.status_code == 400
