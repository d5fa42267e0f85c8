#!/usr/bin/env python3
"""Tests for the Flask dashboard."""

import pytest
import yaml

from web.app import app

YARIS = """
licensePlate: IKA-4521
make: Toyota
model: Yaris
year: 2021
currentMileage: 48200
inspectionExpiry: '2026-11-02'
tiresNextChangeDate: '2027-03-15'
insuranceExpiry: '2026-10-25'
nextServiceMileage: 50000
"""

POLO = """
licensePlate: HRK-1187
make: Volkswagen
model: Polo
year: 2019
currentMileage: 91350
inspectionExpiry: '2026-10-12'
insuranceExpiry: '2027-02-01'
nextServiceMileage: 91000
"""


@pytest.fixture
def fleet_dir(tmp_path):
    (tmp_path / "yaris.yaml").write_text(YARIS)
    (tmp_path / "polo.yaml").write_text(POLO)
    return tmp_path


@pytest.fixture
def client(fleet_dir):
    app.config["TESTING"] = True
    app.config["FLEET_DIR"] = fleet_dir
    with app.test_client() as client:
        yield client


class TestIndex:
    """Tests for the ranked fleet dashboard."""

    def test_ranked_by_inspection(self, client):
        response = client.get("/?today=2026-10-19")
        assert response.status_code == 200
        html = response.get_data(as_text=True)
        assert html.index("Volkswagen Polo") < html.index("Toyota Yaris")
        assert "expired 7 days ago" in html

    def test_ranked_by_insurance(self, client):
        html = client.get("/?sort=insurance&today=2026-10-19").get_data(as_text=True)
        assert html.index("Toyota Yaris") < html.index("Volkswagen Polo")

    def test_level_counts(self, client):
        html = client.get("/?today=2026-10-19").get_data(as_text=True)
        # Polo: most urgent expired; Yaris: critical insurance
        assert "Expired: 1" in html
        assert "Critical: 1" in html

    def test_unknown_sort_falls_back(self, client):
        response = client.get("/?sort=kteo")
        assert response.status_code == 200
        assert "Unknown sort key" in response.get_data(as_text=True)

    def test_empty_fleet(self, client, fleet_dir):
        for path in fleet_dir.glob("*.yaml"):
            path.unlink()
        html = client.get("/").get_data(as_text=True)
        assert "No vehicles found." in html

    def test_invalid_vehicle_data(self, client, fleet_dir):
        (fleet_dir / "bad.yaml").write_text(
            "make: Fiat\nmodel: Panda\ncurrentMileage: -1\n"
        )
        response = client.get("/")
        assert response.status_code == 400
        assert "Invalid vehicle data" in response.get_data(as_text=True)


class TestVehicleDetail:
    """Tests for the vehicle detail page."""

    def test_detail(self, client):
        response = client.get("/vehicle/yaris?today=2026-10-19")
        assert response.status_code == 200
        html = response.get_data(as_text=True)
        assert "2021 Toyota Yaris (IKA-4521)" in html
        assert "expires in 14 days" in html
        assert "1800 km" in html

    def test_unknown_vehicle_redirects(self, client):
        response = client.get("/vehicle/golf")
        assert response.status_code == 302


class TestUpdates:
    """Tests for the update forms."""

    def test_update_mileage(self, client, fleet_dir):
        response = client.post("/vehicle/yaris/mileage", data={"mileage": "48750"})
        assert response.status_code == 302
        data = yaml.safe_load((fleet_dir / "yaris.yaml").read_text())
        assert data["currentMileage"] == 48750

    def test_update_mileage_invalid(self, client, fleet_dir):
        client.post("/vehicle/yaris/mileage", data={"mileage": "lots"})
        data = yaml.safe_load((fleet_dir / "yaris.yaml").read_text())
        assert data["currentMileage"] == 48200

    def test_update_deadlines(self, client, fleet_dir):
        response = client.post(
            "/vehicle/polo/deadlines",
            data={
                "inspection": "2027-10-12",
                "tires": "",
                "insurance": "2027-02-01",
                "service": "106000",
            },
        )
        assert response.status_code == 302
        data = yaml.safe_load((fleet_dir / "polo.yaml").read_text())
        assert data["inspectionExpiry"] == "2027-10-12"
        assert data["tiresNextChangeDate"] is None
        assert data["nextServiceMileage"] == 106000

    def test_update_deadlines_invalid_date_writes_nothing(self, client, fleet_dir):
        client.post(
            "/vehicle/polo/deadlines",
            data={"inspection": "2027-10-12", "tires": "", "insurance": "someday"},
        )
        data = yaml.safe_load((fleet_dir / "polo.yaml").read_text())
        assert data["inspectionExpiry"] == "2026-10-12"


class TestYmlVehicles:
    """Vehicles stored as .yml are reachable from every route."""

    @pytest.fixture
    def yml_client(self, tmp_path):
        (tmp_path / "panda.yml").write_text(
            "make: Fiat\nmodel: Panda\ncurrentMileage: 1200\nnextServiceMileage: 15000\n"
        )
        app.config["TESTING"] = True
        app.config["FLEET_DIR"] = tmp_path
        with app.test_client() as client:
            yield client

    def test_listed_and_detail_page(self, yml_client):
        assert "/vehicle/panda" in yml_client.get("/").get_data(as_text=True)
        response = yml_client.get("/vehicle/panda")
        assert response.status_code == 200
        assert "Fiat Panda" in response.get_data(as_text=True)

    def test_update_mileage(self, yml_client, tmp_path):
        yml_client.post("/vehicle/panda/mileage", data={"mileage": "1500"})
        data = yaml.safe_load((tmp_path / "panda.yml").read_text())
        assert data["currentMileage"] == 1500

    def test_update_deadlines(self, yml_client, tmp_path):
        yml_client.post(
            "/vehicle/panda/deadlines",
            data={"inspection": "2027-05-01", "tires": "", "insurance": "", "service": "16000"},
        )
        data = yaml.safe_load((tmp_path / "panda.yml").read_text())
        assert data["inspectionExpiry"] == "2027-05-01"
        assert data["nextServiceMileage"] == 16000


class TestNonFiniteMileage:
    """nan / inf are rejected before they reach the vehicle file."""

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf", "-5"])
    def test_update_mileage_rejected(self, client, fleet_dir, value):
        client.post("/vehicle/yaris/mileage", data={"mileage": value})
        data = yaml.safe_load((fleet_dir / "yaris.yaml").read_text())
        assert data["currentMileage"] == 48200
        assert client.get("/").status_code == 200

    @pytest.mark.parametrize("value", ["nan", "inf"])
    def test_service_mileage_rejected(self, client, fleet_dir, value):
        client.post(
            "/vehicle/yaris/deadlines",
            data={"inspection": "", "tires": "", "insurance": "", "service": value},
        )
        data = yaml.safe_load((fleet_dir / "yaris.yaml").read_text())
        assert data["nextServiceMileage"] == 50000
        assert data["inspectionExpiry"] == "2026-11-02"

    def test_infinite_mileage_in_file_is_a_400(self, client, fleet_dir):
        (fleet_dir / "bad.yaml").write_text(
            "make: Fiat\nmodel: Panda\ncurrentMileage: 100\nnextServiceMileage: .inf\n"
        )
        assert client.get("/").status_code == 400
