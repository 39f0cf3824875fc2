import sqlite3

import pytest

from sampledb.app_factory import create_app, shutdown_app
from sampledb.constants import FALLBACK_DESCRIPTOR
from sampledb.engine import SampleEngine, list_tables
from sampledb.models import DataSource
from sampledb.provisioner import ResourceProvisioner
from sampledb.resources import PACKAGE_DIR, locate_archive

CLASSIC_MODELS_TABLES = ["customers", "offices", "productlines", "products"]


@pytest.fixture
def bundled_provisioner(make_config, deferred):
    return ResourceProvisioner(make_config(), deferred=deferred)


@pytest.fixture
def app(bundled_provisioner):
    app = create_app(bundled_provisioner)
    yield app
    shutdown_app(app)


class TestBundledArchive:
    def test_archive_ships_with_package(self):
        assert locate_archive() == PACKAGE_DIR / "db" / "SampleDB.zip"

    def test_engine_reads_provisioned_database(self, bundled_provisioner):
        engine = SampleEngine()
        bundled_provisioner.shutdown_hook = engine.shutdown

        with bundled_provisioner.lease() as descriptor:
            conn = engine.connect(descriptor)
            assert list_tables(conn) == CLASSIC_MODELS_TABLES
            assert conn.execute("SELECT COUNT(*) FROM customers").fetchone()[0] == 3
            assert engine.open_connections == 1

        assert engine.open_connections == 0
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")

    def test_fallback_descriptor_cannot_be_opened(self):
        with pytest.raises(sqlite3.OperationalError):
            SampleEngine().connect(FALLBACK_DESCRIPTOR)

    def test_engine_rejects_foreign_descriptor(self):
        with pytest.raises(ValueError):
            SampleEngine().connect("postgresql://localhost/sample")


class TestDataSource:
    def test_properties(self):
        props = DataSource.from_descriptor("sqlite:///tmp/x/SampleDB.sqlite").as_dict()

        assert props["datasource.name"] == "ClassicModels"
        assert props["service.name"] == "datasource/ClassicModels"
        assert props["user"] == "ClassicModels"
        assert props["password"] == ""
        assert props["url"] == "sqlite:///tmp/x/SampleDB.sqlite"


class TestRoutes:
    def test_status(self, app, bundled_provisioner):
        body = app.test_client().get("/").get_json()

        assert body["count"] == 1
        assert body["generation"] == 1
        assert body["working_dir"] == str(bundled_provisioner.working_dir)
        assert body["descriptor"] == bundled_provisioner.resolve_descriptor()

    def test_datasource(self, app, bundled_provisioner):
        body = app.test_client().get("/datasource").get_json()

        assert body["url"] == bundled_provisioner.resolve_descriptor()
        assert body["datasource.name"] == "ClassicModels"

    def test_tables(self, app):
        response = app.test_client().get("/tables")

        assert response.status_code == 200
        assert response.get_json() == {"ok": True, "tables": CLASSIC_MODELS_TABLES}
        assert app.extensions["sampledb"]["engine"].open_connections == 0

    def test_tables_after_shutdown(self, app, bundled_provisioner):
        shutdown_app(app)

        response = app.test_client().get("/tables")

        assert response.status_code == 409
        assert bundled_provisioner.count == 0

    def test_two_apps_share_one_copy(self, bundled_provisioner):
        first = create_app(bundled_provisioner)
        second = create_app(bundled_provisioner)
        workdir = bundled_provisioner.working_dir

        assert bundled_provisioner.count == 2
        shutdown_app(first)
        shutdown_app(first)
        assert bundled_provisioner.count == 1
        assert workdir.exists()

        shutdown_app(second)
        assert bundled_provisioner.count == 0
        assert not workdir.exists()
