"""Fixed names for the bundled SampleDB dataset."""

from __future__ import annotations

SAMPLE_DB_SCHEMA = "ClassicModels"
SAMPLE_DB_NAME = "SampleDB"
SAMPLE_DB_FILE = f"{SAMPLE_DB_NAME}.sqlite"
SAMPLE_DB_ARCHIVE = f"{SAMPLE_DB_NAME}.zip"
SAMPLE_DB_HOME_DIR = "db"
SAMPLE_DB_ENTRY = f"{SAMPLE_DB_HOME_DIR}/{SAMPLE_DB_ARCHIVE}"

SQLITE_SCHEME = "sqlite:///"
# Addresses the database inside the bundled archive; nothing can open it without extraction.
FALLBACK_DESCRIPTOR = f"{SQLITE_SCHEME}resource:{SAMPLE_DB_ENTRY}!/{SAMPLE_DB_FILE}"

DATASOURCE = "datasource"
DATASOURCE_NAME = "datasource.name"
SERVICE_NAME = "service.name"
EMPTY_VALUE = ""
