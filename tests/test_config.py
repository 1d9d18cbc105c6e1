"""Tests for Settings."""
from urllib.parse import unquote_plus

from tasktime.config import Settings


class TestDatabaseUrl:
    """Tests for building the database URL."""

    def test_override_used_verbatim(self):
        settings = Settings(db_url="sqlite:///./tasktime.db")

        assert settings.database_url == "sqlite:///./tasktime.db"

    def test_sql_server_login(self):
        settings = Settings(
            db_url=None,
            db_server="sql01",
            db_name="tracking",
            db_user="svc",
            db_password="s3cret;x",
        )

        url = settings.database_url
        assert url.startswith("mssql+pyodbc:///?odbc_connect=")
        odbc = unquote_plus(url.split("odbc_connect=", 1)[1])
        assert "SERVER=sql01,1433;" in odbc
        assert "DATABASE=tracking;" in odbc
        assert "UID=svc;" in odbc
        assert "Trusted_Connection" not in odbc

    def test_trusted_connection_omits_credentials(self):
        odbc = Settings(db_url=None, db_trusted_connection=True).odbc_connection_string()

        assert "Trusted_Connection=yes;" in odbc
        assert "UID=" not in odbc
        assert "PWD=" not in odbc
