"""
Tests for configuration value checks.
"""
import pytest

from identity_server.config import LOG_TABLE_NAME, sql_identifier


def test_sql_identifier_accepts_plain_names():
    assert sql_identifier("Logs2") == "Logs2"
    assert sql_identifier("api_logs") == "api_logs"


@pytest.mark.parametrize("value", ["", "Logs]; DROP TABLE users", "dbo.Logs", "Logs 2"])
def test_sql_identifier_rejects_other_text(value):
    with pytest.raises(ValueError):
        sql_identifier(value)


def test_log_table_name_default():
    assert LOG_TABLE_NAME == "Logs2"
