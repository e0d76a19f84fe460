from datetime import date

import pytest
from sqlalchemy import DateTime
from sqlmodel import SQLModel

from church_portal.core.clock import age_on, utcnow
from church_portal.db import base  # noqa: F401


def test_utcnow_is_timezone_aware():
    now = utcnow()
    assert now.tzinfo is not None
    assert now.utcoffset().total_seconds() == 0


@pytest.mark.parametrize("table", sorted(SQLModel.metadata.tables))
def test_every_timestamp_column_stores_the_timezone(table):
    columns = SQLModel.metadata.tables[table].columns
    for name in ("created_at", "updated_at"):
        column_type = columns[name].type
        assert isinstance(column_type, DateTime)
        assert column_type.timezone is True, f"{table}.{name}"


def test_age_counts_full_years():
    assert age_on(date(2008, 6, 15), today=date(2025, 6, 14)) == 16
    assert age_on(date(2008, 6, 15), today=date(2025, 6, 15)) == 17
    assert age_on(date(2000, 2, 29), today=date(2018, 2, 28)) == 17
