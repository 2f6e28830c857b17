import pytest
from sqlalchemy import func, select

from app.db import bootstrap
from app.models.day import Day
from app.models.program import Program
from app.models.time_slot import TimeSlot


def _raise_error(message: str):
    raise RuntimeError(message)


def test_runtime_schema_bootstrap_raises_on_validation_failure(monkeypatch, engine):
    monkeypatch.setattr(
        bootstrap,
        "_assert_required_columns",
        lambda _engine: _raise_error("missing required schema"),
    )

    with pytest.raises(RuntimeError, match="Runtime schema bootstrap failed"):
        bootstrap.ensure_runtime_schema(engine, seed=False)


def test_runtime_schema_bootstrap_seeds_reference_rows(engine, session_factory):
    bootstrap.ensure_runtime_schema(engine)

    with session_factory() as db:
        assert db.execute(select(func.count(Day.id))).scalar_one() == 5
        assert db.execute(select(func.count(TimeSlot.id))).scalar_one() == 6
        assert db.execute(select(func.count(Program.id))).scalar_one() == len(bootstrap.DEFAULT_PROGRAMS)


def test_seed_leaves_existing_rows_alone(db_session):
    program = db_session.execute(select(Program).where(Program.code == "CSE")).scalar_one()
    program.sections = 4
    db_session.commit()

    bootstrap.seed_reference_data(db_session)

    assert db_session.execute(select(Program.sections).where(Program.code == "CSE")).scalar_one() == 4
    assert db_session.execute(select(func.count(Program.id))).scalar_one() == 7
