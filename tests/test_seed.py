"""Tests for the board seed script."""

from scripts.seed_board import DEFAULT_COLUMNS, seed_admin, seed_columns
from src.models import BoardColumn, User
from src.services.auth import verify_password


def test_seed_columns_is_idempotent(db):
    assert seed_columns(db) == len(DEFAULT_COLUMNS)
    db.commit()
    assert seed_columns(db) == 0
    db.commit()

    columns = db.query(BoardColumn).order_by(BoardColumn.order_index).all()
    assert [c.title for c in columns] == DEFAULT_COLUMNS
    assert [c.order_index for c in columns] == [0, 1, 2]


def test_seed_admin(db):
    assert seed_admin(db, "boss@example.com", "bosspass") is True
    db.commit()
    assert seed_admin(db, "boss@example.com", "bosspass") is False

    admin = db.query(User).filter_by(email="boss@example.com").one()
    assert admin.role == "admin"
    assert verify_password("bosspass", admin.password_hash)
