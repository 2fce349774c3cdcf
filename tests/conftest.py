"""
Pytest configuration and fixtures for the partner CRM tests.

This module provides:
- An in-memory SQLite Flask app per test
- In-memory partner stores with reusable hierarchies
- Helpers for building partner records and rows
"""

import os

# Config refuses to load without a secret key
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("FLASK_ENV", "production")

import pytest

from config import Config
from extensions import db
from hierarchy.nodes import PartnerRecord
from hierarchy.store import InMemoryPartnerStore
from hierarchy.taxonomy import PartnerRole, parent_role


class TestConfig(Config):
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    HIERARCHY_FANOUT_POOL_SIZE = 0
    HIERARCHY_BUILD_TIMEOUT = 0


# ============================================================
# RECORD HELPERS
# ============================================================

def make_record(store_id, role, key, parent_key=None, name=None, phone="0700000000"):
    """Build a PartnerRecord whose parent is `parent_key` one tier up."""
    role = PartnerRole.parse(role)
    return PartnerRecord(
        id=store_id,
        name=name or f"{role.label} {key}",
        phone=phone,
        role=role,
        linkage_key=key,
        parent_id=parent_key,
        parent_role=parent_role(role) if parent_key is not None else None,
    )


def chain_records():
    """UF1 -> F1 -> S1 -> C1, one partner per tier."""
    return [
        make_record("1", PartnerRole.UNIVERSE_FUND, "UF1"),
        make_record("2", PartnerRole.FRANCHISE, "F1", "UF1"),
        make_record("3", PartnerRole.SUB_FRANCHISE, "S1", "F1"),
        make_record("4", PartnerRole.CHANNEL_PARTNER, "C1", "S1"),
    ]


def wide_records():
    """
    UF1 with two franchises, three sub-franchises and four channel partners:

        UF1
        ├── F1
        │   ├── S1 ── C1, C2
        │   └── S2 ── C3
        └── F2
            └── S3 ── C4
    """
    return [
        make_record("1", PartnerRole.UNIVERSE_FUND, "UF1"),
        make_record("2", PartnerRole.FRANCHISE, "F1", "UF1"),
        make_record("3", PartnerRole.FRANCHISE, "F2", "UF1"),
        make_record("4", PartnerRole.SUB_FRANCHISE, "S1", "F1"),
        make_record("5", PartnerRole.SUB_FRANCHISE, "S2", "F1"),
        make_record("6", PartnerRole.SUB_FRANCHISE, "S3", "F2"),
        make_record("7", PartnerRole.CHANNEL_PARTNER, "C1", "S1"),
        make_record("8", PartnerRole.CHANNEL_PARTNER, "C2", "S1"),
        make_record("9", PartnerRole.CHANNEL_PARTNER, "C3", "S2"),
        make_record("10", PartnerRole.CHANNEL_PARTNER, "C4", "S3"),
    ]


# ============================================================
# STORE FIXTURES
# ============================================================

@pytest.fixture
def chain_store():
    return InMemoryPartnerStore(chain_records())


@pytest.fixture
def wide_store():
    return InMemoryPartnerStore(wide_records())


# ============================================================
# FLASK APP FIXTURES
# ============================================================

@pytest.fixture
def app():
    """
    Fresh app on an in-memory database for each test function.
    Tables are created before the test and dropped afterwards.
    """
    from app import create_app

    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def add_partner(app):
    """Insert a partner row directly and return it."""
    from models import Partner

    def _add(role, key, parent_key=None, name=None, password="secret123", phone="0700000000"):
        role = PartnerRole.parse(role)
        partner = Partner(
            name=name or f"{role.label} {key}",
            phone=phone,
            email=f"{key.lower()}@example.com",
            user_type=role.label,
        )
        if role is PartnerRole.UNIVERSE_FUND:
            partner.universe_fund_id = key
        else:
            partner.unique_id = key
            partner.parent_id = parent_key
            partner.parent_type = parent_role(role).label
        partner.set_password(password)
        db.session.add(partner)
        db.session.commit()
        return partner

    return _add
