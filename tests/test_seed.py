"""Tests for the seed orchestrator."""

import random

import bcrypt
import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.pool import StaticPool

from gateway.seed import clear_database, seed_database, seed_status
from gateway.seed.constants import COLLECTIONS
from gateway.seed.generate_data import generate_all_sample_data, generate_object_id
from gateway.seed.store import TABLES


@pytest.fixture(scope="module")
def sample_data():
    return generate_all_sample_data(rng=random.Random(7), bcrypt_rounds=4)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    yield engine
    engine.dispose()


def user_emails(engine):
    with engine.connect() as conn:
        return list(conn.execute(select(TABLES["users"].c.email)).scalars())


def test_object_ids_are_24_hex():
    object_id = generate_object_id("a1", 255)
    assert object_id == "a1" + "0" * 20 + "ff"
    assert len(generate_object_id("not-hex!", 3)) == 24


def test_generated_volumes(sample_data):
    users = sample_data["users"]
    assert len(users) == 100
    assert sum(1 for user in users if user["role"] == "admin") == 10
    assert users[0]["email"] == "admin1@yopmail.com"
    assert bcrypt.checkpw(b"Admin@123", users[0]["password"].encode())
    assert len(sample_data["products"]) == 15 * len(sample_data["categories"])
    assert len(sample_data["orders"]) == 50
    assert len(sample_data["reviews"]) == 100
    assert len(sample_data["addresses"]) == 100
    assert sample_data["tickets"][0]["ticketId"] == "TKT-2025-0001"


def test_order_totals(sample_data):
    for order in sample_data["orders"]:
        assert order["shipping"] == (0 if order["subtotal"] > 100 else 10)
        assert order["tax"] == pytest.approx((order["subtotal"] - order["discount"]) * 0.1, abs=0.02)
    assert sample_data["orders"][0]["couponCode"] is not None
    assert sample_data["orders"][1]["couponCode"] is None


def test_seed_and_status(engine, sample_data):
    result = seed_database(engine, data=sample_data)

    assert result["success"] is True
    assert result["stats"]["products"] == {"inserted": len(sample_data["products"]), "success": True}
    status = seed_status(engine)
    assert status["stats"]["users"] == 100
    assert status["totalDocuments"] == sum(len(sample_data[name]) for name in COLLECTIONS)
    assert status["isEmpty"] is False


def test_reseed_preserving_users_never_duplicates(engine, sample_data):
    seed_database(engine, data=sample_data)

    # an account registered with different casing must still count as existing
    with engine.begin() as conn:
        conn.execute(TABLES["users"].delete().where(TABLES["users"].c.email == "user1@yopmail.com"))
        conn.execute(TABLES["users"].insert(), [{
            "id": "ffffffffffffffffffffffff", "email": "USER1@YopMail.com", "role": "customer",
            "document": {"email": "USER1@YopMail.com"},
        }])
        conn.execute(TABLES["users"].delete().where(TABLES["users"].c.email == "user2@yopmail.com"))

    result = seed_database(engine, preserve_users=True, data=sample_data)

    emails = [email.lower() for email in user_emails(engine)]
    assert len(emails) == len(set(emails)) == 100
    assert "user2@yopmail.com" in emails
    assert result["stats"]["users"] == {"inserted": 1, "skipped": 99, "success": True}


def test_reseed_without_preserving_replaces_users(engine, sample_data):
    seed_database(engine, data=sample_data)
    result = seed_database(engine, preserve_users=False, data=sample_data)
    assert result["stats"]["users"]["inserted"] == 100
    assert len(user_emails(engine)) == 100


def test_clear_keeps_admins(engine, sample_data):
    seed_database(engine, data=sample_data)

    result = clear_database(engine)

    status = seed_status(engine)
    assert status["stats"]["users"] == 10
    assert status["totalDocuments"] == 10
    assert result["stats"]["users"]["deleted"] == 90
    with engine.connect() as conn:
        roles = set(conn.execute(select(func.lower(TABLES["users"].c.role))).scalars())
    assert roles == {"admin"}


def test_status_of_empty_store(engine):
    status = seed_status(engine)
    assert status["isEmpty"] is True
    assert status["totalDocuments"] == 0
