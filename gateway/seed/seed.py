"""Seed, clear and inspect the sample-data store."""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import Engine, delete, func, or_, select

from shared.core import get_logger

from .constants import COLLECTIONS, ROLE_ADMIN
from .generate_data import generate_all_sample_data
from .store import TABLES, init_models

logger = get_logger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _row(document: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": document["_id"],
        "email": document.get("email"),
        "role": document.get("role"),
        "document": document,
    }


def _new_users(conn, users: Iterable[dict]) -> List[dict]:
    """Generated users whose email (case-insensitive) and id are not stored yet."""
    table = TABLES["users"]
    existing_emails = {
        email.lower() for email in conn.execute(select(table.c.email)).scalars() if email
    }
    existing_ids = set(conn.execute(select(table.c.id)).scalars())
    fresh = []
    for user in users:
        email = (user.get("email") or "").lower()
        if email in existing_emails or user["_id"] in existing_ids:
            continue
        existing_emails.add(email)
        fresh.append(user)
    return fresh


def seed_database(engine: Engine, preserve_users: bool = True,
                  data: Optional[Dict[str, List[dict]]] = None) -> Dict[str, Any]:
    """Replace every collection with generated data.

    With ``preserve_users`` existing users are kept and only absent generated
    users are inserted, so re-seeding never duplicates an account.
    """
    init_models(engine)
    logger.info("Generating sample data")
    generated = data if data is not None else generate_all_sample_data()
    stats: Dict[str, Any] = {}

    with engine.begin() as conn:
        for name in COLLECTIONS:
            table = TABLES[name]
            documents = generated.get(name) or []
            if name == "users" and preserve_users:
                fresh = _new_users(conn, documents)
                stats[name] = {"inserted": len(fresh), "skipped": len(documents) - len(fresh), "success": True}
                documents = fresh
            else:
                conn.execute(delete(table))
                stats[name] = {"inserted": len(documents), "success": bool(documents)}
            if documents:
                conn.execute(table.insert(), [_row(document) for document in documents])
            logger.info(f"Seeded {name}: {stats[name]['inserted']} documents")

    return {
        "success": True,
        "message": "Database seeded with generated data",
        "stats": stats,
        "timestamp": _timestamp(),
    }


def clear_database(engine: Engine) -> Dict[str, Any]:
    """Remove all seeded data except admin accounts."""
    init_models(engine)
    stats: Dict[str, Any] = {}
    with engine.begin() as conn:
        for name in COLLECTIONS:
            table = TABLES[name]
            stmt = delete(table)
            if name == "users":
                stmt = stmt.where(or_(table.c.role.is_(None), func.lower(table.c.role) != ROLE_ADMIN))
            result = conn.execute(stmt)
            stats[name] = {"deleted": result.rowcount, "success": True}
            logger.info(f"Cleared {name}: {result.rowcount} documents")
    return {
        "success": True,
        "message": "Database cleared (admin users preserved)",
        "stats": stats,
        "timestamp": _timestamp(),
    }


def seed_status(engine: Engine) -> Dict[str, Any]:
    init_models(engine)
    with engine.connect() as conn:
        counts = {
            name: conn.execute(select(func.count()).select_from(TABLES[name])).scalar_one()
            for name in COLLECTIONS
        }
    total = sum(counts.values())
    return {"stats": counts, "totalDocuments": total, "isEmpty": total == 0, "timestamp": _timestamp()}
