"""Sample data for the seed orchestrator."""
import random
import re
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import bcrypt

from .constants import (
    CATEGORIES, CITIES, COUPON_CODES, FIRST_NAMES, ID_PREFIX, LAST_NAMES, ORDER_STATUSES, PASSWORDS,
    PAYMENT_METHODS, PAYMENT_STATUSES, PRODUCT_NAMES, REVIEW_COMMENTS, REVIEW_TITLES, ROLE_ADMIN,
    ROLE_CUSTOMER, ROLE_SELLER, ROLE_SUPPORT, STATES, STREETS, TICKET_CATEGORIES, TICKET_DESCRIPTIONS,
    TICKET_PRIORITIES, TICKET_RESOLUTIONS, TICKET_STATUSES, TICKET_SUBJECTS,
)

PRODUCTS_PER_CATEGORY = 15
ORDER_COUNT = 50
REVIEW_COUNT = 100
ADDRESS_COUNT = 100
TICKET_COUNT = 20
TAX_RATE = 0.1
FREE_SHIPPING_THRESHOLD = 100
FLAT_SHIPPING = 10

# (role, count, email prefix)
USER_GROUPS = [
    (ROLE_ADMIN, 10, "admin"),
    (ROLE_SELLER, 20, "seller"),
    (ROLE_CUSTOMER, 60, "user"),
    (ROLE_SUPPORT, 10, "support"),
]


def generate_object_id(prefix: str, index: int) -> str:
    """Deterministic 24 hex character id."""
    safe_prefix = re.sub(r"[^0-9a-f]", "", (prefix or "").lower())
    hex_index = format(index, "x").rjust(max(0, 24 - len(safe_prefix)), "0")
    return f"{safe_prefix}{hex_index}".rjust(24, "0")[:24]


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _iso(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _money(value: float) -> float:
    return round(value * 100) / 100


class SampleDataGenerator:
    def __init__(self, rng: Optional[random.Random] = None, bcrypt_rounds: int = 10):
        self.rng = rng or random.Random()
        self.bcrypt_rounds = bcrypt_rounds

    def date(self, start_year: int, end_year: int) -> str:
        start = datetime(start_year, 1, 1, tzinfo=timezone.utc).timestamp()
        end = datetime(end_year, 12, 31, tzinfo=timezone.utc).timestamp()
        return _iso(datetime.fromtimestamp(self.rng.uniform(start, end), tz=timezone.utc))

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.bcrypt_rounds)).decode("utf-8")

    def users(self) -> List[Dict[str, Any]]:
        hashed = {role: self.hash_password(password) for role, password in PASSWORDS.items()}
        users = []
        for role, count, email_prefix in USER_GROUPS:
            for i in range(count):
                name_index = len(users) % len(FIRST_NAMES)
                users.append({
                    "_id": generate_object_id(ID_PREFIX["users"], len(users) + 1),
                    "email": f"{email_prefix}{i + 1}@yopmail.com",
                    "password": hashed[role],
                    "name": f"{FIRST_NAMES[name_index]} {LAST_NAMES[name_index]}",
                    "role": role,
                    "isActive": not (role == ROLE_SUPPORT and i == count - 1),
                    "emailVerified": True,
                    "createdAt": self.date(2024, 2024),
                    "updatedAt": self.date(2025, 2025),
                })
        return users

    def categories(self) -> List[Dict[str, Any]]:
        return [{
            "_id": generate_object_id(ID_PREFIX["categories"], index + 1),
            "name": category["name"],
            "slug": slugify(category["name"]),
            "description": category["description"],
            "icon": category["icon"],
            "isActive": True,
            "productCount": PRODUCTS_PER_CATEGORY,
            "createdAt": self.date(2024, 2024),
            "updatedAt": self.date(2025, 2025),
        } for index, category in enumerate(CATEGORIES)]

    def products(self, categories: List[dict], sellers: List[dict]) -> List[Dict[str, Any]]:
        products = []
        for cat_index, category in enumerate(categories):
            for _ in range(PRODUCTS_PER_CATEGORY):
                index = len(products) + 1
                seller = sellers[index % len(sellers)]
                products.append({
                    "_id": generate_object_id(ID_PREFIX["products"], index),
                    "name": f"{PRODUCT_NAMES[index % len(PRODUCT_NAMES)]} {cat_index + 1}",
                    "description": f"High quality product from {category['name']} category",
                    "price": self.rng.randint(20, 519) + 0.99,
                    "category": category["name"],
                    "stock": self.rng.randint(10, 109),
                    "imageUrl": f"https://picsum.photos/seed/{index}/400/400",
                    "sellerId": seller["_id"],
                    "isActive": index % 20 != 0,
                    "tags": [category["slug"]],
                    "rating": round(self.rng.uniform(3, 5), 1),
                    "reviewCount": self.rng.randint(0, 49),
                    "createdAt": self.date(2024, 2025),
                    "updatedAt": self.date(2025, 2025),
                })
        return products

    def coupons(self) -> List[Dict[str, Any]]:
        coupons = []
        for index, code in enumerate(COUPON_CODES):
            percentage = index % 2 == 0
            coupons.append({
                "_id": generate_object_id(ID_PREFIX["coupons"], index + 1),
                "code": code,
                "description": f"Save with {code}",
                "discountType": "percentage" if percentage else "fixed",
                "discount": 10 + index * 2 if percentage else 50 + index * 10,
                "minPurchase": 50 + index * 10,
                "maxDiscount": 100 + index * 20 if percentage else None,
                "validFrom": "2025-01-01T00:00:00.000Z",
                "validTo": "2026-12-31T00:00:00.000Z",
                "usageLimit": 100 + index * 50,
                "usageCount": self.rng.randint(0, 49),
                "isActive": index < len(COUPON_CODES) - 2,
                "createdAt": self.date(2024, 2024),
                "updatedAt": self.date(2025, 2025),
            })
        return coupons

    def order(self, index: int, customer: dict, products: List[dict], coupons: List[dict]) -> Dict[str, Any]:
        items = []
        for _ in range(self.rng.randint(1, 4)):
            product = self.rng.choice(products)
            quantity = self.rng.randint(1, 3)
            items.append({
                "productId": product["_id"],
                "productName": product["name"],
                "quantity": quantity,
                "price": product["price"],
                "sellerId": product["sellerId"],
                "subtotal": _money(product["price"] * quantity),
            })
        subtotal = sum(item["subtotal"] for item in items)

        coupon = coupons[index % len(coupons)] if index % 3 == 0 else None
        discount = 0
        if coupon:
            if coupon["discountType"] == "percentage":
                discount = _money(subtotal * coupon["discount"] / 100)
            else:
                discount = coupon["discount"]

        tax = _money((subtotal - discount) * TAX_RATE)
        shipping = 0 if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING
        return {
            "_id": generate_object_id(ID_PREFIX["orders"], index + 1),
            "orderNumber": f"ORD-{int(time.time() * 1000)}-{index + 1}",
            "customerId": customer["_id"],
            "customerEmail": customer["email"],
            "sellerId": items[0]["sellerId"],
            "items": items,
            "subtotal": _money(subtotal),
            "tax": tax,
            "shipping": shipping,
            "discount": discount,
            "couponCode": coupon["code"] if coupon else None,
            "total": _money(subtotal - discount + tax + shipping),
            "orderStatus": self.rng.choice(ORDER_STATUSES),
            "paymentStatus": PAYMENT_STATUSES[0] if index % 5 == 0 else PAYMENT_STATUSES[1],
            "paymentMethod": self.rng.choice(PAYMENT_METHODS),
            "shippingAddress": self.address_fields(index),
            "notes": "Please handle with care" if index % 4 == 0 else None,
            "createdAt": self.date(2025, 2025),
            "updatedAt": self.date(2025, 2025),
        }

    def address_fields(self, index: int) -> Dict[str, Any]:
        return {
            "street": f"{self.rng.randint(1, 9999)} {STREETS[index % len(STREETS)]}",
            "city": CITIES[index % len(CITIES)],
            "state": STATES[index % len(STATES)],
            "zip": str(self.rng.randint(10000, 99999)),
            "country": "USA",
        }

    def reviews(self, customers: List[dict], products: List[dict]) -> List[Dict[str, Any]]:
        reviews = []
        for i in range(REVIEW_COUNT):
            customer = customers[i % len(customers)]
            title_index = i % len(REVIEW_TITLES)
            reviews.append({
                "_id": generate_object_id(ID_PREFIX["reviews"], i + 1),
                "productId": products[i % len(products)]["_id"],
                "userId": customer["_id"],
                "userName": customer["name"],
                "rating": self.rng.randint(3, 5),
                "title": REVIEW_TITLES[title_index],
                "comment": REVIEW_COMMENTS[title_index],
                "images": [f"https://picsum.photos/seed/review{i}/200/200"] if i % 5 == 0 else [],
                "helpful": self.rng.randint(0, 19),
                "verified": i < 80,
                "createdAt": self.date(2025, 2025),
                "updatedAt": self.date(2025, 2025),
            })
        return reviews

    def addresses(self, users: List[dict]) -> List[Dict[str, Any]]:
        addresses = []
        for i in range(ADDRESS_COUNT):
            address = {
                "_id": generate_object_id(ID_PREFIX["addresses"], i + 1),
                "userId": users[i % len(users)]["_id"],
                "isDefault": i % 2 == 0,
                "label": "home" if i % 2 == 0 else "work",
                "createdAt": self.date(2024, 2025),
                "updatedAt": self.date(2025, 2025),
            }
            address.update(self.address_fields(i))
            addresses.append(address)
        return addresses

    def tickets(self, customers: List[dict], support_users: List[dict]) -> List[Dict[str, Any]]:
        tickets = []
        for i in range(TICKET_COUNT):
            customer = customers[i % len(customers)]
            status = TICKET_STATUSES[i % len(TICKET_STATUSES)]
            settled = status in ("resolved", "closed")
            assigned_to = None
            if status != "open" and support_users:
                assigned_to = support_users[i % len(support_users)]["_id"]
            tickets.append({
                "_id": generate_object_id(ID_PREFIX["tickets"], i + 1),
                "ticketId": f"TKT-2025-{i + 1:04d}",
                "subject": TICKET_SUBJECTS[i % len(TICKET_SUBJECTS)],
                "description": TICKET_DESCRIPTIONS[i % len(TICKET_DESCRIPTIONS)],
                "category": TICKET_CATEGORIES[i % len(TICKET_CATEGORIES)],
                "priority": TICKET_PRIORITIES[i % len(TICKET_PRIORITIES)],
                "status": status,
                "customerName": customer["name"],
                "customerEmail": customer["email"],
                "customerId": customer["_id"],
                "assignedTo": assigned_to,
                "resolution": TICKET_RESOLUTIONS[i % len(TICKET_RESOLUTIONS)] if settled else None,
                "attachments": [f"attachment-{i + 1}.jpg"] if i % 5 == 0 else [],
                "comments": [],
                "createdAt": self.date(2025, 2025),
                "updatedAt": self.date(2025, 2025),
                "resolvedAt": self.date(2025, 2025) if settled else None,
                "closedAt": self.date(2025, 2025) if status == "closed" else None,
            })
        return tickets

    def generate(self) -> Dict[str, List[Dict[str, Any]]]:
        users = self.users()
        by_role = {role: [user for user in users if user["role"] == role] for role, _, _ in USER_GROUPS}
        categories = self.categories()
        products = self.products(categories, by_role[ROLE_SELLER])
        coupons = self.coupons()
        customers = by_role[ROLE_CUSTOMER]
        orders = [self.order(i, customers[i % len(customers)], products, coupons) for i in range(ORDER_COUNT)]
        return {
            "users": users,
            "categories": categories,
            "products": products,
            "coupons": coupons,
            "orders": orders,
            "reviews": self.reviews(customers, products),
            "addresses": self.addresses(users),
            "tickets": self.tickets(customers, by_role[ROLE_SUPPORT]),
        }


def generate_all_sample_data(rng: Optional[random.Random] = None, bcrypt_rounds: int = 10) -> Dict[str, List[dict]]:
    return SampleDataGenerator(rng, bcrypt_rounds).generate()
