COLLECTIONS = ("users", "categories", "products", "coupons", "orders", "reviews", "addresses", "tickets")

ROLE_ADMIN = "admin"
ROLE_SELLER = "seller"
ROLE_CUSTOMER = "customer"
ROLE_SUPPORT = "support"

PASSWORDS = {
    ROLE_ADMIN: "Admin@123",
    ROLE_SELLER: "Seller@123",
    ROLE_CUSTOMER: "User@123",
    ROLE_SUPPORT: "Support@123",
}

# hex prefixes keep generated ids distinct across collections
ID_PREFIX = {
    "users": "a1",
    "categories": "b2",
    "products": "c3",
    "coupons": "d4",
    "orders": "e5",
    "reviews": "f6",
    "addresses": "a7",
    "tickets": "b8",
}

FIRST_NAMES = [
    "James", "Mary", "Robert", "Patricia", "John", "Jennifer", "Michael", "Linda", "David", "Elizabeth",
    "William", "Barbara", "Richard", "Susan", "Joseph", "Jessica", "Thomas", "Sarah", "Charles", "Karen",
    "Daniel", "Nancy", "Matthew", "Lisa", "Anthony", "Betty", "Mark", "Sandra", "Donald", "Ashley",
    "Steven", "Kimberly", "Paul", "Emily", "Andrew", "Donna", "Joshua", "Michelle", "Kenneth", "Carol",
    "Kevin", "Amanda", "Brian", "Melissa", "George", "Deborah", "Timothy", "Stephanie", "Ronald", "Rebecca",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Rodriguez", "Martinez",
    "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin",
    "Lee", "Perez", "Thompson", "White", "Harris", "Sanchez", "Clark", "Ramirez", "Lewis", "Robinson",
    "Walker", "Young", "Allen", "King", "Wright", "Scott", "Torres", "Nguyen", "Hill", "Flores",
    "Green", "Adams", "Nelson", "Baker", "Hall", "Rivera", "Campbell", "Mitchell", "Carter", "Roberts",
]

CATEGORIES = [
    {"name": "Electronics", "description": "Phones, laptops and gadgets", "icon": "devices"},
    {"name": "Fashion", "description": "Clothing, shoes and accessories", "icon": "checkroom"},
    {"name": "Home & Kitchen", "description": "Furniture, decor and cookware", "icon": "kitchen"},
    {"name": "Books", "description": "Fiction, non-fiction and textbooks", "icon": "menu_book"},
    {"name": "Sports & Outdoors", "description": "Fitness gear and outdoor equipment", "icon": "sports_soccer"},
    {"name": "Beauty", "description": "Skincare, makeup and fragrances", "icon": "spa"},
    {"name": "Toys & Games", "description": "Toys, puzzles and board games", "icon": "toys"},
    {"name": "Grocery", "description": "Pantry staples and snacks", "icon": "local_grocery_store"},
]

PRODUCT_NAMES = [
    "Premium Widget", "Classic Edition", "Pro Series", "Essential Kit", "Deluxe Bundle",
    "Compact Model", "Ultra Pack", "Signature Line", "Everyday Basic", "Limited Release",
]

COUPON_CODES = [
    "WELCOME10", "SAVE20", "SPRING15", "SUMMER25", "FALL10", "WINTER30", "FLASH5", "VIP50",
    "NEWUSER", "FREESHIP", "BULK15", "LOYAL20", "HOLIDAY35", "WEEKEND12", "STUDENT10", "BDAY25",
    "CYBER40", "BLACKFRI", "CLEAR60", "EXPIRED5",
]

CITIES = ["New York", "Los Angeles", "Chicago", "Houston", "Phoenix", "Philadelphia", "San Antonio", "San Diego"]
STATES = ["NY", "CA", "IL", "TX", "AZ", "PA", "TX", "CA"]
STREETS = ["Main St", "Oak Ave", "Maple Dr", "Cedar Ln", "Pine Rd", "Elm St", "Washington Blvd", "Lake View"]

REVIEW_TITLES = ["Great product", "Good value", "As described", "Exceeded expectations", "Decent quality"]
REVIEW_COMMENTS = [
    "Works exactly as advertised, would buy again.",
    "Solid purchase for the price.",
    "Matches the description and arrived on time.",
    "Much better than I expected.",
    "Does the job, nothing fancy.",
]

ORDER_STATUSES = ["pending", "confirmed", "processing", "shipped", "delivered", "cancelled"]
PAYMENT_STATUSES = ["pending", "paid"]
PAYMENT_METHODS = ["credit_card", "debit_card", "paypal", "cash_on_delivery"]

TICKET_CATEGORIES = ["order", "payment", "product", "account", "other"]
TICKET_PRIORITIES = ["low", "medium", "high", "urgent"]
TICKET_STATUSES = ["open", "in_progress", "resolved", "closed"]
TICKET_SUBJECTS = [
    "Order not received", "Refund request", "Damaged item", "Cannot log in", "Wrong size delivered",
]
TICKET_DESCRIPTIONS = [
    "My order has not arrived yet, please check the status.",
    "I would like a refund for my recent purchase.",
    "The item arrived damaged in the box.",
    "I cannot log into my account after resetting my password.",
    "I received a different size than I ordered.",
]
TICKET_RESOLUTIONS = [
    "Shipment located and redelivered.",
    "Refund issued to the original payment method.",
    "Replacement item sent.",
    "Password reset link re-sent and account unlocked.",
]
