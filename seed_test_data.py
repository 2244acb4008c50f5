"""
Seed demo subscriptions for one user.
Run:  python seed_test_data.py <user-uuid>
"""
import sys
from datetime import date

from subtracker.config import get_settings
from subtracker.domain.errors import DuplicateSubscriptionError, ValidationError
from subtracker.domain.subscription import Subscription
from subtracker.infrastructure.db.repository import SqlSubscriptionStorage
from subtracker.infrastructure.db.session import Database
from subtracker.utils.validation import parse_user_id

DEMO = [
    # service, price/month, start, end (None = active)
    ("Netflix", 999, date(2025, 1, 1), date(2025, 6, 1)),
    ("Spotify", 199, date(2024, 9, 1), None),
    ("Yandex Plus", 399, date(2024, 1, 1), date(2024, 12, 1)),
    ("VK Music", 299, date(2025, 7, 1), date(2026, 7, 1)),
]

if len(sys.argv) != 2:
    print(__doc__.strip()); sys.exit(1)

try:
    user_id = parse_user_id(sys.argv[1])
except ValidationError as e:
    print(f"✗ {e}"); sys.exit(1)

db = Database.from_settings(get_settings())
db.create_schema()
storage = SqlSubscriptionStorage(db.session_factory)

created = 0
for service_name, price, start, end in DEMO:
    sub = Subscription.create(
        user_id=user_id, service_name=service_name, price=price, start_date=start, end_date=end,
    )
    try:
        storage.create_subscription(sub)
        created += 1
        print(f"  + {service_name}: {price}/month")
    except DuplicateSubscriptionError:
        print(f"  = {service_name}: already exists, skipped")

total = storage.subscription_total_cost(user_id, None, date(2025, 1, 1), date(2025, 12, 1))
print(f"\n✓ Created {created} subscription(s); total cost for 2025: {total.total_cost}")

db.dispose()
