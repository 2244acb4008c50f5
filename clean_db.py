"""
Очистить базу данных от подписок пользователя
Run:  python clean_db.py <user-uuid>
"""
import sys

from sqlalchemy import delete

from subtracker.config import get_settings
from subtracker.domain.errors import ValidationError
from subtracker.infrastructure.db.models import SubscriptionModel
from subtracker.infrastructure.db.session import Database
from subtracker.utils.validation import parse_user_id

if len(sys.argv) != 2:
    print(__doc__.strip()); sys.exit(1)

try:
    user_id = parse_user_id(sys.argv[1])
except ValidationError as e:
    print(f"✗ {e}"); sys.exit(1)

db = Database.from_settings(get_settings())

print("=== ОЧИСТКА БАЗЫ ДАННЫХ ===")

with db.session_factory() as session:
    deleted = session.execute(
        delete(SubscriptionModel).where(SubscriptionModel.user_id == user_id)
    ).rowcount
    session.commit()

print(f"✓ Удалено подписок: {deleted}")

db.dispose()
