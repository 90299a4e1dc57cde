import os
import sys

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from synqchain import create_app
from synqchain.db import get_db, init_db
from synqchain.db_migrations import seed_demo_purchase_orders


app = create_app()


if __name__ == "__main__":
    with app.app_context():
        init_db()
        if os.environ.get("SEED_DEMO_DATA", "0").strip().lower() in {"1", "true", "yes", "on"}:
            created = seed_demo_purchase_orders(get_db())
            print(f"Seeded {created} demo purchase orders.")
    print("Database initialized.")
