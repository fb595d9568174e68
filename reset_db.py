from bizboard.core.config import settings
from bizboard.core.database import Database


def reset_db():
    database = Database(settings.DATABASE_URL)
    try:
        database.drop_all()
        print("Dropped all tables")
        database.create_all()
        print("Created all tables")
    finally:
        database.dispose()


if __name__ == "__main__":
    reset_db()
