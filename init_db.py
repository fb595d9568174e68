# init_db.py
from bizboard.core.config import settings
from bizboard.core.database import Database

database = Database(settings.DATABASE_URL)
database.create_all()
database.dispose()
print("Created all tables")
