from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Database settings come from environment variables, optionally via a .env file
import os
from dotenv import load_dotenv
load_dotenv()
# Load environment variables
database_url = os.getenv('PAYBOB_DATABASE_URL')
username = os.getenv('DB_USERNAME')
password = os.getenv('DB_PASSWORD')
db_name = os.getenv('DB_NAME')
db_host = os.getenv('DB_HOST', 'localhost')

DEFAULT_SQLITE_URL = "sqlite:///paybob.db"


def build_database_url() -> str:
    if database_url:
        return database_url
    if username and password and db_name:
        return f"postgresql://{username}:{password}@{db_host}:5432/{db_name}"
    return DEFAULT_SQLITE_URL


DATABASE_URL = build_database_url()

engine = create_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None):
    """Create any missing tables."""
    from paybob.models import Base

    Base.metadata.create_all(bind=bind or engine)
