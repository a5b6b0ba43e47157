from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy_utils import database_exists, create_database

from shotify.config.settings import settings
from shotify.infra.models import Base

# 1. Create Engine
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
engine = create_engine(settings.database_url, echo=False, connect_args=connect_args)

# 2. Create a configured "Session" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# 3. Create the database and all tables (if they don't exist)
def init_db(bind=None):
    bind = bind or engine
    if not database_exists(bind.url):
        create_database(bind.url)
    Base.metadata.create_all(bind=bind)


def get_session():
    return SessionLocal()
