from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from seatmap.config import DATABASE_URL


def make_engine(url=DATABASE_URL):
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


engine = make_engine()

SessionLocal = sessionmaker(autocommit = False, autoflush = False, bind = engine)

Base = declarative_base()
