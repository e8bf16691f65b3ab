import secrets
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from seatmap.backend.database import Base


def new_layout_name(now=None):
    now = now or datetime.now()
    return f"seatmap_{now:%Y%m%d_%H%M%S}_{secrets.token_hex(4)}.json"


class LayoutDB(Base):
    __tablename__ = "layouts"

    id = Column(Integer, primary_key=True, index=True)
    file_name = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    # the layout record as saved: {"rows":4,"cols":6,...,"seats":{"0_0":"ab12cd3"}}
    payload_json = Column(Text, nullable=False)
