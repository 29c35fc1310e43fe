from sqlalchemy import Column, Text
from signdesk.database import Base


class KeyValueEntry(Base):
    __tablename__ = "kv_store"

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)
