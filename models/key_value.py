# models/key_value.py
from sqlalchemy import Column, String, DateTime, Text, func
from database import Base

class KeyValueEntry(Base):
    __tablename__ = 'key_value_store'

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f'<KeyValueEntry {self.key} ({len(self.value or "")} chars)>'
