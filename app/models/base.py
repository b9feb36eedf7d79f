"""
Base Model Mixins
"""
from sqlalchemy import Column, Uuid
import uuid

class UUIDMixin:
    """Mixin for UUID primary key"""
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
