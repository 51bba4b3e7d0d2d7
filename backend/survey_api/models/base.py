"""
Declarative base shared by all feature models.
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
