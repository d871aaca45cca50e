"""Declarative base for the library schema"""
from sqlalchemy.orm import declarative_base

Base = declarative_base()
