"""Pydantic Schemas — request/response models for the submissions resource.

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
