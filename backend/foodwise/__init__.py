# backend/foodwise/__init__.py
"""
FoodWise backend application package.

This package contains:
- main: FastAPI application entrypoint
- inventory: inventory items and expiry queries
- users: users and their notification settings
- notifications: SMS / email delivery and the in-app notification feed
- automation: periodic expiry notification sweep and its scheduler
"""
