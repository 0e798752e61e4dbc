# ==============================================
# STORAGE (MongoDB)
# ==============================================
#
# This package owns the document store: connecting, health
# pings, and single or batch inserts of normalized logs.
#
# Modules:
# --------
# - mongo_client.py    → MongoDB connection and operations
#
# ==============================================

from .mongo_client import MongoClient

__all__ = ["MongoClient"]
