"""MFlix data access: user/session stores and aggregation pipeline builders."""
