"""
Core app - Shared abstractions and utilities.

This app provides the pieces every other app leans on:
- Service-layer error taxonomy (exceptions)
- File upload handling backed by Django storage (upload_service)
"""
