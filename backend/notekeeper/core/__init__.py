# notekeeper/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- errors: Structured API errors mapped to HTTP status codes
- responses: The {statusCode, data, message, success} response envelope
- security: Password hashing and JWT encoding/decoding
"""
