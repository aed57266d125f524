"""
user_platform_tests package

Tests for the user service:

- FastAPI register/login/me endpoints (`test_auth.py`)
- Password hashing and token issuing (`test_security.py`)
- Credential store and the registration/authentication flows
  (`test_repository.py`, `test_services.py`)
- Database initialization and event logging (`test_db_init.py`, `test_event_logger.py`)
"""
