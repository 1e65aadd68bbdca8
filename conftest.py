# conftest.py - pytest config to make tests stable & fast

import os
import pytest

# Ensure Django settings are discoverable for pytest
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "vendorpro.settings")


# --- Give every test DB access by default ------------------------------------
@pytest.fixture(autouse=True)
def _enable_db_for_all_tests(db):
    # the local store is a database table
    pass


# --- Relax settings so APIClient requests are resilient in tests -------------
@pytest.fixture(autouse=True)
def _relaxed_test_settings(settings):
    settings.ALLOWED_HOSTS = ["*", "testserver", "localhost", "127.0.0.1"]
    # Speed up password hashing in tests
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
