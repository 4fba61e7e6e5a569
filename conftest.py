import pytest


@pytest.fixture(autouse=True)
def _test_settings(settings):
    # Session auth over plain http in the test client
    settings.SECURE_SSL_REDIRECT = False
    settings.SESSION_COOKIE_SECURE = False
    settings.CSRF_COOKIE_SECURE = False

    # Expiry tests assume the default window regardless of local .env
    settings.QMS_DOC_EXPIRY_WARNING_DAYS = 90
