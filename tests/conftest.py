import os
import pytest


BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36"
)


@pytest.fixture(scope="session", autouse=True)
def baseline_settings_env():
    """Provide baseline env vars so tests are not affected by local .env.

    Pydantic-settings precedence: init args > env vars > .env > defaults.
    Setting these ensures stable defaults regardless of any .env present.
    """
    os.environ.update({
        # App
        "APP_NAME": "HostGate",
        "APP_VERSION": "0.1.0",
        "APP_DEBUG": "false",
        "APP_ENVIRONMENT": "development",
        # API
        "API_HOST": "0.0.0.0",
        "API_PORT": "8000",
        "API_WORKERS": "1",
        "API_RELOAD": "false",
        "API_LOG_LEVEL": "INFO",
        # Files
        "FILES_DIRECTORY": "files",
        "FILES_URL_PATH": "/files",
        # Download checks
        "DOWNLOAD_CHECK_ENABLE_REFERRER": "false",
        "DOWNLOAD_CHECK_ENABLE_USER_AGENT": "false",
        "DOWNLOAD_CHECK_ENABLE_BROWSER_FEATURE": "false",
        "DOWNLOAD_CHECK_ENABLE_JS_CHECK": "false",
        "DOWNLOAD_CHECK_ALLOWED_REF_DOMAINS": "[]",
        # Geolocation
        "GEO_ENABLED": "true",
        "GEO_PROVIDER": "ipinfo",
        "GEO_MAX_ENTRIES": "100",
        "GEO_LOOKUP_URL": "https://ipinfo.io",
    })


@pytest.fixture(autouse=True)
def refresh_settings_cache():
    """Clear settings cache so env changes take effect per test.

    Ensures tests using monkeypatch.setenv() get a fresh Settings instance.
    """
    from hostgate.config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def browser_headers() -> dict[str, str]:
    """Headers sent by a current desktop Chrome navigating to a file link."""
    return {
        "user-agent": BROWSER_USER_AGENT,
        "accept": (
            "text/html,application/xhtml+xml,application/xml;q=0.9,"
            "image/avif,image/webp,image/apng,*/*;q=0.8"
        ),
        "accept-language": "en-US,en;q=0.9",
        "accept-encoding": "gzip, deflate, br, zstd",
        "sec-fetch-dest": "document",
        "sec-fetch-mode": "navigate",
        "sec-fetch-site": "same-origin",
        "sec-ch-ua": '"Chromium";v="126", "Google Chrome";v="126"',
        "connection": "keep-alive",
        "upgrade-insecure-requests": "1",
        "cache-control": "max-age=0",
        "referer": "https://files.example.com/files/",
    }
