"""Constants for geolocation lookups."""

# Locales supported by MaxMind GeoIP2/GeoLite2 databases
ALLOWED_GEOIP_LOCALES: list[str] = ["de", "en", "es", "fr", "ja", "pt-BR", "ru", "zh-CN"]
GEOIP_LOCALES_DEFAULT: list[str] = ["en"]

# IPy address types that are worth an external lookup
MONITORED_IP_TYPES: frozenset[str] = frozenset({"PUBLIC", "GLOBAL-UNICAST"})

UNKNOWN_ADDRESS = "unknown"
UNKNOWN_LOCATION = "unknown location"
