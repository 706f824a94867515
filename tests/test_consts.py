from oura_mcp.consts import (
    AUTHORIZE_URL,
    DEFAULT_BASE_URL,
    DEFAULT_REDIRECT_URI,
    DEFAULT_TOKEN_URL,
    PACKAGE_VERSION,
    TOKEN_REFRESH_BUFFER_SECONDS,
    DEFAULT_TOKEN_EXPIRY_SECONDS,
    TRAILING_WINDOW_DAYS,
    USER_AGENT,
    USERCOLLECTION_PATH,
)


class TestPackageConstants:
    """Test package constants are properly defined"""

    def test_package_version_defined(self):
        """Test that package version is defined"""
        assert isinstance(PACKAGE_VERSION, str)
        assert "." in PACKAGE_VERSION  # Should be semantic version

    def test_user_agent_format(self):
        assert USER_AGENT.endswith(f"/{PACKAGE_VERSION}")

    def test_url_constants(self):
        """Test that URL constants point at the Oura API"""
        assert DEFAULT_BASE_URL == "https://api.ouraring.com/v2"
        assert USERCOLLECTION_PATH == "/usercollection"
        assert DEFAULT_TOKEN_URL.startswith("https://")
        assert "oauth" in DEFAULT_TOKEN_URL
        assert "authorize" in AUTHORIZE_URL
        assert DEFAULT_REDIRECT_URI == "http://localhost:3000/callback"

    def test_business_constants(self):
        assert TRAILING_WINDOW_DAYS == 7
        assert 0 < TOKEN_REFRESH_BUFFER_SECONDS < DEFAULT_TOKEN_EXPIRY_SECONDS
