"""Tests for ClientConfiguration."""

import pytest

from gemini_kit.config import (
    DEFAULT_BASE_URL,
    DEFAULT_OPENAI_BASE_URL,
    DEFAULT_UPLOAD_BASE_URL,
    ClientConfiguration,
)
from gemini_kit.errors import InvalidConfiguration
from gemini_kit.types.request import RequestTarget


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self) -> None:
        """Test default endpoints and limits."""
        config = ClientConfiguration(api_key="k")
        assert config.base_url == DEFAULT_BASE_URL
        assert config.upload_base_url == DEFAULT_UPLOAD_BASE_URL
        assert config.openai_base_url == DEFAULT_OPENAI_BASE_URL
        assert config.timeout == 60.0
        assert config.max_retries == 3
        assert dict(config.custom_headers) == {}
        assert config.use_openai_compatibility is False
        assert config.transport == "streaming"

    def test_missing_key(self) -> None:
        """An empty key is rejected with a hint."""
        with pytest.raises(InvalidConfiguration) as exc_info:
            ClientConfiguration(api_key="")
        assert "GEMINI_API_KEY" in (exc_info.value.context.hint or "")

    @pytest.mark.parametrize(("field", "value"), [("timeout", 0), ("max_retries", -1)])
    def test_invalid_limits(self, field: str, value: float) -> None:
        """Test numeric validation."""
        with pytest.raises(InvalidConfiguration):
            ClientConfiguration(api_key="k", **{field: value})

    def test_immutable(self) -> None:
        """Configuration and its header mapping are read-only."""
        config = ClientConfiguration(api_key="k", custom_headers={"X-A": "1"})
        with pytest.raises(AttributeError):
            config.timeout = 5  # type: ignore[misc]
        with pytest.raises(TypeError):
            config.custom_headers["X-B"] = "2"  # type: ignore[index]

    def test_with_options(self) -> None:
        """Test copying with changes."""
        config = ClientConfiguration(api_key="k")
        changed = config.with_options(max_retries=5)
        assert changed.max_retries == 5
        assert config.max_retries == 3

    def test_repr_masks_key(self) -> None:
        """The API key never appears in the repr."""
        assert "secret-key" not in repr(ClientConfiguration(api_key="secret-key"))


class TestHeaders:
    """Tests for header helpers."""

    def test_standard_headers(self) -> None:
        """Custom headers plus API key header and JSON content type."""
        config = ClientConfiguration(api_key="k", custom_headers={"X-App": "demo"})
        assert config.standard_headers() == {
            "X-App": "demo",
            "x-goog-api-key": "k",
            "Content-Type": "application/json",
        }

    def test_openai_headers(self) -> None:
        """Bearer authentication for OpenAI-compatible endpoints."""
        config = ClientConfiguration(api_key="k")
        headers = config.openai_headers()
        assert headers["Authorization"] == "Bearer k"
        assert "x-goog-api-key" not in headers
        assert config.auth_headers(RequestTarget.OPENAI) == headers

    def test_upload_headers(self) -> None:
        """Resumable upload initiate headers."""
        config = ClientConfiguration(api_key="k", custom_headers={"X-App": "demo"})
        headers = config.upload_headers(1234, "image/png")
        assert headers["X-App"] == "demo"
        assert headers["x-goog-api-key"] == "k"
        assert headers["X-Goog-Upload-Protocol"] == "resumable"
        assert headers["X-Goog-Upload-Command"] == "start"
        assert headers["X-Goog-Upload-Header-Content-Length"] == "1234"
        assert headers["X-Goog-Upload-Header-Content-Type"] == "image/png"
        assert headers["Content-Type"] == "application/json"

    def test_compat_flag_does_not_reroute(self) -> None:
        """The compatibility flag is carried; the target alone picks auth and URL."""
        config = ClientConfiguration(api_key="k", use_openai_compatibility=True)
        assert config.auth_headers(RequestTarget.STANDARD)["x-goog-api-key"] == "k"
        assert "Authorization" not in config.auth_headers(RequestTarget.STANDARD)
        assert config.base_url_for(RequestTarget.STANDARD) == config.base_url

    def test_fixed_headers_replace_custom_ignoring_case(self) -> None:
        """A custom header spelled in another case cannot duplicate a fixed one."""
        config = ClientConfiguration(
            api_key="k", custom_headers={"content-type": "text/plain", "X-GOOG-API-KEY": "other"}
        )
        assert config.standard_headers() == {
            "x-goog-api-key": "k",
            "Content-Type": "application/json",
        }

    def test_header_helpers_return_copies(self) -> None:
        """Mutating a returned dict does not leak into later calls."""
        config = ClientConfiguration(api_key="k")
        config.standard_headers()["X-Leak"] = "1"
        assert "X-Leak" not in config.standard_headers()


class TestUrls:
    """Tests for URL resolution."""

    def test_build_url_single_slash(self) -> None:
        """Exactly one slash joins base and path."""
        config = ClientConfiguration(api_key="k", base_url="https://h/v1beta/")
        assert config.build_url(RequestTarget.STANDARD, "/models/x") == "https://h/v1beta/models/x"
        assert config.build_url(RequestTarget.STANDARD, "files") == "https://h/v1beta/files"

    def test_base_url_for_targets(self) -> None:
        """Each target has its own base URL."""
        config = ClientConfiguration(api_key="k")
        assert config.base_url_for(RequestTarget.UPLOAD) == DEFAULT_UPLOAD_BASE_URL
        assert config.base_url_for(RequestTarget.OPENAI) == DEFAULT_OPENAI_BASE_URL
        assert config.base_url_for(RequestTarget.STANDARD) == DEFAULT_BASE_URL


class TestFromEnvironment:
    """Tests for environment-based configuration."""

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test all supported variables."""
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        monkeypatch.setenv("GEMINI_BASE_URL", "https://proxy.test/v1beta")
        monkeypatch.setenv("GEMINI_TIMEOUT_SECS", "12.5")
        monkeypatch.setenv("GEMINI_MAX_RETRIES", "5")
        monkeypatch.setenv("GEMINI_TRANSPORT", "buffered")
        monkeypatch.setenv("GEMINI_OPENAI_COMPAT", "true")

        config = ClientConfiguration.from_environment()

        assert config.api_key == "env-key"
        assert config.base_url == "https://proxy.test/v1beta"
        assert config.timeout == 12.5
        assert config.max_retries == 5
        assert config.transport == "buffered"
        assert config.use_openai_compatibility is True

    def test_google_api_key_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """GOOGLE_API_KEY is used when GEMINI_API_KEY is unset."""
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        assert ClientConfiguration.from_environment().api_key == "google-key"

    def test_malformed_numbers_keep_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unparseable numeric values are ignored."""
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        monkeypatch.setenv("GEMINI_TIMEOUT_SECS", "soon")
        monkeypatch.setenv("GEMINI_MAX_RETRIES", "many")
        config = ClientConfiguration.from_environment()
        assert config.timeout == 60.0
        assert config.max_retries == 3

    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Explicit overrides take precedence."""
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        monkeypatch.setenv("GEMINI_MAX_RETRIES", "5")
        config = ClientConfiguration.from_environment(api_key="explicit", max_retries=1)
        assert config.api_key == "explicit"
        assert config.max_retries == 1

    def test_no_key_anywhere(self) -> None:
        """Missing key raises InvalidConfiguration."""
        with pytest.raises(InvalidConfiguration):
            ClientConfiguration.from_environment()
