"""
Tests for the ConfigManager class.
"""

from unittest.mock import Mock, patch

from core.config import DEFAULT_INSTRUCTION, DEFAULT_MODEL
from core.config_manager import ConfigManager


class TestConfigManager:
    """Test cases for ConfigManager."""

    def setup_method(self) -> None:
        """Set up test fixtures."""
        # Mock QSettings so nothing touches the real settings store
        self.settings_patcher = patch("core.config_manager.QSettings")
        self.mock_qsettings_class = self.settings_patcher.start()
        self.mock_qsettings = Mock()
        self.mock_qsettings_class.return_value = self.mock_qsettings

        self.setup_patcher = patch("core.config_manager.setup_qsettings")
        self.mock_setup = self.setup_patcher.start()

    def teardown_method(self) -> None:
        """Clean up test fixtures."""
        self.settings_patcher.stop()
        self.setup_patcher.stop()

    def test_init(self) -> None:
        """Test ConfigManager initialization."""
        ConfigManager()

        self.mock_setup.assert_called_once()
        self.mock_qsettings_class.assert_called_once()

    def test_get_with_default(self) -> None:
        """Test getting a value with default fallback."""
        config_manager = ConfigManager()

        # QSettings returns the fallback it was given for missing keys
        self.mock_qsettings.value.side_effect = lambda key, default: default

        assert config_manager.get("model") == DEFAULT_MODEL
        self.mock_qsettings.value.assert_called_with("model", DEFAULT_MODEL)

    def test_get_with_stored_value(self) -> None:
        """Test getting a stored value."""
        config_manager = ConfigManager()

        self.mock_qsettings.value.return_value = "/home/user/Pictures"

        assert config_manager.get("last_open_dir") == "/home/user/Pictures"

    def test_get_explicit_default(self) -> None:
        """Test that an explicit default overrides DEFAULT_CONFIG."""
        config_manager = ConfigManager()
        self.mock_qsettings.value.side_effect = lambda key, default: default

        assert config_manager.get("unknown", "fallback") == "fallback"

    def test_get_unknown_key_without_default(self) -> None:
        """Test that unknown keys come back untouched."""
        config_manager = ConfigManager()
        self.mock_qsettings.value.return_value = None

        assert config_manager.get("unknown") is None

    def test_type_coercion_error_handling(self) -> None:
        """Test handling of type coercion errors."""
        config_manager = ConfigManager()

        self.mock_qsettings.value.return_value = "not a number"

        assert config_manager.get("retries", 5) == 5

    def test_numeric_coercion(self) -> None:
        """Test that numeric strings are coerced to the default's type."""
        config_manager = ConfigManager()

        self.mock_qsettings.value.return_value = "7"

        assert config_manager.get("retries", 5) == 7

    def test_boolean_coercion(self) -> None:
        """Test boolean type coercion from QSettings."""
        config_manager = ConfigManager()

        self.mock_qsettings.value.return_value = "true"
        assert config_manager.get("flag", False) is True

        self.mock_qsettings.value.return_value = "off"
        assert config_manager.get("flag", True) is False

    def test_set(self) -> None:
        """Test setting a value."""
        config_manager = ConfigManager()

        config_manager.set("last_save_dir", "/tmp/out")

        self.mock_qsettings.setValue.assert_called_with("last_save_dir", "/tmp/out")
        self.mock_qsettings.sync.assert_called_once()

    def test_load_all(self) -> None:
        """Test loading all configuration values."""
        config_manager = ConfigManager()

        def mock_value(key: str, default: object) -> object:
            stored_values = {"model": "custom-model", "log_level": "DEBUG"}
            return stored_values.get(key, default)

        self.mock_qsettings.value.side_effect = mock_value

        result = config_manager.load_all()

        assert result["model"] == "custom-model"
        assert result["log_level"] == "DEBUG"
        assert result["instruction"] == DEFAULT_INSTRUCTION
        assert result["last_open_dir"] == ""

    def test_reset_to_defaults(self) -> None:
        """Test resetting configuration to defaults."""
        config_manager = ConfigManager()

        config_manager.reset_to_defaults()

        self.mock_qsettings.clear.assert_called_once()
        self.mock_qsettings.sync.assert_called_once()

    def test_has_key(self) -> None:
        """Test checking if a key exists."""
        config_manager = ConfigManager()

        self.mock_qsettings.contains.return_value = True

        assert config_manager.has_key("model") is True
        self.mock_qsettings.contains.assert_called_with("model")

    def test_remove_key(self) -> None:
        """Test removing a key."""
        config_manager = ConfigManager()

        config_manager.remove_key("model")

        self.mock_qsettings.remove.assert_called_with("model")
        self.mock_qsettings.sync.assert_called_once()
