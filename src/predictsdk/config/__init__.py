from predictsdk.config.settings import SDKConfig, Settings, configure_logging, get_settings, load_config

__all__ = ["SDKConfig", "Settings", "configure_logging", "get_settings", "load_config"]
