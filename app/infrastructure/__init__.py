"""Infrastructure modules for the panel server.

Centralized infrastructure components:
- configuration: Settings management (Settings, ServerSettings, I18nSettings)
- logging: Structured logging (configure_logging, get_module_logger)
- i18n: Locale discovery, negotiation and translation
- services: Dependency injection providers (get_settings, SettingsDep)

Subpackages are imported explicitly by their users, e.g.
``from infrastructure.i18n import LocaleNegotiator``.
"""
