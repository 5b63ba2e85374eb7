"""Container module - Centralized dependency injection.

Re-exports the factory functions from the submodules:

    from src.core.container import get_logger, get_login_user_handler, ...

The container is organized into modules by scope:
- infrastructure: App-scoped singletons (cache, db, audit, security, logging)
- repositories: Request-scoped repositories sharing one session
- services: Request-scoped application services
- auth_handlers: Request-scoped command and query handlers
"""

# Infrastructure services
from src.core.container.infrastructure import (
    get_audit,
    get_backup_code_service,
    get_cache,
    get_database,
    get_db_session,
    get_device_enricher,
    get_geolocation,
    get_logger,
    get_notification_dispatcher,
    get_password_service,
    get_secure_token_generator,
    get_token_service,
    get_totp_service,
)

# Repositories
from src.core.container.repositories import (
    RequestRepositories,
    build_repositories,
    get_repositories,
)

# Application services
from src.core.container.services import (
    AuthServices,
    build_services,
    get_auth_services,
    risk_thresholds,
)

# Handlers
from src.core.container.auth_handlers import (
    get_authenticate_user_handler,
    get_change_password_handler,
    get_complete_two_factor_login_handler,
    get_confirm_password_reset_handler,
    get_disable_two_factor_handler,
    get_enable_two_factor_handler,
    get_list_devices_handler,
    get_list_security_events_handler,
    get_list_sessions_handler,
    get_login_user_handler,
    get_logout_user_handler,
    get_mark_security_event_reviewed_handler,
    get_refresh_token_handler,
    get_regenerate_backup_codes_handler,
    get_register_user_handler,
    get_request_password_reset_handler,
    get_resend_verification_handler,
    get_revoke_all_sessions_handler,
    get_revoke_all_trusted_devices_handler,
    get_revoke_session_handler,
    get_revoke_trusted_device_handler,
    get_security_stats_handler,
    get_setup_two_factor_handler,
    get_trust_current_device_handler,
    get_two_factor_status_handler,
    get_verify_email_handler,
)

__all__ = [
    # Infrastructure
    "get_audit",
    "get_backup_code_service",
    "get_cache",
    "get_database",
    "get_db_session",
    "get_device_enricher",
    "get_geolocation",
    "get_logger",
    "get_notification_dispatcher",
    "get_password_service",
    "get_secure_token_generator",
    "get_token_service",
    "get_totp_service",
    # Repositories
    "RequestRepositories",
    "build_repositories",
    "get_repositories",
    # Services
    "AuthServices",
    "build_services",
    "get_auth_services",
    "risk_thresholds",
    # Handlers
    "get_authenticate_user_handler",
    "get_change_password_handler",
    "get_complete_two_factor_login_handler",
    "get_confirm_password_reset_handler",
    "get_disable_two_factor_handler",
    "get_enable_two_factor_handler",
    "get_list_devices_handler",
    "get_list_security_events_handler",
    "get_list_sessions_handler",
    "get_login_user_handler",
    "get_logout_user_handler",
    "get_mark_security_event_reviewed_handler",
    "get_refresh_token_handler",
    "get_regenerate_backup_codes_handler",
    "get_register_user_handler",
    "get_request_password_reset_handler",
    "get_resend_verification_handler",
    "get_revoke_all_sessions_handler",
    "get_revoke_all_trusted_devices_handler",
    "get_revoke_session_handler",
    "get_revoke_trusted_device_handler",
    "get_security_stats_handler",
    "get_setup_two_factor_handler",
    "get_trust_current_device_handler",
    "get_two_factor_status_handler",
    "get_verify_email_handler",
]
