# File: langfu_app/modules/auth/config.py

class AuthModuleDefaultConfig:
    # Reachable without a session
    PUBLIC_PATHS = frozenset({
        '/',
        '/login',
        '/register',
        '/api/auth/login',
        '/api/auth/register',
        '/api/auth/token',
        '/api/auth/logout',
    })
    PUBLIC_PREFIXES = ('/static',)

    # Signed-in users are sent to the dashboard instead
    GUEST_ONLY_PATHS = frozenset({'/login', '/register'})

    BEARER_PREFIX = 'Bearer '
