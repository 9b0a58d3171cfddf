"""
Custom middleware for the Election Tracker
==========================================

- SecurityHeadersMiddleware: Adds security headers to every response

OWASP recommendations implemented:
- X-Frame-Options: Prevent clickjacking
- X-Content-Type-Options: Prevent MIME type sniffing
- Strict-Transport-Security: HTTPS enforcement
- Referrer-Policy / Permissions-Policy: limit what the browser shares
"""

from django.utils.deprecation import MiddlewareMixin # pyright: ignore[reportMissingModuleSource]
import logging

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(MiddlewareMixin):
    """Add security headers to all HTTP responses."""

    def process_response(self, request, response):
        response['X-Frame-Options'] = 'DENY'
        response['X-Content-Type-Options'] = 'nosniff'

        if not response.has_header('Strict-Transport-Security'):
            response['Strict-Transport-Security'] = (
                'max-age=31536000; includeSubDomains; preload'
            )

        # Same-origin requests keep the Referer header (required for CSRF)
        response['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        response['Permissions-Policy'] = (
            'geolocation=(), microphone=(), camera=()'
        )

        # API responses are never cached
        if request.path.startswith('/api/') and not response.has_header('Cache-Control'):
            response['Cache-Control'] = 'no-store'

        logger.debug("Security headers added to response")
        return response
