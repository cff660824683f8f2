"""Starlette middleware that negotiates the language of each request."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from infrastructure.i18n.context import reset_localizer, set_localizer
from infrastructure.i18n.resolvers import LocaleNegotiator
from infrastructure.i18n.translator import Localizer, Translator
from infrastructure.logging import bind_request_context

ACCEPT_LANGUAGE_HEADER = "accept-language"
CONTENT_LANGUAGE_HEADER = "content-language"


class LocalizeMiddleware(BaseHTTPMiddleware):
    """Selects a language before any handler runs.

    Sets request.state.language and request.state.localizer, binds the
    localizer to the request context and echoes the selected language in
    the Content-Language response header unless the handler set one.
    """

    def __init__(self, app: ASGIApp, negotiator: LocaleNegotiator, translator: Translator):
        super().__init__(app)
        self.negotiator = negotiator
        self.translator = translator

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        language = self.negotiator.negotiate(request.headers.get(ACCEPT_LANGUAGE_HEADER))
        localizer = Localizer(self.translator, language)
        request.state.language = language
        request.state.localizer = localizer

        token = set_localizer(localizer)
        try:
            with bind_request_context(
                request_path=request.url.path,
                request_method=request.method,
                language=str(language),
            ):
                response = await call_next(request)
        finally:
            reset_localizer(token)

        response.headers.setdefault(CONTENT_LANGUAGE_HEADER, str(language))
        return response
