"""Request-scoped access to the negotiated language.

The localize middleware binds a Localizer for the duration of each request;
code running downstream of it reads it back without passing it around.
Each request gets its own context, so values never leak across requests.
"""

from contextvars import ContextVar, Token
from typing import Optional

from infrastructure.i18n.models import LanguageTag
from infrastructure.i18n.translator import Localizer

_current_localizer: ContextVar[Optional[Localizer]] = ContextVar(
    "i18n_localizer", default=None
)


def set_localizer(localizer: Localizer) -> Token:
    return _current_localizer.set(localizer)


def reset_localizer(token: Token) -> None:
    _current_localizer.reset(token)


def get_localizer() -> Localizer:
    """Return the Localizer bound to the current request.

    Raises:
        LookupError: If called outside a request handled by LocalizeMiddleware.
    """
    localizer = _current_localizer.get()
    if localizer is None:
        raise LookupError("No localizer bound to the current context")
    return localizer


def get_language() -> Optional[LanguageTag]:
    """Return the language negotiated for the current request, if any."""
    localizer = _current_localizer.get()
    return localizer.language if localizer is not None else None
