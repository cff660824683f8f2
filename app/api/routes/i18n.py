from fastapi import APIRouter, Request

from infrastructure.services import LocalizerDep

router = APIRouter(prefix="/lang", tags=["I18n"])


@router.get("")
def get_messages(localizer: LocalizerDep):
    """Translations for the language negotiated from Accept-Language."""
    return {"language": str(localizer.language), "messages": localizer.messages()}


@router.get("/languages")
def get_languages(request: Request):
    """Languages found in the locale directory and the default one."""
    bundle = request.app.state.locale_bundle
    return {
        "languages": [str(tag) for tag in bundle.languages],
        "default": str(bundle.default_language),
    }
