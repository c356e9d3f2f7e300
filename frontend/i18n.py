"""Supported UI languages and the instruction appended to every AI prompt."""

LANGUAGES: dict[str, tuple[str, str]] = {
    "en": ("English", "en-IN"),
    "hi": ("Hindi", "hi-IN"),
    "bn": ("Bengali", "bn-IN"),
    "ta": ("Tamil", "ta-IN"),
    "te": ("Telugu", "te-IN"),
    "mr": ("Marathi", "mr-IN"),
    "gu": ("Gujarati", "gu-IN"),
    "pa": ("Punjabi", "pa-IN"),
    "kn": ("Kannada", "kn-IN"),
    "ml": ("Malayalam", "ml-IN"),
}

DEFAULT_LANGUAGE = "en"


def language_name(code: str) -> str:
    return LANGUAGES.get(code, LANGUAGES[DEFAULT_LANGUAGE])[0]


def language_instruction(code: str) -> str:
    """Instruction the backend appends verbatim to the system prompt.

    English needs none; every other language asks for a full-language answer
    while keeping crop and chemical names recognisable.
    """
    if code not in LANGUAGES or code == DEFAULT_LANGUAGE:
        return ""
    name = language_name(code)
    return (
        f"\nIMPORTANT: Respond entirely in {name}. "
        f"Keep crop names, product names and numbers easy to recognise, adding the English term in brackets where helpful."
    )
