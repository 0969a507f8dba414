"""Simple two-language (en/fr) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "fajr": {
        "en": "Fajr",
        "fr": "Fajr",
    },
    "dhuhr": {
        "en": "Dhuhr",
        "fr": "Dhohr",
    },
    "asr": {
        "en": "Asr",
        "fr": "Asr",
    },
    "maghrib": {
        "en": "Maghrib",
        "fr": "Maghreb",
    },
    "isha": {
        "en": "Isha",
        "fr": "Icha",
    },
    "header": {
        "en": "Prayer times for {place} on {date} ({method})",
        "fr": "Horaires de prière pour {place} le {date} ({method})",
    },
    "timezone": {
        "en": "Times shown in {tz}",
        "fr": "Heures affichées en {tz}",
    },
    "high_latitude_note": {
        "en": "Note: high-latitude fallback applied.",
        "fr": "Remarque : règle des hautes latitudes appliquée.",
    },
    "next_prayer": {
        "en": "Next: {name} at {time}",
        "fr": "Prochaine : {name} à {time}",
    },
    "error_input": {
        "en": "Invalid input: {error}",
        "fr": "Entrée invalide : {error}",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
