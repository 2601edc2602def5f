from collections.abc import Mapping

DEFAULT_LANGUAGE = "en"
MIRROR_LANGUAGES = ("zh", "pt")

SCALAR_FIELDS = ("name", "description", "address")
LIST_FIELDS = ("cuisine_type",)
LOCALIZED_FIELDS = SCALAR_FIELDS + LIST_FIELDS

OTHER_CUISINE = "Other"


def _read(record, attr):
    if isinstance(record, Mapping):
        return record.get(attr)
    return getattr(record, attr, None)


def _as_text(value):
    return value if isinstance(value, str) else ""


def _as_list(value):
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str)]
    return []


def normalize_language(lang):
    if isinstance(lang, str) and lang.lower() in MIRROR_LANGUAGES:
        return lang.lower()
    return DEFAULT_LANGUAGE


def resolve(listing, field, lang):
    """
    Value of ``field`` on ``listing`` in ``lang``.

    Works on model instances and plain dicts. Unknown languages read as
    English and unknown fields read as ``""``; it never raises.
    """
    if field not in LOCALIZED_FIELDS:
        return ""

    coerce = _as_list if field in LIST_FIELDS else _as_text
    lang = normalize_language(lang)
    if lang != DEFAULT_LANGUAGE:
        mirror = coerce(_read(listing, f"{field}_{lang}"))
        if mirror and (field in LIST_FIELDS or mirror.strip()):
            return mirror
    return coerce(_read(listing, field))


def resolve_catalog_name(entry, lang):
    lang = normalize_language(lang)
    if lang != DEFAULT_LANGUAGE:
        mirror = _as_text(_read(entry, f"name_{lang}"))
        if mirror.strip():
            return mirror
    return _as_text(_read(entry, "name"))


class CatalogLocalizer:
    """Looks catalog keys up by case-insensitive English name."""

    def __init__(self, entries):
        self._by_key = {}
        for entry in entries:
            key = _as_text(_read(entry, "name")).strip().lower()
            if key:
                self._by_key[key] = entry

    @classmethod
    def for_cuisines(cls):
        from .models import CuisineType

        return cls(CuisineType.objects.all())

    @classmethod
    def for_pet_policies(cls):
        from .models import PetPolicy

        return cls(PetPolicy.objects.all())

    def resolve(self, key, lang):
        # keys outside the catalog (custom "Other" values) are kept verbatim
        entry = self._by_key.get(key.strip().lower())
        if entry is None:
            return key
        return resolve_catalog_name(entry, lang)


def translate_cuisines(keys, lang, localizer=None):
    if localizer is None:
        localizer = CatalogLocalizer.for_cuisines()
    return [localizer.resolve(key, lang) for key in keys]


def expand_other_cuisine(keys, custom_value):
    """Swap the "Other" placeholder for the free-text cuisine the user typed."""
    custom_value = (custom_value or "").strip()
    expanded = []
    for key in keys:
        if key == OTHER_CUISINE and custom_value:
            expanded.append(custom_value)
        elif key.strip():
            expanded.append(key.strip())
    return expanded


def cuisine_mirrors(keys, localizer=None):
    """Index-aligned ``cuisine_type_zh`` / ``cuisine_type_pt`` for ``keys``."""
    if localizer is None:
        localizer = CatalogLocalizer.for_cuisines()
    return {f"cuisine_type_{lang}": translate_cuisines(keys, lang, localizer) for lang in MIRROR_LANGUAGES}


def localized_listing(listing, lang):
    return {field: resolve(listing, field, lang) for field in LOCALIZED_FIELDS}
