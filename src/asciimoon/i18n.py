"""Five-language catalog: lunar feature labels and UI captions (en/zh/fr/ja/es)."""

from asciimoon.errors import CatalogLookupError
from asciimoon.models import LabelEntry

# Stable ordinal order; cycling walks this tuple.
LANGUAGES: tuple[tuple[str, str], ...] = (
    ("en", "English"),
    ("zh", "中文"),
    ("fr", "Français"),
    ("ja", "日本語"),
    ("es", "Español"),
)

_FEATURE_LABELS: dict[str, tuple[str, str, str, str, str]] = {
    "oceanus_procellarum": (
        "Oceanus Procellarum",
        "风暴洋",
        "Océan des Tempêtes",
        "嵐の大洋",
        "Océano de las Tormentas",
    ),
    "mare_imbrium": ("Mare Imbrium", "雨海", "Mer des Pluies", "雨の海", "Mar de las Lluvias"),
    "mare_serenitatis": (
        "Mare Serenitatis",
        "澄海",
        "Mer de la Sérénité",
        "晴れの海",
        "Mar de la Serenidad",
    ),
    "mare_tranquillitatis": (
        "Mare Tranquillitatis",
        "静海",
        "Mer de la Tranquillité",
        "静かの海",
        "Mar de la Tranquilidad",
    ),
    "mare_crisium": ("Mare Crisium", "危海", "Mer des Crises", "危難の海", "Mar de las Crisis"),
    "tycho": ("Tycho", "第谷", "Tycho", "ティコ", "Tycho"),
    "copernicus": ("Copernicus", "哥白尼", "Copernic", "コペルニクス", "Copérnico"),
    "kepler": ("Kepler", "开普勒", "Kepler", "ケプラー", "Kepler"),
    "aristarchus": ("Aristarchus", "阿里斯塔克斯", "Aristarque", "アリスタルコス", "Aristarco"),
    "plato": ("Plato", "柏拉图", "Platon", "プラトン", "Platón"),
}

_STRINGS: dict[str, dict[str, str]] = {
    "info_title": {
        "en": "Details",
        "zh": "详情",
        "fr": "Détails",
        "ja": "詳細",
        "es": "Detalles",
    },
    "label_date": {"en": "Date", "zh": "日期", "fr": "Date", "ja": "日付", "es": "Fecha"},
    "label_mode": {"en": "Mode", "zh": "模式", "fr": "Mode", "ja": "モード", "es": "Modo"},
    "mode_now": {
        "en": "Now (auto)",
        "zh": "现在（自动）",
        "fr": "Maintenant (auto)",
        "ja": "現在（自動）",
        "es": "Ahora (auto)",
    },
    "mode_manual": {
        "en": "Manual",
        "zh": "手动",
        "fr": "Manuel",
        "ja": "手動",
        "es": "Manual",
    },
    "label_phase": {"en": "Phase", "zh": "月相", "fr": "Phase", "ja": "月相", "es": "Fase"},
    "label_age": {"en": "Age", "zh": "月龄", "fr": "Âge", "ja": "月齢", "es": "Edad"},
    "age_days": {
        "en": "{days:.1f} days",
        "zh": "{days:.1f} 天",
        "fr": "{days:.1f} jours",
        "ja": "{days:.1f} 日",
        "es": "{days:.1f} días",
    },
    "label_illumination": {
        "en": "Illumination",
        "zh": "照亮比例",
        "fr": "Illumination",
        "ja": "輝面比",
        "es": "Iluminación",
    },
    "label_language": {
        "en": "Language",
        "zh": "语言",
        "fr": "Langue",
        "ja": "言語",
        "es": "Idioma",
    },
    "help": {
        "en": "<Left>/<Right> date (Manual)  <n> now  <l> labels  <L> language  "
        "<d> hide dark  <p> poem  <P> next poem  <i> info  <q> quit",
    },
    "poem_title": {
        "en": "Moon Poem",
        "zh": "月之诗",
        "fr": "Poème de la lune",
        "ja": "月の詩",
        "es": "Poema de la luna",
    },
    "no_poems": {
        "en": "(no poems available)",
        "zh": "（暂无诗歌）",
        "fr": "(aucun poème disponible)",
        "ja": "（詩がありません）",
        "es": "(no hay poemas disponibles)",
    },
    "too_small": {
        "en": "Terminal too small",
    },
    "new_moon": {
        "en": "New Moon",
        "zh": "新月",
        "fr": "Nouvelle lune",
        "ja": "新月",
        "es": "Luna nueva",
    },
    "waxing_crescent": {
        "en": "Waxing Crescent",
        "zh": "娥眉月",
        "fr": "Premier croissant",
        "ja": "三日月",
        "es": "Luna creciente",
    },
    "first_quarter": {
        "en": "First Quarter",
        "zh": "上弦月",
        "fr": "Premier quartier",
        "ja": "上弦の月",
        "es": "Cuarto creciente",
    },
    "waxing_gibbous": {
        "en": "Waxing Gibbous",
        "zh": "盈凸月",
        "fr": "Gibbeuse croissante",
        "ja": "十三夜月",
        "es": "Gibosa creciente",
    },
    "full_moon": {
        "en": "Full Moon",
        "zh": "满月",
        "fr": "Pleine lune",
        "ja": "満月",
        "es": "Luna llena",
    },
    "waning_gibbous": {
        "en": "Waning Gibbous",
        "zh": "亏凸月",
        "fr": "Gibbeuse décroissante",
        "ja": "寝待月",
        "es": "Gibosa menguante",
    },
    "last_quarter": {
        "en": "Last Quarter",
        "zh": "下弦月",
        "fr": "Dernier quartier",
        "ja": "下弦の月",
        "es": "Cuarto menguante",
    },
    "waning_crescent": {
        "en": "Waning Crescent",
        "zh": "残月",
        "fr": "Dernier croissant",
        "ja": "有明月",
        "es": "Luna menguante",
    },
}


def language_count() -> int:
    return len(LANGUAGES)


def cycle_language(index: int) -> int:
    """Return the next language index, wrapping back to the first."""
    return (index + 1) % language_count()


def _check_index(index: int) -> None:
    if not 0 <= index < language_count():
        raise CatalogLookupError(f"Unknown language index: {index}")


def language_code(index: int) -> str:
    _check_index(index)
    return LANGUAGES[index][0]


def language_name(index: int) -> str:
    _check_index(index)
    return LANGUAGES[index][1]


def index_for_code(code: str) -> int:
    """Map a language code ("fr", "ja", ...) to its stable ordinal.

    Raises:
        CatalogLookupError: If the code is not one of the supported languages.
    """
    normalized = code.strip().lower()
    for index, (lang, _) in enumerate(LANGUAGES):
        if lang == normalized:
            return index
    raise CatalogLookupError(f"Unknown language code: {code}")


def label_for(feature_id: str, language_index: int) -> str:
    """Return the localized label of a lunar feature.

    Raises:
        CatalogLookupError: If the feature id or language index is unknown.
    """
    _check_index(language_index)
    names = _FEATURE_LABELS.get(feature_id)
    if names is None:
        raise CatalogLookupError(f"Unknown feature id: {feature_id}")
    return names[language_index]


def label_entry(feature_id: str, language_index: int) -> LabelEntry:
    return LabelEntry(
        feature_id=feature_id,
        text=label_for(feature_id, language_index),
        language=language_code(language_index),
    )


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
