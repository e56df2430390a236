"""Canonical display names for retrospective trigger and symptom keys"""
import string

ENVIRONMENTAL_TRIGGER_NAMES: dict[str, str] = {
    "strong_smell": "Strong smell",
    "bright_light": "Bright light",
    "loud_noise": "Loud noise",
    "screen_glare": "Screen glare",
    "weather_change": "Weather change",
    "altitude": "Altitude",
    "heat": "Heat",
    "cold": "Cold",
}

SYMPTOM_NAMES: dict[str, str] = {
    "nausea": "Nausea",
    "light_sensitivity": "Light sensitivity",
    "sound_sensitivity": "Sound sensitivity",
    "aura": "Aura",
    "neck_pain": "Neck pain",
    "visual_disturbance": "Visual disturbance",
    "vomiting": "Vomiting",
    "dizziness": "Dizziness",
}


def capitalize_words(text: str) -> str:
    """Upper-case the first letter of every word, lower-case the rest"""
    return string.capwords(text)


def _humanize(key: str) -> str:
    # Unknown keys: "some_new_key" -> "Some New Key"
    return capitalize_words(key.replace("_", " "))


def trigger_display_name(key: str) -> str:
    """Display name for an environmental trigger key"""
    return ENVIRONMENTAL_TRIGGER_NAMES.get(key) or _humanize(key)


def symptom_display_name(key: str) -> str:
    """Display name for a symptom key"""
    return SYMPTOM_NAMES.get(key) or _humanize(key)


def meal_display_name(meal: str) -> str:
    """Meals are free text; only capitalization is normalized"""
    return capitalize_words(meal)
