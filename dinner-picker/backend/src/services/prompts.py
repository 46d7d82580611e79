from __future__ import annotations

from dataclasses import dataclass

from models import GeoPoint


@dataclass(frozen=True)
class LocaleText:
    placeholder_name: str
    any_cuisine: str
    fallback_cuisines: tuple[str, ...]
    fetch_failed: str
    location_failed: str
    location_missing: str


EN = LocaleText(
    placeholder_name="Recommended Restaurant",
    any_cuisine="anything!",
    fallback_cuisines=(
        "anything!",
        "Japanese",
        "Italian",
        "Chinese",
        "Korean",
        "Thai",
        "Mexican",
        "American",
        "Indian",
        "Hot Pot",
    ),
    fetch_failed="Could not fetch restaurant recommendations, please try again later.",
    location_failed="Could not get your location. Please allow location access so we can recommend restaurants.",
    location_missing="Your location is not available yet.",
)

ZH_TW = LocaleText(
    placeholder_name="推薦餐廳",
    any_cuisine="隨便！",
    fallback_cuisines=(
        "隨便！",
        "日式料理",
        "義式料理",
        "中式料理",
        "韓式料理",
        "泰式料理",
        "美式料理",
        "火鍋",
        "燒肉",
        "素食",
    ),
    fetch_failed="無法獲取餐廳推薦，請稍後再試。",
    location_failed="無法獲取您的位置。請允許位置權限以便推薦餐廳。",
    location_missing="尚未取得您的位置。",
)


def locale_text(lang: str | None) -> LocaleText:
    if lang and lang.lower().startswith("zh"):
        return ZH_TW
    return EN


_PHOTO_INSTRUCTION_EN = (
    "Important: use Google Search to find a real photo URL for each restaurant. If you can find an image link "
    "on the official website or a well-known review site, use it. If you really cannot find one, leave it empty "
    "and a default image will be used."
)

_FORMAT_EN = (
    "Follow this format exactly, one Markdown list item per restaurant:\n"
    "* **Restaurant Name:** [star rating, e.g. 4.5 stars] - A 1-2 sentence description of what makes it special "
    "or which dishes to order. [insert the restaurant's real image URL here, leave empty if none is found]"
)

_PHOTO_INSTRUCTION_ZH = (
    "重點：請利用 Google Search 尋找該餐廳的真實照片 URL。如果找得到官網或知名評論網的圖片連結，請務必使用。"
    "如果真的找不到，請留空，我會使用預設圖片。"
)

_FORMAT_ZH = (
    "請遵循以下格式，為每間餐廳提供一個 Markdown 列表項：\n"
    "* **餐廳名稱:** [星級評分，例如：4.5顆星] - 1-2句話的簡短描述，說明它的特色或推薦菜色。"
    "[請在此處插入餐廳真實圖片URL，如果找不到請留空]"
)


def cuisine_prompt(cuisine: str, lang: str | None = None) -> str:
    text = locale_text(lang)
    no_filter = not cuisine.strip() or cuisine.strip() == text.any_cuisine
    if text is ZH_TW:
        kind = "" if no_filter else f"類型為「{cuisine}」的"
        ask = f"請在我目前的位置附近，推薦 3 間{kind}晚餐餐廳。"
        return "\n\n".join([ask, _PHOTO_INSTRUCTION_ZH, _FORMAT_ZH])
    kind = "" if no_filter else f'"{cuisine}" '
    ask = f"Recommend exactly 3 {kind}dinner restaurants near my current location."
    return "\n\n".join([ask, _PHOTO_INSTRUCTION_EN, _FORMAT_EN])


def random_prompt(lang: str | None = None) -> str:
    if locale_text(lang) is ZH_TW:
        ask = "請在我目前的位置附近，隨機推薦 3 間不同料理類型且評價良好的晚餐餐廳。"
        return "\n\n".join([ask, _PHOTO_INSTRUCTION_ZH, _FORMAT_ZH])
    ask = (
        "Recommend exactly 3 well-reviewed dinner restaurants near my current location, "
        "each serving a different cuisine, picked at random."
    )
    return "\n\n".join([ask, _PHOTO_INSTRUCTION_EN, _FORMAT_EN])


def cuisine_labels_prompt(location: GeoPoint, lang: str | None = None) -> str:
    coords = f"{location.latitude}, {location.longitude}"
    if locale_text(lang) is ZH_TW:
        return (
            f"根據經緯度 {coords}，推薦8到10種附近熱門且適合晚餐的料理類型。"
            "請只用繁體中文回答，並以逗號分隔，例如：「日式料理, 義式料理, 火鍋」。不要包含任何其他文字或編號。"
        )
    return (
        f"Based on the coordinates {coords}, list 8 to 10 cuisine types that are popular nearby and suitable "
        'for dinner. Answer only with the cuisine names separated by commas, e.g. "Japanese, Italian, Hot Pot". '
        "Do not include any other text or numbering."
    )
