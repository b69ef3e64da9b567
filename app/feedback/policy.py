import html
import re
from collections.abc import Iterable

DEFAULT_URGENT_KEYWORDS = (
    "rahbariyat",
    "shikoyat",
    "sud",
    "prokuratura",
    "janjal",
    "qo'pol",
    "qo‘pol",
    "haqorat",
    "pora",
    # English equivalents for feedback left in English
    "management",
    "complaint",
    "court",
    "lawsuit",
    "prosecutor",
    "rude",
    "insult",
    "abuse",
    "bribe",
)

DEFAULT_DEPARTMENT_TAG_CHARSET = r"\wа-яёқғўҳ"

NOT_PROVIDED = "Kiritilmadi"


def is_urgent(
    rating: int,
    comment: str | None,
    keywords: Iterable[str] = DEFAULT_URGENT_KEYWORDS,
) -> bool:
    """Low ratings and comments mentioning escalation terms are urgent."""
    if rating <= 2:
        return True

    text = (comment or "").lower()
    return any(word in text for word in keywords)


def rating_label(rating: int) -> str:
    if rating <= 2:
        return "🚨 QIZIL CHIROQ"
    if rating == 3:
        return "⚠️ SALBIY"
    return "✅ IJOBIY"


def escape_html(text: str | None) -> str:
    return html.escape(text or "", quote=False)


def department_to_tag(
    department: str | None, charset: str = DEFAULT_DEPARTMENT_TAG_CHARSET
) -> str:
    if not department:
        return ""

    slug = re.sub(r"\s+", "_", department.lower())
    slug = re.sub(f"[^{charset}]", "", slug, flags=re.IGNORECASE)
    return f"#{slug}"


def format_feedback_message(
    rating: int,
    department: str | None,
    comment: str | None,
    phone: str | None = None,
    charset: str = DEFAULT_DEPARTMENT_TAG_CHARSET,
) -> str:
    """Render a feedback record as Telegram HTML."""
    label = rating_label(rating)
    safe_department = escape_html(department or NOT_PROVIDED)
    tag = department_to_tag(department, charset)
    safe_comment = escape_html(comment or NOT_PROVIDED)

    phone = (phone or "").strip()
    phone_line = f"📞 Aloqa: <b>{escape_html(phone)}</b>\n" if phone else ""

    message = (
        f"<b>{label}</b>\n"
        f"⭐ Baho: <b>{rating}/5</b>\n"
        f"🏥 Bo‘lim: {safe_department} {tag}\n"
        f"📝 Fikr:\n"
        f"{safe_comment}\n"
        f"{phone_line}"
    )
    return message.strip()
