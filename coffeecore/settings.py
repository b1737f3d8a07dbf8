import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    API_KEY: str = os.getenv("API_KEY", "")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Notification endpoint (external collaborator)
    NOTIFY_URL: str = os.getenv("NOTIFY_URL", "http://localhost:8000/api/notify")
    # 0 disables the application timeout and leaves it to the transport default
    NOTIFY_TIMEOUT_SEC: float = float(os.getenv("NOTIFY_TIMEOUT_SEC", "5.0"))

    # Manual fallback channel (mail compose)
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@coffeecore.example")
    FAKE_DOOR_SUBJECT_TEMPLATE: str = os.getenv("FAKE_DOOR_SUBJECT_TEMPLATE", "Interesse: {product_name}")
    FAKE_DOOR_BODY: str = os.getenv(
        "FAKE_DOOR_BODY", "Vorrei saperne di più su questo prodotto quando sarà pronto."
    )
    CONTACT_SUBJECT: str = os.getenv("CONTACT_SUBJECT", "Richiesta di contatto")
    CONTACT_BODY_TEMPLATE: str = os.getenv(
        "CONTACT_BODY_TEMPLATE",
        "Buongiorno, sono {name}.\n\n{message}\n\nVi prego di ricontattarmi a questo indirizzo.",
    )

    # User-visible confirmations (succeeded state)
    FAKE_DOOR_CONFIRMATION: str = os.getenv(
        "FAKE_DOOR_CONFIRMATION", "Perfetto! Ti avviseremo appena disponibile."
    )
    CONTACT_CONFIRMATION: str = os.getenv(
        "CONTACT_CONFIRMATION", "Grazie! Ti ricontatteremo al più presto."
    )

    # Scroll-highlight affordance
    HIGHLIGHT_DURATION_MS: int = int(os.getenv("HIGHLIGHT_DURATION_MS", "1000"))
    HIGHLIGHT_CLASS: str = os.getenv("HIGHLIGHT_CLASS", "cc-highlight")

    # In-memory page sessions: idle expiry and hard cap (oldest evicted first)
    SESSION_TTL_SEC: int = int(os.getenv("SESSION_TTL_SEC", "1800"))
    SESSION_MAX: int = int(os.getenv("SESSION_MAX", "5000"))

    ENABLE_PII_REDACTION: bool = os.getenv("ENABLE_PII_REDACTION", "true").lower() == "true"

settings = Settings()
