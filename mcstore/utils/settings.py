# mcstore/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL", "http://localhost:54321")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "")
# brak timeoutu = jedno czekanie bez limitu, tak jak w produkcji
BACKEND_TIMEOUT_SECONDS = float(os.getenv("BACKEND_TIMEOUT_SECONDS", 0)) or None

SHIPBUBBLE_BASE_URL = os.getenv("SHIPBUBBLE_BASE_URL", "https://api.shipbubble.com/v1")
SHIPBUBBLE_API_KEY = os.getenv("SHIPBUBBLE_API_KEY", "")

PAYSTACK_BASE_URL = os.getenv("PAYSTACK_BASE_URL", "https://api.paystack.co")
PAYSTACK_SECRET_KEY = os.getenv("PAYSTACK_SECRET_KEY", "")
PAYSTACK_CALLBACK_URL = os.getenv("PAYSTACK_CALLBACK_URL", "")

SESSION_DATABASE_URL = os.getenv("SESSION_DATABASE_URL", "sqlite:///./mcstore_session.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")

# "rpc" = atomowy upsert w bazie, "locked" = redis lock + odczyt/zapis
CART_UPSERT_STRATEGY = os.getenv("CART_UPSERT_STRATEGY", "rpc")
CART_LOCK_TTL_SECONDS = int(os.getenv("CART_LOCK_TTL_SECONDS", 10))
# ile czekac na zajety lock zanim zwrocimy konflikt
CART_LOCK_WAIT_SECONDS = float(os.getenv("CART_LOCK_WAIT_SECONDS", 5))

STOCK_RECONCILE_INTERVAL = float(os.getenv("STOCK_RECONCILE_INTERVAL", 60))
STOCK_RECONCILE_BATCH = int(os.getenv("STOCK_RECONCILE_BATCH", 100))
STOCK_ADJUST_MAX_ATTEMPTS = int(os.getenv("STOCK_ADJUST_MAX_ATTEMPTS", 5))
# jak dlugo pamietamy zastosowane korekty (domyslnie 7 dni)
STOCK_APPLIED_TTL_SECONDS = int(os.getenv("STOCK_APPLIED_TTL_SECONDS", 7 * 24 * 3600))

COD_MIN = int(os.getenv("COD_MIN", 7000))
COD_MAX = int(os.getenv("COD_MAX", 50000))

# handlery platnosci bez callbacku (porzucone) sa zapominane po tym czasie
PAYMENT_HANDLER_TTL_SECONDS = float(os.getenv("PAYMENT_HANDLER_TTL_SECONDS", 3600))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
