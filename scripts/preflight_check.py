#!/usr/bin/env python3
import sys

print("Running preflight import check...")
try:
    import coffeecore.main
    print("Import coffeecore.main: OK")

    from coffeecore.settings import settings
    if not settings.NOTIFY_URL:
        print("Preflight check FAILED: NOTIFY_URL is empty")
        sys.exit(1)
    print(f"NOTIFY_URL={settings.NOTIFY_URL} ADMIN_EMAIL={settings.ADMIN_EMAIL}: OK")

    from coffeecore.catalog.products import list_products
    print(f"Catalog products: {len(list_products())}")

    print("Preflight check passed.")
    sys.exit(0)
except Exception as e:
    print(f"Preflight check FAILED: {e}")
    import traceback
    traceback.print_exc()
    sys.exit(1)
