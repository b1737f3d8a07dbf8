from typing import List, Optional

from coffeecore.catalog.models import Catalog, Product, PRESENT, FUTURE

DEFAULT_CATALOG = Catalog([
    Product(
        id="polifenoli",
        name="Polifenoli & Bioattivi (upcycled)",
        status=PRESENT,
        summary="Estratti ad alto valore da scarti di caffè per nutraceutica, food & beverage e cosmetica.",
        tag="Core",
    ),
    Product(
        id="pellet",
        name="Pellet da scarti di caffè",
        status=FUTURE,
        summary="Combustibile sostenibile e tracciabile ottenuto dal residuo di lavorazione.",
        tag="R&D",
    ),
    Product(
        id="bevande",
        name="Bevande con bioattivi aggiunti",
        status=FUTURE,
        summary="Linea di drink funzionali con antiossidanti naturali estratti dal caffè.",
        tag="R&D",
    ),
    Product(
        id="oli-cosmesi",
        name="Oli per la cosmesi",
        status=FUTURE,
        summary="Oli e lipidi da fondi di caffè per skincare e haircare con ingredienti circolari.",
        tag="R&D",
    ),
])


def get_product(product_id: str) -> Optional[Product]:
    return DEFAULT_CATALOG.get(product_id)


def require_product(product_id: str) -> Product:
    return DEFAULT_CATALOG.require(product_id)


def list_products(status: Optional[str] = None) -> List[Product]:
    return DEFAULT_CATALOG.list(status)
