"""
Seed the employer role, form lookups and the default product catalog.
Safe to run repeatedly: existing rows are left untouched.
"""
import asyncio

from employer_portal.infrastructure.database import get_session_factory, init_db
from employer_portal.modules.accounts.service import AccountService
from employer_portal.modules.lookups.service import LookupService
from employer_portal.modules.products import ProductCreateInput
from employer_portal.modules.products.models import ADD_VACANCY, BOOST_OPTION, CREDIT_BUNDLE, UPSELL, VACANCY_PACKAGE
from employer_portal.modules.products.service import ProductService

DEFAULT_PRODUCTS = [
    ProductCreateInput(slug="basic", display_name="Basis", type=VACANCY_PACKAGE, credits=16,
                       price_cents=39500, duration_days=30, availability=[ADD_VACANCY], sort_order=1),
    ProductCreateInput(slug="complete", display_name="Compleet", type=VACANCY_PACKAGE, credits=20,
                       price_cents=49500, duration_days=45, availability=[ADD_VACANCY], sort_order=2),
    ProductCreateInput(slug="premium", display_name="Premium", type=VACANCY_PACKAGE, credits=23,
                       price_cents=56500, duration_days=60, availability=[ADD_VACANCY], sort_order=3),
    ProductCreateInput(slug="featured", display_name="Uitgelicht", type=UPSELL, credits=3,
                       price_cents=7500, availability=[ADD_VACANCY, BOOST_OPTION], sort_order=10),
    ProductCreateInput(slug="extra_social", display_name="Extra social media campagne", type=UPSELL, credits=3,
                       price_cents=7500, availability=[ADD_VACANCY, BOOST_OPTION], sort_order=11),
    ProductCreateInput(slug="same_day", display_name="Dezelfde dag online", type=UPSELL, credits=3,
                       price_cents=7500, availability=[ADD_VACANCY], sort_order=12),
    ProductCreateInput(slug="extend_duration", display_name="Looptijd verlengen", type=UPSELL, credits=3,
                       price_cents=7500, duration_days=30, availability=[BOOST_OPTION], sort_order=13),
    ProductCreateInput(slug="credits_20", display_name="20 credits", type=CREDIT_BUNDLE, credits=20,
                       price_cents=45000, base_price_cents=50000, sort_order=20),
    ProductCreateInput(slug="credits_50", display_name="50 credits", type=CREDIT_BUNDLE, credits=50,
                       price_cents=105000, base_price_cents=125000, sort_order=21),
]

DEFAULT_LOOKUPS = {
    "regions": ["Noord-Holland", "Zuid-Holland", "Utrecht", "Noord-Brabant", "Gelderland", "Groningen"],
    "sectors": ["Zorg en welzijn", "Onderwijs", "ICT", "Logistiek", "Overheid", "Techniek"],
    "function_types": ["Beleid", "Communicatie", "Management", "Uitvoerend", "Advies"],
    "education_levels": ["MBO", "HBO", "WO"],
    "fields": ["Financieel", "HR", "Juridisch", "Marketing", "Operations"],
}


async def seed_catalog():
    await init_db()

    async with get_session_factory()() as db:
        role_id = await AccountService.with_session(db).resolve_employer_role()
        print(f"Werkgeversrol: {role_id}")

        lookups = LookupService.with_session(db)
        for kind, names in DEFAULT_LOOKUPS.items():
            for position, name in enumerate(names):
                await lookups.ensure(kind, name, sort_order=position)
        print(f"Lookups aangemaakt: {sum(len(names) for names in DEFAULT_LOOKUPS.values())}")

        products = ProductService.with_session(db)
        for payload in DEFAULT_PRODUCTS:
            product = await products.ensure_product(payload)
            print(f"Product {product.slug}: {product.credits} credits")

        await db.commit()


if __name__ == "__main__":
    asyncio.run(seed_catalog())
