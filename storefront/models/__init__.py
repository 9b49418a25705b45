from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.homepage_section import HomepageSection, SECTION_TYPES
from storefront.models.site_settings import SiteSettings
