from storefront.models.homepage_section import HomepageSection
from storefront.schemas.homepage import (
    BlockSectionRender,
    HtmlSectionRender,
    ItemListSectionRender,
    UnsupportedSectionRender,
)
from storefront.services.section_renderer import (
    EMPTY_CATEGORIES_MESSAGE,
    EMPTY_HTML_MESSAGE,
    EMPTY_PRODUCTS_MESSAGE,
    NULL_LINK,
    render_section,
    render_sections,
)

PRODUCT_PLACEHOLDER = "/placeholder-image.png"
CATEGORY_PLACEHOLDER = "/placeholder-category.png"

TEE = {
    "id": 11,
    "name": "Logo Tee",
    "slug": "logo-tee",
    "price": 20.0,
    "images": ["https://cdn.example.com/tee.png"],
}


def carousel(items, section_type="productCarousel"):
    return {"id": 1, "type": section_type, "content": {"title": "Picks", "items": items}}


class TestBlockSections:
    def test_hero_renders_all_fields_with_button(self):
        rendered = render_section({
            "id": 5,
            "type": "hero",
            "content": {
                "title": "Summer Sale",
                "subtitle": "Up to 50% off",
                "imageUrl": "https://cdn.example.com/hero.jpg",
                "buttonText": "Shop now",
                "buttonLink": "/sale",
            },
        })
        assert isinstance(rendered, BlockSectionRender)
        assert rendered.id == 5
        assert rendered.title == "Summer Sale"
        assert rendered.image_url == "https://cdn.example.com/hero.jpg"
        assert rendered.button.text == "Shop now"
        assert rendered.button.link == "/sale"

    def test_button_requires_text_and_link(self):
        rendered = render_section({"type": "banner", "content": {"buttonText": "Go"}})
        assert rendered.button is None

    def test_missing_and_malformed_content_renders_empty_fields(self):
        for content in (None, "not a dict", [], {"title": 42}):
            rendered = render_section({"type": "promotionalBlock", "content": content})
            assert isinstance(rendered, BlockSectionRender)
            assert rendered.title is None
            assert rendered.button is None

    def test_renders_orm_rows(self):
        section = HomepageSection(id=3, name="Top", type="hero", content={"title": "Hi"})
        rendered = render_section(section)
        assert rendered.id == 3
        assert rendered.title == "Hi"


class TestItemListSections:
    def test_populated_product_reads_entity_fields(self):
        rendered = render_section(carousel([{"itemId": TEE, "itemType": "Product"}]))
        assert isinstance(rendered, ItemListSectionRender)
        item = rendered.items[0]
        assert item.key == "11"
        assert item.title == "Logo Tee"
        assert item.image_url == "https://cdn.example.com/tee.png"
        assert item.link == "/products/logo-tee"
        assert item.price == 20.0
        assert rendered.empty_message is None

    def test_item_fields_override_entity(self):
        rendered = render_section(carousel([{
            "itemId": TEE,
            "imageUrl": "https://cdn.example.com/custom.png",
            "title": "Staff pick",
            "link": "/campaigns/tee",
        }]))
        item = rendered.items[0]
        assert item.title == "Staff pick"
        assert item.image_url == "https://cdn.example.com/custom.png"
        assert item.link == "/campaigns/tee"

    def test_entity_without_slug_links_by_id_and_uses_placeholder(self):
        mug = {"id": 12, "name": "Mug", "slug": None, "price": 12.5, "images": []}
        item = render_section(carousel([{"itemId": mug}])).items[0]
        assert item.link == "/products/12"
        assert item.image_url == PRODUCT_PLACEHOLDER

    def test_entity_image_stored_as_object(self):
        cap = {"id": 13, "name": "Cap", "slug": "cap", "images": [{"url": "https://cdn.example.com/cap.png"}]}
        item = render_section(carousel([{"itemId": cap}])).items[0]
        assert item.image_url == "https://cdn.example.com/cap.png"

    def test_bare_reference_renders_without_entity_fields(self):
        item = render_section(carousel([{"itemId": "99", "itemType": "Product"}])).items[0]
        assert item.key == "99"
        assert item.title is None
        assert item.price is None
        assert item.image_url == PRODUCT_PLACEHOLDER
        assert item.link == NULL_LINK

    def test_missing_reference_gets_index_key(self):
        rendered = render_section(carousel([{"title": "Orphan"}, {"itemId": TEE}]))
        assert [item.key for item in rendered.items] == ["item-0", "11"]

    def test_duplicate_entities_get_distinct_keys(self):
        rendered = render_section(carousel([{"itemId": TEE}, {"itemId": TEE}, {"itemId": 11}]))
        keys = [item.key for item in rendered.items]
        assert keys == ["11", "11-1", "11-2"]
        assert len(set(keys)) == len(keys)

    def test_category_list(self):
        comics = {"id": 4, "name": "Comics", "slug": "comics", "image_url": "https://cdn.example.com/c.png"}
        rendered = render_section(carousel([{"itemId": comics}, {"itemId": 8}], section_type="categoryList"))
        first, second = rendered.items
        assert first.link == "/categories/comics"
        assert first.image_url == "https://cdn.example.com/c.png"
        assert first.price is None
        assert second.image_url == CATEGORY_PLACEHOLDER

    def test_custom_link_item_renders_from_own_fields(self):
        rendered = render_section(carousel([
            {"itemType": "CustomLink", "title": "Gift cards", "link": "/gift-cards"},
        ], section_type="featuredProducts"))
        item = rendered.items[0]
        assert item.item_type == "CustomLink"
        assert item.title == "Gift cards"
        assert item.link == "/gift-cards"
        assert item.key == "item-0"

    def test_empty_lists_show_messages(self):
        assert render_section(carousel([])).empty_message == EMPTY_PRODUCTS_MESSAGE
        assert render_section(carousel([], "categoryList")).empty_message == EMPTY_CATEGORIES_MESSAGE

    def test_non_list_items_and_non_dict_entries_are_tolerated(self):
        assert render_section(carousel("nope")).items == []
        rendered = render_section(carousel(["junk", None, {"itemId": TEE}]))
        assert [item.key for item in rendered.items] == ["11"]


class TestCustomHtml:
    def test_markup_passes_through(self):
        html = "<div class='promo'><b>Hi</b></div>"
        rendered = render_section({"type": "customHtml", "content": {"htmlContent": html}})
        assert isinstance(rendered, HtmlSectionRender)
        assert rendered.html_content == html
        assert rendered.empty_message is None

    def test_empty_markup_shows_message(self):
        rendered = render_section({"type": "customHtml", "content": {"htmlContent": "  "}})
        assert rendered.html_content is None
        assert rendered.empty_message == EMPTY_HTML_MESSAGE


class TestUnsupportedTypes:
    def test_unknown_type_renders_placeholder(self):
        rendered = render_section({"id": 9, "type": "notARealType", "content": {}})
        assert isinstance(rendered, UnsupportedSectionRender)
        assert rendered.message == "Unsupported section type: notARealType"

    def test_non_string_type_renders_placeholder(self):
        rendered = render_section({"type": ["hero"], "content": {}})
        assert isinstance(rendered, UnsupportedSectionRender)
        assert rendered.type is None

    def test_bad_section_does_not_take_down_the_page(self):
        rendered = render_sections([
            {"id": 1, "type": "hero", "content": {"title": "A"}},
            {"id": 2, "type": "notARealType"},
            {"id": 3, "type": "customHtml", "content": {"htmlContent": "<p>x</p>"}},
        ])
        assert [r.kind for r in rendered] == ["block", "unsupported", "html"]
