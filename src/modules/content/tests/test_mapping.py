"""Tests for mapping flat bodies back into the stored shape."""

from src.modules.content.mapping import (
    apply_body,
    build_bag_items,
    build_type_section,
    create_bag_item,
    is_reserved,
    looks_like_content_item_id,
    map_field_value,
    to_pascal_case,
)

CONTENT_ID = "4kz8b1x9m2c7q0w5e3r6t8y1u4"
OTHER_ID = "9a8s7d6f5g4h3j2k1l0z9x8c7v"


class TestHelpers:
    def test_reserved_is_case_insensitive(self):
        assert is_reserved("Title")
        assert is_reserved("contentitemid")
        assert not is_reserved("name")

    def test_to_pascal_case(self):
        assert to_pascal_case("firstName") == "FirstName"
        assert to_pascal_case("Name") == "Name"

    def test_looks_like_content_item_id(self):
        assert looks_like_content_item_id(CONTENT_ID)
        assert not looks_like_content_item_id("short")
        assert not looks_like_content_item_id("has-dashes-in-a-long-string")
        assert not looks_like_content_item_id(12345678901234567890123)


class TestMapFieldValue:
    """Wrapping of single values."""

    def test_scalars(self):
        assert map_field_value("Rex") == {"Text": "Rex"}
        assert map_field_value(3) == {"Value": 3.0}
        assert map_field_value(False) == {"Value": False}
        assert map_field_value(None) is None

    def test_media(self):
        value = {"paths": ["/a.png", 3], "mediaTexts": ["A"]}
        assert map_field_value(value) == {"Paths": ["/a.png"], "MediaTexts": ["A"]}

    def test_objects_are_pascal_cased(self):
        value = {"street": "Main", "geo": {"lat": 1}}
        assert map_field_value(value) == {"Street": "Main", "Geo": {"Lat": 1.0}}

    def test_user_picker(self):
        value = [{"id": "u1", "username": "ann"}, {"id": "u2", "username": "bob"}]
        assert map_field_value(value) == {"UserIds": ["u1", "u2"], "UserNames": ["ann", "bob"]}

    def test_id_arrays_and_values(self):
        assert map_field_value([CONTENT_ID, OTHER_ID]) == {"ContentItemIds": [CONTENT_ID, OTHER_ID]}
        assert map_field_value([CONTENT_ID, "red"]) == {"Values": [CONTENT_ID, "red"]}
        assert map_field_value([]) == {"Values": []}


class TestBuildTypeSection:
    """Top-level body keys."""

    def test_reserved_and_items_are_skipped(self):
        body = {"id": "x", "title": "T", "Owner": "me", "items": [], "name": "Rex"}
        assert build_type_section("Pet", body) == {"Name": {"Text": "Rex"}}

    def test_references(self):
        body = {"ownerId": CONTENT_ID, "vetsId": ["a", 1, "b"], "emptyId": []}
        assert build_type_section("Pet", body) == {
            "Owner": {"ContentItemIds": [CONTENT_ID]},
            "Vets": {"ContentItemIds": ["a", "b"]},
        }

    def test_numeric_id_keys_are_plain_values(self):
        assert build_type_section("Pet", {"chipId": 42}) == {"ChipId": {"Value": 42.0}}

    def test_id_suffix_is_case_sensitive(self):
        body = {"paid": "yes", "guid": CONTENT_ID}
        assert build_type_section("Order", body) == {
            "Paid": {"Text": "yes"},
            "Guid": {"Text": CONTENT_ID},
        }

    def test_scalar_items_are_plain_fields(self):
        assert build_type_section("Pet", {"items": "x"}) == {"Items": {"Text": "x"}}
        assert build_type_section("Pet", {"items": 2}) == {"Items": {"Value": 2.0}}

    def test_keeps_existing_fields(self):
        existing = {"Name": {"Text": "Rex"}, "Age": {"Value": 2.0}}
        assert build_type_section("Pet", {"age": 3}, existing) == {
            "Name": {"Text": "Rex"},
            "Age": {"Value": 3.0},
        }
        assert existing["Age"] == {"Value": 2.0}


class TestBagItems:
    """Bag members built from flat elements."""

    def test_create_bag_item(self):
        element = {
            "contentType": "OrderLine",
            "id": "ignored",
            "title": "ignored",
            "productId": "prod1",
            "sku": CONTENT_ID,
            "note": "gift",
            "quantity": 2,
            "express": True,
            "tags": ["a", 1],
            "size": {"width": 3},
            "skip": None,
        }
        bag_item = create_bag_item(element, "OrderLine")
        assert bag_item["ContentType"] == "OrderLine"
        assert len(bag_item["ContentItemId"]) == 26
        assert bag_item["OrderLine"] == {
            "Product": {"ContentItemIds": ["prod1"]},
            "Sku": {"ContentItemIds": [CONTENT_ID]},
            "Note": {"Text": "gift"},
            "Quantity": {"Value": 2.0},
            "Express": {"Value": True},
            "Tags": {"Values": ["a"]},
            "Size": {"Width": 3.0},
        }

    def test_elements_without_type_are_skipped(self):
        items = build_bag_items([{"note": "x"}, "junk", {"contentType": "Line", "note": "y"}])
        assert [i["ContentType"] for i in items] == ["Line"]

    def test_default_type(self):
        items = build_bag_items([{"note": "x"}], default_type="Line")
        assert items[0]["Line"] == {"Note": {"Text": "x"}}


class TestApplyBody:
    """Whole-body application on create and update."""

    def test_create_defaults_title(self):
        item = apply_body({}, "Pet", {"name": "Rex"}, is_create=True)
        assert item["DisplayText"] == "Untitled"
        assert item["Pet"] == {"Name": {"Text": "Rex"}}

    def test_update_keeps_title(self):
        item = apply_body({"DisplayText": "Old", "Pet": {}}, "Pet", {"name": "Rex"}, is_create=False)
        assert item["DisplayText"] == "Old"

    def test_title_is_written(self):
        item = apply_body({}, "Pet", {"title": "Rex"}, is_create=True)
        assert item["DisplayText"] == "Rex"

    def test_items_replace_bag(self):
        item = {"BagPart": {"ContentItems": [{"ContentType": "Line"}]}}
        apply_body(item, "Order", {"items": [{"contentType": "Line", "note": "new"}]}, False)
        members = item["BagPart"]["ContentItems"]
        assert len(members) == 1
        assert members[0]["Line"] == {"Note": {"Text": "new"}}

    def test_empty_items_leave_bag(self):
        bag = {"ContentItems": [{"ContentType": "Line"}]}
        item = apply_body({"BagPart": bag}, "Order", {"items": [{"note": "x"}]}, False)
        assert item["BagPart"] is bag

    def test_push_appends_with_inferred_type(self):
        existing = {"ContentItemId": "l1", "ContentType": "Line", "Line": {}}
        item = {"BagPart": {"ContentItems": [existing]}}
        apply_body(item, "Order", {"items": {"$push": [{"note": "more"}]}}, False)
        members = item["BagPart"]["ContentItems"]
        assert members[0] == existing
        assert members[1]["ContentType"] == "Line"
        assert members[1]["Line"] == {"Note": {"Text": "more"}}

    def test_push_without_inferable_type_is_skipped(self):
        item = {}
        apply_body(item, "Order", {"items": {"$push": [{"note": "more"}]}}, False)
        assert "BagPart" not in item

    def test_scalar_items_leave_bag(self):
        bag = {"ContentItems": [{"ContentType": "Line"}]}
        item = apply_body({"BagPart": bag}, "Pet", {"items": "x"}, is_create=False)
        assert item["Pet"] == {"Items": {"Text": "x"}}
        assert item["BagPart"] is bag
