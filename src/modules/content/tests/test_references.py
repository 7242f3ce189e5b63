"""Tests for reference collection and population."""

from src.modules.content.references import (
    collect_content_item_ids,
    collect_user_ids,
    index_by_id,
    is_reference_key,
    populate_content_item_ids,
)


def make_pet():
    return {
        "ContentItemId": "pet1",
        "ContentType": "Pet",
        "Pet": {
            "Owner": {"ContentItemIds": ["person1"]},
            "Vets": {"ContentItemIds": ["vet1", "vet2", "missing"]},
            "Name": {"Text": "Rex"},
        },
        "BreedId": "breed1",
    }


class TestIsReferenceKey:
    """Which keys point at other items."""

    def test_suffix_keys(self):
        assert is_reference_key("ownerId")
        assert is_reference_key("BreedId")

    def test_identity_and_short_keys(self):
        assert not is_reference_key("id")
        assert not is_reference_key("Id")
        assert not is_reference_key("ContentItemId")
        assert not is_reference_key("name")


class TestCollectContentItemIds:
    """Gathering referenced ids from a tree."""

    def test_collects_pickers_and_suffix_keys(self):
        assert collect_content_item_ids(make_pet()) == {
            "person1",
            "vet1",
            "vet2",
            "missing",
            "breed1",
        }

    def test_identity_fields_are_not_references(self):
        tree = {"id": "a", "ContentItemId": "b", "nested": {"ContentItemId": "c"}}
        assert collect_content_item_ids(tree) == set()

    def test_cleaned_documents_from_index_are_terminal(self):
        index = {"o1": {"id": "o1", "breedId": "b1"}}
        tree = {
            "id": "p",
            "owner": {"id": "o1", "breedId": "b1"},
            "vet": {"id": "v1", "clinicId": "c1"},
        }
        assert collect_content_item_ids(tree) == {"b1", "c1"}
        assert collect_content_item_ids(tree, index=index) == {"c1"}

    def test_walks_lists_and_skips_bad_values(self):
        tree = [
            {"ContentItemIds": ["a", None, 3]},
            {"ownerId": None, "breedId": 5},
            "plain",
            [{"petId": "b"}],
        ]
        assert collect_content_item_ids(tree) == {"a", "b"}

    def test_embedded_documents_are_terminal(self):
        tree = {
            "Owner": {"Items": [{"ContentItemId": "p1", "friendId": "p2"}]},
            "breed": {"ContentItemId": "b1", "originId": "o1"},
        }
        assert collect_content_item_ids(tree) == set()

    def test_bag_members_are_walked(self):
        tree = {
            "BagPart": {
                "ContentItems": [
                    {"ContentItemId": "m1", "Line": {"Product": {"ContentItemIds": ["prod"]}}}
                ]
            }
        }
        assert collect_content_item_ids(tree) == {"prod"}

    def test_accumulates_into_given_set(self):
        ids = {"x"}
        collect_content_item_ids({"aId": "y"}, ids)
        assert ids == {"x", "y"}


class TestCollectUserIds:
    def test_collects_every_user_picker(self):
        tree = {
            "Pet": {"Keepers": {"UserIds": ["u1", "u2"], "UserNames": ["a", "b"]}},
            "BagPart": {"ContentItems": [{"Line": {"By": {"UserIds": ["u3", 4]}}}]},
        }
        assert collect_user_ids(tree) == {"u1", "u2", "u3"}


class TestPopulateContentItemIds:
    """Splicing fetched documents back into a tree."""

    def setup_method(self):
        self.index = index_by_id(
            [
                {"ContentItemId": "person1", "DisplayText": "Ann"},
                {"ContentItemId": "vet1", "DisplayText": "Vet One"},
                {"ContentItemId": "vet2", "DisplayText": "Vet Two"},
                {"ContentItemId": "breed1", "DisplayText": "Collie"},
                {"DisplayText": "no id"},
            ]
        )

    def test_index_skips_documents_without_id(self):
        assert set(self.index) == {"person1", "vet1", "vet2", "breed1"}

    def test_pickers_become_items(self):
        result = populate_content_item_ids(make_pet(), self.index)
        assert result["Pet"]["Owner"] == {"Items": [{"ContentItemId": "person1", "DisplayText": "Ann"}]}
        # Missing ids are dropped
        assert [v["ContentItemId"] for v in result["Pet"]["Vets"]["Items"]] == ["vet1", "vet2"]

    def test_suffix_keys_become_documents(self):
        result = populate_content_item_ids(make_pet(), self.index)
        assert "BreedId" not in result
        assert result["Breed"]["DisplayText"] == "Collie"

    def test_missing_singular_reference_is_kept(self):
        result = populate_content_item_ids({"ownerId": "nobody"}, self.index)
        assert result == {"ownerId": "nobody"}

    def test_input_is_untouched(self):
        pet = make_pet()
        populate_content_item_ids(pet, self.index)
        assert pet == make_pet()

    def test_non_object_list_elements_pass_through(self):
        result = populate_content_item_ids({"tags": ["a", 1, None]}, self.index)
        assert result == {"tags": ["a", 1, None]}

    def test_idempotent(self):
        once = populate_content_item_ids(make_pet(), self.index)
        twice = populate_content_item_ids(once, self.index)
        assert twice == once

    def test_embedded_documents_are_not_descended(self):
        index = {
            **self.index,
            "friend": {"ContentItemId": "friend", "DisplayText": "Friend"},
        }
        tree = {"breed": {"ContentItemId": "b1", "friendId": "friend"}}
        assert populate_content_item_ids(tree, index) == tree

    def test_idempotent_on_cleaned_trees(self):
        index = {"o1": {"id": "o1", "breedId": "b1"}, "b1": {"id": "b1"}}
        tree = {"id": "p", "ownerId": "o1"}

        once = populate_content_item_ids(tree, index)
        twice = populate_content_item_ids(once, index)

        assert once == {"id": "p", "owner": {"id": "o1", "breedId": "b1"}}
        assert twice == once

    def test_cleaned_documents_outside_index_are_walked(self):
        index = {"acme": {"id": "acme", "title": "Acme"}}
        tree = {"owner": {"id": "ann", "employerId": "acme"}}
        result = populate_content_item_ids(tree, index)
        assert result == {"owner": {"id": "ann", "employer": {"id": "acme", "title": "Acme"}}}
