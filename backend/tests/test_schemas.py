"""
RootNote Backend — Schema Unit Tests
====================================

What:  Tests for the request/response models in rootnote.schemas.plant.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from rootnote.models.plant import Plant
from rootnote.schemas.plant import PlantCreate, PlantResponse, PlantUpdate


class TestPlantCreate:

    def test_camel_case_body(self):
        body = PlantCreate.model_validate({"commonName": "Basil", "lastWateredOn": "today"})

        assert body.common_name == "Basil"
        assert body.last_watered_on == "today"

    def test_to_fields_includes_every_column(self):
        fields = PlantCreate.model_validate({"commonName": "Basil"}).to_fields()

        assert fields["common_name"] == "Basil"
        assert fields["variety"] is None
        assert "id" not in fields

    def test_blank_common_name_rejected(self):
        with pytest.raises(PydanticValidationError):
            PlantCreate.model_validate({"commonName": " \t"})

    def test_extra_field_rejected(self):
        with pytest.raises(PydanticValidationError):
            PlantCreate.model_validate({"commonName": "Basil", "id": 3})


class TestPlantUpdate:

    def test_to_changes_only_sent_fields(self):
        body = PlantUpdate.model_validate({"notes": "x"})

        assert body.to_changes() == {"notes": "x"}

    def test_explicit_null_is_kept(self):
        body = PlantUpdate.model_validate({"variety": None})

        assert body.to_changes() == {"variety": None}

    def test_id_removed_from_changes(self):
        body = PlantUpdate.model_validate({"id": 4, "cultivar": "Genovese"})

        assert body.id == 4
        assert body.to_changes() == {"cultivar": "Genovese"}

    def test_empty_body_yields_no_changes(self):
        assert PlantUpdate.model_validate({}).to_changes() == {}

    def test_null_common_name_rejected(self):
        with pytest.raises(PydanticValidationError, match="commonName cannot be null"):
            PlantUpdate.model_validate({"commonName": None})


class TestPlantResponse:

    def test_serializes_camel_case_from_orm(self):
        plant = Plant(id=3, common_name="Basil", first_flower_date="2025-07-01")

        data = PlantResponse.model_validate(plant).model_dump(by_alias=True)

        assert data["id"] == 3
        assert data["commonName"] == "Basil"
        assert data["firstFlowerDate"] == "2025-07-01"
        assert data["notes"] is None
