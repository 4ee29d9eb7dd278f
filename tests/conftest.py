"""
Pytest configuration and fixtures for Recipe Intake tests.
"""

import json
import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment before importing recipe_intake modules
os.environ["INTAKE_ENV"] = "development"
os.environ.setdefault("OPENAI_API_KEY", "test-key-not-real")
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_SERVICE_ROLE_KEY", None)

from recipe_intake.jobs.store import InMemoryJobStore
from recipe_intake.recipe_import.extractor import ExtractionOrchestrator
from recipe_intake.storage.base import InMemoryObjectStorage, InMemoryRecipeRepository

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture
def sample_extraction():
    """Model response for a two-component dish."""
    return {
        "name": "Spaghetti and Meatballs",
        "category": "Dinner",
        "prepTime": 20,
        "cookTime": 40,
        "servings": 4,
        "groups": [
            {
                "name": "Meatballs",
                "ingredients": [
                    {"name": "ground beef", "amount": "1", "unit": "lb"},
                    {"name": "egg", "amount": "1", "unit": "whole"},
                    {"name": "breadcrumbs", "amount": "1/2", "unit": "cup"},
                ],
                "instructions": ["Mix everything.", "Roll into balls.", "Brown in a pan."],
            },
            {
                "name": "Sauce",
                "ingredients": [
                    {"name": "crushed tomatoes", "amount": "28", "unit": "oz"},
                    {"name": "garlic", "amount": "2", "unit": "cloves"},
                ],
                "instructions": ["Simmer the tomatoes with garlic for 20 minutes."],
            },
        ],
        "metaDescription": "Savor tender beef meatballs simmered in garlicky tomato sauce.",
        "seoKeywords": ["spaghetti", "meatballs", "italian", "dinner", "pasta"],
    }


@pytest.fixture
def sample_extraction_json(sample_extraction):
    return json.dumps(sample_extraction)


@pytest.fixture
def mock_models(sample_extraction_json):
    """Model client where every call succeeds."""
    models = MagicMock()
    models.complete_json = AsyncMock(return_value=sample_extraction_json)
    models.generate_image = AsyncMock(return_value=PNG_BYTES)
    models.describe_image = AsyncMock(return_value="Meatballs in tomato sauce over spaghetti")
    return models


@pytest.fixture
def job_store():
    return InMemoryJobStore()


@pytest.fixture
def object_storage():
    return InMemoryObjectStorage()


@pytest.fixture
def recipe_repository():
    return InMemoryRecipeRepository()


@pytest.fixture
def orchestrator(mock_models, object_storage, recipe_repository, job_store):
    return ExtractionOrchestrator(
        models=mock_models,
        object_storage=object_storage,
        recipes=recipe_repository,
        job_store=job_store,
        image_size="1024x1024",
    )
