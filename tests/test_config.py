import pytest

from recipe_catalog.config import DEFAULT_CACHE_TTL_SECONDS, CatalogConfig


def test_defaults_when_environment_is_empty():
    config = CatalogConfig.from_env({})

    assert config.gcp_project is None
    assert config.recipes_collection == "recipes"
    assert (config.redis_host, config.redis_port, config.redis_db) == ("localhost", 6379, 0)
    assert config.redis_password is None
    assert config.cache_ttl_seconds == DEFAULT_CACHE_TTL_SECONDS == 600


def test_reads_values_from_environment():
    config = CatalogConfig.from_env(
        {
            "GCP_PROJECT": "kitchen",
            "RECIPES_COLLECTION": "dishes",
            "REDIS_HOST": "cache",
            "REDIS_PORT": "6380",
            "REDIS_PASSWORD": "secret",
            "REDIS_DB": "3",
            "CACHE_TTL_SECONDS": "30",
            "LOG_LEVEL": "debug",
        }
    )

    assert config.gcp_project == "kitchen"
    assert config.recipes_collection == "dishes"
    assert config.redis_port == 6380
    assert config.redis_password == "secret"
    assert config.redis_db == 3
    assert config.cache_ttl_seconds == 30
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("env", [{"REDIS_PORT": "abc"}, {"CACHE_TTL_SECONDS": "0"}])
def test_invalid_values_fail_fast(env):
    with pytest.raises(ValueError):
        CatalogConfig.from_env(env)
