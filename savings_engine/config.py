from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    serpapi_api_key: str
    search_location: str = "Orlando, Florida, United States"
    amadeus_api_key: str = ""
    amadeus_api_secret: str = ""
    amadeus_base_url: str = "https://test.api.amadeus.com"
    vocabulary_file: str = ""
    log_level: str = "INFO"

    @property
    def amadeus_configured(self) -> bool:
        return bool(self.amadeus_api_key and self.amadeus_api_secret)
