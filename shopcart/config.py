"""Configuration for the shopcart engine and its Streamlit front end."""
import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Settings read from the environment."""

    # Storage
    STORE_PATH = os.getenv("SHOPCART_STORE_PATH", "data/store.json")
    SEED_PATH = os.getenv("SHOPCART_SEED_PATH", "data/seed.json")

    # Notifications (seconds; 0 keeps messages until dismissed)
    NOTIFICATION_TTL = float(os.getenv("SHOPCART_NOTIFICATION_TTL", "3"))

    # Price formatting
    CURRENCY_SYMBOL = os.getenv("SHOPCART_CURRENCY_SYMBOL", "₩")
    CURRENCY_SUFFIX = os.getenv("SHOPCART_CURRENCY_SUFFIX", "원")

    LOG_LEVEL = os.getenv("SHOPCART_LOG_LEVEL", "INFO")


def configure_logging(level: str = None) -> None:
    logging.basicConfig(
        level=(level or Config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
