from .config import Config


def format_price(price: int, notation: str = "symbol") -> str:
    """10000 -> "₩10,000" (symbol) или "10,000원" (text)"""
    if notation == "text":
        return f"{price:,}{Config.CURRENCY_SUFFIX}"
    return f"{Config.CURRENCY_SYMBOL}{price:,}"


def format_percentage(rate: float) -> str:
    """0.1 -> "10%" """
    return f"{round(rate * 100)}%"
