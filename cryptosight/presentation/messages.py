"""
回复文本 - 固定提示语与代币数据模板

每种失败类别有稳定的措辞："未找到" / "稍后重试" / "请补充信息" 各不相同。
"""

from cryptosight.domain.models import Token
from cryptosight.presentation.formatters import format_currency


WELCOME_MESSAGE = "Welcome to your Crypto AI Assistant! Send /help to see what I can do."

HELP_MESSAGE = """Welcome to your Crypto AI Assistant! Here's how I can help:
- Send a token contract address (e.g., 0x123...) for detailed token analysis, AI insights, and a safety score.
- Ask about token prices (e.g., "What's the price of $PEPE?") for current market data.
- Request token recommendations (e.g., "Suggest some DeFi tokens").
- Compare tokens (e.g., "Compare BTC and ETH").
- Get market trends (e.g., "How is the crypto market today?").
- Ask any crypto-related question, and I'll provide an informed answer."""

# 未找到
ADDRESS_NOT_FOUND = "Token not found or invalid address, Please try again."
SYMBOL_NOT_FOUND = "Token not found or invalid symbol, Please try again."

# 请补充信息
SPECIFY_SYMBOL = 'Please specify the token symbol (e.g., "What\'s the price of $PEPE?")'
SPECIFY_TOKENS = "Please specify your token mention (e.g: $popcat) to get valid information"

# 稍后重试
LOOKUP_FAILED = "I couldn't fetch token data right now. Please try again later."
RECOMMENDATION_FAILED = "I couldn't generate token recommendations right now. Please try again later."
COMPARISON_FAILED = "I couldn't compare these tokens right now. Please try again later."
MARKET_TRENDS_FAILED = "I couldn't analyze market trends right now. Please try again later."
GENERAL_QUESTION_FAILED = "I couldn't answer your question right now. Please try again later."

# 通道层兜底
PROCESSING_FAILED = "Something went wrong while processing your request."

# LLM 解读失败时的固定文本
ANALYSIS_FAILED_INSIGHT = "Failed to analyze token"
ANALYSIS_FAILED_SCORE = "0%"


def render_address_reply(token: Token) -> str:
    """合约地址分析回复"""
    return (
        f"📊 Token: {token.name} ({token.symbol})\n"
        f"   Chain: {token.chain or 'N/A'}\n"
        f"   Price: {format_currency(token.price)}\n"
        f"   Liquidity: {format_currency(token.liquidity)}\n"
        f"   24h Volume: {format_currency(token.volume_24h)} ({token.txns_24h or 0} txns)\n"
        f"\n"
        f"🧠 AI Insight: {token.insight}\n"
        f"🛡 Safety Score: {token.safety_score}"
    )


def render_price_reply(token: Token) -> str:
    """价格查询回复"""
    lines = [
        f"📊 Token: {token.name} ({token.symbol})",
        f"   Price: {format_currency(token.price)}",
        f"   24h Volume: {format_currency(token.volume_24h)}",
        f"   Liquidity: {format_currency(token.liquidity)}",
    ]
    if token.market_cap:
        lines.append(f"   Market Cap: {format_currency(token.market_cap)}")
    if token.chain:
        lines.append(f"   Chain: {token.chain}")
    return "\n".join(lines)
