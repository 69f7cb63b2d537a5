"""
用例层 - 每种意图一个回复用例

每个用例代表一个独立的业务场景，
只依赖 ports 接口与服务，不依赖具体实现。

包含：
- AnalyzeTokenAddressUseCase: 合约地址分析
- GetTokenPriceUseCase: 代币价格查询
- RecommendTokensUseCase: 代币推荐
- CompareTokensUseCase: 代币对比
- GetMarketTrendsUseCase: 市场趋势
- AnswerGeneralQuestionUseCase: 通用问答
"""

from cryptosight.use_cases.base import ReplyUseCase
from cryptosight.use_cases.token_address import AnalyzeTokenAddressUseCase
from cryptosight.use_cases.token_price import GetTokenPriceUseCase
from cryptosight.use_cases.recommendation import RecommendTokensUseCase
from cryptosight.use_cases.comparison import CompareTokensUseCase
from cryptosight.use_cases.market_trends import GetMarketTrendsUseCase
from cryptosight.use_cases.general_question import AnswerGeneralQuestionUseCase

__all__ = [
    "ReplyUseCase",
    "AnalyzeTokenAddressUseCase",
    "GetTokenPriceUseCase",
    "RecommendTokensUseCase",
    "CompareTokensUseCase",
    "GetMarketTrendsUseCase",
    "AnswerGeneralQuestionUseCase",
]
