"""
用例测试 - 各意图的回复、缓存与失败分类
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from cryptosight.domain.models import (
    AddressLookup,
    GeneralQuestion,
    MarketTrends,
    PriceQuery,
    ReplyKind,
    TokenComparison,
    TokenRecommendation,
    TokenSnapshot,
)
from cryptosight.infrastructure.cache import CacheKeys
from cryptosight.orchestrator.symbol_extractor import SymbolExtractor
from cryptosight.ports.interfaces import DataUnavailableError, LLMUnavailableError
from cryptosight.presentation.messages import (
    ADDRESS_NOT_FOUND,
    ANALYSIS_FAILED_INSIGHT,
    COMPARISON_FAILED,
    GENERAL_QUESTION_FAILED,
    LOOKUP_FAILED,
    MARKET_TRENDS_FAILED,
    RECOMMENDATION_FAILED,
    SPECIFY_TOKENS,
    SYMBOL_NOT_FOUND,
)
from cryptosight.services import InsightService, TokenService
from cryptosight.use_cases import (
    AnalyzeTokenAddressUseCase,
    AnswerGeneralQuestionUseCase,
    CompareTokensUseCase,
    GetMarketTrendsUseCase,
    GetTokenPriceUseCase,
    RecommendTokensUseCase,
)

PEPE_ADDRESS = "0x6982508145454Ce325dDbE47a25d4ec3d2311933"


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def token_service(mock_dex_port, mock_market_data_port, mock_llm_port, mock_query_log_port, cache):
    return TokenService(mock_dex_port, mock_market_data_port, mock_llm_port, mock_query_log_port, cache)


@pytest.fixture
def insight_service(mock_llm_port):
    return InsightService(mock_llm_port)


def stub_extractor(symbols):
    extractor = Mock(spec=SymbolExtractor)
    extractor.extract = AsyncMock(return_value=frozenset(symbols))
    return extractor


class TestGetTokenPriceUseCase:
    """价格查询用例测试"""

    @pytest.fixture
    def use_case(self, cache, token_service):
        return GetTokenPriceUseCase(cache, token_service)

    def test_reply_is_cached_with_price_ttl(self, use_case, cache, clock, message_context, mock_market_data_port):
        reply = run(use_case.execute(PriceQuery("PEPE"), message_context))

        assert reply.kind == ReplyKind.ANSWER
        assert "Pepe (PEPE)" in reply.text
        assert cache.get("price:pepe") == reply.text

        clock.advance(299)
        assert "price:pepe" in cache
        clock.advance(1)
        assert "price:pepe" not in cache

    def test_second_request_hits_cache(self, use_case, message_context, mock_market_data_port):
        first = run(use_case.execute(PriceQuery("PEPE"), message_context))
        second = run(use_case.execute(PriceQuery("PEPE"), message_context))

        assert second.text == first.text
        assert second.cached is True
        assert mock_market_data_port.get_token_price.await_count == 1

    def test_logs_price_query(self, use_case, message_context, mock_query_log_port):
        run(use_case.execute(PriceQuery("PEPE"), message_context))

        entry = mock_query_log_port.log_query.await_args.args[0]
        assert entry.command.value == "price"
        assert entry.token_id == "PEPE"
        assert entry.user_id == "42"

    def test_not_found_is_not_cached(self, use_case, cache, message_context, mock_market_data_port):
        mock_market_data_port.get_token_price.return_value = None

        reply = run(use_case.execute(PriceQuery("NOPE"), message_context))

        assert reply.kind == ReplyKind.NOT_FOUND
        assert reply.text == SYMBOL_NOT_FOUND
        assert "price:nope" not in cache

    def test_provider_failure_is_retry_later(self, use_case, cache, message_context, mock_market_data_port):
        mock_market_data_port.get_token_price.side_effect = DataUnavailableError("503", source="coingecko")

        reply = run(use_case.execute(PriceQuery("PEPE"), message_context))

        assert reply.kind == ReplyKind.RETRY_LATER
        assert reply.text == LOOKUP_FAILED
        assert len(cache) == 0

    def test_dex_failure_does_not_block_price(self, use_case, message_context, mock_dex_port):
        mock_dex_port.get_token_by_symbol.side_effect = DataUnavailableError("timeout", source="dexscreener")

        reply = run(use_case.execute(PriceQuery("PEPE"), message_context))

        assert reply.kind == ReplyKind.ANSWER
        assert "Liquidity: $0.00" in reply.text

    def test_invalid_symbol(self, use_case, message_context, mock_market_data_port):
        reply = run(use_case.execute(PriceQuery("DOG-WIF"), message_context))

        assert reply.kind == ReplyKind.INVALID_INPUT
        mock_market_data_port.get_token_price.assert_not_awaited()


class TestAnalyzeTokenAddressUseCase:
    """合约地址分析用例测试"""

    @pytest.fixture
    def use_case(self, cache, token_service):
        return AnalyzeTokenAddressUseCase(cache, token_service)

    def test_analysis_reply(self, use_case, cache, message_context, mock_llm_port, mock_query_log_port):
        mock_llm_port.complete.side_effect = ["**Deep** liquidity", "72%: healthy volume"]

        reply = run(use_case.execute(AddressLookup(PEPE_ADDRESS), message_context))

        assert reply.kind == ReplyKind.ANSWER
        assert "AI Insight: Deep liquidity" in reply.text
        assert "Safety Score: 72%: healthy volume" in reply.text
        assert cache.get(CacheKeys.address(PEPE_ADDRESS)) == reply.text
        assert CacheKeys.token_address(PEPE_ADDRESS) in cache

        entry = mock_query_log_port.log_query.await_args.args[0]
        assert entry.command.value == "analyze"
        assert entry.token_address == PEPE_ADDRESS
        assert entry.chain_id == "ethereum"

    def test_llm_failure_reply_not_cached(self, use_case, cache, message_context, mock_llm_port):
        mock_llm_port.complete.side_effect = LLMUnavailableError("quota", source="litellm")

        reply = run(use_case.execute(AddressLookup(PEPE_ADDRESS), message_context))

        assert reply.kind == ReplyKind.PARTIAL
        assert ANALYSIS_FAILED_INSIGHT in reply.text
        assert "Safety Score: 0%" in reply.text
        assert len(cache) == 0

    def test_unknown_address(self, use_case, cache, message_context, mock_dex_port):
        mock_dex_port.get_token_by_address.return_value = None

        reply = run(use_case.execute(AddressLookup(PEPE_ADDRESS), message_context))

        assert reply.kind == ReplyKind.NOT_FOUND
        assert reply.text == ADDRESS_NOT_FOUND
        assert len(cache) == 0

    def test_coingecko_missing_uses_dex_price(self, use_case, message_context, mock_market_data_port):
        mock_market_data_port.get_token_price.return_value = None

        reply = run(use_case.execute(AddressLookup(PEPE_ADDRESS), message_context))

        assert reply.kind == ReplyKind.ANSWER
        assert "Price: $1.2340e-05" in reply.text

    def test_invalid_address(self, use_case, cache, message_context, mock_dex_port, mock_query_log_port):
        reply = run(use_case.execute(AddressLookup("0x123"), message_context))

        assert reply.kind == ReplyKind.INVALID_INPUT
        assert reply.text.startswith("Invalid token address")
        assert len(cache) == 0
        mock_dex_port.get_token_by_address.assert_not_awaited()
        mock_query_log_port.log_query.assert_not_awaited()

    def test_query_log_failure_is_swallowed(self, use_case, message_context, mock_query_log_port):
        mock_query_log_port.log_query.side_effect = OSError("disk full")

        reply = run(use_case.execute(AddressLookup(PEPE_ADDRESS), message_context))

        assert reply.kind == ReplyKind.ANSWER


class TestRecommendTokensUseCase:
    """代币推荐用例测试"""

    def test_recommendation_cached_per_category(
        self, cache, clock, mock_market_data_port, insight_service, message_context
    ):
        use_case = RecommendTokensUseCase(cache, mock_market_data_port, insight_service)

        reply = run(use_case.execute(TokenRecommendation("DeFi"), message_context))
        again = run(use_case.execute(TokenRecommendation("  defi "), message_context))

        assert reply.text == "LLM answer"
        assert again.cached is True
        assert mock_market_data_port.get_trending_tokens.await_count == 1

        clock.advance(7200)
        assert "recommendation:defi" not in cache

    def test_llm_failure(self, cache, mock_market_data_port, mock_llm_port, insight_service, message_context):
        mock_llm_port.complete.side_effect = LLMUnavailableError("down", source="litellm")
        use_case = RecommendTokensUseCase(cache, mock_market_data_port, insight_service)

        reply = run(use_case.execute(TokenRecommendation("meme"), message_context))

        assert reply.kind == ReplyKind.RETRY_LATER
        assert reply.text == RECOMMENDATION_FAILED
        assert len(cache) == 0


class TestCompareTokensUseCase:
    """代币对比用例测试"""

    def test_fewer_than_two_symbols_asks_for_tokens(
        self, cache, token_service, insight_service, message_context
    ):
        use_case = CompareTokensUseCase(cache, token_service, stub_extractor({"BTC"}), insight_service)

        reply = run(use_case.execute(TokenComparison("compare btc"), message_context))

        assert reply.kind == ReplyKind.CLARIFY
        assert reply.text == SPECIFY_TOKENS
        assert "comparison:compare_btc" not in cache

    def test_comparison_reply(self, cache, token_service, insight_service, mock_llm_port, message_context):
        extractor = stub_extractor({"BTC", "ETH"})
        use_case = CompareTokensUseCase(cache, token_service, extractor, insight_service)

        reply = run(use_case.execute(TokenComparison("Compare BTC and ETH"), message_context))

        assert reply.kind == ReplyKind.ANSWER
        assert cache.get("comparison:compare_btc_and_eth") == "LLM answer"
        known = extractor.extract.await_args.args[1]
        assert "PEPE" in known
        assert "Compare BTC and ETH" in mock_llm_port.complete.await_args.args[0]

    def test_tokens_without_data(
        self, cache, token_service, insight_service, mock_dex_port, mock_market_data_port, message_context
    ):
        mock_dex_port.get_token_by_symbol.return_value = None
        mock_market_data_port.get_token_price.return_value = None
        use_case = CompareTokensUseCase(cache, token_service, stub_extractor({"AAA", "BBB"}), insight_service)

        reply = run(use_case.execute(TokenComparison("aaa vs bbb"), message_context))

        assert reply.kind == ReplyKind.NOT_FOUND
        assert len(cache) <= 1  # 只有已知符号列表

    def test_providers_down_is_retry_later(
        self, cache, token_service, insight_service, mock_dex_port, mock_market_data_port, message_context
    ):
        mock_dex_port.get_token_by_symbol.side_effect = DataUnavailableError("timeout", source="dexscreener")
        mock_market_data_port.get_token_price.side_effect = DataUnavailableError("timeout", source="coingecko")
        use_case = CompareTokensUseCase(cache, token_service, stub_extractor({"BTC", "ETH"}), insight_service)

        reply = run(use_case.execute(TokenComparison("Compare BTC and ETH"), message_context))

        assert reply.kind == ReplyKind.RETRY_LATER
        assert reply.text == COMPARISON_FAILED
        assert "comparison:compare_btc_and_eth" not in cache

    def test_llm_failure(self, cache, token_service, insight_service, mock_llm_port, message_context):
        mock_llm_port.complete.side_effect = LLMUnavailableError("down", source="litellm")
        use_case = CompareTokensUseCase(cache, token_service, stub_extractor({"BTC", "ETH"}), insight_service)

        reply = run(use_case.execute(TokenComparison("btc vs eth"), message_context))

        assert reply.text == COMPARISON_FAILED
        assert "comparison:btc_vs_eth" not in cache


class TestGetMarketTrendsUseCase:
    """市场趋势用例测试"""

    def test_cached_by_date(
        self, cache, mock_market_data_port, mock_time_port, insight_service, mock_llm_port, message_context
    ):
        use_case = GetMarketTrendsUseCase(cache, mock_market_data_port, mock_time_port, insight_service)

        reply = run(use_case.execute(MarketTrends(), message_context))

        assert reply.text == "LLM answer"
        assert cache.get("market_trends:2024-05-01") == "LLM answer"
        prompt = mock_llm_port.complete.await_args.args[0]
        assert "$2.45T" in prompt
        assert "BTC dominance: 52.3%" in prompt

    def test_provider_failure(self, cache, mock_market_data_port, mock_time_port, insight_service, message_context):
        mock_market_data_port.get_market_overview.side_effect = DataUnavailableError("429", source="coingecko")
        use_case = GetMarketTrendsUseCase(cache, mock_market_data_port, mock_time_port, insight_service)

        reply = run(use_case.execute(MarketTrends(), message_context))

        assert reply.text == MARKET_TRENDS_FAILED
        assert len(cache) == 0


class TestAnswerGeneralQuestionUseCase:
    """通用问答用例测试"""

    def make(self, cache, token_service, insight_service, symbols):
        return AnswerGeneralQuestionUseCase(cache, token_service, stub_extractor(symbols), insight_service)

    def test_providers_down_is_retry_later(
        self, cache, token_service, insight_service, mock_dex_port, mock_market_data_port, message_context
    ):
        mock_dex_port.get_token_by_symbol.side_effect = DataUnavailableError("timeout", source="dexscreener")
        mock_market_data_port.get_token_price.side_effect = DataUnavailableError("timeout", source="coingecko")
        use_case = self.make(cache, token_service, insight_service, {"PEPE"})

        reply = run(use_case.execute(GeneralQuestion("is pepe safe?"), message_context))

        assert reply.kind == ReplyKind.RETRY_LATER
        assert reply.text == GENERAL_QUESTION_FAILED
        assert "general:is_pepe_safe?" not in cache

    def test_general_answer_without_tokens(self, cache, token_service, insight_service, mock_llm_port, message_context):
        use_case = self.make(cache, token_service, insight_service, set())

        reply = run(use_case.execute(GeneralQuestion("What is a DEX?"), message_context))

        assert reply.text == "LLM answer"
        assert cache.get("general:what_is_a_dex?") == "LLM answer"
        assert "What is a DEX?" in mock_llm_port.complete.await_args.args[0]

    def test_token_answer_uses_market_data(
        self, cache, token_service, insight_service, mock_llm_port, message_context
    ):
        use_case = self.make(cache, token_service, insight_service, {"PEPE"})

        run(use_case.execute(GeneralQuestion("Is PEPE liquid?"), message_context))

        prompt = mock_llm_port.complete.await_args.args[0]
        assert "using the market data" in prompt
        assert '"symbol": "PEPE"' in prompt

    def test_compare_branch(self, cache, token_service, insight_service, mock_llm_port, message_context):
        use_case = self.make(cache, token_service, insight_service, {"PEPE", "BONK"})

        run(use_case.execute(GeneralQuestion("Should I compare PEPE with BONK?"), message_context))

        assert mock_llm_port.complete.await_args.args[0].startswith("Compare these tokens")

    def test_symbols_without_data_fall_back_to_general(
        self, cache, token_service, insight_service, mock_dex_port, mock_market_data_port, mock_llm_port,
        message_context,
    ):
        mock_dex_port.get_token_by_symbol.return_value = None
        mock_market_data_port.get_token_price.return_value = None
        use_case = self.make(cache, token_service, insight_service, {"ZZZ"})

        run(use_case.execute(GeneralQuestion("what about zzz"), message_context))

        assert mock_llm_port.complete.await_args.args[0].startswith("Answer this cryptocurrency question")


class TestTokenService:
    """代币服务测试"""

    def test_snapshot_tolerates_single_source_failure(self, token_service, mock_dex_port):
        mock_dex_port.get_token_by_symbol.side_effect = DataUnavailableError("timeout", source="dexscreener")

        snapshot = run(token_service.get_token_snapshot("PEPE"))

        assert isinstance(snapshot, TokenSnapshot)
        assert snapshot.dex_screener is None
        assert snapshot.coin_gecko is not None
        assert snapshot.has_data

    def test_snapshots_raise_when_every_source_failed(self, token_service, mock_dex_port, mock_market_data_port):
        mock_dex_port.get_token_by_symbol.side_effect = DataUnavailableError("timeout", source="dexscreener")
        mock_market_data_port.get_token_price.side_effect = DataUnavailableError("timeout", source="coingecko")

        with pytest.raises(DataUnavailableError):
            run(token_service.get_token_snapshots(["BTC", "ETH"]))

    def test_snapshots_keep_tokens_with_data_despite_failures(
        self, token_service, mock_dex_port, mock_market_data_port, pepe_gecko_token
    ):
        async def price(symbol):
            if symbol == "PEPE":
                return pepe_gecko_token
            raise DataUnavailableError("timeout", source="coingecko")

        mock_dex_port.get_token_by_symbol.side_effect = DataUnavailableError("timeout", source="dexscreener")
        mock_market_data_port.get_token_price.side_effect = price

        snapshots = run(token_service.get_token_snapshots(["BTC", "PEPE"]))

        assert list(snapshots) == ["PEPE"]

    def test_snapshots_all_missed_is_empty(self, token_service, mock_dex_port, mock_market_data_port):
        mock_dex_port.get_token_by_symbol.return_value = None
        mock_market_data_port.get_token_price.return_value = None

        assert run(token_service.get_token_snapshots(["AAA", "BBB"])) == {}

    def test_known_symbols_cached(self, token_service, cache, mock_market_data_port):
        run(token_service.get_known_symbols())
        run(token_service.get_known_symbols())

        assert mock_market_data_port.get_token_list.await_count == 1
        assert "token_list" in cache

    def test_known_symbols_failure_returns_empty(self, token_service, cache, mock_market_data_port):
        mock_market_data_port.get_token_list.side_effect = DataUnavailableError("429", source="coingecko")

        assert run(token_service.get_known_symbols()) == []
        assert "token_list" not in cache

    def test_anonymous_messages_are_not_logged(self, token_service, mock_query_log_port):
        from cryptosight.domain.models import MessageContext

        run(token_service.get_token_by_symbol("PEPE", MessageContext(text="pepe")))

        mock_query_log_port.log_query.assert_not_awaited()
